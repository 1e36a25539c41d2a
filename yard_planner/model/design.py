"""Design - The aggregate root of a yard layout.

Owns every fence and tree, the global scale and the free-text fields.
Provides operations for:
- Committing drafts (fences calibrate the scale, trees drop misclicks)
- Typed updates, moves and deletes by id (unknown ids are no-ops)
- Tree diameter edits in feet
- Clearing the layout
- Serialization to the share payload (see core/share_codec.py)

Ids come from a monotonic counter owned by the design, so two entities
committed in quick succession can never collide.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any

from yard_planner.constants import ShareConfig
from yard_planner.core.scale_calibrator import Measurement, ScaleCalibrator
from yard_planner.model.fence import Fence, FenceUpdate, delete_fence, find_fence, update_fence
from yard_planner.model.point import Point
from yard_planner.model.tree import Tree, TreeUpdate, delete_tree, find_tree, update_tree

logger = logging.getLogger(__name__)


@dataclass
class Design:
    """A complete yard layout.

    Attributes:
        address: Address the user typed to load the background
        map_loaded: True once the background area is shown
        scale: Pixels per foot, None until the first fence is measured
        fences: Committed fences in drawing order
        trees: Committed trees in drawing order
        notes: Free-text notes
        next_id: Next entity id to hand out

    Example:
        design = Design()
        draft = Fence.create_draft(origin=Point(x=0, y=0), fence_count=0)
        design.commit_fence(draft=draft.extended(new_end=Point(x=100, y=0)), length_ft=50)
        design.scale  # 2.0
    """

    address: str = ""
    map_loaded: bool = False
    scale: float | None = None
    fences: list[Fence] = field(default_factory=list)
    trees: list[Tree] = field(default_factory=list)
    notes: str = ""
    next_id: int = 1

    def next_entity_id(self) -> int:
        entity_id = self.next_id
        self.next_id += 1
        return entity_id

    @property
    def is_calibrated(self) -> bool:
        return self.scale is not None

    def is_empty(self) -> bool:
        """True if nothing has been drawn."""
        return not self.fences and not self.trees

    # =========================================================================
    # Commit Operations
    # =========================================================================

    def commit_fence(self, draft: Fence, length_ft: float) -> Fence:
        """Commit a draft fence and fold its measurement into the scale.

        Args:
            draft: The fence as drawn (length None)
            length_ft: Real-world length the user entered

        Returns:
            The committed fence.

        Raises:
            InvalidCalibrationInput: If length_ft is not a positive finite number.
                The design is left untouched.
        """
        length = ScaleCalibrator.validate_length(length_ft)
        fence = draft.committed(length_ft=length, fence_id=self.next_entity_id())
        self.fences = [*self.fences, fence]
        self.scale = ScaleCalibrator.calibrate(
            current_scale=self.scale,
            pixel_length=fence.pixel_length,
            length_ft=length,
        )
        logger.info(f"Committed {fence}")
        return fence

    def commit_tree(self, draft: Tree) -> Tree | None:
        """Commit a draft tree. Returns None if the canopy was too small."""
        tree = draft.committed(tree_id=self.next_id)
        if tree is None:
            return None
        self.next_entity_id()
        self.trees = [*self.trees, tree]
        logger.info(f"Committed {tree}")
        return tree

    # =========================================================================
    # Fence Operations
    # =========================================================================

    def get_fence(self, fence_id: int) -> Fence | None:
        return find_fence(fences=self.fences, fence_id=fence_id)

    def update_fence(self, fence_id: int, update: FenceUpdate) -> bool:
        """Apply a typed update to a fence.

        A length edit re-calibrates: the fence's current pixel length and the
        new length imply a ratio that is averaged into the scale.

        Returns:
            True if the fence exists, False otherwise (no-op).

        Raises:
            InvalidCalibrationInput: If update.length is not positive and finite.
        """
        fence = self.get_fence(fence_id=fence_id)
        if fence is None:
            logger.warning(f"update_fence: unknown fence id {fence_id}")
            return False
        updated = fence.with_updates(update=update)
        self.fences = update_fence(fences=self.fences, fence_id=fence_id, update=update)
        if update.length is not None:
            self.scale = ScaleCalibrator.calibrate(
                current_scale=self.scale,
                pixel_length=updated.pixel_length,
                length_ft=update.length,
            )
        return True

    def move_fence(self, fence_id: int, dx: float, dy: float) -> bool:
        """Translate a fence. Its stored length never changes."""
        fence = self.get_fence(fence_id=fence_id)
        if fence is None:
            logger.warning(f"move_fence: unknown fence id {fence_id}")
            return False
        moved = fence.translated(dx=dx, dy=dy)
        self.fences = update_fence(
            fences=self.fences,
            fence_id=fence_id,
            update=FenceUpdate(start=moved.start, end=moved.end),
        )
        return True

    def delete_fence(self, fence_id: int) -> bool:
        """Delete a fence. Returns False if the id is unknown."""
        if self.get_fence(fence_id=fence_id) is None:
            logger.warning(f"delete_fence: unknown fence id {fence_id}")
            return False
        self.fences = delete_fence(fences=self.fences, fence_id=fence_id)
        logger.info(f"Deleted fence {fence_id}")
        return True

    def measured_fence_length(self, fence: Fence) -> Measurement:
        """Length derived from the drawn geometry (not the entered length)."""
        return ScaleCalibrator.to_real_world(pixels=fence.pixel_length, scale=self.scale)

    # =========================================================================
    # Tree Operations
    # =========================================================================

    def get_tree(self, tree_id: int) -> Tree | None:
        return find_tree(trees=self.trees, tree_id=tree_id)

    def update_tree(self, tree_id: int, update: TreeUpdate) -> bool:
        """Apply a typed update to a tree. Returns False if the id is unknown."""
        if self.get_tree(tree_id=tree_id) is None:
            logger.warning(f"update_tree: unknown tree id {tree_id}")
            return False
        self.trees = update_tree(trees=self.trees, tree_id=tree_id, update=update)
        return True

    def move_tree(self, tree_id: int, new_center: Point) -> bool:
        """Relocate a tree's trunk. The canopy radius is unaffected."""
        return self.update_tree(tree_id=tree_id, update=TreeUpdate(center=new_center))

    def delete_tree(self, tree_id: int) -> bool:
        """Delete a tree. Returns False if the id is unknown."""
        if self.get_tree(tree_id=tree_id) is None:
            logger.warning(f"delete_tree: unknown tree id {tree_id}")
            return False
        self.trees = delete_tree(trees=self.trees, tree_id=tree_id)
        logger.info(f"Deleted tree {tree_id}")
        return True

    def tree_diameter(self, tree: Tree) -> Measurement:
        """Canopy diameter in feet, or pixels when uncalibrated."""
        return ScaleCalibrator.to_real_world(pixels=tree.diameter_px, scale=self.scale)

    def set_tree_diameter(self, tree_id: int, diameter_ft: float) -> bool:
        """Resize a canopy from a diameter in feet.

        Only possible once calibrated. Invalid diameters are ignored.

        Returns:
            True if the tree was resized.
        """
        if self.scale is None:
            logger.info("set_tree_diameter: design is not calibrated yet")
            return False
        try:
            diameter_px = ScaleCalibrator.feet_to_pixels(length_ft=diameter_ft, scale=self.scale)
        except ValueError:
            logger.info(f"set_tree_diameter: ignoring invalid diameter {diameter_ft!r}")
            return False
        if not math.isfinite(diameter_px):
            logger.info(f"set_tree_diameter: diameter {diameter_ft!r} ft is too large for the canvas")
            return False
        return self.update_tree(tree_id=tree_id, update=TreeUpdate(radius=diameter_px / 2))

    # =========================================================================
    # Layout Operations
    # =========================================================================

    def clear_all(self) -> None:
        """Remove all fences and trees and forget the calibration.

        Address, notes and the id counter are kept so ids stay unique.
        """
        logger.info(f"Clearing {len(self.fences)} fence(s) and {len(self.trees)} tree(s)")
        self.fences = []
        self.trees = []
        self.scale = None

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        """Serialize entire design to the JSON-compatible share payload."""
        return {
            ShareConfig.KEY_VERSION: ShareConfig.SCHEMA_VERSION,
            ShareConfig.KEY_ADDRESS: self.address,
            ShareConfig.KEY_MAP_LOADED: self.map_loaded,
            ShareConfig.KEY_SCALE: self.scale,
            ShareConfig.KEY_FENCES: [fence.to_dict() for fence in self.fences],
            ShareConfig.KEY_TREES: [tree.to_dict() for tree in self.trees],
            ShareConfig.KEY_NOTES: self.notes,
            ShareConfig.KEY_NEXT_ID: self.next_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Design":
        """Deserialize a design from the share payload.

        Missing top-level fields fall back to the empty design's values.

        Raises:
            KeyError, TypeError, ValueError: If present fields are malformed.
        """
        address = data.get(ShareConfig.KEY_ADDRESS) or ""
        notes = data.get(ShareConfig.KEY_NOTES) or ""
        map_loaded = data.get(ShareConfig.KEY_MAP_LOADED) or False
        if not isinstance(address, str) or not isinstance(notes, str):
            raise ValueError("address and notes must be strings")
        if not isinstance(map_loaded, bool):
            raise ValueError(f"mapLoaded must be a boolean, got {map_loaded!r}")

        scale = data.get(ShareConfig.KEY_SCALE)
        if scale is not None:
            scale = ScaleCalibrator.validate_length(scale)

        fences = [Fence.from_dict(data=item) for item in data.get(ShareConfig.KEY_FENCES) or []]
        trees = [Tree.from_dict(data=item) for item in data.get(ShareConfig.KEY_TREES) or []]

        ids = [fence.id for fence in fences] + [tree.id for tree in trees]
        if len(ids) != len(set(ids)):
            raise ValueError("Entity ids must be unique")

        highest_id = max((entity_id for entity_id in ids if entity_id is not None), default=0)
        next_id = data.get(ShareConfig.KEY_NEXT_ID)
        next_id = highest_id + 1 if next_id is None else max(int(next_id), highest_id + 1)

        return cls(
            address=address,
            map_loaded=map_loaded,
            scale=scale,
            fences=fences,
            trees=trees,
            notes=notes,
            next_id=next_id,
        )

    def __repr__(self) -> str:
        return (
            f"Design(address={self.address!r}, scale={self.scale}, "
            f"fences={len(self.fences)}, trees={len(self.trees)}, next_id={self.next_id})"
        )
