"""Tree - A tree canopy placed on the yard canvas.

A tree is placed on pointer-down (radius 0) and its canopy grows with the
distance from the center to the pointer. Releasing with a radius at or below
DrawConfig.MIN_TREE_RADIUS_PX is treated as a misclick and the draft is dropped.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Sequence

import numpy as np

from yard_planner.constants import DrawConfig
from yard_planner.model.point import Point

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TreeUpdate:
    """Fields of a committed tree that may be edited. None means unchanged."""

    name: str | None = None
    center: Point | None = None
    radius: float | None = None


@dataclass(frozen=True)
class Tree:
    """A tree with a circular canopy.

    Attributes:
        id: Unique id within the design, None while drafting
        name: Display name (e.g., "Tree 1")
        center: Trunk position
        radius: Canopy radius in canvas pixels
    """

    id: int | None
    name: str
    center: Point
    radius: float

    @classmethod
    def create_draft(cls, center: Point, tree_count: int) -> "Tree":
        """Start a new tree at the pointer origin."""
        return cls(
            id=None,
            name=DrawConfig.TREE_NAME_TEMPLATE.format(number=tree_count + 1),
            center=center,
            radius=0.0,
        )

    @property
    def is_draft(self) -> bool:
        return self.id is None

    @property
    def diameter_px(self) -> float:
        return self.radius * 2

    def extended(self, pointer: Point) -> "Tree":
        """Grow the canopy so its edge passes through the pointer."""
        return replace(self, radius=self.center.distance_to(other=pointer))

    def committed(self, tree_id: int) -> "Tree | None":
        """Finalize a draft, or return None for a misclick-sized canopy."""
        if self.radius <= DrawConfig.MIN_TREE_RADIUS_PX:
            logger.debug(f"Discarding degenerate tree draft (radius={self.radius:.2f}px)")
            return None
        return replace(self, id=tree_id)

    def moved_to(self, new_center: Point) -> "Tree":
        """Relocate the trunk. The canopy radius is unaffected."""
        return replace(self, center=new_center)

    def with_updates(self, update: TreeUpdate) -> "Tree":
        """Merge the set fields of an update into a new Tree."""
        changes: dict[str, Any] = {}
        if update.name is not None:
            changes["name"] = update.name
        if update.center is not None:
            changes["center"] = update.center
        if update.radius is not None:
            if not (np.isfinite(update.radius) and update.radius > 0):
                raise ValueError(f"Tree radius must be positive, got {update.radius}")
            changes["radius"] = float(update.radius)
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "id": self.id,
            "name": self.name,
            "center": self.center.to_dict(),
            "radius": self.radius,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Tree":
        """Create a committed Tree from dictionary.

        Raises:
            KeyError, TypeError, ValueError: If a field is missing or malformed.
        """
        name = data["name"]
        if not isinstance(name, str):
            raise ValueError(f"Tree name must be a string, got {name!r}")
        radius = float(data["radius"])
        if not (np.isfinite(radius) and radius > 0):
            raise ValueError(f"Tree radius must be positive, got {radius}")
        return cls(
            id=int(data["id"]),
            name=name,
            center=Point.from_dict(data=data["center"]),
            radius=radius,
        )

    def __repr__(self) -> str:
        return f"Tree({self.id}, {self.name!r}, {self.center}, r={self.radius:.1f}px)"


def update_tree(trees: Sequence[Tree], tree_id: int, update: TreeUpdate) -> list[Tree]:
    """Replace the tree with the given id by its updated value (no-op if absent)."""
    return [tree.with_updates(update=update) if tree.id == tree_id else tree for tree in trees]


def delete_tree(trees: Sequence[Tree], tree_id: int) -> list[Tree]:
    """Drop the tree with the given id. Unknown ids are a no-op."""
    return [tree for tree in trees if tree.id != tree_id]


def find_tree(trees: Sequence[Tree], tree_id: int) -> Tree | None:
    """Look up a tree by id."""
    return next((tree for tree in trees if tree.id == tree_id), None)
