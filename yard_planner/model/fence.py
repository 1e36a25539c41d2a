"""Fence - A straight fence line measured by the user.

A fence is drawn as a draft (start == end, no length) on pointer-down,
stretched while the pointer moves, and committed once the user enters its
real-world length. The committed length feeds the scale calibration.

Fences are immutable values. Every change produces a new Fence; the design
replaces the old value by id.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Sequence

from yard_planner.constants import DrawConfig
from yard_planner.core.scale_calibrator import ScaleCalibrator
from yard_planner.model.point import Point

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FenceUpdate:
    """Fields of a committed fence that may be edited.

    None means "leave unchanged". Length edits re-calibrate the design scale.
    """

    name: str | None = None
    length: float | None = None
    start: Point | None = None
    end: Point | None = None

    def is_empty(self) -> bool:
        return self.name is None and self.length is None and self.start is None and self.end is None


@dataclass(frozen=True)
class Fence:
    """A fence line between two canvas points.

    Attributes:
        id: Unique id within the design, None while drafting
        name: Display name (e.g., "Fence 1")
        start: Where the pointer went down
        end: Where the pointer was released
        length: Real-world length in feet, None while drafting

    Example:
        draft = Fence.create_draft(origin=Point(x=0, y=0), fence_count=0)
        draft = draft.extended(new_end=Point(x=100, y=0))
        fence = draft.committed(length_ft=50.0, fence_id=1)
    """

    id: int | None
    name: str
    start: Point
    end: Point
    length: float | None

    @classmethod
    def create_draft(cls, origin: Point, fence_count: int) -> "Fence":
        """Start a new fence at the pointer origin."""
        return cls(
            id=None,
            name=DrawConfig.FENCE_NAME_TEMPLATE.format(number=fence_count + 1),
            start=origin,
            end=origin,
            length=None,
        )

    @property
    def is_draft(self) -> bool:
        return self.length is None

    @property
    def pixel_length(self) -> float:
        """Length of the drawn line in canvas pixels."""
        return self.start.distance_to(other=self.end)

    @property
    def delta(self) -> tuple[float, float]:
        """(dx, dy) from start to end. Preserved by translation."""
        return self.end.minus(other=self.start)

    @property
    def midpoint(self) -> Point:
        return Point(x=(self.start.x + self.end.x) / 2, y=(self.start.y + self.end.y) / 2)

    def extended(self, new_end: Point) -> "Fence":
        """Move the free end of a draft to the pointer."""
        return replace(self, end=new_end)

    def committed(self, length_ft: float, fence_id: int) -> "Fence":
        """Finalize a draft with the length the user entered.

        Raises:
            InvalidCalibrationInput: If length_ft is not a positive finite number.
        """
        length = ScaleCalibrator.validate_length(length_ft)
        logger.debug(f"Committing {self.name!r} as fence {fence_id}: {length}ft over {self.pixel_length:.1f}px")
        return replace(self, id=fence_id, length=length)

    def translated(self, dx: float, dy: float) -> "Fence":
        """Shift both endpoints. Orientation and stored length stay the same."""
        return replace(self, start=self.start.offset_by(dx=dx, dy=dy), end=self.end.offset_by(dx=dx, dy=dy))

    def with_updates(self, update: FenceUpdate) -> "Fence":
        """Merge the set fields of an update into a new Fence."""
        changes: dict[str, Any] = {}
        if update.name is not None:
            changes["name"] = update.name
        if update.length is not None:
            changes["length"] = ScaleCalibrator.validate_length(update.length)
        if update.start is not None:
            changes["start"] = update.start
        if update.end is not None:
            changes["end"] = update.end
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "id": self.id,
            "name": self.name,
            "start": self.start.to_dict(),
            "end": self.end.to_dict(),
            "length": self.length,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Fence":
        """Create a committed Fence from dictionary.

        Raises:
            KeyError, TypeError, ValueError: If a field is missing or malformed.
        """
        name = data["name"]
        if not isinstance(name, str):
            raise ValueError(f"Fence name must be a string, got {name!r}")
        return cls(
            id=int(data["id"]),
            name=name,
            start=Point.from_dict(data=data["start"]),
            end=Point.from_dict(data=data["end"]),
            length=ScaleCalibrator.validate_length(data["length"]),
        )

    def __repr__(self) -> str:
        length = "draft" if self.length is None else f"{self.length}ft"
        return f"Fence({self.id}, {self.name!r}, {self.start}->{self.end}, {length})"


def update_fence(fences: Sequence[Fence], fence_id: int, update: FenceUpdate) -> list[Fence]:
    """Replace the fence with the given id by its updated value.

    Returns the fences unchanged (as a new list) if the id is unknown.
    """
    return [fence.with_updates(update=update) if fence.id == fence_id else fence for fence in fences]


def delete_fence(fences: Sequence[Fence], fence_id: int) -> list[Fence]:
    """Drop the fence with the given id. Unknown ids are a no-op."""
    return [fence for fence in fences if fence.id != fence_id]


def find_fence(fences: Sequence[Fence], fence_id: int) -> Fence | None:
    """Look up a fence by id."""
    return next((fence for fence in fences if fence.id == fence_id), None)
