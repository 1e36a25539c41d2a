"""Point - The geometry atom of the yard canvas.

A Point is a pixel-space coordinate (origin top-left, y grows down). It has
no identity of its own; fences and trees embed points.
"""

import math
from dataclasses import dataclass
from typing import Any

import numpy as np


@dataclass(frozen=True)
class Point:
    """A canvas coordinate in pixels.

    Attributes:
        x: Horizontal pixel offset from the left edge
        y: Vertical pixel offset from the top edge

    Example:
        origin = Point(x=0.0, y=0.0)
        origin.distance_to(other=Point(x=3.0, y=4.0))  # 5.0
    """

    x: float
    y: float

    def __post_init__(self) -> None:
        """Validate data after initialization."""
        if not (np.isfinite(self.x) and np.isfinite(self.y)):
            raise ValueError(f"Point must have finite coordinates, got ({self.x}, {self.y})")

    def distance_to(self, other: "Point") -> float:
        """Euclidean distance to another point in pixels."""
        return math.hypot(other.x - self.x, other.y - self.y)

    def offset_by(self, dx: float, dy: float) -> "Point":
        """Return a new point shifted by (dx, dy)."""
        return Point(x=self.x + dx, y=self.y + dy)

    def minus(self, other: "Point") -> tuple[float, float]:
        """Vector from other to self as (dx, dy)."""
        return (self.x - other.x, self.y - other.y)

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Point":
        """Create Point from dictionary."""
        return cls(x=float(data["x"]), y=float(data["y"]))

    def __repr__(self) -> str:
        return f"Point({self.x:.1f}, {self.y:.1f})"
