"""Gesture detector - turns Plotly lasso selections into pointer events.

The canvas is a Plotly chart rendered with selection_mode="lasso". A lasso
drag is the closest thing Streamlit offers to a pointer gesture: its path
vertices are where the pointer went between press and release.

Mapping:
    first vertex            -> pointer_down
    following vertices      -> pointer_move
    last vertex             -> pointer_up
    vertex outside canvas   -> pointer_leave (rest of the path is ignored)

Streamlit returns the same selection on every rerun until the user draws a
new one, so gestures are deduplicated by their path.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from yard_planner.constants import CanvasConfig
from yard_planner.model.point import Point

if TYPE_CHECKING:
    from yard_planner.ui.context import GestureDeduplicationContext

logger = logging.getLogger(__name__)


class PointerEvents:
    """Event names sent to YardStateMachine."""

    DOWN = "pointer_down"
    MOVE = "pointer_move"
    UP = "pointer_up"
    LEAVE = "pointer_leave"


def is_on_canvas(point: Point) -> bool:
    """True if the point lies inside the drawing surface (edges included)."""
    return 0 <= point.x <= CanvasConfig.WIDTH and 0 <= point.y <= CanvasConfig.HEIGHT


@dataclass(frozen=True)
class Gesture:
    """One press-drag-release on the canvas.

    Attributes:
        path: Pointer positions inside the canvas, in order
        left_canvas: True if the pointer left the canvas before release
    """

    path: tuple[Point, ...]
    left_canvas: bool = False

    def __post_init__(self) -> None:
        if not self.path:
            raise ValueError("Gesture must have at least one point")

    @property
    def start(self) -> Point:
        return self.path[0]

    @property
    def end(self) -> Point:
        return self.path[-1]

    def events(self) -> list[tuple[str, Point | None]]:
        """Pointer events in dispatch order as (event, point) pairs."""
        events: list[tuple[str, Point | None]] = [(PointerEvents.DOWN, self.start)]
        events.extend((PointerEvents.MOVE, point) for point in self.path[1:])
        if self.left_canvas:
            events.append((PointerEvents.LEAVE, None))
        else:
            events.append((PointerEvents.UP, self.end))
        return events

    @classmethod
    def from_path(cls, xs: list[float], ys: list[float]) -> "Gesture | None":
        """Build a gesture from raw vertex lists, cutting it where it leaves the canvas."""
        path: list[Point] = []
        for x, y in zip(xs, ys):
            point = Point(x=float(x), y=float(y))
            if not is_on_canvas(point=point):
                if not path:
                    logger.debug(f"Gesture starts outside the canvas at {point}, ignoring")
                    return None
                return cls(path=tuple(path), left_canvas=True)
            path.append(point)
        if not path:
            return None
        return cls(path=tuple(path))


@dataclass
class GestureDetector:
    """Detects new gestures from the chart selection state.

    Attributes:
        dedup: GestureDeduplicationContext for tracking the last processed gesture
    """

    dedup: "GestureDeduplicationContext"

    def detect(self, selection: dict[str, Any] | None) -> Gesture | None:
        """Detect a new gesture from a Plotly selection.

        Args:
            selection: The "selection" part of st.plotly_chart's return value

        Returns:
            Gesture for a new lasso path, None otherwise
        """
        if not selection:
            return None
        lassos = selection.get("lasso") or []
        if not lassos:
            return None

        lasso = lassos[-1]
        xs = list(lasso.get("x") or [])
        ys = list(lasso.get("y") or [])
        if not xs or len(xs) != len(ys):
            logger.warning(f"Ignoring malformed lasso selection: {lasso}")
            return None

        try:
            key = (tuple(round(float(x), 2) for x in xs), tuple(round(float(y), 2) for y in ys))
            if not self.dedup.is_new(key=key):
                return None
            gesture = Gesture.from_path(xs=xs, ys=ys)
        except (TypeError, ValueError) as e:
            logger.warning(f"Ignoring lasso with unusable coordinates: {e}")
            return None
        if gesture is not None:
            logger.debug(f"Gesture {gesture.start} -> {gesture.end} ({len(gesture.path)} points)")
        return gesture
