"""Shared pytest fixtures for yard_planner workflow tests.

Workflow tests drive the planner the way the canvas does: lasso paths become
Gestures, gestures are replayed through dispatch_gesture. Keep this file
minimal; scenario data lives in the tests.

COORDINATE SYSTEM:
    Canvas pixels (900 x 600), origin top-left, y grows down.
"""

from collections.abc import Callable

import pytest

from yard_planner.model.point import Point
from yard_planner.ui.context import InteractionContext
from yard_planner.ui.gesture_detector import Gesture
from yard_planner.ui.state_machine import YardStateMachine

SMAndCtx = tuple[YardStateMachine, InteractionContext]
GestureFactory = Callable[..., Gesture]


@pytest.fixture
def sm_and_ctx() -> SMAndCtx:
    """Fresh state machine on an empty design, no Streamlit listener."""
    return YardStateMachine.create(add_ui_listener=False)


@pytest.fixture
def make_gesture() -> GestureFactory:
    """Build a Gesture from (x, y) tuples.

    Example:
        make_gesture((0, 0), (100, 0))
        make_gesture((0, 0), (50, 0), left_canvas=True)
    """

    def _make(*points: tuple[float, float], left_canvas: bool = False) -> Gesture:
        return Gesture(path=tuple(Point(x=x, y=y) for x, y in points), left_canvas=left_canvas)

    return _make
