"""User interface components for the yard planner.

File Structure (layout-based naming):
- left_panel.py: Sidebar with address, modes, entity lists, notes, sharing
- canvas_view.py: Plotly canvas with fences, trees and drafts
- right_panel.py: Length prompt and move controls

Core Components:
- state_machine.py: YardStateMachine (5 states) + StreamlitUIListener
- context.py: InteractionContext and its sub-contexts
- actions.py: All action functions (dispatch, prompt, edits, share)
- gesture_detector.py: Plotly lasso selection -> pointer events
"""

from yard_planner.ui.actions import (
    bump_canvas_version,
    clear_all,
    dispatch_gesture,
    load_shared_design,
    release_pointer,
    reload_canvas,
    resolve_length_prompt,
    share_design,
    start_moving,
)
from yard_planner.ui.canvas_view import CanvasRenderer
from yard_planner.ui.context import InteractionContext
from yard_planner.ui.gesture_detector import Gesture, GestureDetector
from yard_planner.ui.left_panel import SidebarRenderer
from yard_planner.ui.right_panel import render_control_panel
from yard_planner.ui.state_machine import StreamlitUIListener, YardStateMachine

__all__ = [
    "YardStateMachine",
    "InteractionContext",
    "StreamlitUIListener",
    "CanvasRenderer",
    "Gesture",
    "GestureDetector",
    "SidebarRenderer",
    "render_control_panel",
    "bump_canvas_version",
    "clear_all",
    "dispatch_gesture",
    "load_shared_design",
    "release_pointer",
    "reload_canvas",
    "resolve_length_prompt",
    "share_design",
    "start_moving",
]
