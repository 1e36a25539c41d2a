"""UI Actions - All action functions for the yard planner.

Centralizes the functions that modify the design, trigger state machine
transitions, or reload the canvas. Panels and the app only call these.

This module handles:
- Canvas reloads (reload_canvas, bump_canvas_version)
- Gesture dispatch (dispatch_gesture, release_pointer)
- Length prompt resolution (resolve_length_prompt)
- Mode and move selection (select_mode, start_moving, cancel_moving)
- Entity edits from the sidebar (rename, length, diameter, delete)
- Layout operations (load_map, clear_all)
- Sharing (share_design, current_base_url, load_shared_design)

Edits that the user can get wrong return a ToastMessage (or None on
success) instead of raising; the caller displays it.
"""

import logging
from collections.abc import Callable

import streamlit as st

from yard_planner.constants import EntityKinds, ShareConfig
from yard_planner.core.address_lookup import AddressLookup
from yard_planner.core.scale_calibrator import InvalidCalibrationInput, ScaleCalibrator
from yard_planner.core.share_codec import build_share_url, decode_or_default
from yard_planner.model.design import Design
from yard_planner.model.fence import FenceUpdate
from yard_planner.model.message import (
    AddressRequiredMessage,
    CalibrationRequiredMessage,
    InvalidLengthMessage,
    LoadFailedMessage,
    ShareLinkReadyMessage,
    ToastMessage,
)
from yard_planner.model.tree import TreeUpdate
from yard_planner.ui.context import InteractionContext
from yard_planner.ui.gesture_detector import Gesture, PointerEvents
from yard_planner.ui.state_machine import YardStateMachine

logger = logging.getLogger(__name__)


# =============================================================================
# CANVAS RELOAD
# =============================================================================


def bump_canvas_version() -> None:
    """Increment canvas_version to create a fresh chart component.

    The chart keeps its lasso selection until it is remounted, so a new key
    clears the processed gesture from the screen.
    """
    old_version = st.session_state.get("canvas_version", 0)
    st.session_state.canvas_version = old_version + 1
    logger.info(f"[CANVAS] Bumped canvas_version: {old_version} -> {old_version + 1}")


def reload_canvas(before: "Callable[[], None] | None" = None) -> None:
    """Run an optional callback, bump the canvas version and rerun.

    st.rerun() raises StopExecution, so nothing after this call runs.
    """
    if before is not None:
        before()
    bump_canvas_version()
    st.rerun()


# =============================================================================
# GESTURES
# =============================================================================


def release_pointer(sm: YardStateMachine, prompt: "Callable[[], str | None] | None" = None) -> bool:
    """Send pointer_up and, if a fence now awaits its length, optionally ask for it.

    Args:
        sm: State machine
        prompt: Called synchronously for the length when given. Returning
            None cancels the fence. Without a prompt the machine stays in
            AwaitingLength and the UI resolves it later.

    Returns:
        True if pointer_up was accepted.
    """
    if not sm.try_transition("pointer_up"):
        return False
    if prompt is not None and sm.is_awaiting_length:
        resolve_length_prompt(sm=sm, raw=prompt())
    return True


def dispatch_gesture(
    sm: YardStateMachine,
    gesture: Gesture,
    prompt: "Callable[[], str | None] | None" = None,
) -> bool:
    """Replay a canvas gesture as pointer events.

    If the pointer-down is refused (view mode, prompt open) the rest of the
    gesture is ignored.

    Returns:
        True if the gesture was handled by the state machine.
    """
    logger.info(f"[GESTURE] {gesture.start} -> {gesture.end} in state {sm.get_state_name()}")
    for event, point in gesture.events():
        if event == PointerEvents.DOWN:
            if not sm.try_transition(event, point=point):
                logger.info(f"[GESTURE] Ignored in state {sm.get_state_name()} (mode={sm.context.mode.mode})")
                return False
        elif event == PointerEvents.MOVE:
            sm.try_transition(event, point=point)
        elif event == PointerEvents.UP:
            release_pointer(sm=sm, prompt=prompt)
        else:
            sm.try_transition(event)
    return True


def resolve_length_prompt(sm: YardStateMachine, raw: str | None) -> bool:
    """Answer the length prompt. None cancels, anything else is parsed.

    Unusable text discards the draft; the reason is left as a toast in the
    context.

    Returns:
        True if the prompt was open.
    """
    if raw is None:
        return sm.try_transition("cancel_length")
    return sm.try_transition("confirm_length", raw_length=raw)


# =============================================================================
# MODE AND MOVE SELECTION
# =============================================================================


def select_mode(sm: YardStateMachine, mode: str) -> None:
    """Switch what the next canvas gesture draws."""
    sm.set_mode(mode=mode)


def start_moving(sm: YardStateMachine, kind: str, entity_id: int) -> bool:
    """Select an entity for moving. Replaces a previous selection."""
    if sm.is_moving:
        sm.try_transition("cancel_move")
    return sm.try_transition("start_move", kind=kind, entity_id=entity_id)


def cancel_moving(sm: YardStateMachine) -> bool:
    return sm.try_transition("cancel_move")


# =============================================================================
# ENTITY EDITS
# =============================================================================


def rename_fence(design: Design, fence_id: int, name: str) -> bool:
    return design.update_fence(fence_id=fence_id, update=FenceUpdate(name=name))


def rename_tree(design: Design, tree_id: int, name: str) -> bool:
    return design.update_tree(tree_id=tree_id, update=TreeUpdate(name=name))


def set_fence_length(design: Design, fence_id: int, raw: str | None) -> ToastMessage | None:
    """Edit a fence's real-world length; the scale is refined with it."""
    try:
        length_ft = ScaleCalibrator.parse_length_input(raw=raw)
    except InvalidCalibrationInput as e:
        logger.info(f"Rejected length edit for fence {fence_id}: {e}")
        return InvalidLengthMessage(raw_input=raw)
    design.update_fence(fence_id=fence_id, update=FenceUpdate(length=length_ft))
    return None


def set_tree_diameter(design: Design, tree_id: int, raw: str | None) -> ToastMessage | None:
    """Resize a tree canopy from a diameter in feet (needs a scale)."""
    if not design.is_calibrated:
        return CalibrationRequiredMessage()
    try:
        diameter_ft = ScaleCalibrator.parse_length_input(raw=raw)
    except InvalidCalibrationInput as e:
        logger.info(f"Rejected diameter edit for tree {tree_id}: {e}")
        return InvalidLengthMessage(raw_input=raw)
    if not design.set_tree_diameter(tree_id=tree_id, diameter_ft=diameter_ft):
        return InvalidLengthMessage(raw_input=raw)
    return None


def delete_entity(sm: YardStateMachine, kind: str, entity_id: int) -> bool:
    """Delete a fence or tree. A move of that entity is ended first."""
    if sm.is_moving and sm.context.move.is_selected(kind=kind, entity_id=entity_id):
        sm.try_transition("cancel_move")
    if kind == EntityKinds.FENCE:
        return sm.design.delete_fence(fence_id=entity_id)
    if kind == EntityKinds.TREE:
        return sm.design.delete_tree(tree_id=entity_id)
    raise ValueError(f"Unknown entity kind '{kind}'")


# =============================================================================
# LAYOUT
# =============================================================================


def load_map(design: Design, address: str) -> ToastMessage | None:
    """Show the background for an address. Blank addresses are refused."""
    if not AddressLookup.can_load(address=address):
        return AddressRequiredMessage()
    design.address = AddressLookup.normalize(address=address)
    design.map_loaded = True
    logger.info(f"Loaded map for {design.address!r}")
    return None


def clear_all(sm: YardStateMachine) -> None:
    """Remove every fence and tree and reset the scale.

    An open prompt or move selection is abandoned first.
    """
    if sm.is_awaiting_length:
        sm.try_transition("cancel_length")
        sm.context.messages.clear()
    elif sm.is_moving:
        sm.try_transition("cancel_move")
    sm.design.clear_all()


# =============================================================================
# SHARING
# =============================================================================


def current_base_url() -> str:
    """Origin and path of the page the user is looking at, without a query.

    Uses st.context.url, then the Origin/Host request headers. Falls back to
    ShareConfig.DEFAULT_BASE_URL outside a running session.
    """
    url = st.context.url
    if url:
        return url.split("?", 1)[0]
    headers = st.context.headers
    origin = headers.get("Origin")
    if origin:
        return f"{origin.rstrip('/')}/"
    host = headers.get("Host")
    if host:
        return f"http://{host}/"
    logger.info(f"[SHARE] Page URL unknown, using {ShareConfig.DEFAULT_BASE_URL}")
    return ShareConfig.DEFAULT_BASE_URL


def share_design(design: Design, base_url: str | None = None) -> tuple[str, ToastMessage]:
    """Build the share URL for the current design."""
    url = build_share_url(base_url=base_url or ShareConfig.DEFAULT_BASE_URL, design=design)
    logger.info(f"[SHARE] Generated link ({len(url)} chars)")
    return url, ShareLinkReadyMessage()


def load_shared_design(
    token: str | None,
    add_ui_listener: bool = True,
) -> tuple[YardStateMachine, InteractionContext, LoadFailedMessage | None]:
    """Start a session from a share token (or an empty design without one)."""
    design, message = decode_or_default(token=token)
    sm, ctx = YardStateMachine.create(design=design, add_ui_listener=add_ui_listener)
    return sm, ctx, message
