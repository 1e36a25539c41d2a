"""Right panel components for the yard planner.

Renders the control panel next to the canvas for the current state:
- Idle: design summary
- AwaitingLength: the length prompt for the fence just drawn
- MovingEntity: the selected entity and a cancel button

Design Principles:
- One renderer per state (no if-else chains inside renderers)
- Raise exception for unknown states (fail-fast)
"""

import logging
from collections.abc import Callable

import streamlit as st

from yard_planner.constants import EntityKinds
from yard_planner.ui.actions import cancel_moving, reload_canvas, resolve_length_prompt
from yard_planner.ui.context import InteractionContext
from yard_planner.ui.state_machine import YardStateMachine

logger = logging.getLogger(__name__)


def render_control_panel(sm: YardStateMachine, ctx: InteractionContext) -> None:
    """Render the appropriate control panel for the current state.

    Raises:
        RuntimeError: If current state has no registered panel renderer
    """
    renderers: dict[str, Callable[[YardStateMachine, InteractionContext], None]] = {
        sm.idle.id: _render_idle_panel,
        sm.awaiting_length.id: _render_length_prompt,
        sm.moving_entity.id: _render_moving_panel,
        sm.drawing_fence.id: _render_drawing_panel,
        sm.drawing_tree.id: _render_drawing_panel,
    }
    renderer = renderers.get(sm.current_state.id)
    if renderer is None:
        raise RuntimeError(f"No control panel renderer for state '{sm.get_state_name()}'.")
    renderer(sm, ctx)


def _render_idle_panel(sm: YardStateMachine, ctx: InteractionContext) -> None:
    design = ctx.design
    st.subheader("📊 Yard")
    col_fences, col_trees = st.columns(2)
    col_fences.metric("Fences", len(design.fences))
    col_trees.metric("Trees", len(design.trees))
    if design.fences:
        total_ft = sum(fence.length for fence in design.fences if fence.length is not None)
        st.metric("Total fence length", f"{total_ft:.1f} ft")


def _render_length_prompt(sm: YardStateMachine, ctx: InteractionContext) -> None:
    """Length entry for the fence that was just drawn (modal for the canvas)."""
    draft = ctx.draft.fence
    if draft is None:
        raise RuntimeError("AwaitingLength state without a draft fence")

    st.subheader(f"📏 {draft.name}")
    st.caption(f"Drawn length: {ctx.design.measured_fence_length(fence=draft).format()}")
    with st.form(key="length_prompt"):
        raw = st.text_input("Enter the length of this fence line in feet:", placeholder="e.g. 25")
        col_ok, col_cancel = st.columns(2)
        confirmed = col_ok.form_submit_button("✅ Confirm", type="primary", use_container_width=True)
        cancelled = col_cancel.form_submit_button("✖️ Cancel", use_container_width=True)
    if confirmed:
        reload_canvas(before=lambda: resolve_length_prompt(sm=sm, raw=raw))
    if cancelled:
        reload_canvas(before=lambda: resolve_length_prompt(sm=sm, raw=None))


def _render_moving_panel(sm: YardStateMachine, ctx: InteractionContext) -> None:
    move = ctx.move
    if move.kind == EntityKinds.FENCE:
        entity = ctx.design.get_fence(fence_id=move.entity_id)
    else:
        entity = ctx.design.get_tree(tree_id=move.entity_id)
    name = entity.name if entity is not None else f"{move.kind} {move.entity_id}"

    st.subheader(f"✋ Moving {name}")
    st.caption("Drag on the canvas. The item keeps its offset to the pointer.")
    if st.button("Done", use_container_width=True):
        reload_canvas(before=lambda: cancel_moving(sm=sm))


def _render_drawing_panel(sm: YardStateMachine, ctx: InteractionContext) -> None:
    # Gestures are dispatched whole, so this only shows if a gesture was interrupted
    st.caption(f"Drawing ({sm.get_state_name()})")
