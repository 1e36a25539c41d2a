"""Yard Planner - Interactive yard layout sketching.

Draw fences and trees over the yard, enter real fence lengths to calibrate
the scale, and share the whole design as a link.

Run: streamlit run yard_planner/app.py
"""

import logging
import traceback

import streamlit as st

from yard_planner.constants import AppConfig, ShareConfig
from yard_planner.model.message import InstructionMessage, LoadFailedMessage, ScaleStatusMessage
from yard_planner.ui import (
    CanvasRenderer,
    GestureDetector,
    InteractionContext,
    SidebarRenderer,
    YardStateMachine,
    dispatch_gesture,
    load_shared_design,
    reload_canvas,
    render_control_panel,
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# =============================================================================
# SESSION STATE
# =============================================================================


def init_session_state() -> None:
    """Initialize session state with the design (from the share link, if any)."""
    if "state_machine" not in st.session_state:
        token = st.query_params.get(ShareConfig.QUERY_PARAM)
        sm, ctx, message = load_shared_design(token=token)
        st.session_state.state_machine = sm
        st.session_state.context = ctx
        st.session_state.load_message = message

    if "canvas_renderer" not in st.session_state:
        st.session_state.canvas_renderer = CanvasRenderer()

    if "canvas_version" not in st.session_state:
        st.session_state.canvas_version = 0


def reset_ui_state() -> None:
    """Reset interaction state while preserving the design.

    Called when an error occurs to recover gracefully. Drafts, an open length
    prompt and a move selection are dropped; fences, trees, scale, address
    and notes survive.
    """
    logger.info("Resetting UI state due to error recovery")
    ctx: InteractionContext = st.session_state.context
    sm, new_ctx = YardStateMachine.create(design=ctx.design)
    st.session_state.state_machine = sm
    st.session_state.context = new_ctx
    st.session_state.canvas_version = st.session_state.get("canvas_version", 0) + 1
    logger.info("UI state reset complete - design preserved")


# =============================================================================
# CANVAS
# =============================================================================


def _render_canvas() -> None:
    """Render the canvas and dispatch a new gesture drawn on it."""
    sm: YardStateMachine = st.session_state.state_machine
    ctx: InteractionContext = st.session_state.context
    renderer: CanvasRenderer = st.session_state.canvas_renderer

    InstructionMessage(
        mode=ctx.mode.mode,
        is_moving=sm.is_moving,
        awaiting_length=sm.is_awaiting_length,
    ).display()

    moving = (ctx.move.kind, ctx.move.entity_id) if sm.is_moving else None
    fig = renderer.render(
        design=ctx.design,
        draft_fence=ctx.draft.fence,
        draft_tree=ctx.draft.tree,
        moving=moving,
    )
    event = st.plotly_chart(
        fig,
        key=f"canvas_{st.session_state.canvas_version}",
        on_select="rerun",
        selection_mode="lasso",
        config={"displayModeBar": False, "scrollZoom": False},
    )
    ScaleStatusMessage(scale=ctx.design.scale).display()

    detector = GestureDetector(dedup=ctx.gesture_dedup)
    gesture = detector.detect(selection=event.get("selection") if event else None)
    if gesture is not None:
        dispatch_gesture(sm=sm, gesture=gesture)

    if ctx.needs_rerun:
        ctx.needs_rerun = False
        reload_canvas()


# =============================================================================
# MAIN
# =============================================================================


def main() -> None:
    """Application entry point."""
    st.set_page_config(page_title=AppConfig.TITLE, page_icon=AppConfig.ICON, layout=AppConfig.LAYOUT)
    init_session_state()

    st.title(f"{AppConfig.ICON} {AppConfig.TITLE}")
    st.caption(AppConfig.SUBTITLE)

    try:
        _run_app_ui()
    except Exception as e:
        # Log full traceback for debugging
        error_msg = f"{type(e).__name__}: {e}"
        full_traceback = traceback.format_exc()
        logger.error(f"[UI] UI error caught: {error_msg}\n{full_traceback}")

        st.error(f"⚠️ [UI] Something went wrong: {error_msg}")

        # Reset UI state while preserving the design
        reset_ui_state()

        if st.button("🔄 Reset and Continue", type="primary"):
            st.rerun()


def _run_app_ui() -> None:
    """Run the main application UI. Separated for error handling wrapper."""
    sm: YardStateMachine = st.session_state.state_machine
    ctx: InteractionContext = st.session_state.context
    logger.info(f"[MAIN] Render cycle starting: state={sm.get_state_name()}, canvas_version={st.session_state.canvas_version}")

    # Transitions from the previous run were already followed by a rerun
    ctx.needs_rerun = False

    # Shown until the user starts drawing
    load_message: LoadFailedMessage | None = st.session_state.get("load_message")
    if load_message is not None and ctx.design.is_empty():
        load_message.display()

    toast = ctx.messages.pop_toast()
    if toast is not None:
        toast.display()

    SidebarRenderer(state_machine=sm, context=ctx).render()

    col_canvas, col_ctrl = st.columns([3, 1])
    with col_canvas:
        _render_canvas()
    with col_ctrl:
        render_control_panel(sm=sm, ctx=ctx)


if __name__ == "__main__":
    main()
