"""Sidebar UI renderer for the yard planner.

Renders the left sidebar with:
- Address input and "Load Map"
- Mode selector (View / Draw Fence / Place Tree)
- Fence list: rename, edit length, move, delete
- Tree list: rename, edit diameter, move, delete
- Notes
- Share link and "Clear All"

Every button calls a function from ui/actions.py. Messages returned by the
actions are stored as the context toast and shown after the reload.
"""

import logging

import streamlit as st

from yard_planner.constants import EntityKinds, InteractionModes
from yard_planner.model.design import Design
from yard_planner.model.fence import Fence
from yard_planner.model.message import ToastMessage
from yard_planner.model.tree import Tree
from yard_planner.ui.actions import (
    clear_all,
    current_base_url,
    delete_entity,
    load_map,
    reload_canvas,
    rename_fence,
    rename_tree,
    select_mode,
    set_fence_length,
    set_tree_diameter,
    share_design,
    start_moving,
)
from yard_planner.ui.context import InteractionContext
from yard_planner.ui.state_machine import YardStateMachine

logger = logging.getLogger(__name__)


@st.dialog("Clear All")
def _confirm_clear_dialog(sm: YardStateMachine) -> None:
    """Show confirmation dialog before removing every fence and tree."""
    st.write("Are you sure you want to clear all fences and trees?")
    st.caption("The scale calibration is reset as well. This cannot be undone.")

    col_yes, col_no = st.columns(2)
    with col_yes:
        if st.button("🗑️ Yes, Clear", type="primary", use_container_width=True):
            clear_all(sm=sm)
            reload_canvas()
    with col_no:
        if st.button("✖️ Cancel", use_container_width=True):
            st.rerun()


class SidebarRenderer:
    """Renders the sidebar UI.

    Encapsulates design setup, mode selection, entity lists and sharing.
    """

    def __init__(
        self,
        state_machine: YardStateMachine,
        context: InteractionContext,
    ) -> None:
        """Initialize sidebar renderer with required dependencies."""
        self.sm = state_machine
        self.ctx = context

    @property
    def design(self) -> Design:
        return self.ctx.design

    def render(self) -> None:
        """Render all sidebar sections."""
        with st.sidebar:
            self._render_address()
            st.divider()
            self._render_mode_selector()
            st.divider()
            self._render_fences()
            self._render_trees()
            st.divider()
            self._render_notes()
            st.divider()
            self._render_share()

    def _finish(self, message: ToastMessage | None = None) -> None:
        """Queue the action's message and reload the canvas (never returns)."""
        if message is not None:
            self.ctx.messages.toast = message
        reload_canvas()

    # =========================================================================
    # Sections
    # =========================================================================

    def _render_address(self) -> None:
        st.subheader("🏠 Property")
        address = st.text_input("Address", value=self.design.address, placeholder="Enter your address")
        if st.button("Load Map", use_container_width=True, disabled=self.sm.is_awaiting_length):
            self._finish(message=load_map(design=self.design, address=address))
        if self.design.map_loaded:
            st.caption(f"Showing: {self.design.address}")

    def _render_mode_selector(self) -> None:
        st.subheader("✏️ Mode")
        current = self.ctx.mode.mode
        cols = st.columns(len(InteractionModes.ALL))
        for col, mode in zip(cols, InteractionModes.ALL):
            with col:
                label = f"{InteractionModes.ICONS[mode]} {InteractionModes.DISPLAY_NAMES[mode]}"
                if st.button(
                    label,
                    key=f"mode_{mode}",
                    type="primary" if mode == current else "secondary",
                    use_container_width=True,
                ):
                    select_mode(sm=self.sm, mode=mode)
                    self._finish()

    def _render_fences(self) -> None:
        st.subheader(f"📏 Fences ({len(self.design.fences)})")
        if not self.design.fences:
            st.caption("No fences yet. Choose Draw Fence and drag on the canvas.")
        for fence in self.design.fences:
            self._render_fence(fence=fence)

    def _render_fence(self, fence: Fence) -> None:
        measured = self.design.measured_fence_length(fence=fence).format()
        with st.expander(f"{fence.name}: {fence.length:g} ft"):
            with st.form(key=f"fence_form_{fence.id}"):
                name = st.text_input("Name", value=fence.name)
                length = st.text_input("Length (ft)", value=f"{fence.length:g}")
                st.caption(f"Measured on canvas: {measured}")
                if st.form_submit_button("Save", use_container_width=True):
                    message = None
                    if name.strip() and name != fence.name:
                        rename_fence(design=self.design, fence_id=fence.id, name=name.strip())
                    if length.strip() != f"{fence.length:g}":
                        message = set_fence_length(design=self.design, fence_id=fence.id, raw=length)
                    self._finish(message=message)
            self._render_entity_buttons(kind=EntityKinds.FENCE, entity_id=fence.id)

    def _render_trees(self) -> None:
        st.subheader(f"🌳 Trees ({len(self.design.trees)})")
        if not self.design.trees:
            st.caption("No trees yet. Choose Place Tree and drag outward on the canvas.")
        for tree in self.design.trees:
            self._render_tree(tree=tree)

    def _render_tree(self, tree: Tree) -> None:
        diameter = self.design.tree_diameter(tree=tree)
        with st.expander(f"{tree.name}: {diameter.format()}"):
            with st.form(key=f"tree_form_{tree.id}"):
                name = st.text_input("Name", value=tree.name)
                shown = f"{diameter.value:.1f}" if diameter.calibrated else ""
                raw_diameter = st.text_input(
                    "Diameter (ft)",
                    value=shown,
                    disabled=not self.design.is_calibrated,
                    help=None if self.design.is_calibrated else "Measure a fence first",
                )
                if st.form_submit_button("Save", use_container_width=True):
                    message = None
                    if name.strip() and name != tree.name:
                        rename_tree(design=self.design, tree_id=tree.id, name=name.strip())
                    if self.design.is_calibrated and raw_diameter.strip() != shown:
                        message = set_tree_diameter(design=self.design, tree_id=tree.id, raw=raw_diameter)
                    self._finish(message=message)
            self._render_entity_buttons(kind=EntityKinds.TREE, entity_id=tree.id)

    def _render_entity_buttons(self, kind: str, entity_id: int) -> None:
        """Move / Delete buttons shared by fences and trees."""
        is_selected = self.sm.is_moving and self.ctx.move.is_selected(kind=kind, entity_id=entity_id)
        col_move, col_delete = st.columns(2)
        with col_move:
            if st.button(
                "✋ Moving" if is_selected else "✋ Move",
                key=f"move_{kind}_{entity_id}",
                disabled=is_selected or self.sm.is_awaiting_length,
                use_container_width=True,
            ):
                start_moving(sm=self.sm, kind=kind, entity_id=entity_id)
                self._finish()
        with col_delete:
            if st.button("🗑️ Delete", key=f"delete_{kind}_{entity_id}", use_container_width=True):
                delete_entity(sm=self.sm, kind=kind, entity_id=entity_id)
                self._finish()

    def _render_notes(self) -> None:
        st.subheader("📝 Notes")
        notes = st.text_area("Notes", value=self.design.notes, label_visibility="collapsed")
        if notes != self.design.notes:
            self.design.notes = notes
            logger.debug(f"Notes updated ({len(notes)} chars)")

    def _render_share(self) -> None:
        st.subheader("🔗 Share")
        if st.button("Share Design", use_container_width=True, type="primary"):
            url, message = share_design(design=self.design, base_url=current_base_url())
            st.session_state.share_url = url
            message.display()
        share_url = st.session_state.get("share_url")
        if share_url:
            st.code(share_url, language=None)
        if st.button("Clear All", use_container_width=True, disabled=self.design.is_empty()):
            _confirm_clear_dialog(sm=self.sm)
