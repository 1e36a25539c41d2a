"""Tests for ui/actions.py - the functions behind every button and gesture.

Streamlit-dependent helpers (reload_canvas) are not exercised here; every
other action works on the state machine and design alone.
"""

from types import SimpleNamespace
from urllib.parse import parse_qs, urlparse

import pytest

from yard_planner.constants import EntityKinds, InteractionModes, ShareConfig
from yard_planner.core.share_codec import encode
from yard_planner.model.design import Design
from yard_planner.model.message import (
    AddressRequiredMessage,
    CalibrationRequiredMessage,
    InvalidLengthMessage,
    LoadFailedMessage,
    ShareLinkReadyMessage,
)
from yard_planner.model.point import Point
from yard_planner.ui import actions
from yard_planner.ui.actions import (
    cancel_moving,
    clear_all,
    current_base_url,
    delete_entity,
    dispatch_gesture,
    load_map,
    load_shared_design,
    release_pointer,
    rename_fence,
    rename_tree,
    resolve_length_prompt,
    select_mode,
    set_fence_length,
    set_tree_diameter,
    share_design,
    start_moving,
)
from yard_planner.ui.context import InteractionContext
from yard_planner.ui.gesture_detector import Gesture
from yard_planner.ui.state_machine import YardStateMachine

SMAndCtx = tuple[YardStateMachine, InteractionContext]


def _gesture(*points: tuple[float, float], left_canvas: bool = False) -> Gesture:
    return Gesture(path=tuple(Point(x=x, y=y) for x, y in points), left_canvas=left_canvas)


class TestDispatchGesture:
    def test_fence_gesture_waits_for_length(self, state_machine_and_context: SMAndCtx) -> None:
        sm, ctx = state_machine_and_context
        select_mode(sm=sm, mode=InteractionModes.FENCE)
        assert dispatch_gesture(sm=sm, gesture=_gesture((0, 0), (50, 0), (100, 0)))
        assert sm.is_awaiting_length
        assert resolve_length_prompt(sm=sm, raw="50")
        assert ctx.design.scale == 2.0

    def test_fence_gesture_with_prompt_resolves_immediately(self, state_machine_and_context: SMAndCtx) -> None:
        sm, ctx = state_machine_and_context
        select_mode(sm=sm, mode=InteractionModes.FENCE)
        dispatch_gesture(sm=sm, gesture=_gesture((0, 0), (100, 0)), prompt=lambda: "50")
        assert sm.is_idle
        assert [f.length for f in ctx.design.fences] == [50.0]

    def test_prompt_returning_none_cancels(self, state_machine_and_context: SMAndCtx) -> None:
        sm, ctx = state_machine_and_context
        select_mode(sm=sm, mode=InteractionModes.FENCE)
        dispatch_gesture(sm=sm, gesture=_gesture((0, 0), (100, 0)), prompt=lambda: None)
        assert sm.is_idle
        assert ctx.design.fences == []

    def test_view_mode_gesture_is_ignored(self, state_machine_and_context: SMAndCtx) -> None:
        sm, ctx = state_machine_and_context
        assert not dispatch_gesture(sm=sm, gesture=_gesture((0, 0), (100, 0)))
        assert sm.is_idle and ctx.design.is_empty()

    def test_gesture_leaving_canvas_aborts(self, state_machine_and_context: SMAndCtx) -> None:
        sm, ctx = state_machine_and_context
        select_mode(sm=sm, mode=InteractionModes.TREE)
        dispatch_gesture(sm=sm, gesture=_gesture((100, 100), (150, 100), left_canvas=True))
        assert sm.is_idle
        assert ctx.design.trees == []

    def test_gesture_ignored_while_prompt_open(self, state_machine_and_context: SMAndCtx) -> None:
        sm, ctx = state_machine_and_context
        select_mode(sm=sm, mode=InteractionModes.FENCE)
        dispatch_gesture(sm=sm, gesture=_gesture((0, 0), (100, 0)))
        assert not dispatch_gesture(sm=sm, gesture=_gesture((200, 200), (300, 300)))
        assert sm.is_awaiting_length
        assert ctx.draft.fence is not None and ctx.draft.fence.end == Point(x=100, y=0)

    def test_release_pointer_outside_gesture_is_refused(self, state_machine_and_context: SMAndCtx) -> None:
        sm, _ = state_machine_and_context
        assert not release_pointer(sm=sm, prompt=lambda: "10")


class TestMoveSelection:
    def test_start_moving_replaces_previous_selection(self, populated_state_machine: SMAndCtx) -> None:
        sm, ctx = populated_state_machine
        assert start_moving(sm=sm, kind=EntityKinds.FENCE, entity_id=1)
        assert start_moving(sm=sm, kind=EntityKinds.TREE, entity_id=2)
        assert ctx.move.is_selected(kind=EntityKinds.TREE, entity_id=2)

    def test_cancel_moving(self, populated_state_machine: SMAndCtx) -> None:
        sm, _ = populated_state_machine
        assert not cancel_moving(sm=sm)
        start_moving(sm=sm, kind=EntityKinds.TREE, entity_id=2)
        assert cancel_moving(sm=sm)
        assert sm.is_idle

    def test_move_gesture_drags_selected_tree(self, populated_state_machine: SMAndCtx) -> None:
        sm, ctx = populated_state_machine
        start_moving(sm=sm, kind=EntityKinds.TREE, entity_id=2)
        dispatch_gesture(sm=sm, gesture=_gesture((200, 200), (250, 220)))
        assert ctx.design.get_tree(tree_id=2).center == Point(x=250, y=220)
        assert sm.is_idle


class TestEntityEdits:
    def test_rename(self, populated_design: Design) -> None:
        assert rename_fence(design=populated_design, fence_id=1, name="North")
        assert rename_tree(design=populated_design, tree_id=2, name="Oak")
        assert populated_design.fences[0].name == "North"
        assert populated_design.trees[0].name == "Oak"
        assert not rename_tree(design=populated_design, tree_id=99, name="Elm")

    def test_set_fence_length_refines_scale(self, populated_design: Design) -> None:
        assert set_fence_length(design=populated_design, fence_id=1, raw="25") is None
        assert populated_design.scale == 3.0

    @pytest.mark.parametrize("raw", ["", "ten", "-1", None])
    def test_set_fence_length_rejects_bad_input(self, populated_design: Design, raw: str | None) -> None:
        assert isinstance(set_fence_length(design=populated_design, fence_id=1, raw=raw), InvalidLengthMessage)
        assert populated_design.fences[0].length == 50.0
        assert populated_design.scale == 2.0

    def test_set_tree_diameter(self, populated_design: Design) -> None:
        assert set_tree_diameter(design=populated_design, tree_id=2, raw="10") is None
        assert populated_design.trees[0].radius == 10.0

    def test_set_tree_diameter_needs_calibration(self, empty_design: Design) -> None:
        assert isinstance(set_tree_diameter(design=empty_design, tree_id=1, raw="10"), CalibrationRequiredMessage)

    def test_set_tree_diameter_rejects_bad_input(self, populated_design: Design) -> None:
        assert isinstance(set_tree_diameter(design=populated_design, tree_id=2, raw="big"), InvalidLengthMessage)
        assert populated_design.trees[0].radius == 20.0

    def test_set_tree_diameter_rejects_diameter_too_large_for_canvas(self, populated_design: Design) -> None:
        assert isinstance(set_tree_diameter(design=populated_design, tree_id=2, raw="1e308"), InvalidLengthMessage)
        assert populated_design.trees[0].radius == 20.0

    def test_delete_entity(self, populated_state_machine: SMAndCtx) -> None:
        sm, ctx = populated_state_machine
        assert delete_entity(sm=sm, kind=EntityKinds.FENCE, entity_id=1)
        assert not delete_entity(sm=sm, kind=EntityKinds.FENCE, entity_id=1)
        assert ctx.design.fences == []
        assert len(ctx.design.trees) == 1

    def test_delete_entity_being_moved_ends_move(self, populated_state_machine: SMAndCtx) -> None:
        sm, ctx = populated_state_machine
        start_moving(sm=sm, kind=EntityKinds.TREE, entity_id=2)
        delete_entity(sm=sm, kind=EntityKinds.TREE, entity_id=2)
        assert sm.is_idle
        assert ctx.design.trees == []

    def test_delete_unknown_kind_raises(self, populated_state_machine: SMAndCtx) -> None:
        sm, _ = populated_state_machine
        with pytest.raises(ValueError):
            delete_entity(sm=sm, kind="shed", entity_id=1)


class TestLayout:
    def test_load_map_requires_address(self, empty_design: Design) -> None:
        assert isinstance(load_map(design=empty_design, address="   "), AddressRequiredMessage)
        assert not empty_design.map_loaded

    def test_load_map(self, empty_design: Design) -> None:
        assert load_map(design=empty_design, address="  12 Garden Lane ") is None
        assert empty_design.map_loaded
        assert empty_design.address == "12 Garden Lane"

    def test_clear_all_abandons_open_prompt(self, populated_state_machine: SMAndCtx) -> None:
        sm, ctx = populated_state_machine
        select_mode(sm=sm, mode=InteractionModes.FENCE)
        dispatch_gesture(sm=sm, gesture=_gesture((0, 0), (100, 0)))
        clear_all(sm=sm)
        assert sm.is_idle
        assert ctx.design.is_empty()
        assert ctx.design.scale is None
        assert ctx.messages.toast is None


class TestSharing:
    def test_share_design(self, populated_design: Design) -> None:
        url, message = share_design(design=populated_design, base_url="https://yard.example/")
        assert url.startswith(f"https://yard.example/?{ShareConfig.QUERY_PARAM}=")
        assert isinstance(message, ShareLinkReadyMessage)

    def test_load_shared_design(self, populated_design: Design) -> None:
        sm, ctx, message = load_shared_design(token=encode(design=populated_design), add_ui_listener=False)
        assert message is None
        assert sm.is_idle
        assert ctx.design == populated_design

    def test_load_shared_design_with_bad_token(self) -> None:
        sm, ctx, message = load_shared_design(token="not a token", add_ui_listener=False)
        assert isinstance(message, LoadFailedMessage)
        assert ctx.design == Design()
        assert sm.context is ctx

    def test_shared_link_uses_given_page_url(self, populated_design: Design) -> None:
        url, _ = share_design(design=populated_design, base_url="https://plans.example.org/yard?data=stale")
        parsed = urlparse(url)
        assert f"{parsed.scheme}://{parsed.netloc}{parsed.path}" == "https://plans.example.org/yard"
        token = parse_qs(parsed.query)[ShareConfig.QUERY_PARAM][0]
        _, ctx, message = load_shared_design(token=token, add_ui_listener=False)
        assert message is None
        assert ctx.design == populated_design


class TestCurrentBaseUrl:
    """Page URL lookup from st.context (replaced by a stand-in object)."""

    @staticmethod
    def _use_context(monkeypatch: pytest.MonkeyPatch, url: str | None, headers: dict[str, str]) -> None:
        monkeypatch.setattr(actions, "st", SimpleNamespace(context=SimpleNamespace(url=url, headers=headers)))

    def test_page_url_without_query(self, monkeypatch: pytest.MonkeyPatch) -> None:
        self._use_context(monkeypatch, url="https://plans.example.org/yard?data=abc", headers={})
        assert current_base_url() == "https://plans.example.org/yard"

    @pytest.mark.parametrize(
        "headers,expected",
        [
            ({"Origin": "https://plans.example.org", "Host": "internal:8501"}, "https://plans.example.org/"),
            ({"Host": "plans.local:8501"}, "http://plans.local:8501/"),
            ({}, ShareConfig.DEFAULT_BASE_URL),
        ],
    )
    def test_falls_back_to_request_headers(
        self, monkeypatch: pytest.MonkeyPatch, headers: dict[str, str], expected: str
    ) -> None:
        self._use_context(monkeypatch, url=None, headers=headers)
        assert current_base_url() == expected
