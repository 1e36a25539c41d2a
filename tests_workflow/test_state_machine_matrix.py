"""State Machine Transition Matrix - Parameterized validation of all event/state combinations.

Uses pytest.mark.parametrize to create a data-driven truth table for state transitions.
This serves as executable documentation of the state machine contract.

Test Categories:
    1. Valid transitions: Event fires from an allowed source state and lands on the target
    2. Invalid transitions: Event raises TransitionNotAllowed from forbidden states
    3. Guards: Events whose outcome depends on mode or drag status

Matrix Reference (from state_machine.py docstring):
    5 states x 8 events = 40 combinations
"""

import pytest
from statemachine.exceptions import TransitionNotAllowed

from yard_planner.constants import EntityKinds, InteractionModes
from yard_planner.model.fence import Fence
from yard_planner.model.point import Point
from yard_planner.model.tree import Tree
from yard_planner.ui.context import InteractionContext
from yard_planner.ui.state_machine import YardStateMachine

ALL_STATES = ["idle", "drawing_fence", "drawing_tree", "moving_entity", "awaiting_length"]

POINT = Point(x=50, y=50)


# =============================================================================
# TRUTH TABLE: Valid Transitions
# =============================================================================
# Format: (event_name, source_state, kwargs, target_state)

VALID_TRANSITIONS: list[tuple[str, str, dict, str]] = [
    # From IDLE (fence mode for pointer_down)
    ("pointer_down", "idle", {"point": POINT}, "drawing_fence"),
    ("start_move", "idle", {"kind": EntityKinds.TREE, "entity_id": 2}, "moving_entity"),
    # From DRAWING_FENCE
    ("pointer_move", "drawing_fence", {"point": POINT}, "drawing_fence"),  # self-loop
    ("pointer_up", "drawing_fence", {}, "awaiting_length"),
    ("pointer_leave", "drawing_fence", {}, "idle"),
    # From DRAWING_TREE
    ("pointer_move", "drawing_tree", {"point": POINT}, "drawing_tree"),  # self-loop
    ("pointer_up", "drawing_tree", {}, "idle"),
    ("pointer_leave", "drawing_tree", {}, "idle"),
    # From MOVING_ENTITY
    ("pointer_down", "moving_entity", {"point": POINT}, "moving_entity"),  # self-loop
    ("pointer_leave", "moving_entity", {}, "idle"),
    ("cancel_move", "moving_entity", {}, "idle"),
    # From AWAITING_LENGTH
    ("confirm_length", "awaiting_length", {"raw_length": "10"}, "idle"),
    ("cancel_length", "awaiting_length", {}, "idle"),
]


# =============================================================================
# TRUTH TABLE: Invalid Transitions (Events from forbidden states)
# =============================================================================
# Format: (event_name, invalid_source_states)

INVALID_TRANSITIONS: list[tuple[str, list[str]]] = [
    # A prompt is modal; nothing starts while drawing
    ("pointer_down", ["drawing_fence", "drawing_tree", "awaiting_length"]),
    ("pointer_move", ["idle", "awaiting_length"]),
    ("pointer_up", ["idle", "awaiting_length"]),
    ("pointer_leave", ["idle", "awaiting_length"]),
    ("confirm_length", ["idle", "drawing_fence", "drawing_tree", "moving_entity"]),
    ("cancel_length", ["idle", "drawing_fence", "drawing_tree", "moving_entity"]),
    ("start_move", ["drawing_fence", "drawing_tree", "moving_entity", "awaiting_length"]),
    ("cancel_move", ["idle", "drawing_fence", "drawing_tree", "awaiting_length"]),
]


def _force_state(sm: YardStateMachine, ctx: InteractionContext, state_name: str) -> None:
    """Force the machine into a state with the context that state implies.

    WARNING: This bypasses normal transitions. Use only for testing.
    """
    ctx.clear_gesture()
    if state_name in ("drawing_fence", "awaiting_length"):
        draft = Fence.create_draft(origin=Point(x=0, y=0), fence_count=0)
        ctx.draft.fence = draft.extended(new_end=Point(x=100, y=0))
    elif state_name == "drawing_tree":
        ctx.draft.tree = Tree.create_draft(center=Point(x=200, y=200), tree_count=0)
    elif state_name == "moving_entity":
        ctx.move.select(kind=EntityKinds.TREE, entity_id=2)
        ctx.move.begin_drag(pointer=Point(x=200, y=200), anchor=Point(x=200, y=200))
    sm.current_state_value = state_name


class TestTransitionMatrix:
    """Parameterized tests validating the complete state machine transition matrix."""

    @pytest.fixture
    def sm_ctx(self, populated_sm: tuple) -> tuple:
        sm, ctx = populated_sm
        sm.set_mode(mode=InteractionModes.FENCE)
        return sm, ctx

    @pytest.fixture
    def populated_sm(self) -> tuple:
        """Machine editing a design with fence 1 and tree 2."""
        sm, ctx = YardStateMachine.create(add_ui_listener=False)
        draft_fence = Fence.create_draft(origin=Point(x=0, y=0), fence_count=0)
        ctx.design.commit_fence(draft=draft_fence.extended(new_end=Point(x=100, y=0)), length_ft=50)
        draft_tree = Tree.create_draft(center=Point(x=200, y=200), tree_count=0)
        ctx.design.commit_tree(draft=draft_tree.extended(pointer=Point(x=220, y=200)))
        return sm, ctx

    @pytest.mark.parametrize("event,source,kwargs,target", VALID_TRANSITIONS)
    def test_valid_transitions(self, sm_ctx: tuple, event: str, source: str, kwargs: dict, target: str) -> None:
        sm, ctx = sm_ctx
        _force_state(sm=sm, ctx=ctx, state_name=source)
        getattr(sm, event)(**kwargs)
        assert sm.current_state_value == target

    @pytest.mark.parametrize("event,invalid_states", INVALID_TRANSITIONS)
    def test_invalid_transitions_raise_error(self, sm_ctx: tuple, event: str, invalid_states: list[str]) -> None:
        """Invalid transitions raise TransitionNotAllowed and leave the state unchanged."""
        sm, ctx = sm_ctx
        for state_name in invalid_states:
            _force_state(sm=sm, ctx=ctx, state_name=state_name)
            with pytest.raises(TransitionNotAllowed):
                getattr(sm, event)()
            assert sm.current_state_value == state_name

    @pytest.mark.parametrize("state_name", ALL_STATES)
    def test_every_state_reachable_by_force(self, sm_ctx: tuple, state_name: str) -> None:
        sm, ctx = sm_ctx
        _force_state(sm=sm, ctx=ctx, state_name=state_name)
        assert sm.current_state_value == state_name


class TestGuards:
    """Events whose destination depends on guards."""

    @pytest.mark.parametrize(
        "mode,target",
        [
            (InteractionModes.FENCE, "drawing_fence"),
            (InteractionModes.TREE, "drawing_tree"),
        ],
    )
    def test_pointer_down_in_idle_follows_mode(self, sm_and_ctx: tuple, mode: str, target: str) -> None:
        sm, _ = sm_and_ctx
        sm.set_mode(mode=mode)
        sm.pointer_down(point=POINT)
        assert sm.current_state_value == target

    def test_pointer_down_in_view_mode_is_refused(self, sm_and_ctx: tuple) -> None:
        sm, _ = sm_and_ctx
        with pytest.raises(TransitionNotAllowed):
            sm.pointer_down(point=POINT)

    @pytest.mark.parametrize("event", ["pointer_move", "pointer_up"])
    def test_moving_without_drag_refuses_pointer_events(self, sm_and_ctx: tuple, event: str) -> None:
        sm, ctx = sm_and_ctx
        ctx.move.select(kind=EntityKinds.TREE, entity_id=2)
        sm.current_state_value = "moving_entity"
        with pytest.raises(TransitionNotAllowed):
            getattr(sm, event)(point=POINT)
        assert sm.current_state_value == "moving_entity"

    def test_start_move_needs_existing_entity(self, sm_and_ctx: tuple) -> None:
        sm, _ = sm_and_ctx
        with pytest.raises(TransitionNotAllowed):
            sm.start_move(kind=EntityKinds.FENCE, entity_id=1)
        assert sm.current_state_value == "idle"
