"""State machine for the yard planner canvas.

One gesture at a time: the machine decides what a pointer event means given
the current state and mode, and applies the result to the Design held by
the InteractionContext (python-statemachine model pattern).

Architecture Overview
---------------------
Canvas gestures are translated into pointer events (pointer_down,
pointer_move, pointer_up, pointer_leave) and sent to the machine. The mode
selector (context.mode) decides what a pointer-down in IDLE creates. A
selected move always wins over drawing: once an entity is selected, a
pointer-down means "begin drag" regardless of the mode.

States (5 states):
    IDLE: Nothing in progress
    DRAWING_FENCE: Draft fence follows the pointer
    DRAWING_TREE: Draft tree canopy grows with the pointer
    MOVING_ENTITY: A fence or tree is selected; dragging translates it
    AWAITING_LENGTH: Fence released, waiting for the user to enter its length

Transitions:
    IDLE -> DRAWING_FENCE: pointer_down (fence mode)
    IDLE -> DRAWING_TREE: pointer_down (tree mode)
    IDLE -> MOVING_ENTITY: start_move (switches mode to view)
    DRAWING_FENCE -> DRAWING_FENCE: pointer_move (extend endpoint)
    DRAWING_TREE -> DRAWING_TREE: pointer_move (grow radius)
    MOVING_ENTITY -> MOVING_ENTITY: pointer_down (capture offset), pointer_move (drag)
    DRAWING_FENCE -> AWAITING_LENGTH: pointer_up
    AWAITING_LENGTH -> IDLE: confirm_length (commit + calibrate), cancel_length
    DRAWING_TREE -> IDLE: pointer_up (commit, misclicks dropped)
    MOVING_ENTITY -> IDLE: pointer_up (while dragging), cancel_move
    DRAWING_* / MOVING_ENTITY -> IDLE: pointer_leave (gesture aborted)

AWAITING_LENGTH has no pointer transitions: the prompt is modal.
Events without a matching transition raise TransitionNotAllowed;
try_transition() turns that into a logged no-op.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from statemachine import State, StateMachine
from statemachine.exceptions import TransitionNotAllowed

from yard_planner.constants import EntityKinds, InteractionModes
from yard_planner.core.scale_calibrator import InvalidCalibrationInput, ScaleCalibrator
from yard_planner.model.fence import Fence
from yard_planner.model.message import FenceDiscardedMessage
from yard_planner.model.tree import Tree
from yard_planner.ui.context import InteractionContext

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from yard_planner.model.design import Design
    from yard_planner.model.point import Point


class StreamlitUIListener:
    """Listener that records transitions for the Streamlit render loop.

    A single canvas gesture fires several events (down, moves, up), so the
    listener only flags the context. The app calls st.rerun() once after the
    whole gesture has been dispatched.

    Usage:
        sm = YardStateMachine(context=context)
        sm.add_listener(StreamlitUIListener(context=context))
    """

    def __init__(self, context: InteractionContext) -> None:
        self.context = context

    def after_transition(self, event: str, source: State, target: State) -> None:
        """Log the transition and request a rerun."""
        if source != target:
            logger.info(f"[STATE] {source.name} --({event})--> {target.name}")
        else:
            logger.debug(f"[STATE] {source.name} --({event})--> {target.name}")
        self.context.needs_rerun = True


class YardStateMachine(StateMachine):
    """State machine for drawing, measuring and moving yard entities.

    See module docstring for complete transition documentation.
    """

    # ==========================================================================
    # State Definitions
    # ==========================================================================

    idle = State("Idle", initial=True)
    drawing_fence = State("DrawingFence")
    drawing_tree = State("DrawingTree")
    moving_entity = State("MovingEntity")
    awaiting_length = State("AwaitingLength")

    # ==========================================================================
    # Transitions: pointer events
    # ==========================================================================

    pointer_down = (
        idle.to(drawing_fence, cond="is_fence_mode", on="start_fence_draft")
        | idle.to(drawing_tree, cond="is_tree_mode", on="start_tree_draft")
        | moving_entity.to(moving_entity, on="begin_drag")
    )

    pointer_move = (
        drawing_fence.to(drawing_fence, on="extend_fence_draft")
        | drawing_tree.to(drawing_tree, on="extend_tree_draft")
        | moving_entity.to(moving_entity, cond="is_dragging", on="drag_to")
    )

    pointer_up = (
        drawing_fence.to(awaiting_length)
        | drawing_tree.to(idle, on="commit_tree_draft")
        | moving_entity.to(idle, cond="is_dragging")
    )

    pointer_leave = drawing_fence.to(idle) | drawing_tree.to(idle) | moving_entity.to(idle)

    # ==========================================================================
    # Transitions: length prompt (suspension point)
    # ==========================================================================

    confirm_length = awaiting_length.to(idle, on="commit_fence_draft")
    cancel_length = awaiting_length.to(idle, on="discard_fence_draft")

    # ==========================================================================
    # Transitions: move selection
    # ==========================================================================

    start_move = idle.to(moving_entity, cond="entity_exists", on="select_entity")
    cancel_move = moving_entity.to(idle)

    # ==========================================================================
    # Guards (Conditions)
    # ==========================================================================

    def is_fence_mode(self) -> bool:
        """Guard: pointer-down draws a fence."""
        return self.context.mode.is_fence()

    def is_tree_mode(self) -> bool:
        """Guard: pointer-down places a tree."""
        return self.context.mode.is_tree()

    def is_dragging(self) -> bool:
        """Guard: a pointer-down has started the drag of the selected entity."""
        return self.context.move.dragging

    def entity_exists(self, kind: str, entity_id: int) -> bool:
        """Guard: the entity to move is part of the design."""
        if kind == EntityKinds.FENCE:
            return self.design.get_fence(fence_id=entity_id) is not None
        if kind == EntityKinds.TREE:
            return self.design.get_tree(tree_id=entity_id) is not None
        return False

    # ==========================================================================
    # State Check Properties
    # ==========================================================================

    @property
    def is_idle(self) -> bool:
        return self.idle.is_active

    @property
    def is_drawing_fence(self) -> bool:
        return self.drawing_fence.is_active

    @property
    def is_drawing_tree(self) -> bool:
        return self.drawing_tree.is_active

    @property
    def is_moving(self) -> bool:
        return self.moving_entity.is_active

    @property
    def is_awaiting_length(self) -> bool:
        return self.awaiting_length.is_active

    # ==========================================================================
    # Mode Helpers (not state changes, just context updates)
    # ==========================================================================

    def set_mode(self, mode: str) -> None:
        """Select what a pointer-down in IDLE creates."""
        self.context.mode.set(mode=mode)
        logger.info(f"Mode: {mode}")

    # ==========================================================================
    # Entry Hooks
    # ==========================================================================

    def on_enter_idle(self) -> None:
        """Hook: Entering idle state. Any unfinished draft or move is dropped."""
        if self.context.draft.has_draft():
            logger.debug(f"Dropping unfinished draft {self.context.draft.fence or self.context.draft.tree}")
        self.context.clear_gesture()

    # ==========================================================================
    # Transition Actions
    # ==========================================================================

    def start_fence_draft(self, point: Point) -> None:
        """Action: create a draft fence at the pointer."""
        self.context.draft.fence = Fence.create_draft(origin=point, fence_count=len(self.design.fences))

    def start_tree_draft(self, point: Point) -> None:
        """Action: create a draft tree at the pointer."""
        self.context.draft.tree = Tree.create_draft(center=point, tree_count=len(self.design.trees))

    def extend_fence_draft(self, point: Point) -> None:
        """Action: move the draft fence's free end."""
        if self.context.draft.fence is None:
            raise RuntimeError("DrawingFence state without a draft fence")
        self.context.draft.fence = self.context.draft.fence.extended(new_end=point)

    def extend_tree_draft(self, point: Point) -> None:
        """Action: grow the draft canopy to reach the pointer."""
        if self.context.draft.tree is None:
            raise RuntimeError("DrawingTree state without a draft tree")
        self.context.draft.tree = self.context.draft.tree.extended(pointer=point)

    def commit_tree_draft(self) -> None:
        """Action: commit the draft tree (misclick-sized canopies are dropped)."""
        draft = self.context.draft.tree
        if draft is None:
            raise RuntimeError("DrawingTree state without a draft tree")
        self.design.commit_tree(draft=draft)

    def commit_fence_draft(self, raw_length: str | None) -> None:
        """Action: commit the draft fence with the entered length.

        Unusable input discards the draft and leaves the design untouched.
        """
        draft = self.context.draft.fence
        if draft is None:
            raise RuntimeError("AwaitingLength state without a draft fence")
        try:
            length_ft = ScaleCalibrator.parse_length_input(raw=raw_length)
        except InvalidCalibrationInput as e:
            logger.info(f"Discarding {draft}: {e}")
            self.context.messages.toast = FenceDiscardedMessage(raw_input=raw_length)
            return
        self.design.commit_fence(draft=draft, length_ft=length_ft)

    def discard_fence_draft(self) -> None:
        """Action: the prompt was cancelled."""
        self.context.messages.toast = FenceDiscardedMessage(raw_input=None)

    def select_entity(self, kind: str, entity_id: int) -> None:
        """Action: remember the entity to move and switch to view mode."""
        self.context.move.select(kind=kind, entity_id=entity_id)
        self.context.mode.set(mode=InteractionModes.VIEW)

    def begin_drag(self, point: Point) -> None:
        """Action: capture the offset between pointer and entity anchor."""
        anchor = self._moving_anchor()
        if anchor is None:
            logger.warning(f"Entity {self.context.move.kind}:{self.context.move.entity_id} no longer exists")
            anchor = point
        self.context.move.begin_drag(pointer=point, anchor=anchor)

    def drag_to(self, point: Point) -> None:
        """Action: translate the selected entity, preserving the captured offset."""
        move = self.context.move
        new_anchor = point.offset_by(dx=-move.offset_x, dy=-move.offset_y)
        if move.kind == EntityKinds.TREE:
            self.design.move_tree(tree_id=move.entity_id, new_center=new_anchor)
        elif move.kind == EntityKinds.FENCE:
            fence = self.design.get_fence(fence_id=move.entity_id)
            if fence is None:
                logger.warning(f"drag_to: unknown fence id {move.entity_id}")
                return
            dx, dy = new_anchor.minus(other=fence.start)
            self.design.move_fence(fence_id=fence.id, dx=dx, dy=dy)

    def _moving_anchor(self) -> Point | None:
        """Tree center or fence start of the selected entity."""
        move = self.context.move
        if move.kind == EntityKinds.TREE:
            tree = self.design.get_tree(tree_id=move.entity_id)
            return tree.center if tree else None
        if move.kind == EntityKinds.FENCE:
            fence = self.design.get_fence(fence_id=move.entity_id)
            return fence.start if fence else None
        return None

    # ==========================================================================
    # Initialization
    # ==========================================================================

    def __init__(self, context: InteractionContext | None = None, start_value: str | None = None) -> None:
        """Initialize state machine with model pattern.

        Args:
            context: Shared context/model (creates new if None)
            start_value: Optional initial state value (for restoring state)
        """
        model = context or InteractionContext()
        super().__init__(model=model, start_value=start_value)

    # ==========================================================================
    # Utility Methods
    # ==========================================================================

    @property
    def context(self) -> InteractionContext:
        """Alias for model."""
        return self.model

    @property
    def design(self) -> Design:
        return self.context.design

    def get_state_name(self) -> str:
        """Get current state name for display."""
        return self.current_state.name

    def __repr__(self) -> str:
        return f"YardStateMachine(state={self.get_state_name()}, model={self.context!r})"

    def try_transition(self, event: str, **kwargs: Any) -> bool:
        """Attempt a transition, returning success/failure.

        Args:
            event: Transition event name
            **kwargs: Arguments for transition

        Returns:
            True if transition succeeded, False otherwise.
        """
        try:
            self.send(event, **kwargs)
            return True
        except TransitionNotAllowed:
            logger.debug(f"Transition '{event}' not allowed from {self.get_state_name()}")
            return False

    @staticmethod
    def create(
        design: Design | None = None,
        add_ui_listener: bool = True,
    ) -> tuple["YardStateMachine", InteractionContext]:
        """Factory method to create state machine with context and optional UI listener.

        Args:
            design: Design to edit (empty design if None)
            add_ui_listener: If True, adds StreamlitUIListener.
                             Set to False for testing or non-Streamlit usage.

        Returns:
            Tuple of (YardStateMachine, InteractionContext)
        """
        context = InteractionContext() if design is None else InteractionContext(design=design)
        sm = YardStateMachine(context=context)
        if add_ui_listener:
            sm.add_listener(StreamlitUIListener(context=context))
            logger.info("Created YardStateMachine with StreamlitUIListener")
        else:
            logger.info("Created YardStateMachine without UI listener")
        return sm, context
