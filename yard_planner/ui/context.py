"""Context Classes for the Yard Planner State Machine.

This module contains all context dataclasses that hold mutable state for an
editing session. The state machine uses these contexts to track drafts, the
entity being moved and the selected mode.

Architecture:
- All contexts inherit from BaseContext (provides clear() interface)
- InteractionContext composes all sub-contexts and references the Design
- Contexts are pure data holders - no business logic
- State machine owns the context, UI reads from it

Sub-contexts:
    ModeContext: view / fence / tree selector
    DraftContext: Fence or tree currently being drawn
    MoveContext: Entity selected for moving and the captured drag offset
    GestureDeduplicationContext: Last processed canvas gesture
    UIMessagesContext: Toast produced by the last transition
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from yard_planner.constants import EntityKinds, InteractionModes
from yard_planner.model.design import Design

if TYPE_CHECKING:
    from yard_planner.model import Fence, Point, Tree
    from yard_planner.model.message import ToastMessage


class BaseContext(ABC):
    """Abstract base class for all context dataclasses.

    All contexts should be clearable to reset to their initial state.
    """

    @abstractmethod
    def clear(self) -> None:
        """Reset context to initial state."""
        ...


@dataclass
class ModeContext(BaseContext):
    """Mode selector state. Defaults to view - dragging does nothing."""

    mode: str = InteractionModes.VIEW

    def clear(self) -> None:
        self.mode = InteractionModes.VIEW

    def set(self, mode: str) -> None:
        if mode not in InteractionModes.ALL:
            raise ValueError(f"Unknown mode '{mode}'. Expected one of {InteractionModes.ALL}")
        self.mode = mode

    def is_fence(self) -> bool:
        return self.mode == InteractionModes.FENCE

    def is_tree(self) -> bool:
        return self.mode == InteractionModes.TREE


@dataclass
class DraftContext(BaseContext):
    """Entity being drawn by the current gesture (never both at once)."""

    fence: Fence | None = None
    tree: Tree | None = None

    def clear(self) -> None:
        self.fence = None
        self.tree = None

    def has_draft(self) -> bool:
        return self.fence is not None or self.tree is not None


@dataclass
class MoveContext(BaseContext):
    """Entity selected for moving.

    The offset is pointer minus entity anchor (tree center, fence start),
    captured on pointer-down so the entity does not jump to the cursor.
    """

    kind: str | None = None
    entity_id: int | None = None
    dragging: bool = False
    offset_x: float = 0.0
    offset_y: float = 0.0

    def clear(self) -> None:
        self.kind = None
        self.entity_id = None
        self.dragging = False
        self.offset_x = 0.0
        self.offset_y = 0.0

    def select(self, kind: str, entity_id: int) -> None:
        if kind not in EntityKinds.ALL:
            raise ValueError(f"Unknown entity kind '{kind}'")
        self.kind = kind
        self.entity_id = entity_id
        self.dragging = False

    def begin_drag(self, pointer: Point, anchor: Point) -> None:
        self.offset_x, self.offset_y = pointer.minus(other=anchor)
        self.dragging = True

    def is_selected(self, kind: str, entity_id: int) -> bool:
        return self.kind == kind and self.entity_id == entity_id


@dataclass
class GestureDeduplicationContext(BaseContext):
    """Tracks the last processed gesture.

    Streamlit returns the same chart selection on every rerun until the user
    draws a new one, so a gesture is only processed once.
    """

    last_gesture_key: tuple | None = None

    def clear(self) -> None:
        self.last_gesture_key = None

    def is_new(self, key: tuple) -> bool:
        if key == self.last_gesture_key:
            return False
        self.last_gesture_key = key
        return True


@dataclass
class UIMessagesContext(BaseContext):
    """Toast produced by a transition, shown once by the UI."""

    toast: ToastMessage | None = None

    def clear(self) -> None:
        self.toast = None

    def pop_toast(self) -> ToastMessage | None:
        toast = self.toast
        self.toast = None
        return toast


@dataclass
class InteractionContext:
    """Shared context/model for the state machine.

    Holds the design being edited and all session state that persists across
    transitions.

    Note: The 'state' field is managed by python-statemachine when this
    object is passed as the model. It stores the current state value.
    """

    # State managed by python-statemachine (model pattern)
    state: str | None = None

    design: Design = field(default_factory=Design)

    mode: ModeContext = field(default_factory=ModeContext)
    draft: DraftContext = field(default_factory=DraftContext)
    move: MoveContext = field(default_factory=MoveContext)
    gesture_dedup: GestureDeduplicationContext = field(default_factory=GestureDeduplicationContext)
    messages: UIMessagesContext = field(default_factory=UIMessagesContext)

    # Set by StreamlitUIListener; the app reruns once after a gesture is dispatched
    needs_rerun: bool = False

    def clear_gesture(self) -> None:
        """Drop any draft and move selection."""
        self.draft.clear()
        self.move.clear()

    def __repr__(self) -> str:
        return (
            f"InteractionContext(state={self.state}, mode={self.mode.mode}, "
            f"draft={self.draft.fence or self.draft.tree}, "
            f"moving={self.move.kind}:{self.move.entity_id}, design={self.design!r})"
        )
