"""Shared pytest fixtures for yard_planner tests.

Provides reusable designs and state machines for all yard_planner tests.
All fixtures use explicit values with documented rationale.

COORDINATE SYSTEM:
    Canvas pixels, origin top-left, y grows down. Fences are drawn along the
    x axis where possible so pixel lengths are exact (100px, 50px, ...).
"""

import pytest

from yard_planner.model.design import Design
from yard_planner.model.fence import Fence
from yard_planner.model.point import Point
from yard_planner.model.tree import Tree
from yard_planner.ui.context import InteractionContext
from yard_planner.ui.state_machine import YardStateMachine


# =============================================================================
# ENTITIES
# =============================================================================


@pytest.fixture
def draft_fence_100px() -> Fence:
    """Draft fence (0,0) -> (100,0): exactly 100 pixels long."""
    draft = Fence.create_draft(origin=Point(x=0, y=0), fence_count=0)
    return draft.extended(new_end=Point(x=100, y=0))


@pytest.fixture
def draft_tree_radius_20() -> Tree:
    """Draft tree at (200,200) dragged to (220,200): radius 20px."""
    draft = Tree.create_draft(center=Point(x=200, y=200), tree_count=0)
    return draft.extended(pointer=Point(x=220, y=200))


# =============================================================================
# DESIGNS
# =============================================================================


@pytest.fixture
def empty_design() -> Design:
    return Design()


@pytest.fixture
def calibrated_design(draft_fence_100px: Fence) -> Design:
    """One 100px fence entered as 50ft: scale = 2.0 px/ft, fence id 1."""
    design = Design()
    design.commit_fence(draft=draft_fence_100px, length_ft=50.0)
    return design


@pytest.fixture
def populated_design(calibrated_design: Design, draft_tree_radius_20: Tree) -> Design:
    """Calibrated design with fence id 1 and tree id 2 (radius 20px = 20ft diameter)."""
    calibrated_design.address = "12 Garden Lane"
    calibrated_design.map_loaded = True
    calibrated_design.notes = "Plant hedge along the north fence"
    calibrated_design.commit_tree(draft=draft_tree_radius_20)
    return calibrated_design


# =============================================================================
# STATE MACHINE FIXTURES
# =============================================================================


@pytest.fixture
def state_machine_and_context() -> tuple[YardStateMachine, InteractionContext]:
    """Fresh state machine and context pair on an empty design, starting in IDLE."""
    return YardStateMachine.create(add_ui_listener=False)


@pytest.fixture
def populated_state_machine(populated_design: Design) -> tuple[YardStateMachine, InteractionContext]:
    """State machine editing populated_design (fence 1, tree 2), starting in IDLE."""
    return YardStateMachine.create(design=populated_design, add_ui_listener=False)
