"""Data model classes for yard layouts.

- Point: Geometry atom (pixel x, y)
- Fence / FenceUpdate: Measured fence line and its editable fields
- Tree / TreeUpdate: Tree canopy and its editable fields
- Design: Aggregate root owning all entities, the scale and notes
- Message / ToastMessage: User-facing messages
"""

from yard_planner.model.design import Design
from yard_planner.model.fence import Fence, FenceUpdate, delete_fence, update_fence
from yard_planner.model.point import Point
from yard_planner.model.tree import Tree, TreeUpdate, delete_tree, update_tree

__all__ = [
    "Point",
    "Fence",
    "FenceUpdate",
    "Tree",
    "TreeUpdate",
    "Design",
    "update_fence",
    "delete_fence",
    "update_tree",
    "delete_tree",
]
