"""Layout engine for nested rectangles.

Public API:
- update_children_layout: cascading re-layout of a whole collection
- fit_parent_to_children / fit_parent_to_children_recursive
- calculate_child_layout / calculate_minimum_parent_size
- calculate_free_space_position: placement under manual parents
- get_z_index / sort_by_depth: render order
- editing operations (add_node, reparent_node, ...) and multi-select
  transforms (bulk_move, align_nodes, ...)
"""

from boxnest.layout.engine import (
    fit_parent_to_children,
    fit_parent_to_children_recursive,
    update_children_layout,
)
from boxnest.layout.free_space import calculate_free_space_position
from boxnest.layout.hierarchy import (
    get_all_descendants,
    get_children,
    is_leaf,
    layout_order,
)
from boxnest.layout.mutations import (
    add_node,
    can_reparent,
    lock_as_is,
    move_node,
    remove_node,
    reparent_node,
    resize_node,
    toggle_manual_positioning,
    toggle_text_label,
    update_layout_preferences,
)
from boxnest.layout.packing import calculate_child_layout, calculate_minimum_parent_size
from boxnest.layout.policy import apply_fixed_dimensions
from boxnest.layout.settings import FixedDimensions, LayoutSettings, Margins
from boxnest.layout.transforms import (
    align_nodes,
    bulk_delete,
    bulk_move,
    distribute_nodes,
    validate_selection,
)
from boxnest.layout.zorder import get_z_index, sort_by_depth

__all__ = [
    "FixedDimensions",
    "LayoutSettings",
    "Margins",
    "add_node",
    "align_nodes",
    "apply_fixed_dimensions",
    "bulk_delete",
    "bulk_move",
    "calculate_child_layout",
    "calculate_free_space_position",
    "calculate_minimum_parent_size",
    "can_reparent",
    "distribute_nodes",
    "fit_parent_to_children",
    "fit_parent_to_children_recursive",
    "get_all_descendants",
    "get_children",
    "get_z_index",
    "is_leaf",
    "layout_order",
    "lock_as_is",
    "move_node",
    "remove_node",
    "reparent_node",
    "resize_node",
    "sort_by_depth",
    "toggle_manual_positioning",
    "toggle_text_label",
    "update_children_layout",
    "update_layout_preferences",
    "validate_selection",
]
