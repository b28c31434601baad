"""Render depth and z-order.

Children always stack above their parents in steady state; an active drag
or resize lifts the affected subtree above everything else. Nothing here
feeds back into geometry.
"""

from __future__ import annotations

__all__ = ["get_z_index", "sort_by_depth"]

from boxnest.layout.constants import (
    MAX_Z_DEPTH,
    Z_BASE,
    Z_DEPTH_STEP,
    Z_DRAG,
    Z_RESIZE,
    Z_SELECTED_LEAF_BOOST,
    Z_SELECTED_PARENT_BOOST,
)
from boxnest.layout.hierarchy import get_ancestors, get_depth, is_leaf
from boxnest.parser.model import DragState, HierarchyDragState, Node, ResizeState


def _in_subtree(node: Node, top_id: str, nodes: dict[str, Node]) -> bool:
    return node.id == top_id or top_id in get_ancestors(node.id, nodes)


def get_z_index(
    node: Node,
    nodes: dict[str, Node],
    selected_id: str | None = None,
    drag_state: DragState | None = None,
    resize_state: ResizeState | None = None,
    hierarchy_drag_state: HierarchyDragState | None = None,
) -> int:
    """Z-index for ``node`` given the current interaction state."""
    depth = min(get_depth(node.id, nodes), MAX_Z_DEPTH)
    base = Z_BASE + Z_DEPTH_STEP * depth

    dragged_id = None
    if hierarchy_drag_state is not None:
        dragged_id = hierarchy_drag_state.dragged_id
    elif drag_state is not None:
        dragged_id = drag_state.id

    if dragged_id is not None and _in_subtree(node, dragged_id, nodes):
        return Z_DRAG + depth

    if resize_state is not None and _in_subtree(node, resize_state.id, nodes):
        return Z_RESIZE + depth

    idle = dragged_id is None and resize_state is None
    if idle and node.id == selected_id:
        if is_leaf(node.id, nodes):
            return base + Z_SELECTED_LEAF_BOOST
        return base + Z_SELECTED_PARENT_BOOST

    return base


def sort_by_depth(nodes: dict[str, Node]) -> list[Node]:
    """Nodes in paint order: shallowest first, then collection order."""
    position = {node_id: i for i, node_id in enumerate(nodes)}
    return sorted(
        nodes.values(),
        key=lambda n: (min(get_depth(n.id, nodes), MAX_Z_DEPTH), position[n.id]),
    )
