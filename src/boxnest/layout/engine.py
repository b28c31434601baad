"""Cascading re-layout: keep every automatic parent fit to its children.

The orchestrator makes a single pass over the hierarchy from the roots
down. Each automatic parent is sized before its children are packed, and
a child is always packed at ``max(current size, its own minimum)``, so by
the time a child's own group is processed it is already large enough and
nothing processed earlier has to grow again.

Minimum sizes are computed once, bottom-up, before the pass. A node that
its parent did not re-pack follows its parent's move when the pass
reaches it.
"""

from __future__ import annotations

__all__ = [
    "fit_parent_to_children",
    "fit_parent_to_children_recursive",
    "translate_subtree",
    "update_children_layout",
]

import logging
from dataclasses import replace

from boxnest.layout.constants import EPSILON
from boxnest.layout.hierarchy import (
    children_index,
    derive_types,
    get_all_descendants,
    get_ancestors,
    get_children,
    layout_order,
)
from boxnest.layout.packing import (
    StrategyLike,
    calculate_child_layout,
    calculate_minimum_parent_size,
    minimum_sizes,
)
from boxnest.layout.settings import FixedDimensions, Margins
from boxnest.parser.model import Node

logger = logging.getLogger(__name__)


def translate_subtree(
    nodes: dict[str, Node], node_id: str, dx: float, dy: float
) -> None:
    """Shift every descendant of ``node_id`` by (dx, dy), in place."""
    if dx == 0 and dy == 0:
        return
    for desc_id in get_all_descendants(node_id, nodes):
        desc = nodes[desc_id]
        nodes[desc_id] = replace(desc, x=desc.x + dx, y=desc.y + dy)


def update_children_layout(
    nodes: dict[str, Node],
    fixed: FixedDimensions | None = None,
    margins: Margins | None = None,
    strategy: StrategyLike = None,
) -> dict[str, Node]:
    """Re-pack every automatic parent's children and grow undersized parents.

    Manual parents leave their children where they are. Locked parents keep
    their size but still pack their children inside it. Groups further down
    either kind of subtree are still processed. Parents are never shrunk
    here. Returns a new collection; ``nodes`` is not modified.
    """
    fixed = fixed or FixedDimensions()
    margins = margins or Margins()
    base = derive_types(nodes)
    order = layout_order(base)
    index = children_index(base)
    minimums = minimum_sizes(base, fixed, margins, strategy, reversed(order))
    result = dict(base)
    placed: set[str] = set()

    for node_id in order:
        node = result[node_id]
        if node_id not in placed and node.parent_id in result:
            # follow the parent's move, if it was moved
            parent_id = node.parent_id
            dx = result[parent_id].x - base[parent_id].x
            dy = result[parent_id].y - base[parent_id].y
            if dx or dy:
                node = replace(node, x=node.x + dx, y=node.y + dy)
                result[node_id] = node

        child_ids = index.get(node_id)
        if not child_ids or node.is_manual_positioning_enabled:
            continue

        if not node.is_locked_as_is:
            min_w, min_h = minimums[node_id]
            if node.w < min_w - EPSILON or node.h < min_h - EPSILON:
                logger.debug(
                    "Growing '%s' from %.1fx%.1f to fit children", node_id, node.w, node.h
                )
                node = replace(node, w=max(node.w, min_w), h=max(node.h, min_h))
                result[node_id] = node

        children = [result[c] for c in child_ids]
        for child in calculate_child_layout(
            node, children, fixed, margins, nodes=result, strategy=strategy,
            minimums=minimums,
        ):
            result[child.id] = child
            placed.add(child.id)

    return result


def fit_parent_to_children(
    parent_id: str,
    nodes: dict[str, Node],
    fixed: FixedDimensions | None = None,
    margins: Margins | None = None,
    strategy: StrategyLike = None,
) -> dict[str, Node]:
    """Resize one parent to exactly its minimum size, then re-run layout.

    Locked, childless and missing parents are left alone. Fitting puts the
    parent back under automatic layout.
    """
    parent = nodes.get(parent_id)
    if parent is None:
        logger.debug("Cannot fit missing node '%s'", parent_id)
        return nodes
    if parent.is_locked_as_is or not get_children(parent_id, nodes):
        return nodes

    min_w, min_h = calculate_minimum_parent_size(parent_id, nodes, fixed, margins, strategy)
    result = dict(nodes)
    result[parent_id] = replace(
        parent, w=min_w, h=min_h, is_manual_positioning_enabled=False
    )
    return update_children_layout(result, fixed, margins, strategy)


def fit_parent_to_children_recursive(
    parent_id: str,
    nodes: dict[str, Node],
    fixed: FixedDimensions | None = None,
    margins: Margins | None = None,
    strategy: StrategyLike = None,
) -> dict[str, Node]:
    """Fit ``parent_id`` and then each of its ancestors, bottom-up."""
    if parent_id not in nodes:
        return nodes
    result = nodes
    for node_id in [parent_id, *get_ancestors(parent_id, nodes)]:
        result = fit_parent_to_children(node_id, result, fixed, margins, strategy)
    return result
