"""Child layout and minimum parent size.

Both functions share one sizing rule for children and one arrangement
from the active strategy, so a parent sized by
:func:`calculate_minimum_parent_size` always receives the layout from
:func:`calculate_child_layout` without overflowing.

Child sizing:

- locked nodes keep their size
- text labels keep their size (clamped to the minimums)
- leaves get the fixed-dimension policy
- manual-mode parents keep their size
- automatic parents grow to their own minimum

Minimums are computed bottom-up, deepest parents first, so nesting depth
is not limited by the interpreter stack.
"""

from __future__ import annotations

__all__ = [
    "calculate_child_layout",
    "calculate_minimum_parent_size",
    "child_size",
    "minimum_sizes",
    "resolve_strategy",
]

import logging
from collections.abc import Iterable
from dataclasses import replace

from boxnest.layout.constants import DEFAULT_STRATEGY, MIN_HEIGHT, MIN_WIDTH
from boxnest.layout.geometry import interior_bounds
from boxnest.layout.hierarchy import (
    children_index,
    get_all_descendants,
    get_depth,
    is_leaf,
    layout_order,
)
from boxnest.layout.policy import apply_fixed_dimensions, clamp_size
from boxnest.layout.settings import FixedDimensions, Margins
from boxnest.layout.strategies import (
    Arrangement,
    GridStrategy,
    LayoutStrategy,
    Size,
    get_strategy,
)
from boxnest.parser.model import Node, NodeType

logger = logging.getLogger(__name__)

StrategyLike = LayoutStrategy | str | None


def resolve_strategy(parent: Node, strategy: StrategyLike = None) -> LayoutStrategy:
    """Strategy used to pack ``parent``'s children.

    A parent with a fill strategy preference is always packed as a grid.
    """
    if parent.layout_preferences.fill_strategy is not None:
        return GridStrategy()
    if strategy is None:
        return get_strategy(DEFAULT_STRATEGY)
    if isinstance(strategy, str):
        return get_strategy(strategy)
    return strategy


def child_size(
    child: Node,
    nodes: dict[str, Node],
    fixed: FixedDimensions,
    minimums: dict[str, tuple[float, float]],
) -> Size:
    """Size ``child`` takes when packed by an automatic parent.

    ``minimums`` holds the already computed minimum size of the child's
    own children group, if it has one.
    """
    if child.is_locked_as_is:
        return Size(child.w, child.h)
    if child.is_text_label:
        return Size(*clamp_size(child.w, child.h))

    if child.id not in minimums and is_leaf(child.id, nodes):
        pinned = apply_fixed_dimensions(replace(child, type=NodeType.LEAF), fixed)
        return Size(pinned.w, pinned.h)

    if child.is_manual_positioning_enabled or child.id not in minimums:
        return Size(*clamp_size(child.w, child.h))

    min_w, min_h = minimums[child.id]
    return Size(max(child.w, min_w), max(child.h, min_h))


def _arrange(
    parent: Node,
    children: list[Node],
    nodes: dict[str, Node],
    fixed: FixedDimensions,
    margins: Margins,
    strategy: StrategyLike,
    minimums: dict[str, tuple[float, float]],
) -> tuple[list[Size], Arrangement]:
    sizes = [child_size(c, nodes, fixed, minimums) for c in children]
    packer = resolve_strategy(parent, strategy)
    depth = get_depth(parent.id, nodes) if parent.id in nodes else 0
    arrangement = packer.arrange(sizes, margins.margin, parent.layout_preferences, depth)
    return sizes, arrangement


def minimum_sizes(
    nodes: dict[str, Node],
    fixed: FixedDimensions | None = None,
    margins: Margins | None = None,
    strategy: StrategyLike = None,
    order: Iterable[str] | None = None,
) -> dict[str, tuple[float, float]]:
    """Minimum size of every node with children, computed bottom-up.

    ``order`` must list each node after all of its descendants; it
    defaults to the reverse of :func:`layout_order`. A child whose own
    minimum is not known yet (only possible inside a parent cycle) is
    taken at its current size.
    """
    fixed = fixed or FixedDimensions()
    margins = margins or Margins()
    if order is None:
        order = reversed(layout_order(nodes))
    index = children_index(nodes)
    minimums: dict[str, tuple[float, float]] = {}
    for node_id in order:
        child_ids = index.get(node_id)
        if not child_ids:
            continue
        children = [nodes[c] for c in child_ids]
        _, arrangement = _arrange(
            nodes[node_id], children, nodes, fixed, margins, strategy, minimums
        )
        minimums[node_id] = clamp_size(
            arrangement.width + 2 * margins.margin,
            arrangement.height + margins.label_margin + margins.margin,
        )
    return minimums


def _subtree_minimums(
    parent_id: str,
    nodes: dict[str, Node],
    fixed: FixedDimensions,
    margins: Margins,
    strategy: StrategyLike,
) -> dict[str, tuple[float, float]]:
    order = reversed([parent_id, *get_all_descendants(parent_id, nodes)])
    return minimum_sizes(nodes, fixed, margins, strategy, order)


def calculate_minimum_parent_size(
    parent_id: str,
    nodes: dict[str, Node],
    fixed: FixedDimensions | None = None,
    margins: Margins | None = None,
    strategy: StrategyLike = None,
    *,
    minimums: dict[str, tuple[float, float]] | None = None,
) -> tuple[float, float]:
    """Smallest (w, h) that holds the parent's children with margins.

    Returns the global minimums for a missing or childless parent. Pass
    ``minimums`` from :func:`minimum_sizes` to reuse sizes computed for
    the whole collection.
    """
    fixed = fixed or FixedDimensions()
    margins = margins or Margins()
    if parent_id not in nodes:
        logger.debug("Minimum size requested for missing node '%s'", parent_id)
        return MIN_WIDTH, MIN_HEIGHT
    if minimums is None or parent_id not in minimums:
        minimums = _subtree_minimums(parent_id, nodes, fixed, margins, strategy)
    return minimums.get(parent_id, (MIN_WIDTH, MIN_HEIGHT))


def calculate_child_layout(
    parent: Node,
    children: list[Node],
    fixed: FixedDimensions | None = None,
    margins: Margins | None = None,
    nodes: dict[str, Node] | None = None,
    strategy: StrategyLike = None,
    *,
    minimums: dict[str, tuple[float, float]] | None = None,
) -> list[Node]:
    """New geometry for ``children`` packed inside ``parent``.

    The packed block is centred in the parent's interior. A parent smaller
    than its minimum size gets a block anchored to the interior's top-left
    corner that spills over.
    """
    fixed = fixed or FixedDimensions()
    margins = margins or Margins()
    if not children:
        return []
    if nodes is None:
        nodes = {parent.id: parent, **{c.id: c for c in children}}
    if minimums is None:
        minimums = {}
        for child in children:
            if child.id not in minimums:
                minimums.update(_subtree_minimums(child.id, nodes, fixed, margins, strategy))

    sizes, arrangement = _arrange(parent, children, nodes, fixed, margins, strategy, minimums)
    interior = interior_bounds(parent, margins)
    origin_x = interior.x + max(0.0, (interior.w - arrangement.width) / 2)
    origin_y = interior.y + max(0.0, (interior.h - arrangement.height) / 2)

    laid_out = []
    for child, size, (dx, dy) in zip(children, sizes, arrangement.positions):
        x, y = origin_x + dx, origin_y + dy
        if (x, y, size.w, size.h) == (child.x, child.y, child.w, child.h):
            laid_out.append(child)
        else:
            laid_out.append(replace(child, x=x, y=y, w=size.w, h=size.h))
    return laid_out
