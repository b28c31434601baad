"""Multi-select transforms: bulk move and delete, align, distribute.

A selection is a list of ids that share one parent and contain no text
labels (a lone text label is fine). Moving transforms additionally need
that parent to be manually positioned, or the selection to be roots.
The first id of a selection is the anchor for alignment; the first and
last ids stay put during distribution.
"""

from __future__ import annotations

__all__ = [
    "ALIGNMENTS",
    "DISTRIBUTIONS",
    "align_nodes",
    "bulk_delete",
    "bulk_move",
    "can_bulk_move",
    "distribute_nodes",
    "validate_selection",
]

import logging
from dataclasses import replace

from boxnest.layout.engine import translate_subtree, update_children_layout
from boxnest.layout.geometry import bounding_box, interior_bounds
from boxnest.layout.hierarchy import get_all_descendants
from boxnest.layout.settings import LayoutSettings
from boxnest.parser.model import Node

logger = logging.getLogger(__name__)

Nodes = dict[str, Node]

ALIGNMENTS = ("left", "center", "right", "top", "middle", "bottom")
DISTRIBUTIONS = ("horizontal", "vertical")

MIN_ALIGN = 2
MIN_DISTRIBUTE = 3


def validate_selection(ids: list[str], nodes: Nodes) -> bool:
    """True when every id exists and the ids form a same-parent group."""
    if not ids:
        return True
    if any(i not in nodes for i in ids):
        return False
    selected = [nodes[i] for i in ids]
    if len(selected) == 1:
        return True
    if any(n.is_text_label for n in selected):
        return False
    return len({n.parent_id for n in selected}) == 1


def can_bulk_move(ids: list[str], nodes: Nodes) -> bool:
    if not ids or not validate_selection(ids, nodes):
        return False
    parent_id = nodes[ids[0]].parent_id
    if parent_id is None:
        return True
    parent = nodes.get(parent_id)
    return parent is not None and parent.is_manual_positioning_enabled


def _shift(nodes: Nodes, offsets: dict[str, tuple[float, float]]) -> Nodes:
    """Apply per-node offsets, carrying each node's subtree along."""
    result = dict(nodes)
    for node_id, (dx, dy) in offsets.items():
        if dx == 0 and dy == 0:
            continue
        translate_subtree(result, node_id, dx, dy)
        node = result[node_id]
        result[node_id] = replace(node, x=node.x + dx, y=node.y + dy)
    return result


def bulk_move(
    nodes: Nodes,
    ids: list[str],
    dx: float,
    dy: float,
    settings: LayoutSettings | None = None,
) -> tuple[Nodes, bool]:
    """Move a selection by (dx, dy) grid units, kept inside the parent."""
    if not can_bulk_move(ids, nodes):
        logger.warning("Selection %s cannot be moved", ids)
        return nodes, False
    settings = settings or LayoutSettings()

    parent_id = nodes[ids[0]].parent_id
    if parent_id is not None:
        interior = interior_bounds(nodes[parent_id], settings.margins)
        box = bounding_box(nodes[i] for i in ids)
        dx = max(interior.x - box.x, min(dx, interior.right - box.right))
        dy = max(interior.y - box.y, min(dy, interior.bottom - box.bottom))

    return _shift(nodes, {i: (dx, dy) for i in ids}), True


def bulk_delete(
    nodes: Nodes, ids: list[str], settings: LayoutSettings | None = None
) -> tuple[Nodes, bool]:
    """Delete a selection and every descendant of it."""
    if not ids or not validate_selection(ids, nodes):
        logger.warning("Selection %s cannot be deleted", ids)
        return nodes, False
    settings = settings or LayoutSettings()
    doomed: set[str] = set()
    for node_id in ids:
        doomed.add(node_id)
        doomed.update(get_all_descendants(node_id, nodes))
    remaining = {k: v for k, v in nodes.items() if k not in doomed}
    return update_children_layout(
        remaining, settings.fixed_dimensions, settings.margins, settings.layout_algorithm
    ), True


def align_nodes(nodes: Nodes, ids: list[str], alignment: str) -> tuple[Nodes, bool]:
    """Line the selection up with its first node."""
    if alignment not in ALIGNMENTS:
        raise ValueError(f"Unknown alignment: {alignment}. Available: {list(ALIGNMENTS)}")
    if len(ids) < MIN_ALIGN or not can_bulk_move(ids, nodes):
        logger.warning("Selection %s cannot be aligned", ids)
        return nodes, False

    anchor = nodes[ids[0]]
    offsets: dict[str, tuple[float, float]] = {}
    for node_id in ids[1:]:
        node = nodes[node_id]
        if alignment == "left":
            offsets[node_id] = (anchor.x - node.x, 0.0)
        elif alignment == "center":
            offsets[node_id] = (anchor.x + anchor.w / 2 - node.w / 2 - node.x, 0.0)
        elif alignment == "right":
            offsets[node_id] = (anchor.right - node.w - node.x, 0.0)
        elif alignment == "top":
            offsets[node_id] = (0.0, anchor.y - node.y)
        elif alignment == "middle":
            offsets[node_id] = (0.0, anchor.y + anchor.h / 2 - node.h / 2 - node.y)
        else:
            offsets[node_id] = (0.0, anchor.bottom - node.h - node.y)
    return _shift(nodes, offsets), True


def distribute_nodes(nodes: Nodes, ids: list[str], direction: str) -> tuple[Nodes, bool]:
    """Space the selection evenly between its first and last node.

    The inner nodes keep their left-to-right (or top-to-bottom) order and
    get equal gaps between neighbouring edges.
    """
    if direction not in DISTRIBUTIONS:
        raise ValueError(f"Unknown direction: {direction}. Available: {list(DISTRIBUTIONS)}")
    if len(ids) < MIN_DISTRIBUTE or not can_bulk_move(ids, nodes):
        logger.warning("Selection %s cannot be distributed", ids)
        return nodes, False

    horizontal = direction == "horizontal"

    def start(n: Node) -> float:
        return n.x if horizontal else n.y

    def length(n: Node) -> float:
        return n.w if horizontal else n.h

    first, last = nodes[ids[0]], nodes[ids[-1]]
    low, high = (first, last) if start(first) <= start(last) else (last, first)
    inner = sorted((nodes[i] for i in ids[1:-1]), key=start)

    span_start = start(low) + length(low)
    free = start(high) - span_start - sum(length(n) for n in inner)
    gap = free / (len(inner) + 1)

    offsets: dict[str, tuple[float, float]] = {}
    cursor = span_start + gap
    for node in inner:
        delta = cursor - start(node)
        offsets[node.id] = (delta, 0.0) if horizontal else (0.0, delta)
        cursor += length(node) + gap
    return _shift(nodes, offsets), True
