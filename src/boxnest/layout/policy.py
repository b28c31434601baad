"""Fixed-dimension policy: pin leaf sizes to the configured values."""

from __future__ import annotations

__all__ = ["apply_fixed_dimensions", "clamp_size"]

from dataclasses import replace

from boxnest.layout.constants import MIN_HEIGHT, MIN_WIDTH
from boxnest.layout.settings import FixedDimensions
from boxnest.parser.model import Node, NodeType


def clamp_size(
    w: float,
    h: float,
    min_width: float = MIN_WIDTH,
    min_height: float = MIN_HEIGHT,
) -> tuple[float, float]:
    return max(w, min_width), max(h, min_height)


def apply_fixed_dimensions(
    node: Node,
    fixed: FixedDimensions,
    min_width: float = MIN_WIDTH,
    min_height: float = MIN_HEIGHT,
) -> Node:
    """Return the node with its size pinned per ``fixed``.

    Only unlocked leaves are pinned; every other node keeps its size.
    The result is always clamped to the minimums.
    """
    w, h = node.w, node.h
    if node.type is NodeType.LEAF and not node.is_locked_as_is:
        if fixed.leaf_fixed_width:
            w = fixed.leaf_width
        if fixed.leaf_fixed_height:
            h = fixed.leaf_height
    w, h = clamp_size(w, h, min_width, min_height)
    if (w, h) == (node.w, node.h):
        return node
    return replace(node, w=w, h=h)
