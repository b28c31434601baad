"""Geometry primitives: rectangle bounds, overlap tests and interior insets.

Functions accept anything exposing ``x``, ``y``, ``w`` and ``h``, so both
:class:`Rect` and :class:`~boxnest.parser.model.Node` work.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Protocol

from boxnest.layout.constants import EPSILON
from boxnest.layout.settings import Margins


class HasBounds(Protocol):
    x: float
    y: float
    w: float
    h: float


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in grid units."""

    x: float
    y: float
    w: float
    h: float

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h

    @classmethod
    def of(cls, obj: HasBounds) -> Rect:
        return cls(obj.x, obj.y, obj.w, obj.h)


def rects_overlap(a: HasBounds, b: HasBounds) -> bool:
    """True when a and b share interior area. Touching edges do not count."""
    return (
        a.x < b.x + b.w - EPSILON
        and b.x < a.x + a.w - EPSILON
        and a.y < b.y + b.h - EPSILON
        and b.y < a.y + a.h - EPSILON
    )


def expand(rect: HasBounds, amount: float) -> Rect:
    """Grow a rectangle by ``amount`` on every side."""
    return Rect(rect.x - amount, rect.y - amount, rect.w + 2 * amount, rect.h + 2 * amount)


def overlaps_with_margin(a: HasBounds, b: HasBounds, margin: float) -> bool:
    """True when a, expanded by margin, intersects b.

    Two siblings placed exactly ``margin`` apart are therefore not
    considered overlapping.
    """
    return rects_overlap(expand(a, margin), b)


def interior_bounds(parent: HasBounds, margins: Margins) -> Rect:
    """The region of a parent available to its children.

    Left, right and bottom are inset by ``margin``; the top is inset by
    ``label_margin`` to leave room for the parent's label.
    """
    return Rect(
        parent.x + margins.margin,
        parent.y + margins.label_margin,
        max(0.0, parent.w - 2 * margins.margin),
        max(0.0, parent.h - margins.label_margin - margins.margin),
    )


def contains(outer: HasBounds, inner: HasBounds, tolerance: float = EPSILON) -> bool:
    """True when inner lies within outer, edges inclusive."""
    return (
        inner.x >= outer.x - tolerance
        and inner.y >= outer.y - tolerance
        and inner.x + inner.w <= outer.x + outer.w + tolerance
        and inner.y + inner.h <= outer.y + outer.h + tolerance
    )


def bounding_box(rects: Iterable[HasBounds]) -> Rect | None:
    """Smallest rectangle enclosing all of ``rects``, or None if empty."""
    items = list(rects)
    if not items:
        return None
    min_x = min(r.x for r in items)
    min_y = min(r.y for r in items)
    max_x = max(r.x + r.w for r in items)
    max_y = max(r.y + r.h for r in items)
    return Rect(min_x, min_y, max_x - min_x, max_y - min_y)
