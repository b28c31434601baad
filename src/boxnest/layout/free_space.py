"""Free-space search for children of manually positioned parents.

Siblings under a manual parent sit where the user put them, so no packing
strategy applies. A new child goes into the first free slot found by a
sequence of increasingly blunt searches:

1. gap-fill over the grid implied by sibling coordinates
2. completing an existing row or column
3. extending past the rightmost or bottommost sibling
4. scanning along the interior's right and bottom edges
5. scanning the whole interior
6. random in-bounds positions
7. the interior's top-left corner

A slot is free when the candidate, expanded by the margin, does not
intersect any sibling.
"""

from __future__ import annotations

__all__ = ["calculate_free_space_position", "grow_to_contain"]

import logging
import random
from dataclasses import replace
from typing import Iterable, Iterator

from boxnest.layout.constants import EPSILON, RANDOM_ATTEMPTS, RANDOM_SEED
from boxnest.layout.geometry import Rect, contains, interior_bounds, overlaps_with_margin
from boxnest.layout.settings import Margins
from boxnest.parser.model import Node

logger = logging.getLogger(__name__)


def _steps(start: float, stop: float, step: float) -> Iterator[float]:
    """start, start + step, ... up to and including stop."""
    i = 0
    while start + i * step <= stop + EPSILON:
        yield start + i * step
        i += 1


def _first(
    candidates: Iterable[tuple[float, float]],
    accept,
) -> tuple[float, float] | None:
    for x, y in candidates:
        if accept(x, y):
            return x, y
    return None


def calculate_free_space_position(
    parent: Node,
    siblings: list[Node],
    size: tuple[float, float],
    margins: Margins | None = None,
    *,
    allow_growth: bool = True,
    rng: random.Random | None = None,
) -> tuple[float, float]:
    """Top-left position for a new ``size`` child of ``parent``.

    With ``allow_growth`` the extension step may return a slot outside the
    current interior; the caller is then expected to grow the parent.
    """
    margins = margins or Margins()
    w, h = size
    m = margins.margin
    interior = interior_bounds(parent, margins)

    if not siblings:
        return interior.x, interior.y

    def is_free(x: float, y: float) -> bool:
        candidate = Rect(x, y, w, h)
        return not any(overlaps_with_margin(candidate, s, m) for s in siblings)

    def in_bounds(x: float, y: float) -> bool:
        return contains(interior, Rect(x, y, w, h))

    def usable(x: float, y: float) -> bool:
        return in_bounds(x, y) and is_free(x, y)

    xs = sorted({s.x for s in siblings})
    ys = sorted({s.y for s in siblings})

    # 1. gap-fill
    if len(xs) >= 2 and len(ys) >= 2:
        found = _first(((x, y) for y in ys for x in xs), usable)
        if found:
            logger.debug("Free slot for '%s' by gap-fill at %s", parent.id, found)
            return found

    # 2. row/column completion
    rightmost = max(s.right for s in siblings)
    bottommost = max(s.bottom for s in siblings)
    found = _first(((rightmost + m, y) for y in ys), usable) or _first(
        ((x, bottommost + m) for x in xs), usable
    )
    if found:
        logger.debug("Free slot for '%s' by row/column completion at %s", parent.id, found)
        return found

    # 3. extension
    right_anchor = max(siblings, key=lambda s: s.right)
    bottom_anchor = max(siblings, key=lambda s: s.bottom)
    extension = [(rightmost + m, right_anchor.y), (bottom_anchor.x, bottommost + m)]
    found = _first(extension, is_free if allow_growth else usable)
    if found:
        logger.debug("Free slot for '%s' by extension at %s", parent.id, found)
        return found

    step = m if m > 0 else 1.0
    fits = interior.w + EPSILON >= w and interior.h + EPSILON >= h
    if fits:
        max_x = interior.right - w
        max_y = interior.bottom - h

        # 4. edge scan
        edges = [(max_x, y) for y in _steps(interior.y, max_y, step)]
        edges += [(x, max_y) for x in _steps(interior.x, max_x, step)]
        found = _first(edges, usable)
        if found:
            return found

        # 5. full scan
        found = _first(
            ((x, y) for y in _steps(interior.y, max_y, step)
             for x in _steps(interior.x, max_x, step)),
            usable,
        )
        if found:
            return found

        # 6. random fallback, overlap tolerated on the last attempt
        rng = rng or random.Random(RANDOM_SEED)
        candidate = (interior.x, interior.y)
        for _ in range(RANDOM_ATTEMPTS):
            candidate = (rng.uniform(interior.x, max_x), rng.uniform(interior.y, max_y))
            if is_free(*candidate):
                return candidate
        logger.warning("No free slot in '%s'; placing with overlap", parent.id)
        return candidate

    # 7. nothing fits
    logger.warning("Interior of '%s' is smaller than %sx%s", parent.id, w, h)
    return interior.x, interior.y


def grow_to_contain(
    parent: Node,
    x: float,
    y: float,
    size: tuple[float, float],
    margins: Margins | None = None,
) -> Node:
    """Enlarge ``parent`` (never shrink) so a child at (x, y) sits in its interior."""
    margins = margins or Margins()
    w, h = size
    new_w = max(parent.w, x + w + margins.margin - parent.x)
    new_h = max(parent.h, y + h + margins.margin - parent.y)
    if (new_w, new_h) == (parent.w, parent.h):
        return parent
    return replace(parent, w=new_w, h=new_h)
