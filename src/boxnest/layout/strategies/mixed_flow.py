"""Mixed flow strategy: pick the best of several row/column/grid arrangements.

Candidates are scored on how much of the block's area the children fill,
how close the block is to square, and how evenly two-column and two-row
splits balance. Matrix grids get a bonus when they use their cells well.
"""

from __future__ import annotations

import math
import re

from boxnest.layout.strategies.base import (
    Arrangement,
    LayoutStrategy,
    Size,
    stack,
    uniform_grid,
)
from boxnest.parser.model import LayoutPreferences

EFFICIENCY_WEIGHT = 0.5
ASPECT_WEIGHT = 0.2
BALANCE_WEIGHT = 0.1
SINGLE_COLUMN_PENALTY = -0.1
GRID_TYPE_BONUS = 0.1

_GRID_KIND = re.compile(r"grid-(\d+)x(\d+)")


def _split_balanced(values: list[float]) -> tuple[list[int], list[int]]:
    """Greedy two-way split: each item goes to the lighter group."""
    first: list[int] = []
    second: list[int] = []
    total_first = total_second = 0.0
    for i, value in enumerate(values):
        if total_first <= total_second:
            first.append(i)
            total_first += value
        else:
            second.append(i)
            total_second += value
    return first, second


def _two_lanes(sizes: list[Size], gap: float, horizontal: bool) -> tuple[Arrangement, float]:
    """Two columns (or two rows) balanced by total height (or width).

    Returns the arrangement and its balance penalty.
    """
    along = [s.w if horizontal else s.h for s in sizes]
    lanes = _split_balanced(along)
    positions: list[tuple[float, float] | None] = [None] * len(sizes)
    offset = 0.0
    lengths: list[float] = []
    for lane in lanes:
        cursor = 0.0
        cross = 0.0
        for i in lane:
            size = sizes[i]
            if horizontal:
                positions[i] = (cursor, offset)
                cursor += size.w + gap
                cross = max(cross, size.h)
            else:
                positions[i] = (offset, cursor)
                cursor += size.h + gap
                cross = max(cross, size.w)
        lengths.append(max(0.0, cursor - gap) if lane else 0.0)
        offset += cross + gap
    cross_total = max(0.0, offset - gap)
    length = max(lengths)
    penalty = abs(lengths[0] - lengths[1]) / length if length > 0 else 0.0
    if horizontal:
        return Arrangement(positions, length, cross_total, "two-row"), penalty
    return Arrangement(positions, cross_total, length, "two-column"), penalty


def grid_candidates(count: int) -> list[tuple[int, int]]:
    """(cols, rows) matrices worth trying for ``count`` children."""
    if count == 4:
        return [(2, 2)]
    if count == 6:
        return [(2, 3), (3, 2)]
    if count == 8:
        return [(2, 4), (4, 2)]
    if count == 9:
        return [(3, 3)]
    options = []
    if count > 9:
        for cols in range(2, math.ceil(math.sqrt(count * 1.5)) + 1):
            rows = math.ceil(count / cols)
            if count <= cols * rows <= count + 2:
                options.append((cols, rows))
    return options


def score(arrangement: Arrangement, sizes: list[Size], balance_penalty: float = 0.0) -> float:
    area = arrangement.width * arrangement.height
    if area <= 0:
        return float("-inf")
    efficiency = sum(s.w * s.h for s in sizes) / area
    aspect_penalty = abs(math.log(arrangement.width / arrangement.height))

    grid_bonus = 0.0
    type_bonus = 0.0
    match = _GRID_KIND.fullmatch(arrangement.kind)
    if match:
        cols, rows = int(match.group(1)), int(match.group(2))
        cells = cols * rows
        utilization = len(sizes) / cells
        balance = min(cols, rows) / max(cols, rows)
        perfect = 0.2 if len(sizes) == cells else 0.0
        grid_bonus = utilization * 0.3 + balance * 0.2 + perfect
        type_bonus = GRID_TYPE_BONUS
    elif arrangement.kind == "single-column":
        type_bonus = SINGLE_COLUMN_PENALTY

    return (
        efficiency * EFFICIENCY_WEIGHT
        - aspect_penalty * ASPECT_WEIGHT
        - balance_penalty * BALANCE_WEIGHT
        + grid_bonus
        + type_bonus
    )


class MixedFlowStrategy(LayoutStrategy):
    """Adaptive layout combining rows and columns to minimise whitespace."""

    name = "mixed-flow"
    description = "Adaptive flow layout combining rows and columns to minimize whitespace"

    def candidates(self, sizes: list[Size], gap: float) -> list[tuple[Arrangement, float]]:
        options = [
            (stack(sizes, gap, horizontal=True), 0.0),
            (stack(sizes, gap, horizontal=False), 0.0),
        ]
        if len(sizes) > 2:
            options.append(_two_lanes(sizes, gap, horizontal=False))
            options.append(_two_lanes(sizes, gap, horizontal=True))
        if len(sizes) >= 4:
            for cols, rows in grid_candidates(len(sizes)):
                options.append((uniform_grid(sizes, cols, rows, gap), 0.0))
        return options

    def arrange(
        self,
        sizes: list[Size],
        gap: float,
        preferences: LayoutPreferences | None = None,
        depth: int = 0,
    ) -> Arrangement:
        if not sizes:
            return Arrangement(kind="empty")
        best: Arrangement | None = None
        best_score = float("-inf")
        # Ties keep the earlier candidate.
        for arrangement, penalty in self.candidates(sizes, gap):
            value = score(arrangement, sizes, penalty)
            if best is None or value > best_score:
                best, best_score = arrangement, value
        return best
