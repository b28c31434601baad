"""Base interface shared by all child packing strategies."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from boxnest.parser.model import LayoutPreferences


@dataclass(frozen=True)
class Size:
    w: float
    h: float


@dataclass
class Arrangement:
    """Child offsets relative to the top-left of the packed block.

    ``width`` and ``height`` are the extent of the block. Positions are in
    the same order as the sizes the strategy was given.
    """

    positions: list[tuple[float, float]] = field(default_factory=list)
    width: float = 0.0
    height: float = 0.0
    kind: str = ""


class LayoutStrategy(ABC):
    """A way of packing a list of child sizes into a block.

    Strategies never see the parent's size. The extent of an arrangement
    depends only on the child sizes, the gap and the preferences, so a
    parent sized to that extent (plus insets) is always large enough to
    receive the same arrangement again.
    """

    name: str = ""
    description: str = ""

    def calculate_grid_dimensions(
        self, count: int, preferences: LayoutPreferences | None = None
    ) -> tuple[int, int]:
        """(cols, rows) this strategy would use; 1x1 when it is not grid based."""
        return 1, 1

    @abstractmethod
    def arrange(
        self,
        sizes: list[Size],
        gap: float,
        preferences: LayoutPreferences | None = None,
        depth: int = 0,
    ) -> Arrangement:
        """Pack ``sizes`` with at least ``gap`` between neighbours."""


def stack(sizes: list[Size], gap: float, horizontal: bool) -> Arrangement:
    """Place sizes in a single row or column, aligned to the top/left edge."""
    positions: list[tuple[float, float]] = []
    cursor = 0.0
    cross = 0.0
    for size in sizes:
        if horizontal:
            positions.append((cursor, 0.0))
            cursor += size.w + gap
            cross = max(cross, size.h)
        else:
            positions.append((0.0, cursor))
            cursor += size.h + gap
            cross = max(cross, size.w)
    length = max(0.0, cursor - gap) if sizes else 0.0
    if horizontal:
        return Arrangement(positions, length, cross, "single-row")
    return Arrangement(positions, cross, length, "single-column")


def uniform_grid(sizes: list[Size], cols: int, rows: int, gap: float) -> Arrangement:
    """Cells sized to the largest child, each child centred in its cell."""
    if not sizes:
        return Arrangement(kind=f"grid-{cols}x{rows}")
    cell_w = max(s.w for s in sizes)
    cell_h = max(s.h for s in sizes)
    positions = []
    for i, size in enumerate(sizes):
        col = i % cols
        row = i // cols
        positions.append((
            col * (cell_w + gap) + (cell_w - size.w) / 2,
            row * (cell_h + gap) + (cell_h - size.h) / 2,
        ))
    used_rows = math.ceil(len(sizes) / cols)
    rows = max(rows, used_rows)
    return Arrangement(
        positions,
        cols * cell_w + (cols - 1) * gap,
        rows * cell_h + (rows - 1) * gap,
        f"grid-{cols}x{rows}",
    )
