"""Grid strategy: rows and columns of uniform cells."""

from __future__ import annotations

import math

from boxnest.layout.strategies.base import Arrangement, LayoutStrategy, Size, uniform_grid
from boxnest.parser.model import FillStrategy, LayoutPreferences


class GridStrategy(LayoutStrategy):
    """Near-square grid by default.

    With a fill strategy set, ``max_columns`` (fill rows first) or
    ``max_rows`` (fill columns first) caps the grid in one direction and
    the other direction grows to fit.
    """

    name = "grid"
    description = "Arranges children in a grid with configurable fill strategy"

    def calculate_grid_dimensions(
        self, count: int, preferences: LayoutPreferences | None = None
    ) -> tuple[int, int]:
        if count <= 0:
            return 0, 0
        square = math.ceil(math.sqrt(count))
        fill = preferences.fill_strategy if preferences is not None else None

        if fill is FillStrategy.FILL_ROWS_FIRST:
            cols = min(preferences.max_columns, count) if preferences.max_columns else square
            return cols, math.ceil(count / cols)
        if fill is FillStrategy.FILL_COLUMNS_FIRST:
            rows = min(preferences.max_rows, count) if preferences.max_rows else square
            return math.ceil(count / rows), rows

        return square, math.ceil(count / square)

    def arrange(
        self,
        sizes: list[Size],
        gap: float,
        preferences: LayoutPreferences | None = None,
        depth: int = 0,
    ) -> Arrangement:
        if not sizes:
            return Arrangement(kind="grid-0x0")
        cols, rows = self.calculate_grid_dimensions(len(sizes), preferences)
        return uniform_grid(sizes, cols, rows, gap)
