"""Flow strategy: a single row or column, alternating by depth."""

from __future__ import annotations

from boxnest.layout.strategies.base import Arrangement, LayoutStrategy, Size, stack
from boxnest.parser.model import LayoutPreferences, Orientation


def orientation_for_depth(depth: int) -> Orientation:
    """Roots stack columns, their children rows, and so on."""
    return Orientation.COLUMN if depth % 2 == 0 else Orientation.ROW


class FlowStrategy(LayoutStrategy):
    """Stacks children along one axis.

    The parent's ``orientation`` preference wins; otherwise the direction
    alternates with the parent's depth so nested levels read as
    column / row / column.
    """

    name = "flow"
    description = "Flow layout with alternating row/column orientation"

    def arrange(
        self,
        sizes: list[Size],
        gap: float,
        preferences: LayoutPreferences | None = None,
        depth: int = 0,
    ) -> Arrangement:
        orientation = preferences.orientation if preferences is not None else None
        if orientation is None:
            orientation = orientation_for_depth(depth)
        return stack(sizes, gap, horizontal=orientation is Orientation.ROW)
