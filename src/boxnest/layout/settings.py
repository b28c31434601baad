"""Global layout settings: margins, fixed leaf dimensions, strategy choice."""

from __future__ import annotations

from dataclasses import dataclass, field

from boxnest.layout.constants import (
    DEFAULT_STRATEGY,
    GRID_SIZE,
    LABEL_MARGIN,
    LEAF_FIXED_HEIGHT,
    LEAF_FIXED_WIDTH,
    MARGIN,
)


@dataclass(frozen=True)
class Margins:
    """Spacing between siblings and the reserved label band of a parent."""

    margin: float = MARGIN
    label_margin: float = LABEL_MARGIN

    def __post_init__(self) -> None:
        if self.margin < 0 or self.label_margin < 0:
            raise ValueError(
                f"Margins must be non-negative, got margin={self.margin}, "
                f"label_margin={self.label_margin}"
            )


@dataclass(frozen=True)
class FixedDimensions:
    """Width/height pinning applied to leaf nodes."""

    leaf_fixed_width: bool = True
    leaf_fixed_height: bool = True
    leaf_width: float = LEAF_FIXED_WIDTH
    leaf_height: float = LEAF_FIXED_HEIGHT


@dataclass(frozen=True)
class LayoutSettings:
    """Everything a document carries besides its nodes."""

    grid_size: int = GRID_SIZE
    margins: Margins = field(default_factory=Margins)
    fixed_dimensions: FixedDimensions = field(default_factory=FixedDimensions)
    layout_algorithm: str = DEFAULT_STRATEGY

    def __post_init__(self) -> None:
        if self.grid_size <= 0:
            raise ValueError(f"Grid size must be positive, got {self.grid_size}")
