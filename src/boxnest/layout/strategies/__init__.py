"""Pluggable child packing strategies.

- GridStrategy: uniform rows and columns, honouring fill preferences
- FlowStrategy: single row or column, alternating by depth
- MixedFlowStrategy: best-scoring mix of rows, columns and grids

Strategies are looked up by name and passed explicitly to the packing
functions; there is no module-level active strategy.
"""

from boxnest.layout.strategies.base import Arrangement, LayoutStrategy, Size
from boxnest.layout.strategies.flow import FlowStrategy
from boxnest.layout.strategies.grid import GridStrategy
from boxnest.layout.strategies.mixed_flow import MixedFlowStrategy

__all__ = [
    "Arrangement",
    "FlowStrategy",
    "GridStrategy",
    "LayoutStrategy",
    "MixedFlowStrategy",
    "STRATEGIES",
    "Size",
    "get_strategy",
    "register_strategy",
]

STRATEGIES: dict[str, type[LayoutStrategy]] = {
    "grid": GridStrategy,
    "flow": FlowStrategy,
    "mixed-flow": MixedFlowStrategy,
}


def get_strategy(name: str) -> LayoutStrategy:
    """Get a strategy instance by name."""
    strategy_class = STRATEGIES.get(name.lower())
    if strategy_class is None:
        raise ValueError(f"Unknown strategy: {name}. Available: {list(STRATEGIES)}")
    return strategy_class()


def register_strategy(name: str, strategy_class: type[LayoutStrategy]) -> None:
    """Make a custom strategy available to get_strategy."""
    STRATEGIES[name.lower()] = strategy_class
