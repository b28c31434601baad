"""Data model for nested rectangle documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class NodeType(Enum):
    """Role of a node, derived from its position in the hierarchy."""

    ROOT = "root"
    PARENT = "parent"
    LEAF = "leaf"
    TEXT_LABEL = "textLabel"


class FillStrategy(Enum):
    """Order in which a grid is filled when a column/row cap is set."""

    FILL_COLUMNS_FIRST = "fill-columns-first"
    FILL_ROWS_FIRST = "fill-rows-first"


class Orientation(Enum):
    """Direction a flow layout stacks children in."""

    ROW = "row"
    COLUMN = "column"


@dataclass(frozen=True)
class LayoutPreferences:
    """Per-parent packing hints."""

    fill_strategy: FillStrategy | None = None
    max_columns: int | None = None
    max_rows: int | None = None
    orientation: Orientation | None = None


@dataclass(frozen=True)
class Node:
    """A rectangle in the containment hierarchy.

    Nodes are immutable; every edit produces a new node via
    ``dataclasses.replace``. ``type`` is derived from structure and is
    recomputed after each structural change, so it is never authoritative
    (apart from ``TEXT_LABEL``, which is chosen by the user).
    """

    id: str
    parent_id: str | None = None
    x: float = 0.0
    y: float = 0.0
    w: float = 0.0
    h: float = 0.0
    label: str = ""
    type: NodeType = NodeType.ROOT
    color: str = "#4a90e2"
    description: str = ""
    is_manual_positioning_enabled: bool = False
    is_locked_as_is: bool = False
    is_text_label: bool = False
    layout_preferences: LayoutPreferences = field(default_factory=LayoutPreferences)

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h


@dataclass(frozen=True)
class DragState:
    """An in-progress drag of one node."""

    id: str
    start_x: float = 0.0
    start_y: float = 0.0
    initial_x: float = 0.0
    initial_y: float = 0.0
    is_hierarchy_drag: bool = False


@dataclass(frozen=True)
class ResizeState:
    """An in-progress resize of one node."""

    id: str
    start_x: float = 0.0
    start_y: float = 0.0
    initial_w: float = 0.0
    initial_h: float = 0.0


@dataclass(frozen=True)
class HierarchyDragState:
    """A drag that may drop the node onto a new parent."""

    dragged_id: str
    current_drop_target: str | None = None
    valid_drop_targets: tuple[str, ...] = ()
