"""Document model and JSON codec."""

from boxnest.parser.document import dump_document, parse_document
from boxnest.parser.model import (
    DragState,
    FillStrategy,
    HierarchyDragState,
    LayoutPreferences,
    Node,
    NodeType,
    Orientation,
    ResizeState,
)

__all__ = [
    "DragState",
    "FillStrategy",
    "HierarchyDragState",
    "LayoutPreferences",
    "Node",
    "NodeType",
    "Orientation",
    "ResizeState",
    "dump_document",
    "parse_document",
]
