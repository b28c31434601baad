"""JSON document codec.

A document is an object with a ``settings`` block and a ``rectangles``
list, using camelCase keys::

    {
      "settings": {"gridSize": 10, "margin": 1, "labelMargin": 2,
                   "leafFixedWidth": true, "leafFixedHeight": true,
                   "leafWidth": 5, "leafHeight": 3,
                   "layoutAlgorithm": "grid"},
      "rectangles": [
        {"id": "rect-1", "x": 0, "y": 0, "w": 16, "h": 10,
         "label": "Root", "type": "root"},
        {"id": "rect-2", "parentId": "rect-1", "x": 1, "y": 2, "w": 5, "h": 3,
         "isManualPositioningEnabled": false, "isLockedAsIs": false,
         "layoutPreferences": {"fillStrategy": "fill-rows-first", "maxColumns": 3}}
      ]
    }

The shape is checked by the pydantic models below; a document that does
not match raises ``ValueError`` naming the offending rectangle and field.
Missing settings fall back to the defaults. A bare list is accepted as a
list of rectangles. Unknown keys are ignored.
"""

from __future__ import annotations

import json
from dataclasses import fields
from typing import Annotated, Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

from boxnest.layout.settings import FixedDimensions, LayoutSettings, Margins
from boxnest.parser.model import (
    FillStrategy,
    LayoutPreferences,
    Node,
    NodeType,
    Orientation,
)

_NODE_DEFAULTS = {f.name: f.default for f in fields(Node) if f.name != "layout_preferences"}
_SETTINGS_DEFAULTS = LayoutSettings()
_ORIENTATION_ALIASES = {"col": "column"}

Count = Annotated[StrictInt, Field(gt=0)]
Spacing = Annotated[StrictFloat, Field(ge=0)]
Extent = Annotated[StrictFloat, Field(gt=0)]


# ============================================================================
# Schema Models
# ============================================================================


class _CamelModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class PreferencesModel(_CamelModel):
    """Per-parent layout preferences."""

    fill_strategy: Optional[FillStrategy] = None
    max_columns: Optional[Count] = Field(default=None, description="Column cap for grid packing")
    max_rows: Optional[Count] = Field(default=None, description="Row cap for grid packing")
    orientation: Optional[Orientation] = None

    @field_validator("orientation", mode="before")
    @classmethod
    def _normalize_orientation(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.lower()
            return _ORIENTATION_ALIASES.get(value, value) or None
        return value

    def to_preferences(self) -> LayoutPreferences:
        return LayoutPreferences(
            fill_strategy=self.fill_strategy,
            max_columns=self.max_columns,
            max_rows=self.max_rows,
            orientation=self.orientation,
        )


class RectangleModel(_CamelModel):
    """One rectangle entry of the ``rectangles`` list."""

    id: StrictStr = Field(min_length=1)
    parent_id: Optional[StrictStr] = None
    x: StrictFloat = 0.0
    y: StrictFloat = 0.0
    w: StrictFloat = 0.0
    h: StrictFloat = 0.0
    label: StrictStr = ""
    type: Optional[NodeType] = None
    color: StrictStr = _NODE_DEFAULTS["color"]
    description: StrictStr = ""
    is_manual_positioning_enabled: StrictBool = False
    is_locked_as_is: StrictBool = False
    is_text_label: StrictBool = False
    layout_preferences: Optional[PreferencesModel] = None

    def to_node(self) -> Node:
        node_type = self.type
        if node_type is None:
            node_type = NodeType.TEXT_LABEL if self.is_text_label else NodeType.ROOT
        prefs = self.layout_preferences
        return Node(
            id=self.id,
            parent_id=self.parent_id or None,
            x=float(self.x),
            y=float(self.y),
            w=float(self.w),
            h=float(self.h),
            label=self.label,
            type=node_type,
            color=self.color,
            description=self.description,
            is_manual_positioning_enabled=self.is_manual_positioning_enabled,
            is_locked_as_is=self.is_locked_as_is,
            is_text_label=self.is_text_label,
            layout_preferences=prefs.to_preferences() if prefs else LayoutPreferences(),
        )


class SettingsModel(_CamelModel):
    """The document-wide ``settings`` block."""

    grid_size: Count = Field(default=_SETTINGS_DEFAULTS.grid_size, description="Pixels per unit")
    margin: Spacing = _SETTINGS_DEFAULTS.margins.margin
    label_margin: Spacing = _SETTINGS_DEFAULTS.margins.label_margin
    leaf_fixed_width: StrictBool = _SETTINGS_DEFAULTS.fixed_dimensions.leaf_fixed_width
    leaf_fixed_height: StrictBool = _SETTINGS_DEFAULTS.fixed_dimensions.leaf_fixed_height
    leaf_width: Extent = _SETTINGS_DEFAULTS.fixed_dimensions.leaf_width
    leaf_height: Extent = _SETTINGS_DEFAULTS.fixed_dimensions.leaf_height
    layout_algorithm: StrictStr = _SETTINGS_DEFAULTS.layout_algorithm

    def to_settings(self) -> LayoutSettings:
        return LayoutSettings(
            grid_size=self.grid_size,
            margins=Margins(margin=float(self.margin), label_margin=float(self.label_margin)),
            fixed_dimensions=FixedDimensions(
                leaf_fixed_width=self.leaf_fixed_width,
                leaf_fixed_height=self.leaf_fixed_height,
                leaf_width=float(self.leaf_width),
                leaf_height=float(self.leaf_height),
            ),
            layout_algorithm=self.layout_algorithm,
        )


class DocumentModel(_CamelModel):
    """A whole document: settings plus the flat rectangle list."""

    settings: Optional[SettingsModel] = None
    rectangles: list[RectangleModel] = Field(default_factory=list)


# ============================================================================
# Parsing
# ============================================================================


def _owner(loc: tuple, data: Any) -> tuple[str, tuple]:
    """Split an error location into a readable owner and the field path."""
    if len(loc) >= 2 and loc[0] == "rectangles" and isinstance(loc[1], int):
        entry = data.get("rectangles", [])[loc[1]] if isinstance(data, dict) else None
        node_id = entry.get("id") if isinstance(entry, dict) else None
        if isinstance(node_id, str) and node_id:
            return f"Rectangle '{node_id}'", loc[2:]
        return f"Rectangle #{loc[1]}", loc[2:]
    if loc and loc[0] == "settings":
        return "Settings", loc[1:]
    return "Document", loc


def _to_value_error(exc: ValidationError, data: Any, prefix: tuple = ()) -> ValueError:
    messages = []
    for error in exc.errors():
        owner, path = _owner(prefix + tuple(error["loc"]), data)
        field = ".".join(str(part) for part in path)
        where = f"{owner} '{field}'" if field else owner
        messages.append(f"{where}: {error['msg']}")
    return ValueError("; ".join(messages))


def parse_node(data: Any) -> Node:
    """Build a Node from its JSON object."""
    try:
        return RectangleModel.model_validate(data).to_node()
    except ValidationError as e:
        raise _to_value_error(e, {"rectangles": [data]}, ("rectangles", 0)) from None


def parse_settings(data: Any) -> LayoutSettings:
    """Build LayoutSettings from the ``settings`` block."""
    if data is None:
        return LayoutSettings()
    try:
        return SettingsModel.model_validate(data).to_settings()
    except ValidationError as e:
        raise _to_value_error(e, {"settings": data}, ("settings",)) from None


def parse_document(text: str) -> tuple[dict[str, Node], LayoutSettings]:
    """Parse a JSON document into an id-keyed node collection and settings."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON: {e}") from e

    if isinstance(data, list):
        data = {"rectangles": data}
    if not isinstance(data, dict):
        raise ValueError("Document must be a JSON object or list of rectangles")

    try:
        document = DocumentModel.model_validate(data)
    except ValidationError as e:
        raise _to_value_error(e, data) from None

    nodes: dict[str, Node] = {}
    for entry in document.rectangles:
        if entry.id in nodes:
            raise ValueError(f"Duplicate rectangle id '{entry.id}'")
        nodes[entry.id] = entry.to_node()
    settings = document.settings.to_settings() if document.settings else LayoutSettings()
    return nodes, settings


def node_to_dict(node: Node) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": node.id,
        "x": node.x,
        "y": node.y,
        "w": node.w,
        "h": node.h,
        "label": node.label,
        "color": node.color,
        "type": node.type.value,
    }
    if node.parent_id is not None:
        data["parentId"] = node.parent_id
    if node.description:
        data["description"] = node.description
    if node.is_manual_positioning_enabled:
        data["isManualPositioningEnabled"] = True
    if node.is_locked_as_is:
        data["isLockedAsIs"] = True
    if node.is_text_label:
        data["isTextLabel"] = True

    prefs = node.layout_preferences
    pref_data: dict[str, Any] = {}
    if prefs.fill_strategy is not None:
        pref_data["fillStrategy"] = prefs.fill_strategy.value
    if prefs.max_columns is not None:
        pref_data["maxColumns"] = prefs.max_columns
    if prefs.max_rows is not None:
        pref_data["maxRows"] = prefs.max_rows
    if prefs.orientation is not None:
        pref_data["orientation"] = prefs.orientation.value
    if pref_data:
        data["layoutPreferences"] = pref_data
    return data


def settings_to_dict(settings: LayoutSettings) -> dict[str, Any]:
    fixed = settings.fixed_dimensions
    return {
        "gridSize": settings.grid_size,
        "margin": settings.margins.margin,
        "labelMargin": settings.margins.label_margin,
        "leafFixedWidth": fixed.leaf_fixed_width,
        "leafFixedHeight": fixed.leaf_fixed_height,
        "leafWidth": fixed.leaf_width,
        "leafHeight": fixed.leaf_height,
        "layoutAlgorithm": settings.layout_algorithm,
    }


def dump_document(nodes: dict[str, Node], settings: LayoutSettings | None = None) -> str:
    """Serialize nodes and settings to indented JSON."""
    payload = {
        "settings": settings_to_dict(settings or LayoutSettings()),
        "rectangles": [node_to_dict(n) for n in nodes.values()],
    }
    return json.dumps(payload, indent=2) + "\n"
