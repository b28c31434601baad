"""Tests for the JSON document codec."""

import json
from pathlib import Path

import pytest

from boxnest.parser import dump_document, parse_document
from boxnest.parser.document import node_to_dict, parse_node
from boxnest.parser.model import FillStrategy, Node, NodeType, Orientation

FIXTURES = Path(__file__).parent / "fixtures"


def test_parse_fixture():
    nodes, settings = parse_document((FIXTURES / "nested.json").read_text())
    assert list(nodes) == ["system", "ingest", "reader", "parser", "store", "notes", "caption"]
    assert nodes["ingest"].parent_id == "system"
    assert nodes["ingest"].type is NodeType.PARENT
    assert nodes["notes"].is_manual_positioning_enabled
    assert nodes["caption"].is_text_label
    assert nodes["caption"].description == "Work in progress"
    assert settings.grid_size == 10
    assert settings.margins.label_margin == 2
    assert settings.layout_algorithm == "grid"


def test_parse_defaults():
    nodes, settings = parse_document('{"rectangles": [{"id": "a"}]}')
    node = nodes["a"]
    assert node.parent_id is None
    assert (node.x, node.y, node.w, node.h) == (0, 0, 0, 0)
    assert node.type is NodeType.ROOT
    assert node.color == "#4a90e2"
    assert settings.margins.margin == 1
    assert settings.fixed_dimensions.leaf_fixed_width


def test_parse_bare_list():
    nodes, _settings = parse_document('[{"id": "a"}, {"id": "b", "parentId": "a"}]')
    assert nodes["b"].parent_id == "a"


def test_parse_text_label_type_inferred():
    node = parse_node({"id": "t", "isTextLabel": True})
    assert node.type is NodeType.TEXT_LABEL


def test_parse_layout_preferences():
    node = parse_node({
        "id": "p",
        "layoutPreferences": {
            "fillStrategy": "fill-columns-first",
            "maxRows": 2,
            "orientation": "col",
        },
    })
    prefs = node.layout_preferences
    assert prefs.fill_strategy is FillStrategy.FILL_COLUMNS_FIRST
    assert prefs.max_rows == 2
    assert prefs.max_columns is None
    assert prefs.orientation is Orientation.COLUMN


@pytest.mark.parametrize("text,match", [
    ("{not json", "Invalid JSON"),
    ('"text"', "must be a JSON object"),
    ('{"rectangles": {}}', "'rectangles': Input should be a valid list"),
    ('{"rectangles": [{"id": "a"}, {"id": "a"}]}', "Duplicate rectangle id"),
    ('{"rectangles": [{"x": 1}]}', "Rectangle #0 'id': Field required"),
    ('{"rectangles": [{"id": ""}]}', "at least 1 character"),
    ('{"rectangles": [{"id": "a", "w": "wide"}]}', "Rectangle 'a' 'w': Input should be a valid number"),
    ('{"rectangles": [{"id": "a", "w": true}]}', "valid number"),
    ('{"rectangles": [{"id": "a", "type": "blob"}]}', "'type': Input should be"),
    ('{"rectangles": [], "settings": {"margin": -1}}', "Settings 'margin': .*greater than or equal to 0"),
    ('{"rectangles": [], "settings": {"gridSize": 0}}', "Settings 'gridSize': .*greater than 0"),
    ('{"rectangles": [], "settings": {"gridSize": 2.5}}', "valid integer"),
    ('{"rectangles": [{"id": "a", "layoutPreferences": {"fillStrategy": "zigzag"}}]}',
     "'layoutPreferences.fillStrategy': Input should be"),
])
def test_parse_errors(text, match):
    with pytest.raises(ValueError, match=match):
        parse_document(text)


@pytest.mark.parametrize("prefs", [
    {"maxColumns": "3"},
    {"maxColumns": -2},
    {"maxColumns": True},
    {"maxRows": 0},
    {"maxRows": 1.5},
])
def test_grid_caps_must_be_positive_integers(prefs):
    text = json.dumps({"rectangles": [{"id": "p", "layoutPreferences": prefs}]})
    with pytest.raises(ValueError, match=r"Rectangle 'p' 'layoutPreferences\.max(Columns|Rows)'"):
        parse_document(text)


def test_parse_node_names_bad_field():
    with pytest.raises(ValueError, match="Rectangle 'a' 'isLockedAsIs'"):
        parse_node({"id": "a", "isLockedAsIs": "yes"})


def test_parse_ignores_unknown_keys():
    nodes, _settings = parse_document('{"rectangles": [{"id": "a", "zIndex": 4}], "version": 2}')
    assert list(nodes) == ["a"]


def test_node_to_dict_omits_defaults():
    data = node_to_dict(Node("a", None, 1, 2, 5, 3, label="A"))
    assert "parentId" not in data
    assert "isManualPositioningEnabled" not in data
    assert "layoutPreferences" not in data
    assert data["type"] == "root"


def test_dump_preserves_document():
    text = (FIXTURES / "nested.json").read_text()
    nodes, settings = parse_document(text)
    dumped = dump_document(nodes, settings)
    assert dumped.endswith("\n")
    assert parse_document(dumped) == (nodes, settings)
    assert json.loads(dumped)["settings"] == json.loads(text)["settings"]
