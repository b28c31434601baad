"""Tests for the layout validator."""

from pathlib import Path

from boxnest.layout.engine import update_children_layout
from boxnest.layout.validation import (
    Severity,
    check_containment,
    check_cycles,
    check_minimum_size,
    check_parent_fit,
    check_sibling_overlap,
    check_types,
    validate_layout,
)
from boxnest.parser import parse_document
from boxnest.parser.model import Node, NodeType

FIXTURES = Path(__file__).parent / "fixtures"


def _load_laid_out():
    nodes, settings = parse_document((FIXTURES / "nested.json").read_text())
    nodes = update_children_layout(
        nodes, settings.fixed_dimensions, settings.margins, settings.layout_algorithm
    )
    return nodes, settings


def _make_parent(**kwargs):
    return Node("p", None, 0, 0, 30, 20, type=NodeType.ROOT, **kwargs)


def test_laid_out_fixture_is_clean():
    nodes, settings = _load_laid_out()
    violations = validate_layout(
        nodes, settings.fixed_dimensions, settings.margins, settings.layout_algorithm
    )
    assert violations == []


def test_unlaid_fixture_has_errors():
    nodes, settings = parse_document((FIXTURES / "nested.json").read_text())
    checks = {v.check for v in validate_layout(nodes, settings.fixed_dimensions, settings.margins)}
    assert {"sibling_overlap", "containment", "parent_fit"} <= checks


def test_cycle_reported_once():
    nodes = {
        "x": Node("x", "y", 0, 0, 5, 3),
        "y": Node("y", "x", 0, 0, 5, 3),
    }
    violations = check_cycles(nodes)
    assert len(violations) == 1
    assert violations[0].severity is Severity.ERROR
    assert set(violations[0].context["nodes"]) == {"x", "y"}


def test_stale_type_is_a_warning():
    nodes = {
        "p": _make_parent(),
        "c": Node("c", "p", 1, 2, 5, 3, type=NodeType.ROOT),
    }
    violations = check_types(nodes)
    assert [v.context["node"] for v in violations] == ["c"]
    assert violations[0].severity is Severity.WARNING


def test_minimum_size():
    nodes = {"p": Node("p", None, 0, 0, 4, 3)}
    assert [v.check for v in check_minimum_size(nodes)] == ["minimum_size"]


def test_sibling_spacing():
    nodes = {
        "p": _make_parent(),
        "a": Node("a", "p", 1, 2, 5, 3),
        "flush": Node("flush", "p", 7, 2, 5, 3),
        "close": Node("close", "p", 12.5, 2, 5, 3),
    }
    violations = check_sibling_overlap(nodes)
    assert len(violations) == 1
    assert violations[0].context["node_a"] == "flush"
    assert violations[0].context["node_b"] == "close"


def test_manual_parent_children_not_checked():
    nodes = {
        "p": _make_parent(is_manual_positioning_enabled=True),
        "a": Node("a", "p", 0, 0, 5, 3),
        "b": Node("b", "p", 0, 0, 5, 3),
    }
    assert check_sibling_overlap(nodes) == []
    assert check_containment(nodes) == []
    assert check_parent_fit(nodes) == []


def test_containment_respects_label_band():
    nodes = {
        "p": _make_parent(),
        "a": Node("a", "p", 1, 1, 5, 3),
    }
    violations = check_containment(nodes)
    assert [v.context["node"] for v in violations] == ["a"]


def test_parent_fit():
    nodes = {
        "p": Node("p", None, 0, 0, 6, 5),
        "a": Node("a", "p", 1, 2, 5, 3, type=NodeType.LEAF),
    }
    violations = check_parent_fit(nodes)
    assert [v.context["parent"] for v in violations] == ["p"]
