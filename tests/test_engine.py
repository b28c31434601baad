"""Tests for the cascading re-layout orchestrator."""

import pytest

from boxnest.layout.engine import (
    fit_parent_to_children,
    fit_parent_to_children_recursive,
    update_children_layout,
)
from boxnest.layout.mutations import (
    add_node,
    move_node,
    remove_node,
    toggle_manual_positioning,
)
from boxnest.layout.settings import FixedDimensions, LayoutSettings, Margins
from boxnest.layout.strategies import STRATEGIES
from boxnest.layout.validation import Severity, validate_layout
from boxnest.parser.model import Node, NodeType

MARGINS = Margins(margin=1, label_margin=2)
FIXED = FixedDimensions(leaf_width=5, leaf_height=3)


def _make_nested():
    """Root r with a nested parent a (two leaves) and a leaf b, all unplaced."""
    nodes = [
        Node("r", None, 0, 0, 5, 3),
        Node("a", "r", 0, 0, 5, 3),
        Node("b", "r", 0, 0, 5, 3),
        Node("a1", "a", 0, 0, 5, 3),
        Node("a2", "a", 0, 0, 5, 3),
    ]
    return {n.id: n for n in nodes}


def _errors(nodes, strategy=None):
    return [
        v for v in validate_layout(nodes, FIXED, MARGINS, strategy)
        if v.severity is Severity.ERROR
    ]


@pytest.fixture(params=sorted(STRATEGIES))
def strategy(request):
    return request.param


def test_layout_grows_parents_and_packs_children(strategy):
    nodes = update_children_layout(_make_nested(), FIXED, MARGINS, strategy)
    assert _errors(nodes, strategy) == []
    assert nodes["a"].type is NodeType.PARENT
    assert nodes["a1"].type is NodeType.LEAF
    assert nodes["r"].w > 5


def test_layout_is_idempotent(strategy):
    once = update_children_layout(_make_nested(), FIXED, MARGINS, strategy)
    twice = update_children_layout(once, FIXED, MARGINS, strategy)
    assert twice == once


def test_layout_does_not_mutate_input():
    nodes = _make_nested()
    snapshot = dict(nodes)
    result = update_children_layout(nodes, FIXED, MARGINS)
    assert nodes == snapshot
    assert result is not nodes


def test_layout_never_shrinks():
    nodes = _make_nested()
    nodes["r"] = Node("r", None, 0, 0, 100, 80)
    result = update_children_layout(nodes, FIXED, MARGINS)
    assert (result["r"].w, result["r"].h) == (100, 80)


def test_descendants_follow_moved_child():
    nodes = update_children_layout(_make_nested(), FIXED, MARGINS)
    offset = (nodes["a1"].x - nodes["a"].x, nodes["a1"].y - nodes["a"].y)
    nodes["r"] = Node("r", None, 50, 50, nodes["r"].w, nodes["r"].h)
    nodes["a"] = Node("a", "r", 0, 0, nodes["a"].w, nodes["a"].h)
    result = update_children_layout(nodes, FIXED, MARGINS)
    assert (result["a1"].x - result["a"].x, result["a1"].y - result["a"].y) == offset
    assert _errors(result) == []


def test_manual_parent_keeps_children():
    nodes = _make_nested()
    nodes["a"] = Node("a", "r", 0, 0, 30, 20, is_manual_positioning_enabled=True)
    nodes["a1"] = Node("a1", "a", 4, 7, 5, 3)
    nodes["a2"] = Node("a2", "a", 12, 9, 9, 9)
    result = update_children_layout(nodes, FIXED, MARGINS)
    assert (result["a1"].x, result["a1"].y) == (result["a"].x + 4, result["a"].y + 7)
    assert (result["a2"].w, result["a2"].h) == (9, 9)
    assert (result["a"].w, result["a"].h) == (30, 20)


def test_locked_parent_keeps_size_but_packs_children():
    nodes = _make_nested()
    nodes["r"] = Node("r", None, 0, 0, 8, 4, is_locked_as_is=True)
    result = update_children_layout(nodes, FIXED, MARGINS)
    assert (result["r"].w, result["r"].h) == (8, 4)
    # too small: the packed block starts at the interior's top-left corner
    assert (result["a"].x, result["a"].y) == (1, 2)
    assert (result["b"].x, result["b"].y) != (0, 0)
    assert _errors(result) == []


def test_locked_parent_still_lays_out_deeper_groups():
    nodes = _make_nested()
    nodes["r"] = Node("r", None, 0, 0, 8, 4, is_locked_as_is=True)
    result = update_children_layout(nodes, FIXED, MARGINS)
    # a is an automatic parent under the locked root
    assert result["a"].w >= 13
    assert result["a1"].x != result["a2"].x


def test_cyclic_nodes_are_left_alone():
    nodes = _make_nested()
    nodes["x"] = Node("x", "y", 0, 0, 5, 3)
    nodes["y"] = Node("y", "x", 0, 0, 5, 3)
    result = update_children_layout(nodes, FIXED, MARGINS)
    assert (result["x"].x, result["x"].y) == (0, 0)
    assert _errors({k: v for k, v in result.items() if k not in ("x", "y")}) == []


def test_fit_parent_to_children_exact():
    nodes = _make_nested()
    nodes["r"] = Node("r", None, 0, 0, 100, 80)
    result = fit_parent_to_children("r", nodes, FIXED, MARGINS)
    # a needs 13x6 next to b (5x3): grid of two 13x6 cells
    assert (result["r"].w, result["r"].h) == (2 * 13 + 1 + 2, 6 + 3)
    assert _errors(result) == []


def test_fit_skips_locked_missing_and_childless():
    nodes = _make_nested()
    nodes["r"] = Node("r", None, 0, 0, 100, 80, is_locked_as_is=True)
    assert fit_parent_to_children("r", nodes, FIXED, MARGINS) is nodes
    assert fit_parent_to_children("b", nodes, FIXED, MARGINS) is nodes
    assert fit_parent_to_children("gone", nodes, FIXED, MARGINS) is nodes


def test_fit_clears_manual_mode():
    nodes = _make_nested()
    nodes["a"] = Node("a", "r", 0, 0, 30, 20, is_manual_positioning_enabled=True)
    result = fit_parent_to_children("a", nodes, FIXED, MARGINS)
    assert not result["a"].is_manual_positioning_enabled
    assert (result["a"].w, result["a"].h) == (13, 6)


def test_fit_recursive_shrinks_every_ancestor():
    nodes = update_children_layout(_make_nested(), FIXED, MARGINS)
    nodes["a"] = Node("a", "r", 0, 0, 60, 60)
    nodes["r"] = Node("r", None, 0, 0, 90, 90)
    result = fit_parent_to_children_recursive("a", nodes, FIXED, MARGINS)
    assert (result["a"].w, result["a"].h) == (13, 6)
    assert (result["r"].w, result["r"].h) == (29, 9)


def test_deep_insertion_grows_all_ancestors():
    settings = LayoutSettings(margins=MARGINS, fixed_dimensions=FIXED)
    nodes, root = add_node({}, settings=settings)
    nodes, mid = add_node(nodes, root, settings)
    nodes, deep = add_node(nodes, mid, settings)
    before = nodes[root].w, nodes[root].h
    for _ in range(6):
        nodes, _leaf = add_node(nodes, deep, settings)
    assert nodes[root].w > before[0] or nodes[root].h > before[1]
    assert _errors(nodes) == []


def test_deep_chain_is_laid_out():
    depth = 2000
    nodes = {"n0": Node("n0", None, 0, 0, 5, 3)}
    for i in range(1, depth):
        nodes[f"n{i}"] = Node(f"n{i}", f"n{i - 1}", 0, 0, 5, 3)
    result = update_children_layout(nodes, FIXED, MARGINS)
    # every level adds 2 margins across and margin + label band down
    assert (result["n0"].w, result["n0"].h) == (5 + 2 * (depth - 1), 3 + 3 * (depth - 1))
    last = result[f"n{depth - 1}"]
    assert (last.x, last.y, last.w, last.h) == (depth - 1, 2 * (depth - 1), 5, 3)


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------

def test_two_leaves_fit_large_root():
    """Two fixed 20x10 leaves fit an 80x40 root without resizing it."""
    settings = LayoutSettings(
        margins=Margins(margin=2, label_margin=2),
        fixed_dimensions=FixedDimensions(leaf_width=20, leaf_height=10),
    )
    nodes = {"R": Node("R", None, 0, 0, 80, 40)}
    nodes, l1 = add_node(nodes, "R", settings)
    nodes, l2 = add_node(nodes, "R", settings)

    assert (nodes["R"].w, nodes["R"].h) == (80, 40)
    a, b = nodes[l1], nodes[l2]
    assert (a.w, a.h) == (20, 10)
    assert (b.w, b.h) == (20, 10)
    left, right = sorted([a, b], key=lambda n: n.x)
    assert right.x - left.right >= 2


def test_remove_then_add_fits_to_single_child():
    settings = LayoutSettings(margins=MARGINS, fixed_dimensions=FIXED)
    nodes = {"R": Node("R", None, 0, 0, 16, 10)}
    nodes, first = add_node(nodes, "R", settings)
    nodes = remove_node(nodes, first, settings)
    nodes, _second = add_node(nodes, "R", settings)
    nodes = fit_parent_to_children("R", nodes, FIXED, MARGINS)
    assert (nodes["R"].w, nodes["R"].h) == (7, 6)


def test_manual_coordinates_discarded_when_manual_mode_ends():
    settings = LayoutSettings(margins=MARGINS, fixed_dimensions=FIXED)
    nodes = {"P": Node("P", None, 0, 0, 16, 10)}
    for _ in range(3):
        nodes, child = add_node(nodes, "P", settings)
    packed = {k: (v.x, v.y) for k, v in nodes.items()}

    nodes = toggle_manual_positioning(nodes, "P", settings)
    nodes, moved = move_node(nodes, child, 20, 10, settings)
    assert moved
    assert (nodes[child].x, nodes[child].y) != packed[child]

    nodes = toggle_manual_positioning(nodes, "P", settings)
    assert not nodes["P"].is_manual_positioning_enabled
    assert {k: (v.x, v.y) for k, v in nodes.items()} == packed
