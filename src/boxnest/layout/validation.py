"""Layout validator: programmatic checks for layout defects.

Runs a suite of checks against a laid-out node collection and returns
a list of Violation objects describing any problems found.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from boxnest.layout.constants import EPSILON, MIN_HEIGHT, MIN_WIDTH
from boxnest.layout.geometry import contains, interior_bounds, overlaps_with_margin
from boxnest.layout.hierarchy import derive_type, get_children
from boxnest.layout.packing import (
    StrategyLike,
    calculate_minimum_parent_size,
    minimum_sizes,
)
from boxnest.layout.settings import FixedDimensions, Margins
from boxnest.parser.model import Node


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass
class Violation:
    check: str
    severity: Severity
    message: str
    context: dict = field(default_factory=dict)


def validate_layout(
    nodes: dict[str, Node],
    fixed: FixedDimensions | None = None,
    margins: Margins | None = None,
    strategy: StrategyLike = None,
) -> list[Violation]:
    """Run all layout checks and return violations."""
    fixed = fixed or FixedDimensions()
    margins = margins or Margins()
    violations: list[Violation] = []
    violations.extend(check_cycles(nodes))
    violations.extend(check_types(nodes))
    violations.extend(check_minimum_size(nodes))
    violations.extend(check_sibling_overlap(nodes, margins))
    violations.extend(check_containment(nodes, margins))
    violations.extend(check_parent_fit(nodes, fixed, margins, strategy))
    return violations


def _automatic_parents(
    nodes: dict[str, Node], include_locked: bool = False
) -> list[Node]:
    return [
        n for n in nodes.values()
        if not n.is_manual_positioning_enabled
        and (include_locked or not n.is_locked_as_is)
        and get_children(n.id, nodes)
    ]


def check_cycles(nodes: dict[str, Node]) -> list[Violation]:
    """Check that no node is its own ancestor."""
    violations: list[Violation] = []
    reported: set[str] = set()
    for node_id in nodes:
        if node_id in reported:
            continue
        seen = [node_id]
        node = nodes[node_id]
        while node.parent_id is not None and node.parent_id in nodes:
            if node.parent_id in seen:
                cycle = seen[seen.index(node.parent_id):]
                reported.update(cycle)
                violations.append(
                    Violation(
                        check="cycle",
                        severity=Severity.ERROR,
                        message=f"Parent cycle: {' -> '.join(cycle)}",
                        context={"nodes": cycle},
                    )
                )
                break
            seen.append(node.parent_id)
            node = nodes[node.parent_id]
    return violations


def check_types(nodes: dict[str, Node]) -> list[Violation]:
    """Check that stored types match the hierarchy."""
    violations: list[Violation] = []
    for node in nodes.values():
        expected = derive_type(node, nodes)
        if node.type is not expected:
            violations.append(
                Violation(
                    check="type",
                    severity=Severity.WARNING,
                    message=(
                        f"Node '{node.id}' is stored as {node.type.value} "
                        f"but is a {expected.value}"
                    ),
                    context={"node": node.id},
                )
            )
    return violations


def check_minimum_size(nodes: dict[str, Node]) -> list[Violation]:
    """Check that every node is at least the global minimum size."""
    violations: list[Violation] = []
    for node in nodes.values():
        if node.w < MIN_WIDTH - EPSILON or node.h < MIN_HEIGHT - EPSILON:
            violations.append(
                Violation(
                    check="minimum_size",
                    severity=Severity.ERROR,
                    message=f"Node '{node.id}' is {node.w}x{node.h}",
                    context={"node": node.id},
                )
            )
    return violations


def check_sibling_overlap(
    nodes: dict[str, Node], margins: Margins | None = None
) -> list[Violation]:
    """Check that children of automatic parents keep a margin between them.

    Locked parents still pack their children, so they are checked too.
    Siblings exactly ``margin`` apart are flush and allowed.
    """
    margins = margins or Margins()
    violations: list[Violation] = []
    for parent in _automatic_parents(nodes, include_locked=True):
        children = get_children(parent.id, nodes)
        for i in range(len(children)):
            a = children[i]
            for b in children[i + 1:]:
                if overlaps_with_margin(a, b, margins.margin - EPSILON):
                    violations.append(
                        Violation(
                            check="sibling_overlap",
                            severity=Severity.ERROR,
                            message=(
                                f"Children '{a.id}' and '{b.id}' of '{parent.id}' "
                                f"are closer than {margins.margin}"
                            ),
                            context={"parent": parent.id, "node_a": a.id, "node_b": b.id},
                        )
                    )
    return violations


def check_containment(
    nodes: dict[str, Node], margins: Margins | None = None
) -> list[Violation]:
    """Check that children of automatic parents lie within the parent interior."""
    margins = margins or Margins()
    violations: list[Violation] = []
    for parent in _automatic_parents(nodes):
        interior = interior_bounds(parent, margins)
        for child in get_children(parent.id, nodes):
            if not contains(interior, child):
                violations.append(
                    Violation(
                        check="containment",
                        severity=Severity.ERROR,
                        message=(
                            f"Node '{child.id}' at ({child.x:.1f},{child.y:.1f}) "
                            f"{child.w:.1f}x{child.h:.1f} leaves the interior of "
                            f"'{parent.id}'"
                        ),
                        context={"parent": parent.id, "node": child.id},
                    )
                )
    return violations


def check_parent_fit(
    nodes: dict[str, Node],
    fixed: FixedDimensions | None = None,
    margins: Margins | None = None,
    strategy: StrategyLike = None,
) -> list[Violation]:
    """Check that automatic parents are at least their minimum size."""
    violations: list[Violation] = []
    minimums = minimum_sizes(nodes, fixed, margins, strategy)
    for parent in _automatic_parents(nodes):
        min_w, min_h = calculate_minimum_parent_size(
            parent.id, nodes, fixed, margins, strategy, minimums=minimums
        )
        if parent.w < min_w - EPSILON or parent.h < min_h - EPSILON:
            violations.append(
                Violation(
                    check="parent_fit",
                    severity=Severity.ERROR,
                    message=(
                        f"Parent '{parent.id}' is {parent.w:.1f}x{parent.h:.1f}, "
                        f"needs {min_w:.1f}x{min_h:.1f}"
                    ),
                    context={"parent": parent.id},
                )
            )
    return violations
