"""Hierarchy queries over a flat, id-keyed node collection.

Parent edges are lookups only: nothing here caches children or depth, so
every answer reflects the collection as passed in. Traversals carry a
per-call visited set and stop at cycles instead of looping.
"""

from __future__ import annotations

__all__ = [
    "children_index",
    "derive_type",
    "derive_types",
    "get_all_descendants",
    "get_ancestors",
    "get_children",
    "get_depth",
    "get_roots",
    "is_descendant",
    "is_leaf",
    "layout_order",
    "subtree_bounds",
]

import logging
from dataclasses import replace

import networkx as nx

from boxnest.layout.geometry import Rect, bounding_box
from boxnest.parser.model import Node, NodeType

logger = logging.getLogger(__name__)

Nodes = dict[str, Node]


def get_children(parent_id: str | None, nodes: Nodes) -> list[Node]:
    """Direct children of ``parent_id`` in collection order.

    ``None`` returns the roots.
    """
    return [n for n in nodes.values() if n.parent_id == parent_id]


def get_roots(nodes: Nodes) -> list[Node]:
    """Nodes without a parent, or whose parent is missing from the collection."""
    return [n for n in nodes.values() if n.parent_id is None or n.parent_id not in nodes]


def children_index(nodes: Nodes) -> dict[str, list[str]]:
    """Child ids of every node that has children, in collection order."""
    index: dict[str, list[str]] = {}
    for node in nodes.values():
        if node.parent_id is not None:
            index.setdefault(node.parent_id, []).append(node.id)
    return index


def get_all_descendants(parent_id: str, nodes: Nodes) -> list[str]:
    """Ids of every descendant of ``parent_id``, depth-first.

    If a node is reached twice the parent edges contain a cycle; that
    branch is abandoned with a warning and the ids gathered so far are
    returned. The walk keeps its own stack, so depth is not limited by
    the interpreter's recursion limit.
    """
    index = children_index(nodes)
    result: list[str] = []
    visited: set[str] = {parent_id}
    stack = [iter(index.get(parent_id, []))]
    while stack:
        child_id = next(stack[-1], None)
        if child_id is None:
            stack.pop()
            continue
        if child_id in visited:
            logger.warning(
                "Cycle detected below '%s' at '%s'; skipping branch",
                parent_id, child_id,
            )
            continue
        visited.add(child_id)
        result.append(child_id)
        stack.append(iter(index.get(child_id, [])))
    return result


def is_leaf(node_id: str, nodes: Nodes) -> bool:
    return not any(n.parent_id == node_id for n in nodes.values())


def get_ancestors(node_id: str, nodes: Nodes) -> list[str]:
    """Ancestor ids from the immediate parent up to the root."""
    ancestors: list[str] = []
    seen = {node_id}
    node = nodes.get(node_id)
    while node is not None and node.parent_id is not None:
        if node.parent_id in seen:
            logger.warning("Cycle detected in ancestors of '%s'", node_id)
            break
        seen.add(node.parent_id)
        if node.parent_id not in nodes:
            break
        ancestors.append(node.parent_id)
        node = nodes[node.parent_id]
    return ancestors


def is_descendant(candidate_id: str, ancestor_id: str, nodes: Nodes) -> bool:
    """True when ``candidate_id`` sits somewhere below ``ancestor_id``."""
    return ancestor_id in get_ancestors(candidate_id, nodes)


def get_depth(node_id: str, nodes: Nodes) -> int:
    """Number of parent hops from the node to its root."""
    return len(get_ancestors(node_id, nodes))


def derive_type(node: Node, nodes: Nodes) -> NodeType:
    """Type implied by structure. Text labels keep their type.

    A node whose parent is missing from the collection is a root.
    """
    if node.is_text_label:
        return NodeType.TEXT_LABEL
    if node.parent_id is None or node.parent_id not in nodes:
        return NodeType.ROOT
    if is_leaf(node.id, nodes):
        return NodeType.LEAF
    return NodeType.PARENT


def derive_types(nodes: Nodes) -> Nodes:
    """Return a collection with every node's type re-derived."""
    index = children_index(nodes)
    result: Nodes = {}
    for node_id, node in nodes.items():
        if node.is_text_label:
            node_type = NodeType.TEXT_LABEL
        elif node.parent_id is None or node.parent_id not in nodes:
            node_type = NodeType.ROOT
        elif node_id in index:
            node_type = NodeType.PARENT
        else:
            node_type = NodeType.LEAF
        result[node_id] = node if node.type is node_type else replace(node, type=node_type)
    return result


def layout_order(nodes: Nodes) -> list[str]:
    """Ids reachable from a root, parents before children.

    Siblings keep collection order. Nodes caught in a parent cycle are
    unreachable from any root and are left out.
    """
    position = {node_id: i for i, node_id in enumerate(nodes)}
    G = nx.DiGraph()
    G.add_nodes_from(nodes)
    for node in nodes.values():
        if node.parent_id is not None and node.parent_id in nodes:
            G.add_edge(node.parent_id, node.id)

    reachable: set[str] = set()
    for root in get_roots(nodes):
        reachable.add(root.id)
        reachable.update(nx.descendants(G, root.id))

    if len(reachable) < len(nodes):
        skipped = sorted(set(nodes) - reachable, key=position.__getitem__)
        logger.warning("Skipping nodes not reachable from a root: %s", skipped)

    sub = G.subgraph(reachable)
    return list(nx.lexicographical_topological_sort(sub, key=position.__getitem__))


def subtree_bounds(node_id: str, nodes: Nodes) -> Rect | None:
    """Bounding box of a node and all of its descendants."""
    if node_id not in nodes:
        return None
    ids = [node_id, *get_all_descendants(node_id, nodes)]
    return bounding_box(nodes[i] for i in ids)
