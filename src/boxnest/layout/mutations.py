"""Editing operations on a node collection.

Every operation takes a snapshot and returns a new one; rejected edits
return the input unchanged (with ``False`` where the operation reports
success) and log a warning. Structural edits finish with a cascading
re-layout so automatic parents stay fit to their children.
"""

from __future__ import annotations

__all__ = [
    "add_node",
    "can_reparent",
    "lock_as_is",
    "move_node",
    "next_node_id",
    "remove_node",
    "reparent_node",
    "resize_node",
    "toggle_manual_positioning",
    "toggle_text_label",
    "update_layout_preferences",
]

import logging
import random
import re
from dataclasses import replace

from boxnest.layout.constants import (
    DEFAULT_LEAF_HEIGHT,
    DEFAULT_LEAF_WIDTH,
    DEFAULT_ROOT_HEIGHT,
    DEFAULT_ROOT_WIDTH,
    DEFAULT_TEXT_LABEL_HEIGHT,
    DEFAULT_TEXT_LABEL_WIDTH,
)
from boxnest.layout.engine import translate_subtree, update_children_layout
from boxnest.layout.free_space import calculate_free_space_position, grow_to_contain
from boxnest.layout.geometry import interior_bounds
from boxnest.layout.hierarchy import (
    derive_types,
    get_all_descendants,
    get_children,
    get_roots,
    is_descendant,
)
from boxnest.layout.packing import calculate_minimum_parent_size
from boxnest.layout.policy import apply_fixed_dimensions, clamp_size
from boxnest.layout.settings import LayoutSettings
from boxnest.parser.model import LayoutPreferences, Node, NodeType

logger = logging.getLogger(__name__)

Nodes = dict[str, Node]

_ID_PATTERN = re.compile(r"rect-(\d+)")


def _relayout(nodes: Nodes, settings: LayoutSettings) -> Nodes:
    return update_children_layout(
        nodes, settings.fixed_dimensions, settings.margins, settings.layout_algorithm
    )


def next_node_id(nodes: Nodes) -> str:
    """First unused ``rect-N`` id after the highest one in use."""
    highest = 0
    for node_id in nodes:
        match = _ID_PATTERN.fullmatch(node_id)
        if match:
            highest = max(highest, int(match.group(1)))
    return f"rect-{highest + 1}"


def _place_in_manual_parent(
    nodes: Nodes,
    parent_id: str,
    node: Node,
    settings: LayoutSettings,
    rng: random.Random | None,
) -> Nodes:
    """Two-pass insertion of ``node`` among the user-placed children of a parent.

    A tentative slot decides how far the parent must grow; the slot is then
    searched again inside the grown parent with the new node excluded.
    """
    margins = settings.margins
    siblings = [c for c in get_children(parent_id, nodes) if c.id != node.id]
    size = (node.w, node.h)

    parent = nodes[parent_id]
    x, y = calculate_free_space_position(parent, siblings, size, margins, rng=rng)
    parent = grow_to_contain(parent, x, y, size, margins)
    x, y = calculate_free_space_position(
        parent, siblings, size, margins, allow_growth=False, rng=rng
    )

    result = dict(nodes)
    result[parent_id] = parent
    translate_subtree(result, node.id, x - node.x, y - node.y)
    result[node.id] = replace(node, x=x, y=y)
    return result


def add_node(
    nodes: Nodes,
    parent_id: str | None = None,
    settings: LayoutSettings | None = None,
    *,
    node_id: str | None = None,
    label: str = "",
    is_text_label: bool = False,
    rng: random.Random | None = None,
) -> tuple[Nodes, str | None]:
    """Create a node under ``parent_id`` (or as a new root).

    Returns the new collection and the id of the created node, or the
    input and ``None`` when the parent is missing or is a text label.
    """
    settings = settings or LayoutSettings()
    margins = settings.margins
    if parent_id is not None:
        parent = nodes.get(parent_id)
        if parent is None:
            logger.warning("Cannot add child to missing node '%s'", parent_id)
            return nodes, None
        if parent.is_text_label:
            logger.warning("Cannot add child to text label '%s'", parent_id)
            return nodes, None

    node_id = node_id or next_node_id(nodes)
    if node_id in nodes:
        raise ValueError(f"Node id '{node_id}' is already in use")

    if is_text_label:
        w, h = DEFAULT_TEXT_LABEL_WIDTH, DEFAULT_TEXT_LABEL_HEIGHT
    elif parent_id is None:
        w, h = DEFAULT_ROOT_WIDTH, DEFAULT_ROOT_HEIGHT
    else:
        w, h = DEFAULT_LEAF_WIDTH, DEFAULT_LEAF_HEIGHT
    w, h = clamp_size(w, h)

    x = y = 0.0
    if parent_id is None:
        roots = get_roots(nodes)
        if roots:
            last = roots[-1]
            x, y = last.right + margins.margin, last.y
    else:
        interior = interior_bounds(nodes[parent_id], margins)
        x, y = interior.x, interior.y

    node = Node(
        id=node_id,
        parent_id=parent_id,
        x=x,
        y=y,
        w=w,
        h=h,
        label=label or node_id,
        type=NodeType.TEXT_LABEL if is_text_label else NodeType.ROOT,
        is_text_label=is_text_label,
    )
    result = derive_types({**nodes, node_id: node})
    node = result[node_id]

    if parent_id is not None:
        if result[parent_id].is_manual_positioning_enabled:
            result = _place_in_manual_parent(result, parent_id, node, settings, rng)
        else:
            result[node_id] = apply_fixed_dimensions(node, settings.fixed_dimensions)

    logger.debug("Added '%s' under '%s'", node_id, parent_id)
    return _relayout(result, settings), node_id


def remove_node(
    nodes: Nodes, node_id: str, settings: LayoutSettings | None = None
) -> Nodes:
    """Delete a node together with all of its descendants."""
    if node_id not in nodes:
        logger.debug("Cannot remove missing node '%s'", node_id)
        return nodes
    doomed = {node_id, *get_all_descendants(node_id, nodes)}
    remaining = {k: v for k, v in nodes.items() if k not in doomed}
    return _relayout(remaining, settings or LayoutSettings())


def can_reparent(child_id: str, new_parent_id: str | None, nodes: Nodes) -> bool:
    """Whether ``child_id`` may move under ``new_parent_id``.

    Refuses moves onto itself, into its own subtree, or under a text
    label. ``None`` (becoming a root) is always allowed for an existing
    node.
    """
    if child_id not in nodes:
        return False
    if new_parent_id is None:
        return True
    if child_id == new_parent_id:
        return False
    new_parent = nodes.get(new_parent_id)
    if new_parent is None or new_parent.is_text_label:
        return False
    return not is_descendant(new_parent_id, child_id, nodes)


def reparent_node(
    nodes: Nodes,
    child_id: str,
    new_parent_id: str | None,
    settings: LayoutSettings | None = None,
    *,
    rng: random.Random | None = None,
) -> tuple[Nodes, bool]:
    """Move ``child_id`` under ``new_parent_id``.

    The moved node's descendants travel with it by the same offset.
    Returns ``(nodes, False)`` without changes when the move is refused.
    """
    if not can_reparent(child_id, new_parent_id, nodes):
        logger.warning("Refusing to move '%s' under '%s'", child_id, new_parent_id)
        return nodes, False

    settings = settings or LayoutSettings()
    result = dict(nodes)
    result[child_id] = replace(nodes[child_id], parent_id=new_parent_id)
    result = derive_types(result)

    if new_parent_id is not None:
        node = result[child_id]
        new_parent = result[new_parent_id]
        if new_parent.is_manual_positioning_enabled:
            result = _place_in_manual_parent(result, new_parent_id, node, settings, rng)
        else:
            result[child_id] = apply_fixed_dimensions(node, settings.fixed_dimensions)
            if not new_parent.is_locked_as_is:
                min_w, min_h = calculate_minimum_parent_size(
                    new_parent_id,
                    result,
                    settings.fixed_dimensions,
                    settings.margins,
                    settings.layout_algorithm,
                )
                result[new_parent_id] = replace(
                    new_parent, w=max(new_parent.w, min_w), h=max(new_parent.h, min_h)
                )

    logger.debug("Moved '%s' from '%s' to '%s'", child_id, nodes[child_id].parent_id, new_parent_id)
    return _relayout(result, settings), True


def move_node(
    nodes: Nodes,
    node_id: str,
    dx_pixels: float,
    dy_pixels: float,
    settings: LayoutSettings | None = None,
) -> tuple[Nodes, bool]:
    """Drag a node by a pixel offset, carrying its descendants along.

    Only roots and children of manually positioned parents can move; a
    child is kept inside its parent's interior.
    """
    settings = settings or LayoutSettings()
    node = nodes.get(node_id)
    if node is None:
        return nodes, False

    dx = dx_pixels / settings.grid_size
    dy = dy_pixels / settings.grid_size
    if node.parent_id is not None:
        parent = nodes.get(node.parent_id)
        if parent is None or not parent.is_manual_positioning_enabled:
            logger.warning("Cannot move '%s': parent is not manually positioned", node_id)
            return nodes, False
        interior = interior_bounds(parent, settings.margins)
        new_x = max(interior.x, min(node.x + dx, interior.right - node.w))
        new_y = max(interior.y, min(node.y + dy, interior.bottom - node.h))
        dx, dy = new_x - node.x, new_y - node.y

    result = dict(nodes)
    translate_subtree(result, node_id, dx, dy)
    result[node_id] = replace(node, x=node.x + dx, y=node.y + dy)
    return result, True


def resize_node(
    nodes: Nodes,
    node_id: str,
    w: float,
    h: float,
    settings: LayoutSettings | None = None,
) -> Nodes:
    """Set a node's size (clamped to the minimums) and re-run layout."""
    node = nodes.get(node_id)
    if node is None:
        return nodes
    w, h = clamp_size(w, h)
    return _relayout({**nodes, node_id: replace(node, w=w, h=h)}, settings or LayoutSettings())


def toggle_manual_positioning(
    nodes: Nodes, node_id: str, settings: LayoutSettings | None = None
) -> Nodes:
    """Flip manual positioning; switching it off re-packs the children."""
    node = nodes.get(node_id)
    if node is None:
        return nodes
    enabled = not node.is_manual_positioning_enabled
    result = {
        **nodes,
        node_id: replace(node, is_manual_positioning_enabled=enabled, is_locked_as_is=False),
    }
    if enabled:
        return result
    return _relayout(result, settings or LayoutSettings())


def lock_as_is(nodes: Nodes, node_id: str, locked: bool = True) -> Nodes:
    """Freeze (or release) a node's own size. Locking ends manual mode."""
    node = nodes.get(node_id)
    if node is None:
        return nodes
    if locked:
        node = replace(node, is_locked_as_is=True, is_manual_positioning_enabled=False)
    else:
        node = replace(node, is_locked_as_is=False)
    return {**nodes, node_id: node}


def update_layout_preferences(
    nodes: Nodes,
    node_id: str,
    settings: LayoutSettings | None = None,
    **preferences,
) -> Nodes:
    """Merge packing preferences into a node and refit it.

    An unlocked parent is resized to exactly its new minimum.
    """
    settings = settings or LayoutSettings()
    node = nodes.get(node_id)
    if node is None:
        return nodes
    prefs: LayoutPreferences = replace(node.layout_preferences, **preferences)
    node = replace(node, layout_preferences=prefs)
    result = {**nodes, node_id: node}

    if not node.is_locked_as_is and get_children(node_id, result):
        w, h = calculate_minimum_parent_size(
            node_id,
            result,
            settings.fixed_dimensions,
            settings.margins,
            settings.layout_algorithm,
        )
        result[node_id] = replace(node, w=w, h=h)
    return _relayout(result, settings)


def toggle_text_label(
    nodes: Nodes, node_id: str, settings: LayoutSettings | None = None
) -> Nodes:
    """Turn a childless node into a text label, or back."""
    node = nodes.get(node_id)
    if node is None:
        return nodes
    if not node.is_text_label and get_children(node_id, nodes):
        logger.warning("Cannot turn '%s' into a text label: it has children", node_id)
        return nodes
    node = replace(node, is_text_label=not node.is_text_label)
    return _relayout({**nodes, node_id: node}, settings or LayoutSettings())
