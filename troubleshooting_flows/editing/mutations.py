"""
Mutations - Structural Edit Operations

Every operation takes a FlowGraph and returns a NEW FlowGraph; the input is
never modified, so an editor can keep the previous value for undo.

Operations never raise on unknown ids or selectors; they return an unchanged
copy instead. Validity (labels, yes/no pairs, ...) is reported by the
Validator, but referential integrity is owned here: no operation can leave an
option pointing at a node that does not exist.
"""

import copy
import logging
import uuid
from enum import Enum
from typing import Callable, Optional, Tuple, Union

from ..domain.models import (
    RESERVED_NODE_IDS,
    FlowGraph,
    FlowNode,
    FlowOption,
    NodeRef,
    NodeTarget,
    Outcome,
    TerminalTarget,
    normalize_label,
)

logger = logging.getLogger(__name__)

# An option is addressed by position or by label.
OptionSelector = Union[int, str]

IdFactory = Callable[[], str]

NOT_APPLICABLE = TerminalTarget(Outcome.NOT_APPLICABLE)


class Direction(Enum):
    UP = -1
    DOWN = 1


def new_node_id() -> str:
    return f"node_{uuid.uuid4().hex[:12]}"


# ==========================================================================
# Node operations
# ==========================================================================


def add_node(
    graph: FlowGraph,
    after_index: Optional[int] = None,
    strict: bool = False,
    id_factory: IdFactory = new_node_id,
) -> Tuple[FlowGraph, str]:
    """
    Inserts an empty node and returns (new_graph, new_node_id).

    Args:
        after_index: Display position to insert after. -1 inserts at the front;
            None or an index past the end appends.
        strict: Pre-wire the Yes/No pair. "Yes" leads to the node that follows
            the new one (if any), "No" ends the run as not applicable.
        id_factory: Source of unique tokens; re-drawn until unused.
    """
    result = copy.deepcopy(graph)
    node_id = _fresh_id(result, id_factory)

    ids = result.node_ids
    if after_index is None or after_index >= len(ids) - 1:
        position = len(ids)
    else:
        position = max(after_index + 1, 0)

    node = FlowNode(id=node_id)
    if strict:
        next_id = ids[position] if position < len(ids) else None
        yes_target: NodeRef = NodeTarget(next_id) if next_id else NOT_APPLICABLE
        node.options = [
            FlowOption(label="Yes", target=yes_target),
            FlowOption(label="No", target=NOT_APPLICABLE),
        ]

    items = list(result.nodes.items())
    items.insert(position, (node_id, node))
    result.nodes = dict(items)

    if not result.start or result.start not in result.nodes:
        result.start = node_id

    logger.debug(f"Added node {node_id} at position {position}")
    return result, node_id


def remove_node(graph: FlowGraph, node_id: str) -> FlowGraph:
    """
    Deletes a node and rewires every option that targeted it to the
    NOT_APPLICABLE terminal. A flow keeps at least one node, so removing the
    last one is a no-op, as is removing an unknown id.
    """
    result = copy.deepcopy(graph)
    if node_id not in result.nodes:
        return result
    if len(result.nodes) <= 1:
        logger.debug(f"Refusing to remove last node {node_id}")
        return result

    del result.nodes[node_id]

    rewired = 0
    for node in result.nodes.values():
        for option in node.options:
            if isinstance(option.target, NodeTarget) and option.target.node_id == node_id:
                option.target = NOT_APPLICABLE
                rewired += 1

    if result.start == node_id:
        result.start = next(iter(result.nodes))

    logger.debug(f"Removed node {node_id}, rewired {rewired} option(s)")
    return result


def move_node(graph: FlowGraph, node_id: str, direction: Direction) -> FlowGraph:
    """Changes display order only. No-op at the boundaries."""
    result = copy.deepcopy(graph)
    index = result.index_of(node_id)
    if index is None:
        return result

    swap_with = index + direction.value
    if swap_with < 0 or swap_with >= len(result.nodes):
        return result

    items = list(result.nodes.items())
    items[index], items[swap_with] = items[swap_with], items[index]
    result.nodes = dict(items)
    return result


def set_start(graph: FlowGraph, node_id: str) -> FlowGraph:
    result = copy.deepcopy(graph)
    if node_id in result.nodes:
        result.start = node_id
    return result


def update_node_text(
    graph: FlowGraph,
    node_id: str,
    title: Optional[str] = None,
    body: Optional[str] = None,
) -> FlowGraph:
    result = copy.deepcopy(graph)
    node = result.get_node(node_id)
    if node is None:
        return result
    if title is not None:
        node.title = title
    if body is not None:
        node.body = body
    return result


# ==========================================================================
# Option operations
# ==========================================================================


def resolve_option_index(
    node: FlowNode, selector: OptionSelector, strict: bool = False
) -> Optional[int]:
    """
    Finds the option a selector addresses. Labels match exactly in the basic
    editor and case-insensitively in the strict one.
    """
    if isinstance(selector, int):
        if 0 <= selector < len(node.options):
            return selector
        return None

    for index, option in enumerate(node.options):
        if strict:
            if normalize_label(option.label) == normalize_label(selector):
                return index
        elif option.label == selector:
            return index
    return None


def add_option(
    graph: FlowGraph,
    node_id: str,
    label: str = "",
    target: Optional[NodeRef] = None,
) -> FlowGraph:
    result = copy.deepcopy(graph)
    node = result.get_node(node_id)
    if node is None or not _target_exists(result, target):
        return result
    node.options.append(FlowOption(label=label, target=target))
    return result


def remove_option(
    graph: FlowGraph, node_id: str, selector: OptionSelector, strict: bool = False
) -> FlowGraph:
    result = copy.deepcopy(graph)
    node = result.get_node(node_id)
    if node is None:
        return result
    index = resolve_option_index(node, selector, strict)
    if index is not None:
        del node.options[index]
    return result


def set_option_label(
    graph: FlowGraph,
    node_id: str,
    selector: OptionSelector,
    label: str,
    strict: bool = False,
) -> FlowGraph:
    result = copy.deepcopy(graph)
    node = result.get_node(node_id)
    if node is None:
        return result
    index = resolve_option_index(node, selector, strict)
    if index is not None:
        node.options[index].label = label
    return result


def move_option(
    graph: FlowGraph,
    node_id: str,
    selector: OptionSelector,
    direction: Direction,
    strict: bool = False,
) -> FlowGraph:
    """Explicit option reordering; the only operation that changes option order."""
    result = copy.deepcopy(graph)
    node = result.get_node(node_id)
    if node is None:
        return result
    index = resolve_option_index(node, selector, strict)
    if index is None:
        return result
    swap_with = index + direction.value
    if 0 <= swap_with < len(node.options):
        node.options[index], node.options[swap_with] = (
            node.options[swap_with],
            node.options[index],
        )
    return result


def set_option_target(
    graph: FlowGraph,
    node_id: str,
    selector: OptionSelector,
    target: Optional[NodeRef],
    strict: bool = False,
) -> FlowGraph:
    """
    Rewires a single option. A NodeTarget naming a node that does not exist is
    refused, leaving the graph unchanged.
    """
    result = copy.deepcopy(graph)
    node = result.get_node(node_id)
    if node is None:
        return result
    index = resolve_option_index(node, selector, strict)
    if index is None:
        return result
    if not _target_exists(result, target):
        logger.warning(f"Refusing to point {node_id}[{index}] at missing node {target}")
        return result

    node.options[index].target = target
    return result


def insert_linked_node(
    graph: FlowGraph,
    from_id: str,
    selector: OptionSelector,
    strict: bool = False,
    id_factory: IdFactory = new_node_id,
) -> Tuple[FlowGraph, Optional[str]]:
    """
    Creates a node right after `from_id` and points the selected option at it
    in one step. Returns (unchanged_copy, None) if the source option does not
    resolve.
    """
    source = graph.get_node(from_id)
    if source is None or resolve_option_index(source, selector, strict) is None:
        return copy.deepcopy(graph), None

    with_node, new_id = add_node(
        graph, after_index=graph.index_of(from_id), strict=strict, id_factory=id_factory
    )
    linked = set_option_target(
        with_node, from_id, selector, NodeTarget(new_id), strict=strict
    )
    return linked, new_id


# ==========================================================================
# Helpers
# ==========================================================================


def _fresh_id(graph: FlowGraph, id_factory: IdFactory) -> str:
    node_id = id_factory()
    while not node_id or node_id in graph.nodes or node_id in RESERVED_NODE_IDS:
        node_id = id_factory()
    return node_id


def _target_exists(graph: FlowGraph, target: Optional[NodeRef]) -> bool:
    if isinstance(target, NodeTarget):
        return target.node_id in graph.nodes
    return True
