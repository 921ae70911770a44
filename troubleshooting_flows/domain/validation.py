"""
Flow Validation.

Pure, deterministic checks of a FlowGraph's structural invariants. The editor
calls this on every change, so it never mutates the graph and never raises:
problems are returned as Violation values.

Walk order (first hit wins):
1. Graph level: empty node set, then an unresolved start node.
2. Nodes in display order: empty id, an outcome tag used as an id, then the
   variant-specific node checks (strict: content and the yes/no pair;
   basic: at least one option).
3. Options of that node in declared order: label, target, target resolution.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional

from .models import RESERVED_NODE_IDS, FlowGraph, FlowNode, NodeTarget


class ViolationKind(str, Enum):
    EMPTY_NODE_SET = "empty_node_set"
    MISSING_START = "missing_start"
    EMPTY_NODE_ID = "empty_node_id"
    RESERVED_NODE_ID = "reserved_node_id"
    EMPTY_CONTENT = "empty_content"
    NO_OPTIONS = "no_options"
    MISSING_AFFIRMATIVE = "missing_affirmative"
    DUPLICATE_AFFIRMATIVE = "duplicate_affirmative"
    MISSING_NEGATIVE = "missing_negative"
    DUPLICATE_NEGATIVE = "duplicate_negative"
    EMPTY_LABEL = "empty_label"
    EMPTY_TARGET = "empty_target"
    UNRESOLVED_TARGET = "unresolved_target"


@dataclass(frozen=True)
class Violation:
    """
    The first structural problem found in a graph.

    Attributes:
        kind: Machine-checkable category.
        node_id: Offending node (None for graph-level problems).
        option_index: Offending option position within the node, if any.
        message: Human readable summary for the editor.
    """
    kind: ViolationKind
    node_id: Optional[str] = None
    option_index: Optional[int] = None
    message: str = ""


def iter_violations(graph: FlowGraph, strict: bool = False) -> Iterator[Violation]:
    """
    Yields every violation in walk order. Graph-level problems stop the walk,
    since node checks are meaningless without a resolvable start.
    """
    if not graph.nodes:
        yield Violation(ViolationKind.EMPTY_NODE_SET, message="Flow has no nodes.")
        return

    if not graph.start or graph.start not in graph.nodes:
        yield Violation(
            ViolationKind.MISSING_START,
            node_id=graph.start or None,
            message=f"Start node '{graph.start}' does not exist.",
        )
        return

    for node_id, node in graph.nodes.items():
        yield from _node_violations(graph, node_id, node, strict)


def validate(graph: FlowGraph, strict: bool = False) -> Optional[Violation]:
    """Returns the first violated invariant, or None if the graph is valid."""
    return next(iter_violations(graph, strict=strict), None)


def is_valid(graph: FlowGraph, strict: bool = False) -> bool:
    return validate(graph, strict=strict) is None


def _node_violations(
    graph: FlowGraph, node_id: str, node: FlowNode, strict: bool
) -> Iterator[Violation]:
    if not node_id.strip():
        yield Violation(ViolationKind.EMPTY_NODE_ID, message="Node id is empty.")
        return
    if node_id in RESERVED_NODE_IDS:
        yield Violation(
            ViolationKind.RESERVED_NODE_ID,
            node_id=node_id,
            message=f"'{node_id}' is an outcome tag and cannot be a node id.",
        )
        return

    if strict:
        if not node.has_content:
            yield Violation(
                ViolationKind.EMPTY_CONTENT,
                node_id=node_id,
                message="Node needs a title or a body.",
            )
            return

        yes_count = sum(1 for opt in node.options if opt.is_affirmative)
        no_count = sum(1 for opt in node.options if opt.is_negative)

        if yes_count == 0:
            yield _pair_violation(ViolationKind.MISSING_AFFIRMATIVE, node_id)
            return
        if yes_count > 1:
            yield _pair_violation(ViolationKind.DUPLICATE_AFFIRMATIVE, node_id)
            return
        if no_count == 0:
            yield _pair_violation(ViolationKind.MISSING_NEGATIVE, node_id)
            return
        if no_count > 1:
            yield _pair_violation(ViolationKind.DUPLICATE_NEGATIVE, node_id)
            return
    elif not node.options:
        yield Violation(
            ViolationKind.NO_OPTIONS,
            node_id=node_id,
            message="Node needs at least one option.",
        )
        return

    for index, option in enumerate(node.options):
        if not option.label.strip():
            yield Violation(
                ViolationKind.EMPTY_LABEL,
                node_id=node_id,
                option_index=index,
                message=f"Option {index + 1} has no label.",
            )
            continue

        target = option.target
        if target is None or (isinstance(target, NodeTarget) and not target.node_id):
            yield Violation(
                ViolationKind.EMPTY_TARGET,
                node_id=node_id,
                option_index=index,
                message=f"Option '{option.label}' does not lead anywhere.",
            )
            continue

        if isinstance(target, NodeTarget) and target.node_id not in graph.nodes:
            yield Violation(
                ViolationKind.UNRESOLVED_TARGET,
                node_id=node_id,
                option_index=index,
                message=f"Option '{option.label}' points at missing node '{target.node_id}'.",
            )


def _pair_violation(kind: ViolationKind, node_id: str) -> Violation:
    expected = "Yes" if kind in (
        ViolationKind.MISSING_AFFIRMATIVE,
        ViolationKind.DUPLICATE_AFFIRMATIVE,
    ) else "No"
    return Violation(
        kind,
        node_id=node_id,
        message=f"Node must have exactly one '{expected}' option.",
    )
