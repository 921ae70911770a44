"""
Domain Layer - Static Flow Models

Defines the branching troubleshooting flow (nodes, options, terminal
outcomes) and the structural validation rules that keep it executable.
"""

from troubleshooting_flows.domain.models import (
    FlowGraph,
    FlowNode,
    FlowOption,
    NodeRef,
    NodeTarget,
    Outcome,
    RESERVED_NODE_IDS,
    TerminalTarget,
)
from troubleshooting_flows.domain.validation import (
    Violation,
    ViolationKind,
    is_valid,
    iter_violations,
    validate,
)

__all__ = [
    "FlowGraph",
    "FlowNode",
    "FlowOption",
    "NodeRef",
    "NodeTarget",
    "Outcome",
    "RESERVED_NODE_IDS",
    "TerminalTarget",
    "Violation",
    "ViolationKind",
    "is_valid",
    "iter_violations",
    "validate",
]
