"""
Troubleshooting Flows

Branching troubleshooting flows for a customer-support client: the flow
graph model and its validation, integrity-preserving editing, the versioned
wire format shared with the remote agent, and a traversal engine for preview
runs and pinned-position rendering.
"""

from troubleshooting_flows.domain import (
    FlowGraph,
    FlowNode,
    FlowOption,
    NodeTarget,
    Outcome,
    TerminalTarget,
    Violation,
    ViolationKind,
    validate,
)
from troubleshooting_flows.state import (
    ChatMessage,
    PinnedPosition,
)
from troubleshooting_flows.schemas import FlowDecodeError, decode, encode
from troubleshooting_flows.editing import Direction, EditorMode, FlowEditor
from troubleshooting_flows.execution import AtNode, AtTerminal, TraversalEngine

__all__ = [
    # Domain Layer
    "FlowGraph",
    "FlowNode",
    "FlowOption",
    "NodeTarget",
    "Outcome",
    "TerminalTarget",
    "Violation",
    "ViolationKind",
    "validate",
    # State Layer
    "ChatMessage",
    "PinnedPosition",
    # Wire Format
    "FlowDecodeError",
    "decode",
    "encode",
    # Editing Layer
    "Direction",
    "EditorMode",
    "FlowEditor",
    # Execution Layer
    "AtNode",
    "AtTerminal",
    "TraversalEngine",
]
