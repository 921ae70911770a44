"""
Schemas - Flow Wire Format

This module defines the versioned JSON contract for a flow graph. The same
payload is stored in an article's `decision_tree` field and executed by the
remote conversational agent, so decoding is strict: anything the agent could
not execute is rejected with a FlowDecodeError instead of being coerced.

    {
      "version": 1,
      "start": "s1",
      "nodes": {
        "s1": {"title": "...", "body": "...",
               "options": [{"text": "Yes", "goto": "s2"},
                           {"text": "No", "goto": "end_not_applicable"}]}
      }
    }
"""

import json
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, StrictInt, ValidationError

from ..domain.models import (
    RESERVED_NODE_IDS,
    FlowGraph,
    FlowNode,
    FlowOption,
    NodeRef,
    NodeTarget,
    Outcome,
    TerminalTarget,
)

WIRE_VERSION = 1

TERMINAL_TAGS = {outcome.value: outcome for outcome in Outcome}


class DecodeErrorKind(str, Enum):
    INVALID_JSON = "invalid_json"
    MISSING_VERSION = "missing_version"
    UNSUPPORTED_VERSION = "unsupported_version"
    MALFORMED = "malformed"
    MISSING_START = "missing_start"
    RESERVED_NODE_ID = "reserved_node_id"
    UNRESOLVED_TARGET = "unresolved_target"


class FlowDecodeError(ValueError):
    """Raised when a wire payload cannot be turned into a FlowGraph."""

    def __init__(
        self,
        kind: DecodeErrorKind,
        detail: str,
        node_id: Optional[str] = None,
        option_index: Optional[int] = None,
    ):
        super().__init__(f"{kind.value}: {detail}")
        self.kind = kind
        self.detail = detail
        self.node_id = node_id
        self.option_index = option_index


class WireOption(BaseModel):
    text: str = ""
    goto: str = ""


class WireNode(BaseModel):
    title: str = ""
    body: str = ""
    options: List[WireOption] = Field(default_factory=list)


class WireFlow(BaseModel):
    """
    The strict JSON structure shared with the remote agent.
    Node order in `nodes` is the editor's display order.
    """
    version: StrictInt
    start: str
    nodes: Dict[str, WireNode] = Field(default_factory=dict)


# ==========================================================================
# Encode
# ==========================================================================


def encode_target(target: Optional[NodeRef]) -> str:
    if isinstance(target, TerminalTarget):
        return target.outcome.value
    if isinstance(target, NodeTarget):
        return target.node_id
    # Unwired option in the basic editor.
    return ""


def to_wire(graph: FlowGraph) -> WireFlow:
    return WireFlow(
        version=WIRE_VERSION,
        start=graph.start,
        nodes={
            node_id: WireNode(
                title=node.title,
                body=node.body,
                options=[
                    WireOption(text=opt.label, goto=encode_target(opt.target))
                    for opt in node.options
                ],
            )
            for node_id, node in graph.nodes.items()
        },
    )


def encode(graph: FlowGraph) -> Dict[str, Any]:
    """Projects a graph onto its wire payload (a JSON-compatible dict)."""
    return to_wire(graph).model_dump(mode="json")


def encode_json(graph: FlowGraph, indent: Optional[int] = 2) -> str:
    return json.dumps(encode(graph), indent=indent, ensure_ascii=False)


# ==========================================================================
# Decode
# ==========================================================================


def decode(payload: Union[str, bytes, Dict[str, Any]]) -> FlowGraph:
    """
    Parses a wire payload (dict or JSON text) into a FlowGraph.

    Raises:
        FlowDecodeError: On invalid JSON, a missing or unsupported version
            (only the integer 1), bad shape, an outcome tag used as a node
            id, an unknown start node, or a `goto` that is neither a
            terminal tag nor a node id.
    """
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as e:
            raise FlowDecodeError(DecodeErrorKind.INVALID_JSON, str(e)) from e

    if not isinstance(payload, dict):
        raise FlowDecodeError(
            DecodeErrorKind.MALFORMED, "Flow payload must be a JSON object."
        )
    if payload.get("version") is None:
        raise FlowDecodeError(DecodeErrorKind.MISSING_VERSION, "Payload has no 'version'.")
    version = payload["version"]
    if isinstance(version, bool) or not isinstance(version, int) or version != WIRE_VERSION:
        raise FlowDecodeError(
            DecodeErrorKind.UNSUPPORTED_VERSION,
            f"Unsupported flow version {version!r}.",
        )

    try:
        wire = WireFlow.model_validate(payload)
    except ValidationError as e:
        raise FlowDecodeError(DecodeErrorKind.MALFORMED, str(e)) from e

    for node_id in wire.nodes:
        if node_id in RESERVED_NODE_IDS:
            raise FlowDecodeError(
                DecodeErrorKind.RESERVED_NODE_ID,
                f"Node id '{node_id}' is an outcome tag.",
                node_id=node_id,
            )
    if wire.start not in wire.nodes:
        raise FlowDecodeError(
            DecodeErrorKind.MISSING_START,
            f"Start node '{wire.start}' is not defined.",
            node_id=wire.start or None,
        )

    nodes: Dict[str, FlowNode] = {}
    for node_id, wire_node in wire.nodes.items():
        options = []
        for index, wire_option in enumerate(wire_node.options):
            target = _decode_target(wire, wire_option.goto)
            if target is None:
                raise FlowDecodeError(
                    DecodeErrorKind.UNRESOLVED_TARGET,
                    f"Option '{wire_option.text}' goes to unknown '{wire_option.goto}'.",
                    node_id=node_id,
                    option_index=index,
                )
            options.append(FlowOption(label=wire_option.text, target=target))
        nodes[node_id] = FlowNode(
            id=node_id, title=wire_node.title, body=wire_node.body, options=options
        )

    return FlowGraph(start=wire.start, nodes=nodes)


def _decode_target(wire: WireFlow, goto: str) -> Optional[NodeRef]:
    if goto in TERMINAL_TAGS:
        return TerminalTarget(TERMINAL_TAGS[goto])
    if goto and goto in wire.nodes:
        return NodeTarget(goto)
    return None
