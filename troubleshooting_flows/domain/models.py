"""
Domain Layer - Static Flow Models

This module defines the core domain model representing the static structure
of a branching troubleshooting flow (the "decision tree" attached to a
knowledge article): Nodes, Options and the Terminal outcomes that end a run.

The same structure is executed remotely by the conversational agent against a
live customer, so node ids are stable and must never be reassigned.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Union


class Outcome(str, Enum):
    """
    Fixed set of outcomes that end a troubleshooting run.

    The values are the literal tags shared with the remote agent and used as
    `goto` values on the wire. They are never created dynamically.
    """
    DONE = "end_done"
    ESCALATE = "end_escalate"
    NOT_APPLICABLE = "end_not_applicable"


@dataclass(frozen=True)
class NodeTarget:
    """Option target pointing at another node of the same graph."""
    node_id: str


@dataclass(frozen=True)
class TerminalTarget:
    """Option target ending the run with a fixed outcome."""
    outcome: Outcome


NodeRef = Union[NodeTarget, TerminalTarget]

# Terminal tags cannot double as node ids; a `goto` naming one always ends the run.
RESERVED_NODE_IDS = frozenset(outcome.value for outcome in Outcome)

# Labels recognised as the yes/no pair required by the strict editor.
AFFIRMATIVE_LABEL = "yes"
NEGATIVE_LABEL = "no"


def normalize_label(label: str) -> str:
    return (label or "").strip().casefold()


@dataclass
class FlowOption:
    """
    A labeled choice on a node.

    Attributes:
        label: Text shown to the customer (e.g., "Yes", "Still leaking").
        target: Where the choice leads. None only while an option is being
            authored in the basic editor and has not been wired yet.
    """
    label: str
    target: Optional[NodeRef] = None

    @property
    def is_affirmative(self) -> bool:
        return normalize_label(self.label) == AFFIRMATIVE_LABEL

    @property
    def is_negative(self) -> bool:
        return normalize_label(self.label) == NEGATIVE_LABEL


@dataclass
class FlowNode:
    """
    One question step of a troubleshooting flow.

    Attributes:
        id: Opaque identifier, unique within the graph and immutable once
            created. A running session may reference it.
        title: Short question label (e.g., "Is the water pump running?").
        body: Optional elaboration shown under the title.
        options: Ordered choices. Order drives the choice UI, not semantics.
    """
    id: str
    title: str = ""
    body: str = ""
    options: List[FlowOption] = field(default_factory=list)

    @property
    def has_content(self) -> bool:
        return bool(self.title.strip() or self.body.strip())


@dataclass
class FlowGraph:
    """
    A complete branching flow.

    Attributes:
        start: Entry node ID.
        nodes: Dict mapping node IDs to nodes. Insertion order is the display
            order used by the editor.
    """
    start: str = ""
    nodes: Dict[str, FlowNode] = field(default_factory=dict)

    @property
    def node_ids(self) -> List[str]:
        return list(self.nodes)

    def get_node(self, node_id: Optional[str]) -> Optional[FlowNode]:
        if not node_id:
            return None
        return self.nodes.get(node_id)

    def index_of(self, node_id: str) -> Optional[int]:
        try:
            return self.node_ids.index(node_id)
        except ValueError:
            return None
