"""
Engine - Flow Traversal Layer

The TraversalEngine is the deterministic state machine that walks a flow
graph one answer at a time. It backs the author's "preview run" and is used to
interpret positions reported by the remote agent.
-----------------------------------------------

The engine never raises on bad references. It may be driven by a stale
snapshot of a graph that kept evolving elsewhere, so any reference that does
not resolve degrades to the NOT_APPLICABLE terminal:

1. Terminal states absorb every step (HOLD).
2. A current node missing from the graph -> AtTerminal(NOT_APPLICABLE).
3. An unknown choice is a caller error: the state is kept (HOLD).
4. A terminal target ends the run (EXIT); a node target moves to it
   (ADVANCE) unless that node is missing (FALLBACK).

The engine keeps no history. Callers wanting a breadcrumb trail accumulate
states themselves.
"""

import logging
from typing import List, Optional, Tuple

from ..domain.models import (
    FlowGraph,
    FlowNode,
    FlowOption,
    NodeTarget,
    Outcome,
    TerminalTarget,
    normalize_label,
)
from .schemas.state_machine import (
    AtNode,
    AtTerminal,
    StateMachineTransition,
    TraversalState,
)

logger = logging.getLogger(__name__)

FALLBACK_STATE = AtTerminal(Outcome.NOT_APPLICABLE)


def transition(
    graph: FlowGraph,
    state: TraversalState,
    choice: str,
    strict: bool = False,
) -> Tuple[TraversalState, StateMachineTransition]:
    """
    Pure transition function. Returns the next state and what happened.
    """
    if isinstance(state, AtTerminal):
        return state, StateMachineTransition.HOLD

    node = graph.get_node(state.node_id)
    if node is None:
        logger.warning(f"Node '{state.node_id}' no longer exists; ending run as not applicable")
        return FALLBACK_STATE, StateMachineTransition.FALLBACK

    option = match_option(node, choice, strict=strict)
    if option is None:
        logger.debug(f"No option '{choice}' on node {node.id}; holding")
        return state, StateMachineTransition.HOLD

    target = option.target
    if isinstance(target, TerminalTarget):
        return AtTerminal(target.outcome), StateMachineTransition.EXIT

    if isinstance(target, NodeTarget) and target.node_id in graph.nodes:
        return AtNode(target.node_id), StateMachineTransition.ADVANCE

    logger.warning(
        f"Option '{option.label}' on node {node.id} points at {target}; ending run as not applicable"
    )
    return FALLBACK_STATE, StateMachineTransition.FALLBACK


def match_option(node: FlowNode, choice: str, strict: bool = False) -> Optional[FlowOption]:
    """
    Finds the option a customer picked. The strict (yes/no) editor matches
    case-insensitively; otherwise labels must match exactly.
    """
    if strict:
        wanted = normalize_label(choice)
        return next(
            (opt for opt in node.options if normalize_label(opt.label) == wanted),
            None,
        )
    return next((opt for opt in node.options if opt.label == choice), None)


class TraversalEngine:
    def __init__(self, graph: FlowGraph, strict: bool = False):
        self.graph = graph
        self.strict = strict
        self.state: TraversalState = self.start_state
        self.last_transition: Optional[StateMachineTransition] = None

    @property
    def start_state(self) -> TraversalState:
        return AtNode(self.graph.start)

    @property
    def is_finished(self) -> bool:
        return isinstance(self.state, AtTerminal)

    @property
    def outcome(self) -> Optional[Outcome]:
        if isinstance(self.state, AtTerminal):
            return self.state.outcome
        return None

    @property
    def current_node(self) -> Optional[FlowNode]:
        if isinstance(self.state, AtNode):
            return self.graph.get_node(self.state.node_id)
        return None

    def available_choices(self) -> List[str]:
        node = self.current_node
        if node is None:
            return []
        return [opt.label for opt in node.options]

    def step(self, choice: str) -> TraversalState:
        """Applies one answer and returns the new state."""
        self.state, self.last_transition = transition(
            self.graph, self.state, choice, strict=self.strict
        )
        return self.state

    def restart(self) -> TraversalState:
        """Back to the start node, regardless of the current state."""
        self.state = self.start_state
        self.last_transition = None
        return self.state
