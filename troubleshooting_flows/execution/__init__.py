"""
Execution Layer - Flow Traversal

Defines the TraversalEngine (deterministic state machine) used for preview
runs and for interpreting the remote agent's reported position.
"""

from troubleshooting_flows.execution.engine import (
    TraversalEngine,
    match_option,
    transition,
)
from troubleshooting_flows.execution.schemas.state_machine import (
    AtNode,
    AtTerminal,
    StateMachineTransition,
    TraversalState,
)


__all__ = [
    "AtNode",
    "AtTerminal",
    "StateMachineTransition",
    "TraversalEngine",
    "TraversalState",
    "match_option",
    "transition",
]
