"""
Traversal Types - FSM State and Transition Definitions

Type definitions for the flow traversal state machine. Used by the engine (to
compute positions) and by the live session view (to express the remote
agent's pinned position in the same terms).
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Union

from ...domain.models import Outcome


@dataclass(frozen=True)
class AtNode:
    """The run is waiting for an answer on a node."""
    node_id: str


@dataclass(frozen=True)
class AtTerminal:
    """The run has ended. Absorbing: no transition leaves it."""
    outcome: Outcome


TraversalState = Union[AtNode, AtTerminal]


class StateMachineTransition(Enum):
    """
    Strict State Machine terminology describing what happened to the pointer.
    """

    HOLD = auto()  # The pointer remains where it was (terminal, or unknown choice).
    ADVANCE = auto()  # The pointer moved to another node.
    EXIT = auto()  # The pointer reached a terminal outcome.
    FALLBACK = auto()  # A reference did not resolve; degraded to NOT_APPLICABLE.
