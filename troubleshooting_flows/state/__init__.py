"""
State Layer - Runtime Data Models

Defines the read-only snapshots mirrored from the support backend: chat
messages and the remote agent's pinned flow position.
"""

from troubleshooting_flows.state.models import (
    AiHistory,
    AiMessage,
    ChatMessage,
    ConversationHistory,
    PinnedPosition,
)

__all__ = [
    "AiHistory",
    "AiMessage",
    "ChatMessage",
    "ConversationHistory",
    "PinnedPosition",
]
