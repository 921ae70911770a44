"""
State Layer - Runtime Data Models

This module defines the runtime snapshots mirrored from the remote support
backend: chat messages of a conversation and the position the remote agent
has "pinned" itself to inside an article's flow.

These are read-only views. Nothing here is ever pushed back to the backend.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..domain.models import FlowGraph, FlowNode
from ..execution.schemas.state_machine import AtNode


class ChatMessage(BaseModel):
    """
    One message of a live chat or AI conversation.
    """
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    conversation_id: Optional[str] = None
    sender_id: Optional[str] = None
    sender_role: str = "system"  # customer | owner | system
    body: str = ""
    created_at: Optional[str] = None


class AiMessage(BaseModel):
    """
    One turn of the AI conversation, as reported by the session store.
    Unlike live chat messages these carry no id.
    """
    model_config = ConfigDict(coerce_numbers_to_str=True)

    role: str = "assistant"  # user | assistant
    text: str = ""
    created_at: Optional[str] = None
    id: Optional[str] = None


class PinnedPosition(BaseModel):
    """
    The remote agent's reported position inside a flow.

    Fields mirror the session store's report. `active_tree_present` is None
    when the backend did not send a boolean.
    """
    active_article_id: Optional[str] = None
    active_node_id: Optional[str] = None
    active_node_text: Optional[str] = None
    active_tree_present: Optional[bool] = None

    @field_validator("active_tree_present", mode="before")
    @classmethod
    def _only_real_booleans(cls, value: Any) -> Optional[bool]:
        return value if isinstance(value, bool) else None

    @field_validator("active_article_id", "active_node_id", mode="before")
    @classmethod
    def _ids_as_text(cls, value: Any) -> Optional[str]:
        if value is None or value == "":
            return None
        return str(value)

    @property
    def is_pinned(self) -> bool:
        return bool(self.active_tree_present and self.active_article_id and self.active_node_id)

    def as_traversal_state(self) -> Optional[AtNode]:
        if not self.is_pinned:
            return None
        return AtNode(self.active_node_id)

    def locate_in(self, graph: FlowGraph) -> Optional[FlowNode]:
        """
        Looks the pinned node up in a locally loaded graph. The local and
        remote graphs may have diverged; a missing node yields None and the
        reported text is all there is to render.
        """
        if not self.is_pinned:
            return None
        return graph.get_node(self.active_node_id)

    def signature(self) -> str:
        return f"{self.active_article_id or ''}:{self.active_node_id or ''}:{self.active_tree_present}"


class ConversationHistory(BaseModel):
    """History of a live chat conversation."""
    conversation_id: str = ""
    messages: List[ChatMessage] = Field(default_factory=list)


class AiHistory(BaseModel):
    """
    AI conversation history for a customer, plus the pinned flow position.
    """
    messages: List[AiMessage] = Field(default_factory=list)
    pinned: PinnedPosition = Field(default_factory=PinnedPosition)

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "AiHistory":
        messages = data.get("messages")
        return cls(
            messages=messages if isinstance(messages, list) else [],
            pinned=PinnedPosition(
                active_article_id=data.get("active_article_id"),
                active_node_id=data.get("active_node_id"),
                active_node_text=data.get("active_node_text"),
                active_tree_present=data.get("active_tree_present"),
            ),
        )
