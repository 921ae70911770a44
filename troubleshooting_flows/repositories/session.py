from abc import ABC, abstractmethod
from typing import Dict

from ..state.models import AiHistory, ConversationHistory
from ..infrastructure.http.client import SupportApiClient


class SessionRepository(ABC):
    """
    Defines how the application reads remote conversation state.
    Read-only: the client mirrors what the backend and the remote agent
    report and never writes a position back.
    """

    @abstractmethod
    async def get_ai_history(self, customer_id: str) -> AiHistory:
        """AI conversation messages plus the pinned flow position."""
        pass

    @abstractmethod
    async def get_conversation_history(self, conversation_id: str) -> ConversationHistory:
        """Live chat messages of a conversation."""
        pass


class InMemorySessionRepository(SessionRepository):
    """
    Serves canned snapshots for testing/dev purposes. Tests update the
    snapshots to simulate the backend moving on.
    """

    def __init__(self):
        self.ai_histories: Dict[str, AiHistory] = {}
        self.conversations: Dict[str, ConversationHistory] = {}

    async def get_ai_history(self, customer_id: str) -> AiHistory:
        return self.ai_histories.get(customer_id, AiHistory()).model_copy(deep=True)

    async def get_conversation_history(self, conversation_id: str) -> ConversationHistory:
        default = ConversationHistory(conversation_id=conversation_id)
        return self.conversations.get(conversation_id, default).model_copy(deep=True)


class HttpSessionRepository(SessionRepository):
    """
    Reads conversation state through the remote support API.

    Args:
        admin: Use the operator endpoints (conversation ids) instead of the
            customer endpoint (session ids).
    """

    def __init__(self, client: SupportApiClient, admin: bool = True):
        self.client = client
        self.admin = admin

    async def get_ai_history(self, customer_id: str) -> AiHistory:
        data = await self.client.get_ai_history(customer_id)
        return AiHistory.from_payload(data if isinstance(data, dict) else {})

    async def get_conversation_history(self, conversation_id: str) -> ConversationHistory:
        if self.admin:
            data = await self.client.get_admin_livechat_history(conversation_id)
        else:
            data = await self.client.get_livechat_history(conversation_id)

        data = data if isinstance(data, dict) else {}
        messages = data.get("messages")
        return ConversationHistory(
            conversation_id=str(data.get("conversation_id") or conversation_id),
            messages=messages if isinstance(messages, list) else [],
        )
