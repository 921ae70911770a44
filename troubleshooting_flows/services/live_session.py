"""
Live Session View

Mirrors one support session for the operator: the live chat messages and the
AI conversation, including the flow position the remote agent is pinned to.
Everything here is read-only; the remote agent owns its position.
"""

import logging
from typing import List, Optional

from ..config import settings
from ..domain.models import FlowGraph, FlowNode
from ..execution.schemas.state_machine import AtNode
from ..repositories.session import SessionRepository
from ..state.models import AiHistory, AiMessage, ChatMessage, ConversationHistory, PinnedPosition
from ..sync.poller import PollingMirror, message_signature

logger = logging.getLogger(__name__)


def ai_history_signature(history: AiHistory) -> str:
    return f"{message_signature(history.messages)}|{history.pinned.signature()}"


class LiveSessionView:
    def __init__(
        self,
        repository: SessionRepository,
        conversation_id: str,
        customer_id: Optional[str] = None,
        interval: float = settings.POLL_INTERVAL_SECONDS,
    ):
        self.repository = repository
        self.conversation_id = conversation_id
        self.customer_id = customer_id

        self.messages: List[ChatMessage] = []
        self.ai_messages: List[AiMessage] = []
        self.pinned = PinnedPosition()
        self.updates = 0

        self.chat_mirror: PollingMirror[ConversationHistory] = PollingMirror(
            fetch=self._fetch_conversation,
            apply=self._apply_conversation,
            signature=lambda history: message_signature(history.messages),
            interval=interval,
        )
        self.ai_mirror: Optional[PollingMirror[AiHistory]] = None
        if customer_id:
            self.ai_mirror = PollingMirror(
                fetch=self._fetch_ai_history,
                apply=self._apply_ai_history,
                signature=ai_history_signature,
                interval=interval,
            )

    @property
    def mirrors(self) -> List[PollingMirror]:
        return [m for m in (self.chat_mirror, self.ai_mirror) if m is not None]

    async def open(self):
        """Initial load, then polling."""
        for mirror in self.mirrors:
            await mirror.refresh()
            mirror.start()
        logger.info(f"Watching conversation {self.conversation_id}")

    def close(self):
        for mirror in self.mirrors:
            mirror.stop()

    async def refresh(self) -> bool:
        applied = [await mirror.refresh() for mirror in self.mirrors]
        return any(applied)

    @property
    def errors(self) -> List[str]:
        return [m.last_error for m in self.mirrors if m.last_error]

    # --- Pinned flow position ---

    @property
    def pinned_state(self) -> Optional[AtNode]:
        return self.pinned.as_traversal_state()

    def pinned_node(self, graph: FlowGraph) -> Optional[FlowNode]:
        """
        The pinned node as found in a locally loaded graph. None when the
        local copy no longer has it; the reported node text is still shown.
        """
        return self.pinned.locate_in(graph)

    # --- Mirror plumbing ---

    async def _fetch_conversation(self) -> ConversationHistory:
        return await self.repository.get_conversation_history(self.conversation_id)

    def _apply_conversation(self, history: ConversationHistory):
        self.messages = list(history.messages)
        self.updates += 1

    async def _fetch_ai_history(self) -> AiHistory:
        return await self.repository.get_ai_history(self.customer_id)

    def _apply_ai_history(self, history: AiHistory):
        self.ai_messages = list(history.messages)
        self.pinned = history.pinned
        self.updates += 1
