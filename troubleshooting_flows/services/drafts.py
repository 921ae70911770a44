"""
Draft Storage Service

Keeps the operator's in-progress flow and saved admin key in local key-value
storage. Drafts are written on a debounce timer (every edit resets it) and
read once when the editor opens.
"""

import asyncio
import json
import logging
from typing import Optional

from ..config import settings
from ..editing.editor import EditorMode, FlowEditor
from ..repositories.keyvalue import KeyValueStore
from ..schemas.wire import FlowDecodeError, decode, encode

logger = logging.getLogger(__name__)

DRAFT_KEY = "flow_draft"
ADMIN_KEY = "admin_key"


class DraftStore:
    def __init__(
        self,
        store: KeyValueStore,
        key: str = DRAFT_KEY,
        debounce_seconds: float = settings.DRAFT_DEBOUNCE_SECONDS,
    ):
        self.store = store
        self.key = key
        self.debounce_seconds = debounce_seconds
        self._pending: Optional[asyncio.TimerHandle] = None
        self._pending_editor: Optional[FlowEditor] = None

    @property
    def has_pending_write(self) -> bool:
        return self._pending is not None

    def attach(self, editor: FlowEditor):
        """Autosaves the editor after every change."""
        editor.subscribe(self.schedule)

    def schedule(self, editor: FlowEditor):
        """
        (Re)starts the debounce timer. Outside an event loop the draft is
        written immediately.
        """
        self._cancel_pending()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self.save_now(editor)
            return
        self._pending_editor = editor
        self._pending = loop.call_later(self.debounce_seconds, self._fire)

    def _fire(self):
        editor = self._pending_editor
        self._pending = None
        self._pending_editor = None
        if editor is not None:
            self.save_now(editor)

    def _cancel_pending(self):
        if self._pending is not None:
            self._pending.cancel()
        self._pending = None
        self._pending_editor = None

    def flush(self):
        """Writes a pending draft right away."""
        editor = self._pending_editor
        self._cancel_pending()
        if editor is not None:
            self.save_now(editor)

    def save_now(self, editor: FlowEditor):
        record = {"mode": editor.mode.value, "strict": editor.strict}
        if editor.mode == EditorMode.JSON:
            record["text"] = editor.json_text
        else:
            record["flow"] = encode(editor.graph)
        self.store.set(self.key, json.dumps(record))
        logger.debug(f"Draft saved (revision {editor.revision})")

    def load(self) -> Optional[FlowEditor]:
        """Restores the saved draft, or None if there is none or it is unreadable."""
        raw = self.store.get(self.key)
        if not raw:
            return None
        try:
            record = json.loads(raw)
            editor = FlowEditor(strict=bool(record.get("strict", False)))
            if record.get("mode") == EditorMode.JSON.value:
                editor.edit_json(record.get("text", ""))
            else:
                editor = FlowEditor(decode(record["flow"]), strict=editor.strict)
        except (json.JSONDecodeError, FlowDecodeError, KeyError, AttributeError) as e:
            logger.warning(f"Ignoring unreadable draft: {e}")
            return None
        return editor

    def clear(self):
        self._cancel_pending()
        self.store.delete(self.key)


class AdminKeyStore:
    """The operator's admin API key, kept between app launches."""

    def __init__(self, store: KeyValueStore, key: str = ADMIN_KEY):
        self.store = store
        self.key = key

    def get(self) -> str:
        return self.store.get(self.key) or ""

    def save(self, admin_key: str):
        self.store.set(self.key, admin_key.strip())

    def clear(self):
        self.store.delete(self.key)
