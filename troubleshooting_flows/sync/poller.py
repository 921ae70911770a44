"""
Polling Mirror - Remote State Sync Contract

Every view that mirrors remote state (live chat messages, AI history, the
pinned flow position) refreshes on a fixed interval. Each refresh computes a
cheap signature of the fetched snapshot and applies it only when the
signature differs from the last applied one, so unchanged data never causes a
re-render or scroll jump.

Ordering is last-fetch-wins: ticks do not wait for in-flight fetches, and a
slow response may land after a newer one. Stopping the mirror clears the
timer and marks it closed; in-flight fetches are not aborted, their results
are ignored on arrival.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Generic, Optional, Sequence, Set, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Fetch = Callable[[], Awaitable[T]]
Apply = Callable[[T], Any]
Signature = Callable[[T], str]


def _field(item: Any, name: str) -> Any:
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


def message_signature(items: Optional[Sequence[Any]]) -> str:
    """`count:last_id:last_created_at`, the same for dicts and models."""
    items = items or []
    last = items[-1] if items else None
    last_id = _field(last, "id") if last is not None else None
    last_created = _field(last, "created_at") if last is not None else None
    return f"{len(items)}:{last_id or ''}:{last_created or ''}"


class SignatureGate(Generic[T]):
    """
    Remembers the signature of the last applied snapshot.
    """

    def __init__(self, signature: Signature = message_signature):
        self.signature = signature
        self.last_signature: Optional[str] = None

    def admit(self, snapshot: T) -> bool:
        """True (and remembered) if the snapshot differs from the last applied one."""
        sig = self.signature(snapshot)
        if sig == self.last_signature:
            return False
        self.last_signature = sig
        return True

    def reset(self):
        self.last_signature = None


class PollingMirror(Generic[T]):
    """
    Keeps local view state in sync with a remote snapshot.

    Args:
        fetch: Coroutine function returning the current remote snapshot.
        apply: Called with each snapshot whose signature changed.
        signature: Snapshot -> signature string.
        interval: Seconds between refreshes.
        discard_superseded: Opt-in strict ordering. Drops a response when a
            response to a later request has already arrived, whether or
            not that one changed anything. Off by default,
            matching the backend clients' last-fetch-wins behavior.
    """

    def __init__(
        self,
        fetch: Fetch,
        apply: Apply,
        signature: Signature = message_signature,
        interval: float = 2.0,
        discard_superseded: bool = False,
    ):
        self.fetch = fetch
        self.apply = apply
        self.gate: SignatureGate[T] = SignatureGate(signature)
        self.interval = interval
        self.discard_superseded = discard_superseded

        self.last_error: Optional[str] = None
        self._closed = False
        self._timer: Optional[asyncio.Task] = None
        self._inflight: Set[asyncio.Task] = set()
        self._issued = 0
        self._latest_ticket = 0

    @property
    def is_running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    @property
    def closed(self) -> bool:
        return self._closed

    async def refresh(self) -> bool:
        """
        Fetches once. Returns True if the snapshot was applied.
        """
        self._issued += 1
        ticket = self._issued

        try:
            snapshot = await self.fetch()
        except Exception as e:
            # Transient failures are surfaced to the view but polling continues.
            logger.error(f"Refresh failed: {e}")
            self.last_error = str(e)
            return False

        if self._closed:
            logger.debug("Mirror closed; ignoring late response")
            return False

        if self.discard_superseded and ticket < self._latest_ticket:
            logger.debug(f"Discarding superseded response #{ticket}")
            return False
        # A newer response counts even when its snapshot is unchanged.
        self._latest_ticket = max(self._latest_ticket, ticket)

        self.last_error = None
        if not self.gate.admit(snapshot):
            return False

        self.apply(snapshot)
        return True

    def start(self):
        """Starts (or restarts) the interval timer. Must run inside an event loop."""
        if self.is_running:
            self._timer.cancel()
        self._closed = False
        self._timer = asyncio.get_running_loop().create_task(self._tick_forever())

    def stop(self):
        """Clears the timer; in-flight fetches are left to finish and be ignored."""
        self._closed = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    async def _tick_forever(self):
        while True:
            await asyncio.sleep(self.interval)
            task = asyncio.create_task(self.refresh())
            self._inflight.add(task)
            task.add_done_callback(self._inflight.discard)
