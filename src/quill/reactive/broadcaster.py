"""Notification channel — pushes change tokens to every open tab.

Each browser tab holds one Server-Sent Events stream.  The broadcaster
owns the set of connected clients and fans a message out to all of them.
Two tokens are meaningful to the browser agent:

- ``style``  — the compiled stylesheet changed; swap it in place
- anything else (``reload``) — the document changed; reload the page

The channel is strictly server-to-client.
"""

from __future__ import annotations

import asyncio
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

STYLE_MESSAGE = "style"
RELOAD_MESSAGE = "reload"

# Per-client backlog.  A tab that stops reading simply misses messages.
_QUEUE_SIZE = 64


def _client_queue() -> asyncio.Queue[Any]:
    return asyncio.Queue(maxsize=_QUEUE_SIZE)


@dataclass(frozen=True, slots=True)
class SSEConnection:
    """A connected browser tab.

    Attributes:
        client_id: Unique identifier for this connection.
        queue: Events waiting to be written to the client's stream.

    """

    client_id: str
    queue: asyncio.Queue[Any] = field(default_factory=_client_queue, compare=False, hash=False)


class Broadcaster:
    """Owns the connected client set and fans messages out to it.

    Membership changes only on subscribe (stream opened) and unsubscribe
    (stream closed).  Delivery is best-effort per client: a full queue is
    skipped and never aborts the broadcast to the remaining clients.

    Thread-safe: the client set is protected by a lock.

    """

    def __init__(self) -> None:
        self._clients: set[SSEConnection] = set()
        self._lock = threading.Lock()

    @property
    def client_count(self) -> int:
        """Number of currently connected clients."""
        with self._lock:
            return len(self._clients)

    def subscribe(self, conn: SSEConnection) -> None:
        """Register a newly opened client stream."""
        with self._lock:
            self._clients.add(conn)

    def unsubscribe(self, conn: SSEConnection) -> None:
        """Remove a client whose stream closed.  Unknown clients are ignored."""
        with self._lock:
            self._clients.discard(conn)

    def get_clients(self) -> frozenset[SSEConnection]:
        """Snapshot of connected clients (no lock held on return)."""
        with self._lock:
            return frozenset(self._clients)

    async def broadcast(self, message: str) -> int:
        """Send *message* to every connected client.

        Returns:
            Number of clients the message was delivered to.

        """
        from chirp import SSEEvent

        event = SSEEvent(data=message, event="message")

        count = 0
        for conn in self.get_clients():
            try:
                conn.queue.put_nowait(event)
                count += 1
            except asyncio.QueueFull:
                pass  # Stalled client; it will catch up on the next change

        return count

    async def client_generator(self, conn: SSEConnection) -> AsyncIterator[Any]:
        """Async generator that yields events from a connection's queue.

        Used as the generator for Chirp's ``EventStream``.  Swallows
        ``CancelledError`` and ``GeneratorExit`` so a client disconnect
        ends the stream quietly.

        """
        try:
            while True:
                event = await conn.queue.get()
                yield event
        except (asyncio.CancelledError, GeneratorExit):
            return
