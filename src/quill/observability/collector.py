"""Stack collector — one recording surface for server and pipeline events.

Implements Pounce's ``LifecycleCollector`` protocol (duck-typed ``record``)
so connection lifecycle events land in the same log as style compiles,
document saves, and broadcasts.

Thread Safety:
    Delegates to ``EventLog``, which is internally locked.

"""

from __future__ import annotations

from typing import Any

from quill.observability.events import Broadcast, DocumentSaved, StyleCompiled, now_ns
from quill.observability.log import EventLog


class StackCollector:
    """Unified event collector.

    Args:
        log: The EventLog to store events in.

    """

    __slots__ = ("_log",)

    def __init__(self, log: EventLog | None = None) -> None:
        self._log = log if log is not None else EventLog()

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    def record(self, event: Any) -> None:
        """Record a Pounce lifecycle event as-is."""
        self._log.append(event)

    def record_compile(
        self,
        source: str,
        output: str,
        *,
        ok: bool,
        error: str = "",
        duration_ms: float = 0.0,
    ) -> None:
        """Record a style compilation attempt."""
        self._log.append(
            StyleCompiled(
                source=source,
                output=output,
                ok=ok,
                error=error,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )

    def record_save(self, path: str, *, size: int) -> None:
        """Record a document save."""
        self._log.append(DocumentSaved(path=path, size=size, timestamp_ns=now_ns()))

    def record_broadcast(
        self,
        message: str,
        *,
        clients_notified: int,
        trigger_path: str = "",
    ) -> None:
        """Record a broadcast to connected clients."""
        self._log.append(
            Broadcast(
                message=message,
                clients_notified=clients_notified,
                trigger_path=trigger_path,
                timestamp_ns=now_ns(),
            )
        )
