"""Change dispatcher — connects watcher events to their reactions.

    style_source changed -> recompile (writes style_output on success)
    style_output changed -> broadcast ``style``
    document changed     -> broadcast ``reload``

Saving an edit never broadcasts directly: the POST handler only writes
the document, and the resulting ``document`` change event is the single
trigger for reloads.  Recompiling likewise only writes the CSS file; its
change event drives the ``style`` broadcast.  A failed compile writes
nothing, so browsers are never told about it.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from quill.reactive.broadcaster import RELOAD_MESSAGE, STYLE_MESSAGE

if TYPE_CHECKING:
    from quill.observability.collector import StackCollector
    from quill.reactive.broadcaster import Broadcaster
    from quill.reactive.watcher import ChangeEvent
    from quill.style.compiler import StyleCompiler


class ChangeDispatcher:
    """Routes each ChangeEvent to a recompile or a broadcast.

    Args:
        compiler: Style compiler run on source changes.
        broadcaster: Notification channel for connected browsers.
        collector: Optional collector that records each broadcast.

    """

    def __init__(
        self,
        compiler: StyleCompiler,
        broadcaster: Broadcaster,
        collector: StackCollector | None = None,
    ) -> None:
        self._compiler = compiler
        self._broadcaster = broadcaster
        self._collector = collector

    async def handle_change(self, event: ChangeEvent) -> int:
        """Process one change.

        Returns:
            Number of clients notified (0 for recompiles).

        """
        if event.category == "style_source":
            # libsass is synchronous; keep the loop free for requests.
            await asyncio.to_thread(self._compiler.compile)
            return 0
        if event.category == "style_output":
            if event.kind == "deleted":
                return 0
            return await self._notify(STYLE_MESSAGE, event)
        if event.category == "document":
            return await self._notify(RELOAD_MESSAGE, event)
        return 0

    async def _notify(self, message: str, event: ChangeEvent) -> int:
        count = await self._broadcaster.broadcast(message)
        if self._collector is not None:
            self._collector.record_broadcast(
                message,
                clients_notified=count,
                trigger_path=str(event.path),
            )
        return count
