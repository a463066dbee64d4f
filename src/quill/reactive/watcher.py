"""File watcher — turns filesystem changes into typed change events.

Three files matter:

- the canonical document  -> ``document``     (browsers reload)
- the SCSS source         -> ``style_source`` (recompile)
- the compiled CSS        -> ``style_output`` (browsers swap stylesheet)

The directories holding them are watched non-recursively, so editors
that save by writing a temp file and renaming it over the original still
produce an event for the final path.
"""

from __future__ import annotations

import asyncio
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from watchfiles import Change

from quill._types import ChangeCategory

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from quill.config import QuillConfig


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """A change to one of the watched files.

    Attributes:
        path: Absolute path to the changed file.
        kind: Type of filesystem change.
        category: Which watched file changed (determines the reaction).

    """

    path: Path
    kind: Literal["created", "modified", "deleted"]
    category: ChangeCategory


_CHANGE_KIND_MAP: dict[Change, Literal["created", "modified", "deleted"]] = {
    Change.added: "created",
    Change.modified: "modified",
    Change.deleted: "deleted",
}


def categorize_change(path: Path, config: QuillConfig) -> ChangeCategory | None:
    """Map a changed path to its category, or None if it is not watched."""
    if path == config.document_path:
        return "document"
    if path == config.style_source_path:
        return "style_source"
    if path == config.style_output_path:
        return "style_output"
    return None


def watch_dirs(config: QuillConfig) -> tuple[Path, ...]:
    """Directories that must be watched to see every tracked file."""
    dirs: list[Path] = []
    for path in (config.document_path, config.style_source_path, config.style_output_path):
        if path.parent not in dirs:
            dirs.append(path.parent)
    return tuple(dirs)


def coalesce(
    raw_changes: set[tuple[Change, str]], config: QuillConfig
) -> list[ChangeEvent]:
    """Reduce one watchfiles batch to at most one event per watched file."""
    events: dict[ChangeCategory, ChangeEvent] = {}
    for change_type, path_str in sorted(raw_changes, key=lambda c: c[1]):
        path = Path(path_str)
        category = categorize_change(path, config)
        if category is None:
            continue
        kind = _CHANGE_KIND_MAP.get(change_type, "modified")
        previous = events.get(category)
        # A delete followed by an add in the same batch is an atomic save.
        if previous is not None and kind == "deleted":
            continue
        events[category] = ChangeEvent(path=path, kind=kind, category=category)
    return list(events.values())


class FileWatcher:
    """Watches the document and stylesheet files for changes.

    watchfiles runs in a background thread; events are handed to the
    event loop with ``call_soon_threadsafe`` and consumed through the
    ``changes()`` async iterator.

    """

    def __init__(self, config: QuillConfig) -> None:
        self._config = config
        self._queue: asyncio.Queue[ChangeEvent] = asyncio.Queue()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        """Whether the watcher background thread is active."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start watching in a background thread.

        Must be called from inside the running event loop that will
        consume ``changes()``.
        """
        if self.is_running:
            return

        self._loop = asyncio.get_running_loop()
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._watch_loop,
            name="quill-watcher",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        """Signal the watcher to stop and wait for the thread to finish."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=5.0)
            self._thread = None

    async def changes(self) -> AsyncIterator[ChangeEvent]:
        """Yield ChangeEvent objects as they occur until the watcher stops."""
        while self.is_running or not self._queue.empty():
            try:
                event = await asyncio.wait_for(self._queue.get(), timeout=0.5)
                yield event
            except TimeoutError:
                if not self.is_running:
                    break

    def _watch_loop(self) -> None:
        """Background thread: run watchfiles and hand events to the loop."""
        from watchfiles import watch

        loop = self._loop
        assert loop is not None

        for raw_changes in watch(
            *watch_dirs(self._config),
            stop_event=self._stop_event,
            recursive=False,
            debounce=200,
            step=50,
        ):
            for event in coalesce(raw_changes, self._config):
                try:
                    loop.call_soon_threadsafe(self._queue.put_nowait, event)
                except RuntimeError:
                    # Event loop closed underneath us; nothing left to notify.
                    return
