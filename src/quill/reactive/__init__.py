"""Reactive layer — file changes to browser notifications.

Connects the file watcher, style recompilation, and the server-push
channel, and provides the script browsers run to take part.
"""

from quill.reactive.broadcaster import (
    RELOAD_MESSAGE,
    STYLE_MESSAGE,
    Broadcaster,
    SSEConnection,
)
from quill.reactive.dispatcher import ChangeDispatcher
from quill.reactive.watcher import ChangeEvent, FileWatcher

__all__ = [
    "RELOAD_MESSAGE",
    "STYLE_MESSAGE",
    "Broadcaster",
    "ChangeDispatcher",
    "ChangeEvent",
    "FileWatcher",
    "SSEConnection",
]
