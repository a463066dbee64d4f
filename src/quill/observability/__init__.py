"""Observability — in-memory event log for compiles, saves, and broadcasts.

Quick Start:
    >>> from quill.observability import EventLog, StackCollector
    >>> collector = StackCollector(EventLog())
    >>> collector.record_save("/site/index.html", size=42)

"""

from quill.observability.collector import StackCollector
from quill.observability.events import (
    Broadcast,
    DocumentSaved,
    StackEvent,
    StyleCompiled,
    now_ns,
)
from quill.observability.log import EventLog

__all__ = [
    "Broadcast",
    "DocumentSaved",
    "EventLog",
    "StackCollector",
    "StackEvent",
    "StyleCompiled",
    "now_ns",
]
