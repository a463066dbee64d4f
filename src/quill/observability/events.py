"""Event model for the edit-sync pipeline.

All events are frozen dataclasses with a ``timestamp_ns`` monotonic
nanosecond timestamp plus fields describing what happened.  Pounce
lifecycle events are stored alongside them unchanged.

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class StyleCompiled:
    """A style compilation was attempted.

    Attributes:
        source: SCSS source path.
        output: CSS output path.
        ok: True if the output was written.
        error: First line of the compiler error when ``ok`` is False.
        duration_ms: Compile time in milliseconds.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    source: str
    output: str
    ok: bool
    error: str
    duration_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class DocumentSaved:
    """The canonical document was overwritten by a browser edit.

    Attributes:
        path: Document path.
        size: Number of characters written.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    size: int
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class Broadcast:
    """A message was pushed to connected browsers.

    Attributes:
        message: Token sent (``style`` or ``reload``).
        clients_notified: Number of clients the message reached.
        trigger_path: File change that caused the broadcast.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    message: str
    clients_notified: int
    trigger_path: str
    timestamp_ns: int


type StackEvent = StyleCompiled | DocumentSaved | Broadcast


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
