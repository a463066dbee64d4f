"""Style pipeline — SCSS source to CSS, keeping the last good output.

Compilation happens once at startup and again whenever the source file
changes.  A failed compile (syntax error, missing source) writes nothing:
the CSS already on disk keeps being served, so a half-typed rule never
breaks the page the user is looking at.  Failures are reported on stderr
and recorded in the event log but never pushed to browsers.
"""

from __future__ import annotations

import sys
import time
from typing import TYPE_CHECKING

import sass

if TYPE_CHECKING:
    from quill.config import QuillConfig
    from quill.observability.collector import StackCollector


def _first_line(exc: BaseException) -> str:
    text = str(exc).strip()
    return text.splitlines()[0] if text else type(exc).__name__


class StyleCompiler:
    """Compiles ``config.style_source`` into ``config.style_output``.

    Args:
        config: Resolved QuillConfig.
        collector: Optional collector that receives a StyleCompiled event
            for every attempt.

    """

    def __init__(self, config: QuillConfig, collector: StackCollector | None = None) -> None:
        self._config = config
        self._collector = collector

    def compile(self) -> bool:
        """Compile the source and write the CSS output.

        Returns:
            True if the output was written, False if compilation failed and
            the previous output was left untouched.

        """
        source = self._config.style_source_path
        output = self._config.style_output_path
        t0 = time.perf_counter()

        try:
            css = sass.compile(
                filename=str(source),
                output_style=self._config.output_style,
            )
            output.write_text(css, encoding="utf-8")
        except (sass.CompileError, OSError) as exc:
            error = _first_line(exc)
            print(f"  Style error: {source.name}: {error}", file=sys.stderr)
            self._record(ok=False, error=error, t0=t0)
            return False

        self._record(ok=True, error="", t0=t0)
        return True

    def _record(self, *, ok: bool, error: str, t0: float) -> None:
        if self._collector is None:
            return
        self._collector.record_compile(
            str(self._config.style_source_path),
            str(self._config.style_output_path),
            ok=ok,
            error=error,
            duration_ms=(time.perf_counter() - t0) * 1000,
        )
