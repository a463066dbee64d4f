"""Shared test fixtures for quill."""

from __future__ import annotations

from pathlib import Path

import pytest

from quill.config import QuillConfig

VALID_SCSS = "$accent: red;\nbody { color: $accent; }\n"
COMPILED_CSS = "body{color:red}"


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Create a minimal project: document, SCSS source, and compiled CSS."""
    (tmp_path / "index.html").write_text("<p>hello</p>", encoding="utf-8")
    (tmp_path / "index.scss").write_text(VALID_SCSS, encoding="utf-8")
    (tmp_path / "index.css").write_text(COMPILED_CSS, encoding="utf-8")
    return tmp_path


@pytest.fixture
def config(project: Path) -> QuillConfig:
    """A QuillConfig rooted at the temp project."""
    return QuillConfig(root=project)


class FakeRequest:
    """Just enough of a Chirp request for the document handlers."""

    def __init__(self, method: str = "GET", body: bytes = b"") -> None:
        self.method = method
        self._body = body

    async def body(self) -> bytes:
        return self._body
