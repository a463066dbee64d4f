"""Quill configuration.

QuillConfig is the central configuration object, frozen after creation.
"""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, slots=True)
class QuillConfig:
    """Configuration for a Quill live-editing server.

    Attributes:
        root: Project directory holding the document and stylesheet files.
              Always resolved to an absolute path on construction.
        host: Bind address.
        port: Bind port.
        document: Canonical HTML fragment, relative to ``root``.
        style_source: SCSS source, relative to ``root``.
        style_output: Compiled CSS output, relative to ``root``.  Also
            served at ``/<style_output>``.
        output_style: libsass output style (``nested``, ``expanded``,
            ``compact`` or ``compressed``).
        debounce_ms: Idle time the browser agent waits after the last
            keystroke before saving.

    """

    root: Path = field(default_factory=Path.cwd)
    host: str = "127.0.0.1"
    port: int = 8080
    document: str = "index.html"
    style_source: str = "index.scss"
    style_output: str = "index.css"
    output_style: str = "expanded"
    debounce_ms: int = 2000

    def __post_init__(self) -> None:
        # watchfiles reports resolved absolute paths; compare like with like.
        if not self.root.is_absolute():
            object.__setattr__(self, "root", self.root.resolve())

    @property
    def document_path(self) -> Path:
        """Absolute path to the canonical document."""
        return self.root / self.document

    @property
    def style_source_path(self) -> Path:
        """Absolute path to the SCSS source."""
        return self.root / self.style_source

    @property
    def style_output_path(self) -> Path:
        """Absolute path to the compiled CSS."""
        return self.root / self.style_output

    @property
    def stylesheet_href(self) -> str:
        """URL path the page shell links the stylesheet from."""
        return "/" + Path(self.style_output).as_posix().lstrip("/")
