"""Page rendering and edit persistence.

The canonical document on disk is the only source of truth.  Every GET
reads it fresh and every POST overwrites it; nothing is cached.

GET:  shell + document + agent  ->  mark(body)  ->  HTML
POST: submitted fragment        ->  unmark      ->  trimmed HTML on disk
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from quill._errors import DocumentError
from quill.document.marker import mark, unmark
from quill.document.tree import (
    Attribute,
    Doctype,
    Element,
    Fragment,
    find_descendant,
    parse_fragment,
    serialize,
)
from quill.reactive.agent import render_agent_script

if TYPE_CHECKING:
    from quill.config import QuillConfig


def build_page_shell(stylesheet_href: str) -> Fragment:
    """Build the fixed page skeleton with an empty ``<body>``."""
    head = Element(
        "head",
        children=[
            Element("meta", [Attribute("charset", "UTF-8")]),
            Element(
                "meta",
                [
                    Attribute("name", "viewport"),
                    Attribute("content", "width=device-width, initial-scale=1"),
                ],
            ),
            Element(
                "link",
                [Attribute("rel", "stylesheet"), Attribute("href", stylesheet_href)],
            ),
        ],
    )
    html = Element("html", children=[head, Element("body")])
    return Fragment(children=[Doctype("html"), html])


def read_document(config: QuillConfig) -> str:
    """Read the canonical document.

    Raises:
        DocumentError: If the file is missing or unreadable.

    """
    path = config.document_path
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"Cannot read document {path}: {exc}"
        raise DocumentError(msg) from exc


def render_page(config: QuillConfig) -> str:
    """Render the editable page served at ``/``.

    The document text and the browser agent are parsed together as one
    fragment, appended into the shell's body, and every element under the
    body (the body included) is marked editable.

    Raises:
        DocumentError: If the canonical document cannot be read.

    """
    shell = build_page_shell(config.stylesheet_href)
    body = find_descendant(shell, "body")
    assert body is not None

    content = read_document(config) + render_agent_script(config)
    body.children.extend(parse_fragment(content).children)

    mark(body)
    return serialize(shell)


def clean_submission(markup: str) -> str:
    """Strip editability markers from submitted markup and trim it."""
    fragment = parse_fragment(markup)
    unmark(fragment)
    return serialize(fragment).strip()


def save_document(config: QuillConfig, markup: str) -> str:
    """Persist an edit submitted by the browser agent.

    Returns the text written to disk.

    Raises:
        DocumentError: If the canonical document cannot be written.

    """
    text = clean_submission(markup)
    path = config.document_path
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot write document {path}: {exc}"
        raise DocumentError(msg) from exc
    return text
