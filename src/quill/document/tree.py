"""Element tree — a parser-independent model of HTML markup.

Quill never hands parser objects to the rest of the system.  Markup is
parsed as an HTML5 fragment by html5lib (the same tree-construction rules
browsers use, so implied end tags and stray markup resolve the way the
page was displayed) and its token stream is folded into the small
recursive sum type below, which the marker, page renderer, and tests can
walk without knowing anything about html5lib.

Node kinds:

- ``Element`` — tag, ordered attributes, ordered children
- ``Text`` — character data, whitespace kept exactly as written
- ``Comment`` — ``<!-- ... -->``
- ``Doctype`` — ``<!DOCTYPE ...>`` (page shell only; fragments never carry one)
- ``Fragment`` — root container; children but no attributes

Serialization follows the HTML serializer rules browsers use for
``innerHTML``: void elements have no end tag, ``script``/``style`` content
is written verbatim, and text/attribute values escape ``&``, ``<``, ``>``,
``"`` and U+00A0 as appropriate.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field

import html5lib
from html5lib.constants import prefixes

VOID_ELEMENTS = frozenset({
    "area", "base", "basefont", "bgsound", "br", "col", "embed", "frame",
    "hr", "img", "input", "keygen", "link", "meta", "param", "source",
    "track", "wbr",
})

RAW_TEXT_ELEMENTS = frozenset({
    "iframe", "noembed", "noframes", "plaintext", "script", "style", "xmp",
})


@dataclass(frozen=True, slots=True)
class Attribute:
    """A single ``name="value"`` pair on an element."""

    name: str
    value: str = ""


@dataclass(slots=True)
class Element:
    """An element node.

    Attributes:
        tag: Lowercase tag name.
        attrs: Attributes in source order.
        children: Child nodes in source order.

    """

    tag: str
    attrs: list[Attribute] = field(default_factory=list)
    children: list[Node] = field(default_factory=list)


@dataclass(slots=True)
class Text:
    data: str


@dataclass(slots=True)
class Comment:
    data: str


@dataclass(slots=True)
class Doctype:
    name: str = "html"


@dataclass(slots=True)
class Fragment:
    """Root container for a parsed fragment or a constructed page."""

    children: list[Node] = field(default_factory=list)


type Node = Element | Text | Comment | Doctype


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def parse_fragment(markup: str) -> Fragment:
    """Parse *markup* as the contents of a ``<body>``-level container.

    Parsing is permissive: malformed markup produces the same best-effort
    tree a browser would build rather than an error.  Document-level tags
    (``<!DOCTYPE>``, ``<html>``, ``<head>``, ``<body>``) are dropped, as
    in any fragment parse.
    """
    root = html5lib.parseFragment(markup, treebuilder="etree", namespaceHTMLElements=False)

    fragment = Fragment()
    stack: list[Fragment | Element] = [fragment]
    for token in html5lib.getTreeWalker("etree")(root):
        kind = token["type"]
        parent = stack[-1]
        if kind in ("StartTag", "EmptyTag"):
            element = Element(token["name"], _attributes(token["data"]))
            parent.children.append(element)
            if kind == "StartTag":
                stack.append(element)
        elif kind == "EndTag":
            stack.pop()
        elif kind in ("Characters", "SpaceCharacters"):
            _append_text(parent, token["data"])
        elif kind == "Comment":
            parent.children.append(Comment(token["data"]))
    return fragment


def _attributes(data: Mapping[tuple[str | None, str], str]) -> list[Attribute]:
    attrs: list[Attribute] = []
    for (namespace, name), value in data.items():
        prefix = prefixes.get(namespace) if namespace else None
        if prefix is not None and prefix != name:
            # Foreign attributes such as xlink:href keep their prefix.
            name = f"{prefix}:{name}"
        attrs.append(Attribute(name, value))
    return attrs


def _append_text(parent: Fragment | Element, data: str) -> None:
    # The walker splits runs of text at whitespace boundaries.
    if parent.children and isinstance(parent.children[-1], Text):
        parent.children[-1].data += data
    else:
        parent.children.append(Text(data))


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def serialize(node: Fragment | Node) -> str:
    """Serialize a node (or a Fragment's children) to HTML text."""
    parts: list[str] = []
    _write(node, parts, parent_tag=None)
    return "".join(parts)


def _write(node: Fragment | Node, parts: list[str], parent_tag: str | None) -> None:
    if isinstance(node, Fragment):
        for child in node.children:
            _write(child, parts, parent_tag=None)
    elif isinstance(node, Element):
        parts.append("<" + node.tag)
        for attr in node.attrs:
            parts.append(f' {attr.name}="{escape_attribute(attr.value)}"')
        parts.append(">")
        if node.tag in VOID_ELEMENTS:
            return
        for child in node.children:
            _write(child, parts, parent_tag=node.tag)
        parts.append(f"</{node.tag}>")
    elif isinstance(node, Text):
        if parent_tag in RAW_TEXT_ELEMENTS:
            parts.append(node.data)
        else:
            parts.append(escape_text(node.data))
    elif isinstance(node, Comment):
        parts.append(f"<!--{node.data}-->")
    elif isinstance(node, Doctype):
        parts.append(f"<!DOCTYPE {node.name}>")


def escape_text(data: str) -> str:
    return (
        data.replace("&", "&amp;")
        .replace("\xa0", "&nbsp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
    )


def escape_attribute(value: str) -> str:
    return (
        value.replace("&", "&amp;")
        .replace("\xa0", "&nbsp;")
        .replace('"', "&quot;")
    )


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------


def find_descendant(node: Fragment | Node, tag: str) -> Element | None:
    """Return the first descendant element named *tag* (depth-first, pre-order)."""
    for child in getattr(node, "children", ()):
        if isinstance(child, Element):
            if child.tag == tag:
                return child
            found = find_descendant(child, tag)
            if found is not None:
                return found
    return None


def iter_elements(node: Fragment | Node) -> Iterator[Element]:
    """Yield every element reachable from *node*, *node* itself included."""
    if isinstance(node, Element):
        yield node
    for child in getattr(node, "children", ()):
        yield from iter_elements(child)
