"""Document layer — element tree, editability marker, page rendering."""

from quill.document.marker import EDITABLE_ATTR, is_marked, mark, unmark
from quill.document.page import build_page_shell, render_page, save_document
from quill.document.tree import (
    Attribute,
    Comment,
    Doctype,
    Element,
    Fragment,
    Text,
    find_descendant,
    parse_fragment,
    serialize,
)

__all__ = [
    "EDITABLE_ATTR",
    "Attribute",
    "Comment",
    "Doctype",
    "Element",
    "Fragment",
    "Text",
    "build_page_shell",
    "find_descendant",
    "is_marked",
    "mark",
    "parse_fragment",
    "render_page",
    "save_document",
    "serialize",
    "unmark",
]
