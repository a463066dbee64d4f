"""Editability marker — toggles ``contenteditable`` across an element tree.

``mark`` runs over every tree served to a browser, ``unmark`` over every
tree persisted to disk.  Both mutate in place and return nothing.

The marker is the exact pair ``contenteditable="true"``.  An author's own
``contenteditable`` with any other value is document content and is never
touched.
"""

from __future__ import annotations

from quill.document.tree import Attribute, Element, Fragment, Node, iter_elements

EDITABLE_ATTR = "contenteditable"
EDITABLE_VALUE = "true"

MARKER = Attribute(EDITABLE_ATTR, EDITABLE_VALUE)


def is_marked(element: Element) -> bool:
    """Whether *element* carries the editability marker."""
    return MARKER in element.attrs


def mark(node: Fragment | Node) -> None:
    """Append the marker to every element reachable from *node*.

    An element that already carries the marker is left alone, so the
    marker never appears twice on one node.
    """
    for element in iter_elements(node):
        if not is_marked(element):
            element.attrs.append(MARKER)


def unmark(node: Fragment | Node) -> None:
    """Remove one marker occurrence from every element reachable from *node*.

    Elements without the marker are unchanged.
    """
    for element in iter_elements(node):
        if is_marked(element):
            element.attrs.remove(MARKER)
