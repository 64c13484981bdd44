"""
Document tree helpers: leaf classification, ordered traversal and run building.

The body of word/document.xml is an lxml element tree. Text is fragmented
across w:t leaves inside w:r runs, and runs may sit directly in a paragraph or
inside inline wrappers (w:hyperlink, w:ins, w:smartTag, w:fldSimple, inline
w:sdt). Everything here walks that tree in document order without assuming a
flat paragraph/run structure.
"""

import copy
from collections.abc import Iterator
from enum import Enum

from lxml import etree

from .constants import MC_NAMESPACE, w, xml


class LeafKind(Enum):
    """Classification of the children of a w:r run.

    Attributes:
        TEXT: w:t, contributes characters to the logical stream
        DELETED_TEXT: w:delText, text already removed by a revision
        TAB: w:tab
        BREAK: w:br or w:cr
        OTHER: zero-width run content (field chars, drawings, references)
    """

    TEXT = "text"
    DELETED_TEXT = "deleted_text"
    TAB = "tab"
    BREAK = "break"
    OTHER = "other"


_LEAF_KINDS = {
    w("t"): LeafKind.TEXT,
    w("delText"): LeafKind.DELETED_TEXT,
    w("tab"): LeafKind.TAB,
    w("br"): LeafKind.BREAK,
    w("cr"): LeafKind.BREAK,
}

# Block containers whose children are themselves block-level content
_BLOCK_CONTAINERS = {w("tbl"), w("tr"), w("tc"), w("sdt"), w("sdtContent"), w("customXml")}

# Inline containers that may be dropped once a splice empties them
_INLINE_WRAPPERS = {w("hyperlink"), w("ins"), w("smartTag"), w("fldSimple"), w("customXml")}

_MC_FALLBACK = f"{{{MC_NAMESPACE}}}Fallback"


def leaf_kind(element: etree._Element) -> LeafKind:
    """Classify a child of a w:r run."""
    return _LEAF_KINDS.get(element.tag, LeafKind.OTHER)


def is_leaf(element: etree._Element) -> bool:
    """Whether a run child is content (not the w:rPr formatting descriptor)."""
    return isinstance(element.tag, str) and element.tag != w("rPr")


def run_leaves(run: etree._Element) -> list[etree._Element]:
    """Content children of a run, in order, excluding w:rPr."""
    return [child for child in run if is_leaf(child)]


def run_text(run: etree._Element) -> str:
    """Searchable text of a run: the concatenation of its w:t leaves."""
    return "".join(child.text or "" for child in run if child.tag == w("t"))


def iter_paragraphs(container: etree._Element) -> Iterator[etree._Element]:
    """Yield the block-level paragraphs under container in document order.

    Recurses into tables (rows, then cells, then the cell's block content),
    block-level content controls and custom XML wrappers. Paragraphs nested
    inside runs (text boxes) are not yielded here; their runs are reached via
    iter_runs on the nested paragraph itself.
    """
    for child in container:
        if not isinstance(child.tag, str):
            continue
        if child.tag == w("p"):
            yield child
        elif child.tag in _BLOCK_CONTAINERS:
            yield from iter_paragraphs(child)


def iter_runs(paragraph: etree._Element) -> Iterator[etree._Element]:
    """Yield the runs owned by paragraph in document order.

    Runs inside inline wrappers belong to the paragraph; runs belonging to a
    nested paragraph (e.g. inside a text box) belong to that paragraph and are
    skipped.
    """
    for run in paragraph.iter(w("r")):
        if owning_paragraph(run) is paragraph and not in_fallback(run):
            yield run


def owning_paragraph(element: etree._Element) -> etree._Element | None:
    """Nearest w:p ancestor of element, or None."""
    parent = element.getparent()
    while parent is not None:
        if parent.tag == w("p"):
            return parent
        parent = parent.getparent()
    return None


def in_fallback(element: etree._Element) -> bool:
    """Whether element sits in an mc:Fallback, the legacy copy of an mc:Choice."""
    parent = element.getparent()
    while parent is not None:
        if parent.tag == _MC_FALLBACK:
            return True
        parent = parent.getparent()
    return False


def is_attached(element: etree._Element, root: etree._Element) -> bool:
    """Whether element is root or one of its descendants."""
    node = element
    while node is not None:
        if node is root:
            return True
        node = node.getparent()
    return False


def make_text_element(text: str, tag: str = "t") -> etree._Element:
    """Create a w:t (or w:delText) leaf, preserving surrounding whitespace."""
    element = etree.Element(w(tag))
    element.text = text
    if text != text.strip() or text == "":
        element.set(xml("space"), "preserve")
    return element


def make_run(text: str | None = None, rpr: etree._Element | None = None) -> etree._Element:
    """Create a w:r with an optional copy of rpr and an optional w:t.

    Args:
        text: Text for a single w:t leaf; None creates a run without leaves
        rpr: Formatting descriptor to copy onto the new run
    """
    run = etree.Element(w("r"))
    if rpr is not None:
        run.append(copy.deepcopy(rpr))
    if text is not None:
        run.append(make_text_element(text))
    return run


def find_body(root: etree._Element) -> etree._Element | None:
    """Locate w:body under a w:document root."""
    if root.tag == w("body"):
        return root
    return root.find(w("body"))


def append_block(body: etree._Element, block: etree._Element) -> None:
    """Append a block to the body, keeping w:sectPr as the last child."""
    sect_pr = body.find(w("sectPr"))
    if sect_pr is not None:
        sect_pr.addprevious(block)
    else:
        body.append(block)


def remove_if_empty_wrapper(element: etree._Element | None, stop: etree._Element) -> None:
    """Remove inline wrappers left without children, walking up to stop."""
    node = element
    while node is not None and node is not stop and node.tag in _INLINE_WRAPPERS:
        parent = node.getparent()
        if len(node) or parent is None:
            return
        parent.remove(node)
        node = parent
