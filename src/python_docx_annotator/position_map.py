"""
Position mapping between the logical text stream and the document tree.

Word splits visible text across many w:t leaves. build_index flattens the body
into one string and records, for every character, the leaf, run and paragraph
it came from, so that a substring match can be translated back into exact tree
coordinates.
"""

import logging
from dataclasses import dataclass, field

from lxml import etree

from .constants import w
from .tree import LeafKind, in_fallback, leaf_kind, owning_paragraph

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndexEntry:
    """Tree coordinates of one character of the logical stream.

    Attributes:
        offset: Position in the logical stream
        leaf: The w:t element holding the character
        leaf_offset: Position within the leaf's text
        run: The w:r owning the leaf
        run_offset: Position within the run's concatenated w:t text
        paragraph: The w:p owning the run
    """

    offset: int
    leaf: etree._Element
    leaf_offset: int
    run: etree._Element
    run_offset: int
    paragraph: etree._Element


@dataclass
class PositionIndex:
    """The logical stream of a body plus per-character coordinates.

    Attributes:
        text: Concatenation of every w:t in document order, no separators
        entries: One IndexEntry per character of text
        text_leaves: Every visited w:t leaf in document order, empty ones included
    """

    text: str = ""
    entries: list[IndexEntry] = field(default_factory=list)
    text_leaves: list[etree._Element] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.text)

    def entry_at(self, offset: int) -> IndexEntry:
        """Coordinates of the character at offset.

        Raises:
            IndexError: If offset is outside the stream
        """
        return self.entries[offset]


def build_index(body: etree._Element) -> PositionIndex:
    """Build the position index of a document body.

    Runs are visited in document order: body children in sequence, tables row
    by row and cell by cell, runs inside inline wrappers where they occur.
    A run belongs to its nearest enclosing paragraph, so text-box runs belong
    to the text-box paragraph. Text in an mc:Fallback repeats its mc:Choice and
    is skipped. Only w:t leaves contribute characters, and no separator is
    added between runs or paragraphs.

    Args:
        body: The w:body element (or any block container)

    Returns:
        PositionIndex whose text length equals its number of entries
    """
    chunks: list[str] = []
    entries: list[IndexEntry] = []
    text_leaves: list[etree._Element] = []
    offset = 0

    for run in body.iter(w("r")):
        paragraph = owning_paragraph(run)
        if paragraph is None or in_fallback(run):
            continue
        run_offset = 0
        for leaf in run:
            if not isinstance(leaf.tag, str) or leaf_kind(leaf) is not LeafKind.TEXT:
                continue
            text_leaves.append(leaf)
            text = leaf.text or ""
            if not text:
                continue
            chunks.append(text)
            for leaf_offset in range(len(text)):
                entries.append(
                    IndexEntry(
                        offset=offset,
                        leaf=leaf,
                        leaf_offset=leaf_offset,
                        run=run,
                        run_offset=run_offset,
                        paragraph=paragraph,
                    )
                )
                offset += 1
                run_offset += 1

    index = PositionIndex(text="".join(chunks), entries=entries, text_leaves=text_leaves)
    logger.debug(
        "Built position index: %d characters across %d text leaves",
        len(index.text),
        len(text_leaves),
    )
    return index
