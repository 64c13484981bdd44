"""
Text location for Word documents.

This module resolves a TextSearchPosition (query, occurrence, case
sensitivity, optional end marker) into exact tree coordinates, even when the
text is fragmented across many <w:r> (run) elements.

Algorithm Note:
    The body is flattened into one logical character stream by
    position_map.build_index, which keeps per-character coordinates. Matching
    runs on that stream, so paragraph boundaries are invisible to search and a
    query may span paragraphs. When the query is not found the locator does
    not fail: it degrades through explicit fallback tiers (see MatchTier) and
    reports which tier produced the result.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from lxml import etree

from .constants import FIRST_TEXT_ANCHOR_LENGTH, LOG_PREVIEW_CHARS, PARTIAL_PREFIX_LENGTH, w
from .errors import DocumentNotFoundError, InvalidInputError, InvalidRangeError
from .models.change import TextSearchPosition
from .position_map import IndexEntry, PositionIndex, build_index
from .tree import append_block, iter_paragraphs, iter_runs, make_run

logger = logging.getLogger(__name__)


class MatchTier(Enum):
    """Which strategy produced a SearchResult.

    Attributes:
        EXACT: The query (and end query) matched as requested
        PARTIAL_PREFIX: Only the first few characters of the query matched
        FIRST_NON_BLANK: Anchored at the start of the first non-blank text
        STRUCTURAL: Anchored at offset 0 of the first paragraph's first run
    """

    EXACT = "exact"
    PARTIAL_PREFIX = "partial_prefix"
    FIRST_NON_BLANK = "first_non_blank"
    STRUCTURAL = "structural"

    @property
    def is_fallback(self) -> bool:
        return self is not MatchTier.EXACT


@dataclass(frozen=True)
class RunCoordinate:
    """A position inside a run.

    Attributes:
        run: The w:r element
        run_offset: Offset within the run's concatenated w:t text
        leaf: The w:t element the offset falls in (None for runs without text)
        leaf_offset: Offset within the leaf's text
    """

    run: etree._Element
    run_offset: int
    leaf: etree._Element | None = None
    leaf_offset: int = 0

    @classmethod
    def at(cls, entry: IndexEntry) -> "RunCoordinate":
        """Coordinate immediately before the character of entry."""
        return cls(entry.run, entry.run_offset, entry.leaf, entry.leaf_offset)

    @classmethod
    def after(cls, entry: IndexEntry) -> "RunCoordinate":
        """Coordinate immediately after the character of entry."""
        return cls(entry.run, entry.run_offset + 1, entry.leaf, entry.leaf_offset + 1)


@dataclass
class SearchResult:
    """A located range, end exclusive.

    Attributes:
        start_container: Paragraph holding the start of the range
        end_container: Paragraph holding the end of the range
        start: Coordinate of the first matched character
        end: Coordinate just past the last matched character
        matched_text: Text of the logical stream inside the range
        tier: Strategy that produced the result
        start_offset: Logical stream offset of the start
        end_offset: Logical stream offset of the end (exclusive)
    """

    start_container: etree._Element
    end_container: etree._Element
    start: RunCoordinate
    end: RunCoordinate
    matched_text: str
    tier: MatchTier
    start_offset: int = 0
    end_offset: int = 0

    @property
    def is_empty(self) -> bool:
        """Whether the range is a bare position (start and end coincide)."""
        return self.start.run is self.end.run and self.start.run_offset == self.end.run_offset

    @property
    def spans_paragraphs(self) -> bool:
        return self.start_container is not self.end_container


def fold_case(text: str) -> str:
    """Lowercase text one character at a time, keeping its length.

    Characters whose lowercase form is longer than one character (e.g. "İ")
    are kept as-is so that offsets in the folded text match the original.
    """
    folded = []
    for char in text:
        lower = char.lower()
        folded.append(lower if len(lower) == 1 else char)
    return "".join(folded)


def find_occurrence(haystack: str, needle: str, occurrence: int) -> int:
    """Offset of the Nth non-overlapping occurrence of needle, or -1.

    Example:
        >>> find_occurrence("aaaa", "aa", 2)
        2
    """
    if not needle:
        return -1
    index = -1
    start = 0
    for _ in range(occurrence):
        index = haystack.find(needle, start)
        if index == -1:
            return -1
        start = index + len(needle)
    return index


class TextLocator:
    """Resolves search positions against a document body.

    Tiers are tried in order and the first success wins:

    1. Exact: the Nth occurrence of the query; with an end query, from the
       start of that occurrence to the end of the Mth occurrence of the end
       query.
    2. Partial prefix: for queries longer than five characters, the first
       occurrence of their first five characters, extended to the query's
       length.
    3. First non-blank: the first text leaf that is not all whitespace, up to
       ten characters of it.
    4. Structural: offset 0 of the first run of the first paragraph, creating
       the run or paragraph when missing.

    Only tier 4 mutates the tree, and only to create an anchor.
    """

    def locate(self, body: etree._Element | None, position: TextSearchPosition) -> SearchResult:
        """Locate position in body.

        Args:
            body: The w:body element
            position: What to look for

        Returns:
            SearchResult whose containers are attached paragraphs

        Raises:
            InvalidInputError: If the query is empty or an occurrence is not positive
            DocumentNotFoundError: If body is None
            InvalidRangeError: If the end query resolves at or before the start
        """
        if body is None:
            raise DocumentNotFoundError("<document>", "document has no body")
        if position is None or not position.search_text:
            raise InvalidInputError("search_text")
        if position.occurrence < 1 or position.end_occurrence < 1:
            raise InvalidInputError("occurrence", "occurrence must be >= 1")

        index = build_index(body)
        logger.debug(
            "Locating %r (occurrence %d, case_sensitive=%s, end=%r) in %d characters",
            position.search_text,
            position.occurrence,
            position.case_sensitive,
            position.end_search_text,
            len(index),
        )

        result = self._exact(index, position)
        if result is not None:
            logger.debug("Exact match at [%d, %d)", result.start_offset, result.end_offset)
            return result

        logger.info(
            "Text %r not found (occurrence %d); document starts with %r",
            position.search_text,
            position.occurrence,
            index.text[:LOG_PREVIEW_CHARS],
        )

        result = self._partial_prefix(index, position)
        if result is None:
            result = self._first_non_blank(index)
        if result is None:
            result = self._structural(body)
        logger.info(
            "Falling back to %s anchor at [%d, %d): %r",
            result.tier.value,
            result.start_offset,
            result.end_offset,
            result.matched_text,
        )
        return result

    def _exact(self, index: PositionIndex, position: TextSearchPosition) -> SearchResult | None:
        stream = _prepare(index.text, position.case_sensitive)
        query = _prepare(position.search_text, position.case_sensitive)

        start = find_occurrence(stream, query, position.occurrence)
        if start == -1:
            return None

        if position.end_search_text is None:
            end = start + len(query)
        else:
            end_query = _prepare(position.end_search_text, position.case_sensitive)
            end_start = find_occurrence(stream, end_query, position.end_occurrence)
            if end_start == -1:
                logger.info(
                    "End text %r not found (occurrence %d)",
                    position.end_search_text,
                    position.end_occurrence,
                )
                return None
            end = end_start + len(end_query)
            if end <= start:
                raise InvalidRangeError(
                    start, end, position.search_text, position.end_search_text
                )

        return _range_result(index, start, end, MatchTier.EXACT)

    def _partial_prefix(
        self, index: PositionIndex, position: TextSearchPosition
    ) -> SearchResult | None:
        if len(position.search_text) <= PARTIAL_PREFIX_LENGTH:
            return None
        stream = _prepare(index.text, position.case_sensitive)
        prefix = _prepare(position.search_text[:PARTIAL_PREFIX_LENGTH], position.case_sensitive)
        start = stream.find(prefix)
        if start == -1:
            logger.debug("Prefix %r not found", prefix)
            return None
        end = min(start + len(position.search_text), len(stream))
        return _range_result(index, start, end, MatchTier.PARTIAL_PREFIX)

    def _first_non_blank(self, index: PositionIndex) -> SearchResult | None:
        for leaf in index.text_leaves:
            text = leaf.text or ""
            if not text.strip():
                continue
            start = next(
                entry.offset
                for entry in index.entries
                if entry.leaf is leaf and entry.leaf_offset == 0
            )
            end = start + min(FIRST_TEXT_ANCHOR_LENGTH, len(text))
            return _range_result(index, start, end, MatchTier.FIRST_NON_BLANK)
        logger.debug("Document has no non-blank text")
        return None

    def _structural(self, body: etree._Element) -> SearchResult:
        paragraph = next(iter_paragraphs(body), None)
        if paragraph is None:
            paragraph = etree.Element(w("p"))
            append_block(body, paragraph)
            logger.debug("Created an empty paragraph as anchor")

        run = next(iter_runs(paragraph), None)
        if run is None:
            run = make_run("")
            paragraph.append(run)
            logger.debug("Created an empty run as anchor")

        leaf = run.find(w("t"))
        coordinate = RunCoordinate(run, 0, leaf, 0)
        return SearchResult(
            start_container=paragraph,
            end_container=paragraph,
            start=coordinate,
            end=coordinate,
            matched_text="",
            tier=MatchTier.STRUCTURAL,
        )


def _prepare(text: str, case_sensitive: bool) -> str:
    return text if case_sensitive else fold_case(text)


def _range_result(index: PositionIndex, start: int, end: int, tier: MatchTier) -> SearchResult:
    first = index.entry_at(start)
    last = index.entry_at(end - 1)
    return SearchResult(
        start_container=first.paragraph,
        end_container=last.paragraph,
        start=RunCoordinate.at(first),
        end=RunCoordinate.after(last),
        matched_text=index.text[start:end],
        tier=tier,
        start_offset=start,
        end_offset=end,
    )
