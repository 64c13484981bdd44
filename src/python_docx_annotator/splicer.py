"""
Run splitting and range materialization.

Annotations can only be attached at run boundaries, so before inserting
comment markers or a w:del/w:ins pair the runs at both ends of a located range
are split. Each fragment keeps a copy of the original run's attributes and
w:rPr, so formatting survives the split unchanged.
"""

import copy
import logging
from dataclasses import dataclass, field
from enum import Enum

from lxml import etree

from .constants import w, xml
from .errors import TreeConsistencyError
from .text_search import RunCoordinate
from .tree import (
    LeafKind,
    is_attached,
    leaf_kind,
    owning_paragraph,
    remove_if_empty_wrapper,
    run_leaves,
    run_text,
)

logger = logging.getLogger(__name__)


class Side(Enum):
    BEFORE = "before"
    AFTER = "after"


@dataclass(frozen=True)
class InsertionPoint:
    """A gap between siblings, expressed relative to an anchor element.

    Attributes:
        anchor: Element next to the gap
        side: Whether the gap is before or after the anchor
    """

    anchor: etree._Element
    side: Side

    def insert(self, *elements: etree._Element) -> None:
        """Insert elements into the gap, keeping their order."""
        if self.side is Side.BEFORE:
            for element in elements:
                self.anchor.addprevious(element)
        else:
            for element in reversed(elements):
                self.anchor.addnext(element)


@dataclass
class SplitResult:
    """Outcome of splitting one run.

    Attributes:
        before: Fragment holding the text before the split point, or None
        after: Fragment holding the text from the split point on, or None
        point: The gap between the two fragments
    """

    before: etree._Element | None
    after: etree._Element | None
    point: InsertionPoint


@dataclass
class SplicedRange:
    """A located range materialized as whole runs.

    Attributes:
        before: Fragment of the start run preceding the range, or None
        matched: Runs covering exactly the range, in document order
        after: Fragment of the end run following the range, or None
        removed: Elements detached while materializing (inner runs and blocks)
        start_point: Gap immediately before the range
        end_point: Gap immediately after the range
    """

    before: etree._Element | None
    matched: list[etree._Element]
    after: etree._Element | None
    start_point: InsertionPoint
    end_point: InsertionPoint
    removed: list[etree._Element] = field(default_factory=list)

    @property
    def removed_count(self) -> int:
        return len(self.removed)

    @property
    def content_runs(self) -> list[etree._Element]:
        """Every run whose content lies in the range, in document order."""
        return list(self.matched)

    @property
    def is_empty(self) -> bool:
        return not self.matched


class TreeSplicer:
    """Splits runs and materializes ranges inside one document body.

    Example:
        >>> splicer = TreeSplicer(body)
        >>> spliced = splicer.materialize_range(result.start, result.end)
        >>> spliced.start_point.insert(range_start_marker)
    """

    def __init__(self, body: etree._Element):
        self.body = body

    def split_at(self, coordinate: RunCoordinate) -> SplitResult:
        """Split a run in two at a text offset.

        Text leaves are cut at the offset. Zero-width leaves (tabs, breaks,
        field characters, empty w:t) stay with the character before them, so
        they go to the first fragment when they sit at or before the offset
        and the offset is not 0. A side that ends up with no leaves produces no
        fragment; the run itself then stays in place unchanged.

        Raises:
            TreeConsistencyError: If the run is detached or the offset is out of range
        """
        self._validate(coordinate)
        run = coordinate.run
        offset = coordinate.run_offset

        before_leaves, after_leaves = _partition_leaves(run, offset)
        if not after_leaves:
            return SplitResult(before=run, after=None, point=InsertionPoint(run, Side.AFTER))
        if not before_leaves:
            return SplitResult(before=None, after=run, point=InsertionPoint(run, Side.BEFORE))

        before = _fragment_like(run, before_leaves)
        after = _fragment_like(run, after_leaves)
        run.addprevious(before)
        run.addprevious(after)
        run.getparent().remove(run)
        logger.debug("Split run at offset %d: %r | %r", offset, run_text(before), run_text(after))
        return SplitResult(before=before, after=after, point=InsertionPoint(after, Side.BEFORE))

    def materialize_range(
        self, start: RunCoordinate, end: RunCoordinate, remove_inner: bool = False
    ) -> SplicedRange:
        """Split the runs at both ends of [start, end) so the range is whole runs.

        Args:
            start: Coordinate of the first character in the range
            end: Coordinate just past the last character (exclusive)
            remove_inner: Detach every run strictly between the start and end
                runs; across paragraphs, also every block strictly between the
                two paragraphs

        Returns:
            SplicedRange describing fragments, matched runs and insertion gaps

        Raises:
            TreeConsistencyError: If a coordinate is stale, the end precedes the
                start, or (with remove_inner) the end paragraph cannot be
                reached from the start paragraph. Raised before any mutation.
        """
        self._validate(start)
        self._validate(end)

        if start.run is end.run:
            return self._materialize_within_run(start, end)

        runs = self._body_runs()
        start_index = _position_of(runs, start.run)
        end_index = _position_of(runs, end.run)
        if end_index < start_index:
            raise TreeConsistencyError("Range end precedes its start in document order")

        start_paragraph = owning_paragraph(start.run)
        end_paragraph = owning_paragraph(end.run)
        blocks: list[etree._Element] = []
        if remove_inner and start_paragraph is not end_paragraph:
            blocks = _blocks_between(start_paragraph, end_paragraph)

        # Runs already inside a tracked deletion are left as they are
        inner = [run for run in runs[start_index + 1 : end_index] if not _is_deleted_run(run)]
        loose = [run for run in inner if not any(is_attached(run, b) for b in blocks)]

        start_split = self.split_at(start)
        end_split = self.split_at(end)

        matched = [r for r in (start_split.after, *inner, end_split.before) if r is not None]
        removed: list[etree._Element] = []
        if remove_inner:
            for run in loose:
                parent = run.getparent()
                paragraph = owning_paragraph(run)
                parent.remove(run)
                removed.append(run)
                remove_if_empty_wrapper(parent, paragraph)
            for block in blocks:
                block.getparent().remove(block)
                removed.append(block)
            logger.debug("Removed %d inner runs and %d blocks", len(loose), len(blocks))

        return SplicedRange(
            before=start_split.before,
            matched=matched,
            after=end_split.after,
            start_point=start_split.point,
            end_point=end_split.point,
            removed=removed,
        )

    def _materialize_within_run(self, start: RunCoordinate, end: RunCoordinate) -> SplicedRange:
        if end.run_offset < start.run_offset:
            raise TreeConsistencyError("Range end precedes its start within one run")

        first = self.split_at(start)
        if end.run_offset == start.run_offset or first.after is None:
            return SplicedRange(
                before=first.before,
                matched=[],
                after=first.after,
                start_point=first.point,
                end_point=first.point,
            )

        # The second split may replace first.after, so anchor on its result
        second = self.split_at(RunCoordinate(first.after, end.run_offset - start.run_offset))
        matched = second.before
        return SplicedRange(
            before=first.before,
            matched=[matched],
            after=second.after,
            start_point=InsertionPoint(matched, Side.BEFORE),
            end_point=second.point,
        )

    def _validate(self, coordinate: RunCoordinate) -> None:
        run = coordinate.run
        if run is None or run.tag != w("r"):
            raise TreeConsistencyError("Coordinate does not reference a w:r run")
        if not is_attached(run, self.body):
            raise TreeConsistencyError("Run is no longer attached to the document body")
        length = len(run_text(run))
        if not 0 <= coordinate.run_offset <= length:
            raise TreeConsistencyError(
                f"Offset {coordinate.run_offset} outside run text of length {length}"
            )

    def _body_runs(self) -> list[etree._Element]:
        return [run for run in self.body.iter(w("r")) if owning_paragraph(run) is not None]


def _partition_leaves(
    run: etree._Element, offset: int
) -> tuple[list[etree._Element], list[etree._Element]]:
    """Distribute a run's leaves around a text offset, cutting the leaf it falls in."""
    before: list[etree._Element] = []
    after: list[etree._Element] = []
    position = 0

    for leaf in run_leaves(run):
        text = (leaf.text or "") if leaf_kind(leaf) is LeafKind.TEXT else ""
        if not text:
            if offset > 0 and position <= offset:
                before.append(leaf)
            else:
                after.append(leaf)
        elif position + len(text) <= offset:
            before.append(leaf)
        elif position >= offset:
            after.append(leaf)
        else:
            cut = offset - position
            head = copy.deepcopy(leaf)
            tail = copy.deepcopy(leaf)
            head.text = text[:cut]
            tail.text = text[cut:]
            head.set(xml("space"), "preserve")
            tail.set(xml("space"), "preserve")
            before.append(head)
            after.append(tail)
        position += len(text)

    return before, after


def _fragment_like(run: etree._Element, leaves: list[etree._Element]) -> etree._Element:
    """New run with run's attributes, a copy of its w:rPr and the given leaves."""
    fragment = etree.Element(w("r"), attrib=dict(run.attrib))
    rpr = run.find(w("rPr"))
    if rpr is not None:
        fragment.append(copy.deepcopy(rpr))
    for leaf in leaves:
        fragment.append(copy.deepcopy(leaf) if leaf.getparent() is run else leaf)
    return fragment


def _position_of(runs: list[etree._Element], run: etree._Element) -> int:
    for i, candidate in enumerate(runs):
        if candidate is run:
            return i
    raise TreeConsistencyError("Run is not part of the document body")


def _is_deleted_run(run: etree._Element) -> bool:
    parent = run.getparent()
    while parent is not None and parent.tag != w("p"):
        if parent.tag in (w("del"), w("moveFrom")):
            return True
        parent = parent.getparent()
    return False


def _blocks_between(start: etree._Element, end: etree._Element) -> list[etree._Element]:
    """Siblings strictly between two paragraphs, walking forward from start."""
    blocks = []
    for sibling in start.itersiblings():
        if sibling is end:
            return [b for b in blocks if b.tag != w("sectPr")]
        if isinstance(sibling.tag, str):
            blocks.append(sibling)
    raise TreeConsistencyError(
        "End paragraph cannot be reached from the start paragraph by forward traversal"
    )

