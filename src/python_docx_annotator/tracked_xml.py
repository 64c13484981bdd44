"""
XML generation for comments and tracked changes.

TrackedXMLGenerator builds the lxml elements this package inserts: comment
range markers and references, w:comment records, and w:del / w:ins wrappers
with their author, date and revision id.
"""

import copy
import random

from lxml import etree

from .author import AuthorIdentity
from .constants import w
from .constants import w14 as _w14
from .tree import make_run, make_text_element, run_leaves


class TrackedXMLGenerator:
    """Generates OOXML for annotations with author information filled in.

    Args:
        author: Identity stamped on every generated record
    """

    def __init__(self, author: AuthorIdentity) -> None:
        self.author = author

    # ------------------------------------------------------------------
    # Tracked changes
    # ------------------------------------------------------------------

    def create_deletion(
        self, runs: list[etree._Element], revision_id: str, timestamp: str
    ) -> etree._Element:
        """Build a w:del wrapping copies of runs.

        Each copy keeps its own w:rPr; its w:t leaves become w:delText.

        Args:
            runs: Matched runs in document order
            revision_id: Id shared with the paired insertion
            timestamp: w:date value
        """
        deletion = self._revision_element("del", revision_id, timestamp)
        for run in runs:
            deletion.append(self._as_deleted_run(run))
        return deletion

    def create_insertion(
        self,
        text: str,
        revision_id: str,
        timestamp: str,
        rpr: etree._Element | None = None,
    ) -> etree._Element:
        """Build a w:ins wrapping one run of text formatted with rpr."""
        insertion = self._revision_element("ins", revision_id, timestamp)
        insertion.append(make_run(text, rpr))
        return insertion

    def _revision_element(self, tag: str, revision_id: str, timestamp: str) -> etree._Element:
        element = etree.Element(w(tag))
        element.set(w("id"), revision_id)
        element.set(w("author"), self.author.display_name)
        element.set(w("date"), timestamp)
        return element

    @staticmethod
    def _as_deleted_run(run: etree._Element) -> etree._Element:
        deleted = etree.Element(w("r"), attrib=dict(run.attrib))
        rpr = run.find(w("rPr"))
        if rpr is not None:
            deleted.append(copy.deepcopy(rpr))
        for leaf in run_leaves(run):
            if leaf.tag == w("t"):
                deleted.append(make_text_element(leaf.text or "", tag="delText"))
            else:
                deleted.append(copy.deepcopy(leaf))
        return deleted

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    @staticmethod
    def create_range_start(comment_id: str) -> etree._Element:
        marker = etree.Element(w("commentRangeStart"))
        marker.set(w("id"), comment_id)
        return marker

    @staticmethod
    def create_range_end(comment_id: str) -> etree._Element:
        marker = etree.Element(w("commentRangeEnd"))
        marker.set(w("id"), comment_id)
        return marker

    @staticmethod
    def create_reference_run(comment_id: str) -> etree._Element:
        """Build the run holding a w:commentReference, styled as Word does."""
        run = etree.Element(w("r"))
        rpr = etree.SubElement(run, w("rPr"))
        style = etree.SubElement(rpr, w("rStyle"))
        style.set(w("val"), "CommentReference")
        reference = etree.SubElement(run, w("commentReference"))
        reference.set(w("id"), comment_id)
        return run

    def create_comment(self, comment_id: str, text: str, timestamp: str) -> etree._Element:
        """Build a w:comment record with one paragraph per line of text."""
        comment = etree.Element(w("comment"))
        comment.set(w("id"), comment_id)
        comment.set(w("author"), self.author.display_name)
        comment.set(w("date"), timestamp)
        comment.set(w("initials"), self.author.initials)

        for line in text.split("\n"):
            paragraph = etree.SubElement(comment, w("p"))
            paragraph.set(_w14("paraId"), self._generate_para_id())
            paragraph.append(make_run(line))
        return comment

    @staticmethod
    def _generate_para_id() -> str:
        """Generate a w14:paraId (8 hex digits, below 0x80000000)."""
        return f"{random.randint(1, 0x7FFFFFFF):08X}"

    @staticmethod
    def generate_rsid() -> str:
        """Generate a Revision Save ID (8 hex digits)."""
        return f"{random.randint(0, 0xFFFFFFFF):08X}"
