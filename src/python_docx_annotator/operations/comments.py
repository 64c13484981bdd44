"""
CommentOperations class for reading and adding comments.

A comment is anchored by three markers in the document body: a
w:commentRangeStart before the located text, a w:commentRangeEnd after it,
and a run holding the w:commentReference. The comment itself is a w:comment
record appended to word/comments.xml.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from lxml import etree

from ..constants import COMMENTS_PART, NSMAP_COMMENTS, w
from ..content_types import ContentTypes
from ..errors import InvalidInputError
from ..models.comment import Comment
from ..relationships import RelationshipTypes
from ..results import ChangeResult
from ..splicer import TreeSplicer

if TYPE_CHECKING:
    from ..document import Document
    from ..models.change import TextSearchPosition

logger = logging.getLogger(__name__)


class CommentOperations:
    """Handles comment reading and adding.

    Example:
        >>> # Usually accessed through Document
        >>> doc = Document("contract.docx")
        >>> doc.add_comment(TextSearchPosition("Section 2.1"), "Please review")
        >>> for comment in doc.comments:
        ...     print(f"{comment.author}: {comment.text}")
    """

    def __init__(self, document: Document) -> None:
        """Initialize CommentOperations with a Document reference.

        Args:
            document: The Document instance to operate on
        """
        self._document = document

    def all(self) -> list[Comment]:
        """Get all comments, with the text each one is anchored on.

        Returns:
            Comments in the order they appear in comments.xml
        """
        root = self._document.get_part(self._comments_part_name())
        if root is None:
            return []
        marked = self._marked_texts()
        return [
            Comment(element, marked.get(element.get(w("id"), "")))
            for element in root.iter(w("comment"))
        ]

    def add(self, position: TextSearchPosition, text: str) -> ChangeResult:
        """Attach a comment to the text found at position.

        When the text is not found, the locator's fallback tiers still pick an
        anchor, so a comment is always added; the result reports the tier used.

        Args:
            position: Where to anchor the comment
            text: Comment body (newlines start new paragraphs)

        Returns:
            ChangeResult with the new comment id

        Raises:
            InvalidInputError: If text is empty
        """
        if not text:
            raise InvalidInputError("text")

        doc = self._document
        found = doc.locate(position)
        comments = self._load_or_create_comments()
        existing_ids = [c.get(w("id"), "") for c in comments.iter(w("comment"))]
        comment_id = doc.session.next_comment_id(existing_ids)

        self._insert_comment_markers(found, comment_id)
        comment = doc.xml_generator.create_comment(comment_id, text, doc.session.timestamp())
        comments.append(comment)

        logger.debug(
            "Added comment %s on %r (%s)", comment_id, found.matched_text, found.tier.value
        )
        return ChangeResult(
            success=True,
            change_type="comment",
            message=f"Comment {comment_id} added on {found.matched_text!r}",
            tier=found.tier,
            matched_text=found.matched_text,
            record_id=comment_id,
        )

    def _insert_comment_markers(self, found, comment_id: str) -> None:
        """Place range start/end markers and the reference run around the match.

        Markers are siblings of the matched runs, so a match inside a
        hyperlink or an existing insertion gets its markers inside that
        wrapper too.
        """
        generator = self._document.xml_generator
        start_marker = generator.create_range_start(comment_id)
        end_marker = generator.create_range_end(comment_id)
        reference = generator.create_reference_run(comment_id)

        spliced = TreeSplicer(self._document.body).materialize_range(found.start, found.end)
        if spliced.is_empty:
            spliced.start_point.insert(start_marker, end_marker, reference)
            return
        spliced.start_point.insert(start_marker)
        spliced.end_point.insert(end_marker, reference)

    def _comments_part_name(self) -> str:
        return self._document.related_part_name(RelationshipTypes.COMMENTS) or COMMENTS_PART

    def _load_or_create_comments(self) -> etree._Element:
        return self._document.ensure_part(
            self._comments_part_name(),
            lambda: etree.Element(w("comments"), nsmap=NSMAP_COMMENTS),
            RelationshipTypes.COMMENTS,
            "comments.xml",
            ContentTypes.COMMENTS,
        )

    def _marked_texts(self) -> dict[str, str]:
        """Map comment id to the body text between its range markers."""
        body = self._document.body
        open_ranges: dict[str, list[str]] = {}
        marked: dict[str, str] = {}

        for element in body.iter(w("commentRangeStart"), w("commentRangeEnd"), w("t")):
            if element.tag == w("commentRangeStart"):
                open_ranges[element.get(w("id"), "")] = []
            elif element.tag == w("commentRangeEnd"):
                comment_id = element.get(w("id"), "")
                parts = open_ranges.pop(comment_id, None)
                if parts is not None:
                    marked[comment_id] = "".join(parts)
            else:
                for parts in open_ranges.values():
                    parts.append(element.text or "")
        return marked
