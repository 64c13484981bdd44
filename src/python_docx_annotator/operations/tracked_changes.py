"""
TrackedChangeOperations class for suggesting replacements as tracked changes.

A suggestion replaces the located text with a w:del holding the old runs and
a w:ins holding the new text. Both carry the same revision id, author and
date, so Word presents them as one replacement.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..constants import w
from ..errors import InvalidInputError
from ..models.tracked_change import TrackedChange, collect_tracked_changes
from ..results import ChangeResult
from ..splicer import TreeSplicer
from ..tree import owning_paragraph, remove_if_empty_wrapper

if TYPE_CHECKING:
    from ..document import Document
    from ..models.change import TextSearchPosition

logger = logging.getLogger(__name__)


class TrackedChangeOperations:
    """Handles tracked-change suggestions.

    Example:
        >>> doc = Document("contract.docx")
        >>> doc.add_suggestion(TextSearchPosition("30 days"), "45 days")
        >>> doc.save()
    """

    def __init__(self, document: Document) -> None:
        """Initialize TrackedChangeOperations with a Document reference.

        Args:
            document: The Document instance to operate on
        """
        self._document = document

    def all(self) -> list[TrackedChange]:
        """Get every w:ins / w:del revision in the body, in document order."""
        return collect_tracked_changes(self._document.body)

    def existing_revision_ids(self) -> list[str]:
        return [change.id for change in self.all()]

    def add(self, position: TextSearchPosition, text: str) -> ChangeResult:
        """Replace the text found at position with text, as a tracked change.

        Tracking is enabled on the document first. The matched runs are
        replaced by a w:del holding copies of them (each keeping its own
        formatting) followed by a w:ins holding text in the formatting of the
        first matched run. An empty replacement produces only the deletion; a
        bare position (nothing matched) produces only the insertion.

        Args:
            position: Where the replacement applies
            text: Replacement text, may be empty

        Returns:
            ChangeResult with the shared revision id

        Raises:
            InvalidInputError: If text is None
            TreeConsistencyError: If a cross-paragraph range cannot be replaced;
                the tree is left unchanged
        """
        if text is None:
            raise InvalidInputError("text", "'text' cannot be null")

        doc = self._document
        found = doc.locate(position)
        spliced = TreeSplicer(doc.body).materialize_range(found.start, found.end, remove_inner=True)
        doc.tracking.enable()

        revision_id = doc.session.next_revision_id()
        timestamp = doc.session.timestamp()
        generator = doc.xml_generator

        records = []
        if not spliced.is_empty:
            records.append(generator.create_deletion(spliced.content_runs, revision_id, timestamp))
        if text:
            anchor_run = spliced.matched[0] if spliced.matched else found.start.run
            records.append(
                generator.create_insertion(text, revision_id, timestamp, anchor_run.find(w("rPr")))
            )

        if records:
            spliced.start_point.insert(*records)
        for run in spliced.matched:
            parent = run.getparent()
            if parent is None:
                continue
            paragraph = owning_paragraph(run)
            parent.remove(run)
            remove_if_empty_wrapper(parent, paragraph)

        logger.debug(
            "Suggested %r -> %r as %s (%s, %d elements removed)",
            found.matched_text,
            text,
            revision_id,
            found.tier.value,
            spliced.removed_count,
        )
        return ChangeResult(
            success=True,
            change_type="suggestion",
            message=f"Replaced {found.matched_text!r} with {text!r} ({revision_id})",
            tier=found.tier,
            matched_text=found.matched_text,
            record_id=revision_id,
        )
