"""
TrackedChange model class for representing revisions in Word documents.

Provides read access to tracked change metadata (kind, id, author, date, text)
for w:ins and w:del elements found in the document body.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from lxml import etree

from python_docx_annotator.constants import WORD_NAMESPACE
from python_docx_annotator.models.comment import parse_ooxml_date


class RevisionKind(Enum):
    """Kinds of revision this package writes and reports.

    Attributes:
        INSERTION: Text that was added (w:ins)
        DELETION: Text that was removed (w:del)
    """

    INSERTION = "insertion"
    DELETION = "deletion"


@dataclass
class TrackedChange:
    """A single w:ins or w:del in a Word document.

    Attributes:
        id: The revision ID (w:id attribute value)
        kind: Insertion or deletion
        author: Author who made the change
        date: Timestamp when the change was made
        text: Inserted text (w:t) or deleted text (w:delText)
        element: Reference to the underlying XML element

    Example:
        >>> for change in doc.tracked_changes:
        ...     print(f"{change.id}: {change.kind.value} by {change.author}")
    """

    id: str
    kind: RevisionKind
    author: str
    date: datetime | None
    text: str
    element: etree._Element

    @classmethod
    def from_element(cls, element: etree._Element) -> "TrackedChange":
        """Create a TrackedChange from a w:ins or w:del element.

        Raises:
            ValueError: If the element is neither w:ins nor w:del
        """
        if element.tag == f"{{{WORD_NAMESPACE}}}ins":
            kind = RevisionKind.INSERTION
            text_tag = f"{{{WORD_NAMESPACE}}}t"
        elif element.tag == f"{{{WORD_NAMESPACE}}}del":
            kind = RevisionKind.DELETION
            text_tag = f"{{{WORD_NAMESPACE}}}delText"
        else:
            raise ValueError(f"Expected w:ins or w:del element, got {element.tag}")

        return cls(
            id=element.get(f"{{{WORD_NAMESPACE}}}id", ""),
            kind=kind,
            author=element.get(f"{{{WORD_NAMESPACE}}}author", ""),
            date=parse_ooxml_date(element.get(f"{{{WORD_NAMESPACE}}}date")),
            text="".join(t.text or "" for t in element.iter(text_tag)),
            element=element,
        )

    @property
    def is_insertion(self) -> bool:
        return self.kind == RevisionKind.INSERTION

    @property
    def is_deletion(self) -> bool:
        return self.kind == RevisionKind.DELETION

    def __repr__(self) -> str:
        text_preview = self.text[:30] + "..." if len(self.text) > 30 else self.text
        return (
            f"<TrackedChange id={self.id} kind={self.kind.value} "
            f"author={self.author!r} text={text_preview!r}>"
        )


def collect_tracked_changes(root: etree._Element) -> list[TrackedChange]:
    """All run-level w:ins / w:del revisions under root, in document order.

    Paragraph-mark and table-row revisions (w:ins / w:del inside w:rPr or
    w:trPr) carry no text and are skipped.
    """
    property_tags = {f"{{{WORD_NAMESPACE}}}rPr", f"{{{WORD_NAMESPACE}}}trPr"}
    changes = []
    for element in root.iter(f"{{{WORD_NAMESPACE}}}ins", f"{{{WORD_NAMESPACE}}}del"):
        parent = element.getparent()
        if parent is not None and parent.tag in property_tags:
            continue
        changes.append(TrackedChange.from_element(element))
    return changes
