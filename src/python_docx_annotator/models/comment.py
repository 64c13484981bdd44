"""
Comment wrapper class for document comments.

Provides read access to w:comment records in word/comments.xml, together with
the document text each comment is anchored on.
"""

from datetime import datetime

from lxml import etree

from python_docx_annotator.constants import WORD_NAMESPACE


class Comment:
    """Wrapper around a w:comment element.

    Example:
        >>> for comment in doc.comments:
        ...     print(f"{comment.id} {comment.author}: {comment.text}")
        ...     if comment.marked_text:
        ...         print(f"  On: '{comment.marked_text}'")
    """

    def __init__(self, element: etree._Element, marked_text: str | None = None):
        """Initialize Comment wrapper.

        Args:
            element: The w:comment XML element
            marked_text: Document text between the comment's range markers, if known
        """
        if element.tag != f"{{{WORD_NAMESPACE}}}comment":
            raise ValueError(f"Expected w:comment element, got {element.tag}")
        self._element = element
        self._marked_text = marked_text

    @property
    def element(self) -> etree._Element:
        """Get the underlying XML element."""
        return self._element

    @property
    def id(self) -> str:
        return self._element.get(f"{{{WORD_NAMESPACE}}}id", "")

    @property
    def author(self) -> str:
        return self._element.get(f"{{{WORD_NAMESPACE}}}author", "")

    @property
    def initials(self) -> str | None:
        return self._element.get(f"{{{WORD_NAMESPACE}}}initials")

    @property
    def date(self) -> datetime | None:
        """Get the comment date/time.

        Returns:
            datetime object or None if not present/parseable
        """
        return parse_ooxml_date(self._element.get(f"{{{WORD_NAMESPACE}}}date"))

    @property
    def text(self) -> str:
        """Get the comment text content.

        Paragraphs of a multi-paragraph comment are joined with newlines.
        """
        paragraphs = self._element.findall(f"{{{WORD_NAMESPACE}}}p")
        return "\n".join(
            "".join(t.text or "" for t in p.iter(f"{{{WORD_NAMESPACE}}}t")) for p in paragraphs
        )

    @property
    def marked_text(self) -> str | None:
        """Get the document text this comment is anchored on.

        Empty for position-only comments; None when unknown.
        """
        return self._marked_text

    def to_dict(self) -> dict[str, str | None]:
        date = self._element.get(f"{{{WORD_NAMESPACE}}}date")
        return {
            "id": self.id,
            "author": self.author,
            "initials": self.initials,
            "date": date,
            "text": self.text,
            "markedText": self.marked_text,
        }

    def __repr__(self) -> str:
        text_preview = self.text[:30] + "..." if len(self.text) > 30 else self.text
        return f"<Comment id={self.id} author={self.author!r} text={text_preview!r}>"


def parse_ooxml_date(value: str | None) -> datetime | None:
    """Parse a w:date attribute (ISO 8601, usually with a trailing Z)."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
