"""
Document model classes for python_docx_annotator.

These classes describe change requests and wrap the OOXML elements this
package reads back.
"""

from python_docx_annotator.models.change import Change, ChangeType, TextSearchPosition
from python_docx_annotator.models.comment import Comment
from python_docx_annotator.models.paragraph import Paragraph
from python_docx_annotator.models.tracked_change import RevisionKind, TrackedChange

__all__ = [
    "Change",
    "ChangeType",
    "TextSearchPosition",
    "Comment",
    "Paragraph",
    "RevisionKind",
    "TrackedChange",
]
