"""
Operations classes for python_docx_annotator.

Each class takes a Document and implements one family of operations on it.
"""

from python_docx_annotator.operations.batch import BatchOperations
from python_docx_annotator.operations.comments import CommentOperations
from python_docx_annotator.operations.tracked_changes import TrackedChangeOperations
from python_docx_annotator.operations.tracking import TrackingSettings

__all__ = [
    "BatchOperations",
    "CommentOperations",
    "TrackedChangeOperations",
    "TrackingSettings",
]
