"""
python_docx_annotator - Attach comments and tracked-change suggestions to Word documents.

Text is addressed by what it says, not by where it sits in the XML: a search
query (with occurrence, case sensitivity and an optional end marker) is
resolved across fragmented runs, and the runs at the match boundaries are
split so the annotation lands on exactly that text.

Example:
    >>> from python_docx_annotator import Document, TextSearchPosition
    >>> doc = Document("contract.docx", author="Legal Review")
    >>> doc.add_comment(TextSearchPosition("governing law"), "Check jurisdiction")
    >>> doc.add_suggestion(TextSearchPosition("30 days"), "45 days")
    >>> doc.save("contract_reviewed.docx")
"""

__version__ = "0.1.0"
__all__ = [
    "Document",
    "apply_changes_to_document",
    "load_changes",
    "AnnotationSession",
    "AuthorIdentity",
    "OOXMLPackage",
    "from_python_docx",
    "to_python_docx",
    "Change",
    "ChangeType",
    "TextSearchPosition",
    "Comment",
    "Paragraph",
    "TrackedChange",
    "RevisionKind",
    "ChangeResult",
    "MatchTier",
    "SearchResult",
    "RunCoordinate",
    "TextLocator",
    "TreeSplicer",
    "PositionIndex",
    "build_index",
    "DocxAnnotatorError",
    "InvalidInputError",
    "DocumentNotFoundError",
    "MalformedChangeError",
    "PersistenceError",
    "TreeConsistencyError",
    "InvalidRangeError",
    "ChangeApplicationError",
]

from .author import AuthorIdentity
from .compat import from_python_docx, to_python_docx
from .document import Document, apply_changes_to_document
from .errors import (
    ChangeApplicationError,
    DocumentNotFoundError,
    DocxAnnotatorError,
    InvalidInputError,
    InvalidRangeError,
    MalformedChangeError,
    PersistenceError,
    TreeConsistencyError,
)
from .models import (
    Change,
    ChangeType,
    Comment,
    Paragraph,
    RevisionKind,
    TextSearchPosition,
    TrackedChange,
)
from .operations.batch import load_changes
from .package import OOXMLPackage
from .position_map import PositionIndex, build_index
from .results import ChangeResult
from .session import AnnotationSession
from .splicer import TreeSplicer
from .text_search import MatchTier, RunCoordinate, SearchResult, TextLocator
