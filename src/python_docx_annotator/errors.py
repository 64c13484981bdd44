"""
Custom exception classes for python_docx_annotator package.

Location failures never surface here: the locator degrades through its
fallback tiers instead. These exceptions cover fatal preconditions that abort
a batch of changes, with enough context (file, change index) to act on.
"""

from typing import Any


class DocxAnnotatorError(Exception):
    """Base exception for all python_docx_annotator errors."""

    pass


class InvalidInputError(DocxAnnotatorError, ValueError):
    """Raised when a required argument is missing or empty.

    Attributes:
        field: Name of the offending argument
    """

    def __init__(self, field: str, message: str | None = None) -> None:
        self.field = field
        super().__init__(message or f"'{field}' cannot be null or empty")


class DocumentNotFoundError(DocxAnnotatorError):
    """Raised when the document container is missing or has no body.

    Attributes:
        source: Description of the document source (path or "<in-memory document>")
        reason: Why the document could not be used
    """

    def __init__(self, source: str, reason: str | None = None) -> None:
        self.source = source
        self.reason = reason
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format an error message naming the source."""
        msg = f"Document not usable: {self.source}"
        if self.reason:
            msg += f" ({self.reason})"
        return msg


class MalformedChangeError(DocxAnnotatorError):
    """Raised when a change entry or change list cannot be interpreted.

    Attributes:
        details: What was wrong with the change
        index: Position of the change in its list (None when not applicable)
    """

    def __init__(self, details: str, index: int | None = None) -> None:
        self.details = details
        self.index = index
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.index is None:
            return f"Malformed change: {self.details}"
        return f"Malformed change #{self.index + 1}: {self.details}"


class PersistenceError(DocxAnnotatorError):
    """Raised when saving the document fails.

    The target file is left untouched when this is raised.

    Attributes:
        target: The output path (None for in-memory saves)
    """

    def __init__(self, message: str, target: str | None = None) -> None:
        self.target = target
        super().__init__(message)


class TreeConsistencyError(DocxAnnotatorError):
    """Raised when a splice cannot be applied to the live tree.

    This occurs when:
    - A coordinate references a run that is no longer attached to the body
    - An offset lies outside its run's text
    - A cross-paragraph range cannot be walked forward from its start paragraph

    It is always raised before the tree is mutated.
    """

    pass


class InvalidRangeError(DocxAnnotatorError):
    """Raised when a range's resolved end lies at or before its start.

    Attributes:
        start: Logical offset of the range start
        end: Logical offset of the range end (exclusive)
    """

    def __init__(self, start: int, end: int, search_text: str, end_search_text: str) -> None:
        self.start = start
        self.end = end
        super().__init__(
            f"End text '{end_search_text}' resolves to offset {end}, which is not after "
            f"the start of '{search_text}' at offset {start}"
        )


class ChangeApplicationError(DocxAnnotatorError):
    """Raised when applying one change of a batch fails.

    Changes before this one remain applied to the in-memory document; nothing
    has been written to disk.

    Attributes:
        index: Zero-based position of the failed change
        change: The change that failed
        source: Document source description
    """

    def __init__(self, index: int, change: Any, source: str, cause: Exception) -> None:
        self.index = index
        self.change = change
        self.source = source
        super().__init__(self._format_message(cause))

    def _format_message(self, cause: Exception) -> str:
        search = getattr(getattr(self.change, "position", None), "search_text", None)
        msg = f"Change #{self.index + 1} failed on {self.source}"
        if search:
            msg += f" (searchText={search!r})"
        msg += f": {cause}"
        return msg
