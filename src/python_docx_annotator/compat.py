"""
Compatibility helpers for integrating with python-docx.

Documents built or edited with python-docx can be annotated without a round
trip through the filesystem, and annotated documents can be handed back.
python-docx is an optional dependency (the "docx" extra).
"""

from __future__ import annotations

import io
from typing import Any

from .author import AuthorIdentity
from .document import Document


def _require_python_docx(feature: str) -> Any:
    try:
        import docx
    except ImportError as e:
        raise ImportError(
            f"python-docx is required for {feature}(). "
            "Install it with: pip install python-docx-annotator[docx]"
        ) from e
    return docx


def from_python_docx(
    python_docx_doc: Any,
    author: str | AuthorIdentity | None = None,
) -> Document:
    """Create an annotatable Document from a python-docx Document.

    Args:
        python_docx_doc: A python-docx Document object
        author: Author name or AuthorIdentity for comments and revisions

    Returns:
        A Document backed by an in-memory copy of the python-docx document

    Raises:
        ImportError: If python-docx is not installed
        TypeError: If the input is not a python-docx Document

    Example:
        >>> from docx import Document as PythonDocxDocument
        >>> py_doc = PythonDocxDocument()
        >>> py_doc.add_paragraph("Payment terms: 30 days")
        >>> doc = from_python_docx(py_doc)
        >>> doc.add_suggestion(TextSearchPosition("30 days"), "45 days")
    """
    _require_python_docx("from_python_docx")
    from docx.document import Document as PythonDocxDocType

    if not isinstance(python_docx_doc, PythonDocxDocType):
        raise TypeError(
            f"Expected python-docx Document, got {type(python_docx_doc).__name__}. "
            "Pass a Document object created with: from docx import Document"
        )

    buffer = io.BytesIO()
    python_docx_doc.save(buffer)
    buffer.seek(0)
    return Document(buffer, author=author)


def to_python_docx(doc: Document) -> Any:
    """Convert an annotated Document to a python-docx Document.

    Comments and tracked changes are preserved in the XML; python-docx simply
    does not expose them through its API.

    Raises:
        ImportError: If python-docx is not installed
    """
    docx = _require_python_docx("to_python_docx")
    return docx.Document(io.BytesIO(doc.save_to_bytes()))
