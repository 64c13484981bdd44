"""
Document class for annotating Word documents with comments and suggestions.

This module provides the main Document class which handles loading .docx
files, locating text, attaching comments or tracked-change suggestions, and
saving the result.
"""

import io
import logging
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any, BinaryIO

from lxml import etree

from .author import AuthorIdentity
from .constants import DOCUMENT_PART
from .content_types import ContentTypeManager
from .errors import DocumentNotFoundError, InvalidInputError, PersistenceError
from .models.change import Change, TextSearchPosition
from .operations.batch import BatchOperations, load_changes
from .operations.comments import CommentOperations
from .operations.tracked_changes import TrackedChangeOperations
from .operations.tracking import TrackingSettings
from .package import OOXMLPackage
from .position_map import build_index
from .relationships import RelationshipManager
from .results import ChangeResult
from .session import AnnotationSession
from .text_search import SearchResult, TextLocator
from .tracked_xml import TrackedXMLGenerator
from .tree import find_body, iter_paragraphs

if TYPE_CHECKING:
    from python_docx_annotator.models.comment import Comment
    from python_docx_annotator.models.paragraph import Paragraph
    from python_docx_annotator.models.tracked_change import TrackedChange

logger = logging.getLogger(__name__)


class Document:
    """Main class for annotating Word documents.

    Documents can be loaded from:
    - File paths (str or Path)
    - Raw bytes
    - BytesIO objects
    - Open file objects (in binary mode)

    Example:
        >>> doc = Document("contract.docx", author="Legal Review")
        >>> doc.add_comment(TextSearchPosition("governing law"), "Check jurisdiction")
        >>> doc.add_suggestion(TextSearchPosition("30 days"), "45 days")
        >>> doc.save("contract_reviewed.docx")

    Attributes:
        path: Path to the document file (None for in-memory documents)
        author: Identity stamped on comments and revisions
        session: Id counters and clock, possibly shared with other documents
        xml_root: Root element of word/document.xml
    """

    def __init__(
        self,
        source: str | Path | bytes | BinaryIO,
        author: str | AuthorIdentity | None = None,
        session: AnnotationSession | None = None,
    ) -> None:
        """Initialize a Document from a .docx file or in-memory data.

        Args:
            source: Path to a .docx file, its raw bytes, or a binary stream
            author: Author name or AuthorIdentity (default: "WordDocumentModifier")
            session: Session to draw ids from; a new one is created when omitted

        Raises:
            InvalidInputError: If source is empty
            DocumentNotFoundError: If the document is missing, not a .docx, or
                has no body
        """
        if source is None or (isinstance(source, (str, bytes)) and not source):
            raise InvalidInputError("source")

        if isinstance(source, bytes):
            self._source_stream: BinaryIO | None = io.BytesIO(source)
            self.path: Path | None = None
        elif hasattr(source, "read"):
            self._source_stream = source  # type: ignore[assignment]
            self.path = None
        else:
            self._source_stream = None
            self.path = Path(source)

        self.author = AuthorIdentity.coerce(author)
        self.session = session or AnnotationSession()
        self.xml_generator = TrackedXMLGenerator(self.author)
        self._locator = TextLocator()
        self._package: OOXMLPackage | None = None
        # Parts loaded or created this session, written back on save
        self._parts: dict[str, etree._Element] = {}

        self._load_document()
        self.session.seed_revision_ids(self._tracked_ops.existing_revision_ids())

    @property
    def source_label(self) -> str:
        """Human-readable description of where the document came from."""
        return str(self.path) if self.path is not None else "<in-memory document>"

    def _load_document(self) -> None:
        """Open the package and parse word/document.xml.

        Raises:
            DocumentNotFoundError: If the document cannot be opened or has no body
        """
        source: Path | BinaryIO = (
            self._source_stream if self._source_stream is not None else self.path
        )
        self._package = OOXMLPackage.open(source)

        document_xml = self._package.get_part_path(DOCUMENT_PART)
        if not document_xml.exists():
            self.close()
            raise DocumentNotFoundError(self.source_label, f"{DOCUMENT_PART} not found")
        try:
            parser = etree.XMLParser(remove_blank_text=False)
            self.xml_tree = etree.parse(str(document_xml), parser)
        except etree.XMLSyntaxError as e:
            self.close()
            raise DocumentNotFoundError(self.source_label, f"invalid XML: {e}") from e

        self.xml_root = self.xml_tree.getroot()
        self._parts[DOCUMENT_PART] = self.xml_root
        if find_body(self.xml_root) is None:
            self.close()
            raise DocumentNotFoundError(self.source_label, "document has no body")
        logger.debug("Loaded %s", self.source_label)

    # ------------------------------------------------------------------
    # Operation helpers (lazy initialization)
    # ------------------------------------------------------------------

    @property
    def _comment_ops(self) -> CommentOperations:
        if not hasattr(self, "_comment_ops_instance"):
            self._comment_ops_instance = CommentOperations(self)
        return self._comment_ops_instance

    @property
    def _tracked_ops(self) -> TrackedChangeOperations:
        if not hasattr(self, "_tracked_ops_instance"):
            self._tracked_ops_instance = TrackedChangeOperations(self)
        return self._tracked_ops_instance

    @property
    def _batch_ops(self) -> BatchOperations:
        if not hasattr(self, "_batch_ops_instance"):
            self._batch_ops_instance = BatchOperations(self)
        return self._batch_ops_instance

    @property
    def tracking(self) -> TrackingSettings:
        """Revision tracking settings of this document."""
        if not hasattr(self, "_tracking_instance"):
            self._tracking_instance = TrackingSettings(self)
        return self._tracking_instance

    # ------------------------------------------------------------------
    # Package parts
    # ------------------------------------------------------------------

    @property
    def body(self) -> etree._Element:
        """The w:body element of the main document part."""
        body = find_body(self.xml_root)
        if body is None:
            raise DocumentNotFoundError(self.source_label, "document has no body")
        return body

    def get_part(self, part_name: str) -> etree._Element | None:
        """Get a package part, parsed once and cached for this session."""
        if part_name not in self._parts:
            if self._package is None:
                return None
            root = self._package.get_part(part_name)
            if root is None:
                return None
            self._parts[part_name] = root
        return self._parts[part_name]

    def related_part_name(self, rel_type: str) -> str | None:
        """Part name targeted from document.xml by a relationship type."""
        if self._package is None:
            return None
        return RelationshipManager(self._package, DOCUMENT_PART).resolve_part_name(rel_type)

    def ensure_part(
        self,
        part_name: str,
        factory: Callable[[], etree._Element],
        rel_type: str,
        rel_target: str,
        content_type: str,
    ) -> etree._Element:
        """Get a part, creating and registering it when it does not exist.

        A new part gets a relationship from document.xml and a content type
        override; it is written to the package on save.
        """
        root = self.get_part(part_name)
        if root is not None:
            return root

        root = factory()
        self._parts[part_name] = root

        assert self._package is not None
        rel_mgr = RelationshipManager(self._package, DOCUMENT_PART)
        rel_mgr.add_relationship(rel_type, rel_target)
        rel_mgr.save()
        ct_mgr = ContentTypeManager(self._package)
        ct_mgr.add_override(f"/{part_name}", content_type)
        ct_mgr.save()
        logger.debug("Created part %s", part_name)
        return root

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    @property
    def paragraphs(self) -> list["Paragraph"]:
        """Block-level paragraphs in document order, table cells included."""
        from python_docx_annotator.models.paragraph import Paragraph

        return [Paragraph(p) for p in iter_paragraphs(self.body)]

    def get_text(self) -> str:
        """The logical text stream searched by locate().

        Every w:t in document order, concatenated without separators.
        """
        return build_index(self.body).text

    @property
    def comments(self) -> list["Comment"]:
        """All comments in the document."""
        return self._comment_ops.all()

    @property
    def tracked_changes(self) -> list["TrackedChange"]:
        """All run-level insertions and deletions in the body."""
        return self._tracked_ops.all()

    @property
    def tracking_enabled(self) -> bool:
        """Whether the document has revision tracking turned on."""
        return self.tracking.is_enabled

    def locate(self, position: TextSearchPosition) -> SearchResult:
        """Resolve a search position against the current tree.

        Falls back through the locator's tiers instead of failing when the
        text is not found; check result.tier.
        """
        return self._locator.locate(self.body, position)

    # ------------------------------------------------------------------
    # Annotating
    # ------------------------------------------------------------------

    def add_comment(self, position: TextSearchPosition, text: str) -> ChangeResult:
        """Attach a comment to the text at position."""
        return self._comment_ops.add(position, text)

    def add_suggestion(self, position: TextSearchPosition, text: str) -> ChangeResult:
        """Replace the text at position with text as a tracked change."""
        return self._tracked_ops.add(position, text)

    def apply_change(self, change: Change) -> ChangeResult:
        return self._batch_ops.apply_change(change)

    def apply_changes(self, changes: list[Change | dict[str, Any]]) -> list[ChangeResult]:
        """Apply changes in order; see BatchOperations.apply_changes."""
        return self._batch_ops.apply_changes(changes)

    def apply_change_file(self, path: str | Path) -> list[ChangeResult]:
        """Apply changes from a JSON or YAML file."""
        return self._batch_ops.apply_change_file(path)

    # ------------------------------------------------------------------
    # Saving
    # ------------------------------------------------------------------

    def _flush_parts(self) -> None:
        assert self._package is not None
        for part_name, root in self._parts.items():
            self._package.set_part(part_name, root)

    def save(self, output_path: str | Path | None = None) -> None:
        """Save the document, replacing the target file atomically.

        Args:
            output_path: Where to save; defaults to the original path. Required
                for in-memory documents.

        Raises:
            InvalidInputError: If no path is known for an in-memory document
            PersistenceError: If writing fails; the target is left untouched
        """
        if output_path is None:
            if self.path is None:
                raise InvalidInputError(
                    "output_path",
                    "output_path is required for in-memory documents. "
                    "Use doc.save(path) or doc.save_to_bytes() instead.",
                )
            output_path = self.path
        output_path = Path(output_path)
        if self._package is None:
            raise PersistenceError("Document is closed", str(output_path))

        try:
            self._flush_parts()
        except OSError as e:
            raise PersistenceError(f"Failed to write document parts: {e}", str(output_path)) from e
        self._package.save(output_path)
        logger.info("Saved %s", output_path)

    def save_to_bytes(self) -> bytes:
        """Save the document to bytes.

        Raises:
            PersistenceError: If the package cannot be written
        """
        if self._package is None:
            raise PersistenceError("Document is closed")
        try:
            self._flush_parts()
            return self._package.save_to_bytes()
        except OSError as e:
            raise PersistenceError(f"Failed to save document to bytes: {e}") from e

    def close(self) -> None:
        """Release the extracted package directory."""
        if self._package is not None:
            self._package.close()
            self._package = None

    def __enter__(self) -> "Document":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<Document {self.source_label}>"


def apply_changes_to_document(
    path: str | Path,
    changes: list[Change | dict[str, Any]] | str,
    author: str | AuthorIdentity | None = None,
    output: str | Path | None = None,
) -> list[ChangeResult]:
    """Open a document, apply changes in order, and save once.

    If any change fails the document on disk is left untouched.

    Args:
        path: Document to annotate
        changes: Change objects/dicts, or a change file path or inline JSON
        author: Author name or identity
        output: Where to save; defaults to overwriting path

    Returns:
        One ChangeResult per change

    Raises:
        InvalidInputError: If path is empty
        DocumentNotFoundError: If the document cannot be opened
        MalformedChangeError: If the change list cannot be parsed
        ChangeApplicationError: If a change fails
        PersistenceError: If saving fails
    """
    if not path:
        raise InvalidInputError("path")
    if isinstance(changes, str | Path):
        changes = load_changes(changes)

    with Document(path, author=author) as doc:
        results = doc.apply_changes(changes)
        doc.save(output or path)
    return results

