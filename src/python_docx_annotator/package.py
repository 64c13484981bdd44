"""
The .docx container: a ZIP archive of XML parts.

OOXMLPackage extracts the archive into a private temporary directory, hands
out parts as lxml trees, and zips the directory back up on save. Writing to a
path is all-or-nothing: the archive goes to a sibling temporary file that is
moved over the target only once it is complete.
"""

import io
import logging
import os
import shutil
import tempfile
import zipfile
from pathlib import Path
from typing import Any, BinaryIO

from lxml import etree

from .errors import DocumentNotFoundError, PersistenceError

logger = logging.getLogger(__name__)

CONTENT_TYPES_ENTRY = "[Content_Types].xml"


class OOXMLPackage:
    """An extracted .docx archive.

    Parts are addressed by their name inside the archive, e.g.
    "word/document.xml". The extraction directory lives until close(), which
    the context manager and the finalizer both call.

    Example:
        >>> with OOXMLPackage.open("contract.docx") as package:
        ...     root = package.get_part("word/document.xml")
        ...     package.set_part("word/document.xml", root)
        ...     package.save("contract_reviewed.docx")
    """

    def __init__(self, temp_dir: Path, source_path: Path | None = None) -> None:
        """Wrap a directory that already holds the extracted parts.

        Prefer open() or from_bytes(), which do the extraction.

        Args:
            temp_dir: Extraction directory, removed by close()
            source_path: The .docx the parts came from, if it was a file
        """
        self._temp_dir = temp_dir
        self._source_path = source_path
        self._closed = False

    @classmethod
    def open(cls, source: str | Path | BinaryIO) -> "OOXMLPackage":
        """Extract a .docx from a path or a binary stream.

        Raises:
            DocumentNotFoundError: If the path does not exist, the data is not
                a ZIP archive, or extraction fails
        """
        if isinstance(source, str | Path):
            source_path: Path | None = Path(source)
            label = str(source_path)
            if not source_path.is_file():
                raise DocumentNotFoundError(label, "file does not exist")
            archive: Path | BinaryIO = source_path
        else:
            source_path = None
            label = "<in-memory document>"
            archive = source

        if not zipfile.is_zipfile(archive):
            raise DocumentNotFoundError(label, "not a valid .docx (ZIP) file")
        # is_zipfile leaves a stream positioned at its end
        if hasattr(archive, "seek"):
            archive.seek(0)

        temp_dir = Path(tempfile.mkdtemp(prefix="python_docx_annotator_"))
        try:
            with zipfile.ZipFile(archive) as zf:
                zf.extractall(temp_dir)
        except (zipfile.BadZipFile, OSError) as e:
            shutil.rmtree(temp_dir, ignore_errors=True)
            raise DocumentNotFoundError(label, f"failed to extract: {e}") from e

        logger.debug("Extracted %s to %s", label, temp_dir)
        return cls(temp_dir, source_path)

    @classmethod
    def from_bytes(cls, data: bytes) -> "OOXMLPackage":
        return cls.open(io.BytesIO(data))

    @property
    def temp_dir(self) -> Path:
        return self._temp_dir

    @property
    def source_path(self) -> Path | None:
        return self._source_path

    def get_part_path(self, part_name: str) -> Path:
        """Where a part lives on disk inside the extraction directory."""
        return self._temp_dir / part_name

    def part_exists(self, part_name: str) -> bool:
        return self.get_part_path(part_name).exists()

    def get_part(self, part_name: str) -> etree._Element | None:
        """Parse a part and return its root element, or None if it is absent."""
        path = self.get_part_path(part_name)
        if not path.exists():
            return None
        return etree.parse(str(path), etree.XMLParser(remove_blank_text=False)).getroot()

    def set_part(self, part_name: str, element: etree._Element) -> None:
        """Serialize element's tree into a part, creating folders as needed."""
        path = self.get_part_path(part_name)
        path.parent.mkdir(parents=True, exist_ok=True)
        element.getroottree().write(
            str(path), encoding="UTF-8", xml_declaration=True, standalone=True
        )

    def save(self, output_path: str | Path) -> None:
        """Zip the parts into output_path, replacing any existing file.

        Raises:
            PersistenceError: If writing fails; output_path is left as it was
        """
        target = Path(output_path)
        fd, staging = tempfile.mkstemp(
            prefix=f".{target.name}.", suffix=".tmp", dir=target.parent or None
        )
        os.close(fd)
        try:
            with zipfile.ZipFile(staging, "w", zipfile.ZIP_DEFLATED) as zf:
                self._write_entries(zf)
            # mkstemp creates the file 0600; keep the mode of the file being replaced
            if target.exists():
                shutil.copymode(target, staging)
            os.replace(staging, target)
        except OSError as e:
            if os.path.exists(staging):
                os.unlink(staging)
            raise PersistenceError(f"Failed to save {target}: {e}", str(target)) from e
        logger.debug("Saved package to %s", target)

    def save_to_bytes(self) -> bytes:
        """Zip the parts into memory and return the archive."""
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
            self._write_entries(zf)
        return buffer.getvalue()

    def _write_entries(self, zf: zipfile.ZipFile) -> None:
        # Word expects the content types entry first
        root = self._temp_dir
        files = sorted(
            (path for path in root.rglob("*") if path.is_file()),
            key=lambda path: (path.name != CONTENT_TYPES_ENTRY, path.relative_to(root).as_posix()),
        )
        for path in files:
            zf.write(path, path.relative_to(root).as_posix())

    def close(self) -> None:
        """Remove the extraction directory. Safe to call more than once."""
        if not self._closed and self._temp_dir.exists():
            shutil.rmtree(self._temp_dir, ignore_errors=True)
        self._closed = True

    def __enter__(self) -> "OOXMLPackage":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def __del__(self) -> None:
        self.close()
