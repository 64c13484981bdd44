"""
Relationships of a package part (its _rels/<part>.rels file).

Word only reads a comments or settings part when word/document.xml links to
it through a relationship of the matching type. The same relationships tell
us where an existing document keeps those parts, which is not always the
default file name.
"""

import logging
import posixpath

from lxml import etree

from .constants import PACKAGE_RELATIONSHIPS_NAMESPACE
from .package import OOXMLPackage

logger = logging.getLogger(__name__)

_RELATIONSHIP = f"{{{PACKAGE_RELATIONSHIPS_NAMESPACE}}}Relationship"


class RelationshipTypes:
    """Relationship type URIs for the parts this package touches."""

    COMMENTS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/comments"
    SETTINGS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/settings"


class RelationshipManager:
    """Reads and extends the relationships of one source part.

    Example:
        >>> rels = RelationshipManager(package, "word/document.xml")
        >>> rels.resolve_part_name(RelationshipTypes.COMMENTS)
        'word/comments.xml'
        >>> rels.add_relationship(RelationshipTypes.SETTINGS, "settings.xml")
        'rId4'
        >>> rels.save()
    """

    def __init__(self, package: OOXMLPackage, part_name: str) -> None:
        """Bind to the relationships of part_name.

        Args:
            package: Package holding both the source part and its .rels file
            part_name: Source part, e.g. "word/document.xml", whose
                relationships live in "word/_rels/document.xml.rels"
        """
        self._package = package
        self._part_name = part_name
        folder, name = posixpath.split(part_name)
        self._rels_part = posixpath.join(folder, "_rels", f"{name}.rels")
        self._root: etree._Element | None = None
        self._dirty = False

    @property
    def root(self) -> etree._Element:
        """The Relationships element, loaded on first use or created empty."""
        if self._root is None:
            self._root = self._package.get_part(self._rels_part)
            if self._root is None:
                self._root = etree.Element(
                    f"{{{PACKAGE_RELATIONSHIPS_NAMESPACE}}}Relationships",
                    nsmap={None: PACKAGE_RELATIONSHIPS_NAMESPACE},
                )
                self._dirty = True
        return self._root

    def _by_type(self, rel_type: str) -> etree._Element | None:
        for rel in self.root.iter(_RELATIONSHIP):
            if rel.get("Type") == rel_type:
                return rel
        return None

    def get_relationship(self, rel_type: str) -> str | None:
        """Id (e.g. "rId3") of the first relationship of rel_type, or None."""
        rel = self._by_type(rel_type)
        return None if rel is None else rel.get("Id")

    def resolve_part_name(self, rel_type: str) -> str | None:
        """Part name a relationship of rel_type points at, or None.

        Relative targets resolve against the source part's folder, so
        "comments.xml" from "word/document.xml" is "word/comments.xml".
        External targets are not parts and resolve to None.
        """
        rel = self._by_type(rel_type)
        if rel is None or rel.get("TargetMode") == "External":
            return None
        target = rel.get("Target", "")
        if target.startswith("/"):
            return target.lstrip("/")
        return posixpath.normpath(posixpath.join(posixpath.dirname(self._part_name), target))

    def add_relationship(self, rel_type: str, target: str) -> str:
        """Link the source part to target; reuses an existing link of rel_type.

        Returns:
            The relationship id
        """
        existing = self.get_relationship(rel_type)
        if existing is not None:
            return existing

        rel_id = f"rId{self._next_available_id()}"
        etree.SubElement(self.root, _RELATIONSHIP, Id=rel_id, Type=rel_type, Target=target)
        self._dirty = True
        logger.debug("Linked %s to %s as %s", self._part_name, target, rel_id)
        return rel_id

    def _next_available_id(self) -> int:
        # Lowest free rIdN; gaps left by removed relationships are reused
        taken = {
            int(rel.get("Id")[3:])
            for rel in self.root.iter(_RELATIONSHIP)
            if rel.get("Id", "").startswith("rId") and rel.get("Id")[3:].isdigit()
        }
        candidate = 1
        while candidate in taken:
            candidate += 1
        return candidate

    def save(self) -> None:
        """Write the .rels part back if it changed."""
        if not self._dirty:
            return
        self._package.set_part(self._rels_part, self.root)
        self._dirty = False

    @property
    def is_modified(self) -> bool:
        return self._dirty
