"""
Content types of the package ([Content_Types].xml).

Every part needs a content type, either from a Default keyed by its file
extension or from an Override keyed by its part name. The comments and
settings parts this package creates are registered with an Override.
"""

import logging

from lxml import etree

from .constants import CONTENT_TYPES_NAMESPACE
from .package import CONTENT_TYPES_ENTRY, OOXMLPackage

logger = logging.getLogger(__name__)

_OVERRIDE = f"{{{CONTENT_TYPES_NAMESPACE}}}Override"


class ContentTypes:
    """Content type strings for the WordprocessingML parts used here."""

    DOCUMENT = "application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"
    COMMENTS = "application/vnd.openxmlformats-officedocument.wordprocessingml.comments+xml"
    SETTINGS = "application/vnd.openxmlformats-officedocument.wordprocessingml.settings+xml"


class ContentTypeManager:
    """Reads and extends the Override entries of [Content_Types].xml.

    Example:
        >>> types = ContentTypeManager(package)
        >>> types.add_override("/word/comments.xml", ContentTypes.COMMENTS)
        True
        >>> types.save()
    """

    def __init__(self, package: OOXMLPackage) -> None:
        self._package = package
        self._root: etree._Element | None = None
        self._dirty = False

    @property
    def root(self) -> etree._Element:
        if self._root is None:
            self._root = self._package.get_part(CONTENT_TYPES_ENTRY)
            if self._root is None:
                self._root = etree.Element(
                    f"{{{CONTENT_TYPES_NAMESPACE}}}Types", nsmap={None: CONTENT_TYPES_NAMESPACE}
                )
                self._dirty = True
        return self._root

    def get_content_type(self, part_name: str) -> str | None:
        """Override registered for part_name (leading slash included), or None."""
        for override in self.root.iter(_OVERRIDE):
            if override.get("PartName") == part_name:
                return override.get("ContentType")
        return None

    def add_override(self, part_name: str, content_type: str) -> bool:
        """Register content_type for part_name unless an override exists.

        Returns:
            Whether a new Override was written
        """
        if self.get_content_type(part_name) is not None:
            return False
        etree.SubElement(self.root, _OVERRIDE, PartName=part_name, ContentType=content_type)
        self._dirty = True
        logger.debug("Registered %s as %s", part_name, content_type)
        return True

    def save(self) -> None:
        """Write [Content_Types].xml back if it changed."""
        if not self._dirty:
            return
        self._package.set_part(CONTENT_TYPES_ENTRY, self.root)
        self._dirty = False

    @property
    def is_modified(self) -> bool:
        return self._dirty
