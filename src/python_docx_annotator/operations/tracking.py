"""
TrackingSettings class for turning on revision tracking in word/settings.xml.

Suggestions are only shown as tracked changes by Word when the document has
revision tracking enabled. Enabling is a one-way, idempotent transition:
UNTRACKED -> TRACKING_ENABLED.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from lxml import etree

from ..constants import NSMAP, SETTINGS_ELEMENT_ORDER, SETTINGS_PART, WORD_NAMESPACE, w
from ..content_types import ContentTypes
from ..relationships import RelationshipTypes
from ..tracked_xml import TrackedXMLGenerator

if TYPE_CHECKING:
    from ..document import Document

logger = logging.getLogger(__name__)


class TrackingSettings:
    """Reads and enables revision tracking for a Document.

    Enabling inserts, each at its schema position and only when missing:
    - w:revisionView with markup shown
    - w:trackRevisions
    - w:rsids with a w:rsidRoot

    Example:
        >>> settings = TrackingSettings(doc)
        >>> settings.enable()
        >>> settings.is_enabled
        True
    """

    def __init__(self, document: Document) -> None:
        self._document = document
        self._enabled = False

    @property
    def is_enabled(self) -> bool:
        """Whether the settings part turns on w:trackRevisions."""
        if self._enabled:
            return True
        settings = self._document.get_part(self._settings_part_name())
        if settings is None:
            return False
        track = settings.find(w("trackRevisions"))
        return track is not None and track.get(w("val"), "true") not in ("0", "false", "off")

    def enable(self) -> None:
        """Turn on revision tracking. Repeated calls change nothing."""
        if self._enabled:
            return

        settings = self._document.ensure_part(
            self._settings_part_name(),
            lambda: etree.Element(w("settings"), nsmap=NSMAP),
            RelationshipTypes.SETTINGS,
            "settings.xml",
            ContentTypes.SETTINGS,
        )

        track = settings.find(w("trackRevisions"))
        if track is None:
            _insert_in_order(settings, etree.Element(w("trackRevisions")))
        elif track.get(w("val")) is not None:
            del track.attrib[w("val")]

        rsids = settings.find(w("rsids"))
        if rsids is None:
            rsids = etree.Element(w("rsids"))
            _insert_in_order(settings, rsids)
        if rsids.find(w("rsidRoot")) is None:
            root = etree.Element(w("rsidRoot"))
            root.set(w("val"), TrackedXMLGenerator.generate_rsid())
            rsids.insert(0, root)

        view = settings.find(w("revisionView"))
        if view is None:
            view = etree.Element(w("revisionView"))
            _insert_in_order(settings, view)
        view.set(w("markup"), "1")

        self._enabled = True
        logger.info("Enabled revision tracking in %s", self._document.source_label)

    def _settings_part_name(self) -> str:
        return self._document.related_part_name(RelationshipTypes.SETTINGS) or SETTINGS_PART


def _insert_in_order(settings: etree._Element, element: etree._Element) -> None:
    """Insert element among settings children at its CT_Settings position.

    Children from other namespaces (w14/w15 extensions) sort after every
    w: element.
    """
    rank = _settings_rank(element)
    for index, child in enumerate(settings):
        if isinstance(child.tag, str) and _settings_rank(child) > rank:
            settings.insert(index, element)
            return
    settings.append(element)


def _settings_rank(element: etree._Element) -> int:
    qname = etree.QName(element)
    if qname.namespace == WORD_NAMESPACE and qname.localname in SETTINGS_ELEMENT_ORDER:
        return SETTINGS_ELEMENT_ORDER.index(qname.localname)
    return len(SETTINGS_ELEMENT_ORDER)
