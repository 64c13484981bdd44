"""
Tests for enabling revision tracking in word/settings.xml.
"""

from _docx_helpers import WORD_NS, create_test_docx, paragraphs, read_part, w
from lxml import etree

from python_docx_annotator import AnnotationSession, Document, TextSearchPosition


def settings_xml(children: str) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<w:settings xmlns:w="{WORD_NS}">{children}</w:settings>'
    )


class TestEnableTracking:
    """Tests for TrackingSettings.enable()."""

    def test_creates_settings_part_when_missing(self, tmp_path):
        path = create_test_docx(tmp_path / "plain.docx", paragraphs("text"))
        output = tmp_path / "out.docx"

        with Document(path) as doc:
            doc.tracking.enable()
            assert doc.tracking_enabled
            doc.save(output)

        settings = read_part(output, "word/settings.xml")
        assert settings.find(w("trackRevisions")) is not None
        assert settings.find(f"{w('rsids')}/{w('rsidRoot')}") is not None
        assert settings.find(w("revisionView")).get(w("markup")) == "1"

        rels = read_part(output, "word/_rels/document.xml.rels")
        assert "settings.xml" in [rel.get("Target") for rel in rels]
        content_types = read_part(output, "[Content_Types].xml")
        assert "/word/settings.xml" in [o.get("PartName") for o in content_types]

    def test_enable_is_idempotent(self, tmp_path):
        path = create_test_docx(tmp_path / "plain.docx", paragraphs("text"))

        with Document(path) as doc:
            doc.tracking.enable()
            first = etree.tostring(doc.get_part("word/settings.xml"))
            doc.tracking.enable()
            second = etree.tostring(doc.get_part("word/settings.xml"))

        assert first == second

    def test_elements_inserted_in_schema_order(self, tmp_path):
        path = create_test_docx(
            tmp_path / "settings.docx",
            paragraphs("text"),
            settings=settings_xml(
                '<w:zoom w:percent="100"/><w:defaultTabStop w:val="720"/>'
                '<w:characterSpacingControl w:val="doNotCompress"/><w:compat/>'
            ),
        )

        with Document(path) as doc:
            doc.tracking.enable()
            tags = [etree.QName(child).localname for child in doc.get_part("word/settings.xml")]

        assert tags == [
            "zoom",
            "revisionView",
            "trackRevisions",
            "defaultTabStop",
            "characterSpacingControl",
            "compat",
            "rsids",
        ]

    def test_existing_track_revisions_is_kept(self, tmp_path):
        path = create_test_docx(
            tmp_path / "tracked.docx",
            paragraphs("text"),
            settings=settings_xml("<w:trackRevisions/>"),
        )

        with Document(path) as doc:
            assert doc.tracking_enabled
            doc.tracking.enable()
            settings = doc.get_part("word/settings.xml")

        assert len(settings.findall(w("trackRevisions"))) == 1

    def test_disabled_track_revisions_is_turned_on(self, tmp_path):
        path = create_test_docx(
            tmp_path / "off.docx",
            paragraphs("text"),
            settings=settings_xml('<w:trackRevisions w:val="false"/>'),
        )

        with Document(path) as doc:
            assert not doc.tracking_enabled
            doc.tracking.enable()
            track = doc.get_part("word/settings.xml").find(w("trackRevisions"))

        assert track.get(w("val")) is None


class TestSharedSession:
    """Tracking state belongs to each document, not to a shared session."""

    def test_each_document_gets_its_own_settings(self, tmp_path):
        session = AnnotationSession()
        first = create_test_docx(tmp_path / "a.docx", paragraphs("Pay in 30 days."))
        second = create_test_docx(tmp_path / "b.docx", paragraphs("Pay in 60 days."))

        with Document(first, session=session) as doc:
            doc.add_suggestion(TextSearchPosition("30 days"), "45 days")
            doc.save()

        with Document(second, session=session) as doc:
            assert not doc.tracking_enabled
            doc.add_suggestion(TextSearchPosition("60 days"), "90 days")
            assert doc.tracking_enabled
            doc.save()

        settings = read_part(second, "word/settings.xml")
        assert settings is not None
        assert settings.find(w("trackRevisions")) is not None

    def test_revision_ids_still_continue_across_documents(self, tmp_path):
        session = AnnotationSession()
        first = create_test_docx(tmp_path / "a.docx", paragraphs("one two"))
        second = create_test_docx(tmp_path / "b.docx", paragraphs("three four"))

        with Document(first, session=session) as doc:
            doc.add_suggestion(TextSearchPosition("two"), "2")
        with Document(second, session=session) as doc:
            doc.add_suggestion(TextSearchPosition("four"), "4")
            ids = {el.get(w("id")) for el in doc.body.iter(w("ins"))}

        assert ids == {"rev_2"}
