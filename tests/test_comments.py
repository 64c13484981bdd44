"""
Tests for adding and reading comments.

These tests verify that:
1. Comments are anchored on exactly the located text
2. Comment ids continue after the highest existing id
3. comments.xml, its relationship and content type are created when missing
4. Comments survive a save/reload round trip
"""

import tempfile
from pathlib import Path

import pytest
from _docx_helpers import WORD_NS, create_test_docx, paragraphs, read_part, w

from python_docx_annotator import Document, InvalidInputError, MatchTier, TextSearchPosition


def comments_xml(*ids: str) -> str:
    records = "".join(
        f'<w:comment w:id="{i}" w:author="Reviewer" w:date="2024-01-15T10:30:00Z" w:initials="R">'
        f"<w:p><w:r><w:t>Existing {i}</w:t></w:r></w:p></w:comment>"
        for i in ids
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<w:comments xmlns:w="{WORD_NS}">{records}</w:comments>'
    )


@pytest.fixture
def sample_docx(tmp_path):
    return create_test_docx(
        tmp_path / "sample.docx",
        paragraphs(
            "This contract is governed by the laws of Delaware.",
            "Payment is due in 30 days.",
        ),
    )


class TestAddComment:
    """Tests for Document.add_comment()."""

    def test_markers_surround_matched_text(self, sample_docx):
        with Document(sample_docx) as doc:
            result = doc.add_comment(TextSearchPosition("laws of Delaware"), "Check jurisdiction")
            paragraph = doc.body.find(w("p"))
            children = [c.tag for c in paragraph]

            assert result.success
            assert result.tier is MatchTier.EXACT
            assert result.matched_text == "laws of Delaware"
            start = children.index(w("commentRangeStart"))
            end = children.index(w("commentRangeEnd"))
            assert children[start + 1] == w("r")
            assert children[end + 1] == w("r")
            assert paragraph[end + 1].find(w("commentReference")) is not None
            assert doc.comments[0].marked_text == "laws of Delaware"

    def test_document_text_is_unchanged(self, sample_docx):
        with Document(sample_docx) as doc:
            before = doc.get_text()
            doc.add_comment(TextSearchPosition("30 days"), "Too short")

            assert doc.get_text() == before

    def test_ids_are_sequential(self, sample_docx):
        with Document(sample_docx) as doc:
            ids = [
                doc.add_comment(TextSearchPosition(query), "note").record_id
                for query in ("contract", "Delaware", "Payment")
            ]

        assert ids == ["1", "2", "3"]

    def test_ids_continue_after_existing_maximum(self, tmp_path):
        path = create_test_docx(
            tmp_path / "existing.docx",
            paragraphs("Some text to comment on."),
            comments=comments_xml("1", "3", "4"),
        )

        with Document(path) as doc:
            result = doc.add_comment(TextSearchPosition("text"), "New comment")

        assert result.record_id == "5"

    def test_comment_record_carries_author(self, sample_docx):
        with Document(sample_docx, author="Jane Smith") as doc:
            doc.add_comment(TextSearchPosition("contract"), "First line\nSecond line")
            comment = doc.comments[0]

        assert comment.author == "Jane Smith"
        assert comment.initials == "JS"
        assert comment.text == "First line\nSecond line"
        assert comment.date is not None

    def test_comment_inside_single_run(self, tmp_path):
        """A match in the middle of one run splits it into three runs."""
        path = create_test_docx(tmp_path / "one.docx", paragraphs("alpha beta gamma"))

        with Document(path) as doc:
            doc.add_comment(TextSearchPosition("beta"), "why")
            texts = [
                "".join(t.text for t in r.iter(w("t")))
                for r in doc.body.iter(w("r"))
                if r.find(w("t")) is not None
            ]

        assert texts == ["alpha ", "beta", " gamma"]

    def test_fallback_still_adds_comment(self, sample_docx):
        with Document(sample_docx) as doc:
            result = doc.add_comment(TextSearchPosition("nowhere"), "anchor anyway")

            assert result.success
            assert result.used_fallback
            assert len(doc.comments) == 1

    def test_empty_body_gets_position_only_comment(self, tmp_path):
        path = create_test_docx(tmp_path / "empty.docx", "")

        with Document(path) as doc:
            result = doc.add_comment(TextSearchPosition("anything"), "empty doc")
            paragraph = doc.body.find(w("p"))

            assert result.tier is MatchTier.STRUCTURAL
            tags = [c.tag for c in paragraph]
            assert tags.index(w("commentRangeStart")) < tags.index(w("commentRangeEnd"))
            assert doc.comments[0].marked_text == ""

    def test_range_across_paragraphs(self, tmp_path):
        path = create_test_docx(
            tmp_path / "span.docx", paragraphs("Alpha beta", "middle", "gamma delta")
        )

        with Document(path) as doc:
            before = doc.get_text()
            result = doc.add_comment(
                TextSearchPosition("beta", end_search_text="gamma"), "spans three paragraphs"
            )
            first, middle, last = doc.body.findall(w("p"))
            first_tags = [c.tag for c in first]
            last_tags = [c.tag for c in last]

            assert result.success
            assert result.tier is MatchTier.EXACT
            assert first_tags == [w("r"), w("commentRangeStart"), w("r")]
            assert "".join(first[0].itertext()) == "Alpha "
            assert middle.find(w("commentRangeStart")) is None
            assert middle.find(w("commentRangeEnd")) is None
            assert last_tags == [w("r"), w("commentRangeEnd"), w("r"), w("r")]
            assert "".join(last[0].itertext()) == "gamma"
            assert last[2].find(w("commentReference")) is not None
            assert doc.comments[0].marked_text == "betamiddlegamma"
            assert doc.get_text() == before

    def test_empty_comment_text_is_rejected(self, sample_docx):
        with Document(sample_docx) as doc:
            with pytest.raises(InvalidInputError):
                doc.add_comment(TextSearchPosition("contract"), "")


class TestCommentPersistence:
    """Tests for saving comments to the package."""

    def test_creates_comments_part_and_registrations(self, sample_docx, tmp_path):
        output = tmp_path / "out.docx"
        with Document(sample_docx) as doc:
            doc.add_comment(TextSearchPosition("contract"), "note")
            doc.save(output)

        comments = read_part(output, "word/comments.xml")
        assert comments is not None
        assert len(comments.findall(w("comment"))) == 1

        rels = read_part(output, "word/_rels/document.xml.rels")
        targets = [rel.get("Target") for rel in rels]
        assert "comments.xml" in targets

        content_types = read_part(output, "[Content_Types].xml")
        part_names = [o.get("PartName") for o in content_types]
        assert "/word/comments.xml" in part_names

    def test_reload_lists_comments(self, sample_docx):
        with Document(sample_docx) as doc:
            doc.add_comment(TextSearchPosition("Delaware"), "Which court?")
            doc.save()

        with Document(sample_docx) as reloaded:
            comments = reloaded.comments

        assert [(c.id, c.text, c.marked_text) for c in comments] == [
            ("1", "Which court?", "Delaware")
        ]

    def test_in_memory_document_round_trip(self, sample_docx):
        with Document(sample_docx.read_bytes()) as doc:
            doc.add_comment(TextSearchPosition("30 days"), "Too short")
            data = doc.save_to_bytes()

        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "round.docx"
            path.write_bytes(data)
            with Document(path) as reloaded:
                assert len(reloaded.comments) == 1
