"""
Tests for run splitting and range materialization.
"""

import pytest
from _docx_helpers import WORD_NS, paragraphs, parse_body, visible_text, w
from lxml import etree

from python_docx_annotator.errors import TreeConsistencyError
from python_docx_annotator.models.change import TextSearchPosition
from python_docx_annotator.splicer import TreeSplicer
from python_docx_annotator.text_search import RunCoordinate, TextLocator
from python_docx_annotator.tree import run_text

BOLD_RUN = '<w:r w:rsidR="00AB12CD"><w:rPr><w:b/></w:rPr><w:t>Hello world</w:t></w:r>'


def _run(body):
    return body.find(f".//{w('r')}")


class TestSplitAt:
    """Tests for TreeSplicer.split_at()."""

    def test_fragments_concatenate_to_original(self):
        body = parse_body(f"<w:p>{BOLD_RUN}</w:p>")
        run = _run(body)

        result = TreeSplicer(body).split_at(RunCoordinate(run, 5, run.find(w("t")), 5))

        assert run_text(result.before) == "Hello"
        assert run_text(result.after) == " world"
        assert visible_text(body) == "Hello world"
        assert run.getparent() is None

    def test_fragments_keep_formatting_and_attributes(self):
        body = parse_body(f"<w:p>{BOLD_RUN}</w:p>")
        run = _run(body)
        original_rpr = etree.tostring(run.find(w("rPr")))

        result = TreeSplicer(body).split_at(RunCoordinate(run, 5))

        for fragment in (result.before, result.after):
            assert etree.tostring(fragment.find(w("rPr"))) == original_rpr
            assert fragment.get(w("rsidR")) == "00AB12CD"

    def test_cut_leaves_preserve_whitespace(self):
        body = parse_body(f"<w:p>{BOLD_RUN}</w:p>")

        result = TreeSplicer(body).split_at(RunCoordinate(_run(body), 5))

        after_text = result.after.find(w("t"))
        assert after_text.get("{http://www.w3.org/XML/1998/namespace}space") == "preserve"

    def test_split_at_boundaries_keeps_run(self):
        """Splitting at offset 0 or at the end leaves the run in place."""
        body = parse_body(f"<w:p>{BOLD_RUN}</w:p>")
        run = _run(body)
        splicer = TreeSplicer(body)

        at_start = splicer.split_at(RunCoordinate(run, 0))
        at_end = splicer.split_at(RunCoordinate(run, 11))

        assert at_start.before is None and at_start.after is run
        assert at_end.before is run and at_end.after is None
        assert len(body.findall(f".//{w('r')}")) == 1

    def test_zero_width_leaf_stays_with_preceding_text(self):
        body = parse_body("<w:p><w:r><w:t>ab</w:t><w:tab/><w:t>cd</w:t></w:r></w:p>")

        result = TreeSplicer(body).split_at(RunCoordinate(_run(body), 2))

        assert result.before.find(w("tab")) is not None
        assert result.after.find(w("tab")) is None
        assert run_text(result.after) == "cd"

    def test_detached_run_is_rejected(self):
        body = parse_body(paragraphs("text"))
        stray = etree.fromstring(f'<w:r xmlns:w="{WORD_NS}"><w:t>stray</w:t></w:r>')

        with pytest.raises(TreeConsistencyError):
            TreeSplicer(body).split_at(RunCoordinate(stray, 1))

    def test_offset_out_of_range_is_rejected(self):
        body = parse_body(paragraphs("text"))

        with pytest.raises(TreeConsistencyError):
            TreeSplicer(body).split_at(RunCoordinate(_run(body), 9))


class TestMaterializeRange:
    """Tests for TreeSplicer.materialize_range()."""

    def _locate(self, body, query, **kwargs):
        return TextLocator().locate(body, TextSearchPosition(query, **kwargs))

    def test_within_one_run(self):
        body = parse_body(f"<w:p>{BOLD_RUN}</w:p>")
        found = self._locate(body, "lo wo")

        spliced = TreeSplicer(body).materialize_range(found.start, found.end)

        assert [run_text(r) for r in spliced.matched] == ["lo wo"]
        assert run_text(spliced.before) == "Hel"
        assert run_text(spliced.after) == "rld"
        assert visible_text(body) == "Hello world"

    def test_insertion_points_bracket_the_range(self):
        body = parse_body(f"<w:p>{BOLD_RUN}</w:p>")
        found = self._locate(body, "lo wo")
        spliced = TreeSplicer(body).materialize_range(found.start, found.end)

        spliced.start_point.insert(etree.Element(w("bookmarkStart")))
        spliced.end_point.insert(etree.Element(w("bookmarkEnd")))

        tags = [etree.QName(child).localname for child in body.find(w("p"))]
        assert tags == ["r", "bookmarkStart", "r", "bookmarkEnd", "r"]

    def test_across_runs(self):
        body = parse_body(
            "<w:p><w:r><w:t>one two</w:t></w:r><w:r><w:t> three </w:t></w:r>"
            "<w:r><w:t>four five</w:t></w:r></w:p>"
        )
        found = self._locate(body, "two three four")

        spliced = TreeSplicer(body).materialize_range(found.start, found.end)

        assert "".join(run_text(r) for r in spliced.matched) == "two three four"
        assert run_text(spliced.before) == "one "
        assert run_text(spliced.after) == " five"
        assert spliced.removed == []

    def test_remove_inner_detaches_middle_runs(self):
        body = parse_body(
            "<w:p><w:r><w:t>one two</w:t></w:r><w:r><w:t> three </w:t></w:r>"
            "<w:r><w:t>four five</w:t></w:r></w:p>"
        )
        found = self._locate(body, "two three four")

        spliced = TreeSplicer(body).materialize_range(found.start, found.end, remove_inner=True)

        assert spliced.removed_count == 1
        assert visible_text(body) == "one twofour five"

    def test_remove_inner_across_paragraphs_removes_blocks_between(self):
        body = parse_body(paragraphs("start here", "middle", "end there"))
        found = self._locate(body, "here", end_search_text="end")

        spliced = TreeSplicer(body).materialize_range(found.start, found.end, remove_inner=True)

        assert len(body.findall(w("p"))) == 2
        assert "".join(run_text(r) for r in spliced.content_runs) == "heremiddleend"

    def test_unreachable_end_paragraph_leaves_tree_unchanged(self):
        """An end paragraph that is not a later sibling is rejected up front."""
        body = parse_body(
            paragraphs("before the table")
            + "<w:tbl><w:tr><w:tc>"
            + paragraphs("inside the cell")
            + "</w:tc></w:tr></w:tbl>"
        )
        snapshot = etree.tostring(body)
        found = self._locate(body, "table", end_search_text="cell")

        with pytest.raises(TreeConsistencyError):
            TreeSplicer(body).materialize_range(found.start, found.end, remove_inner=True)

        assert etree.tostring(body) == snapshot

    def test_stale_coordinate_is_rejected(self):
        body = parse_body(f"<w:p>{BOLD_RUN}</w:p>")
        found = self._locate(body, "world")
        splicer = TreeSplicer(body)
        splicer.split_at(found.start)

        with pytest.raises(TreeConsistencyError):
            splicer.materialize_range(found.start, found.end)
