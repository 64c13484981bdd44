"""
Tests for the docx-annotator CLI.
"""

import json

import pytest
from _docx_helpers import create_test_docx, paragraphs, read_part, w
from typer.testing import CliRunner

from python_docx_annotator import __version__
from python_docx_annotator.cli import app

runner = CliRunner()

CHANGES = [
    {"position": {"searchText": "30 days"}, "text": "45 days", "type": "Suggestion"},
    {"position": {"searchText": "Delaware"}, "text": "Which court?", "type": "Comment"},
]

CHANGES_YAML = """\
- position:
    searchText: 30 days
  text: 45 days
  type: Suggestion
- position:
    searchText: Delaware
  text: Which court?
  type: Comment
"""


@pytest.fixture
def sample_docx(tmp_path):
    return create_test_docx(
        tmp_path / "sample.docx",
        paragraphs("Payment is due in 30 days.", "Governed by the laws of Delaware."),
    )


def assert_changes_applied(path):
    document = read_part(path, "word/document.xml")
    assert "".join(t.text for t in document.iter(w("delText"))) == "30 days"
    comments = read_part(path, "word/comments.xml")
    assert len(comments.findall(w("comment"))) == 1


class TestVersion:
    """Tests for --version."""

    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output


class TestApplyCommand:
    """Tests for the apply command."""

    def test_inline_json(self, sample_docx):
        result = runner.invoke(app, ["apply", str(sample_docx), "--changes", json.dumps(CHANGES)])

        assert result.exit_code == 0, result.output
        assert "Applied 2 change(s)" in result.output
        assert_changes_applied(sample_docx)

    def test_json_file(self, sample_docx, tmp_path):
        changes_file = tmp_path / "changes.json"
        changes_file.write_text(json.dumps(CHANGES))

        result = runner.invoke(app, ["apply", str(sample_docx), "-f", str(changes_file)])

        assert result.exit_code == 0, result.output
        assert_changes_applied(sample_docx)

    def test_yaml_file(self, sample_docx, tmp_path):
        changes_file = tmp_path / "changes.yml"
        changes_file.write_text(CHANGES_YAML)

        result = runner.invoke(app, ["apply", str(sample_docx), "-f", str(changes_file)])

        assert result.exit_code == 0, result.output
        assert_changes_applied(sample_docx)

    def test_output_path(self, sample_docx, tmp_path):
        output = tmp_path / "reviewed.docx"
        original = sample_docx.read_bytes()

        result = runner.invoke(
            app,
            [
                "apply",
                str(sample_docx),
                "-c",
                json.dumps(CHANGES),
                "--author",
                "Legal Review",
                "-o",
                str(output),
            ],
        )

        assert result.exit_code == 0, result.output
        assert sample_docx.read_bytes() == original
        assert_changes_applied(output)
        comment = read_part(output, "word/comments.xml").find(w("comment"))
        assert comment.get(w("author")) == "Legal Review"

    def test_fallback_is_reported(self, sample_docx):
        changes = [{"position": {"searchText": "nowhere"}, "text": "x", "type": "Comment"}]

        result = runner.invoke(app, ["apply", str(sample_docx), "-c", json.dumps(changes)])

        assert result.exit_code == 0, result.output
        assert "[first_non_blank]" in result.output

    def test_invalid_json(self, sample_docx):
        original = sample_docx.read_bytes()

        result = runner.invoke(app, ["apply", str(sample_docx), "-c", "[{broken"])

        assert result.exit_code == 1
        assert "Error" in result.output
        assert sample_docx.read_bytes() == original

    def test_requires_changes(self, sample_docx):
        result = runner.invoke(app, ["apply", str(sample_docx)])

        assert result.exit_code == 1
        assert "Must specify" in result.output

    def test_rejects_both_sources(self, sample_docx, tmp_path):
        changes_file = tmp_path / "changes.json"
        changes_file.write_text(json.dumps(CHANGES))

        result = runner.invoke(
            app,
            ["apply", str(sample_docx), "-c", json.dumps(CHANGES), "-f", str(changes_file)],
        )

        assert result.exit_code == 1

    def test_missing_document(self, tmp_path):
        result = runner.invoke(
            app, ["apply", str(tmp_path / "missing.docx"), "-c", json.dumps(CHANGES)]
        )

        assert result.exit_code == 1
        assert "missing.docx" in result.output


class TestReadCommands:
    """Tests for locate, comments and info."""

    def test_locate(self, sample_docx):
        result = runner.invoke(app, ["locate", str(sample_docx), "-s", "DELAWARE"])

        assert result.exit_code == 0, result.output
        assert "Tier: exact" in result.output
        assert "'Delaware'" in result.output

    def test_comments_empty(self, sample_docx):
        result = runner.invoke(app, ["comments", str(sample_docx)])

        assert result.exit_code == 0
        assert "No comments." in result.output

    def test_comments_after_apply(self, sample_docx):
        runner.invoke(app, ["apply", str(sample_docx), "-c", json.dumps(CHANGES)])

        result = runner.invoke(app, ["comments", str(sample_docx)])

        assert result.exit_code == 0
        assert "Which court?" in result.output
        assert "on: 'Delaware'" in result.output

    def test_info(self, sample_docx):
        runner.invoke(app, ["apply", str(sample_docx), "-c", json.dumps(CHANGES)])

        result = runner.invoke(app, ["info", str(sample_docx)])

        assert result.exit_code == 0
        assert "Paragraphs: 2" in result.output
        assert "Comments: 1" in result.output
        assert "Tracked changes: 2 (1 insertions, 1 deletions)" in result.output
        assert "Tracking enabled: yes" in result.output
