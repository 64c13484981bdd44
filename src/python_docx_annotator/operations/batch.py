"""
BatchOperations class and change-list loading.

A change list is a JSON array of change objects, given inline or in a file.
YAML files with the same structure are accepted as well, and either format may
wrap the list in a top-level "changes" key:

    changes:
      - position: {searchText: "30 days"}
        text: "45 days"
        type: Suggestion
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from ..errors import ChangeApplicationError, DocxAnnotatorError, MalformedChangeError
from ..models.change import Change, ChangeType

if TYPE_CHECKING:
    from ..document import Document
    from ..results import ChangeResult

logger = logging.getLogger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}


def load_changes(source: str | Path) -> list[Change]:
    """Load a change list from a file path or an inline JSON string.

    A str that starts with "[" or "{" (after whitespace) is parsed as inline
    JSON; anything else is treated as a path. Files ending in .yaml/.yml are
    parsed as YAML, all others as JSON.

    Raises:
        MalformedChangeError: If the content cannot be parsed or is not a list
            of change objects
        FileNotFoundError: If a path is given and does not exist
    """
    if isinstance(source, str) and source.lstrip()[:1] in ("[", "{"):
        return parse_changes(_parse_json(source, "inline JSON"))

    path = Path(source)
    if not path.is_file():
        raise FileNotFoundError(f"Change file not found: {path}")
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in YAML_SUFFIXES:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise MalformedChangeError(f"Invalid YAML in {path}: {e}") from e
    else:
        data = _parse_json(text, str(path))
    return parse_changes(data)


def parse_changes(data: Any) -> list[Change]:
    """Turn decoded JSON/YAML into Change objects.

    Raises:
        MalformedChangeError: If data is not a list of change objects
    """
    if isinstance(data, dict) and "changes" in data:
        data = data["changes"]
    if not isinstance(data, list):
        raise MalformedChangeError(
            f"Change list must be an array, got {type(data).__name__}"
        )

    changes = []
    for index, item in enumerate(data):
        if isinstance(item, Change):
            changes.append(item)
            continue
        try:
            changes.append(Change.from_dict(item))
        except MalformedChangeError as e:
            raise MalformedChangeError(e.details, index) from e
    return changes


def _parse_json(text: str, origin: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedChangeError(f"Invalid JSON in {origin}: {e}") from e


class BatchOperations:
    """Applies a list of changes to a Document in order.

    Each change re-locates its text against the current tree, so earlier
    changes are visible to later ones. The batch stops at the first failure.

    Example:
        >>> doc = Document("contract.docx")
        >>> results = doc.apply_changes(load_changes("changes.json"))
        >>> doc.save()
    """

    def __init__(self, document: Document) -> None:
        """Initialize BatchOperations with a Document reference.

        Args:
            document: The Document instance to operate on
        """
        self._document = document

    def apply_change(self, change: Change) -> ChangeResult:
        """Dispatch one change to the comment or suggestion handler."""
        if change.type is ChangeType.COMMENT:
            return self._document.add_comment(change.position, change.text)
        return self._document.add_suggestion(change.position, change.text)

    def apply_changes(self, changes: list[Change | dict[str, Any]]) -> list[ChangeResult]:
        """Apply changes in order, stopping at the first failure.

        Changes already applied stay applied in memory; nothing is saved.

        Raises:
            ChangeApplicationError: Wrapping the error raised by change K, with
                its index and the document source
        """
        parsed = parse_changes(list(changes))
        results = []
        for index, change in enumerate(parsed):
            try:
                result = self.apply_change(change)
            except DocxAnnotatorError as e:
                logger.error("Change #%d failed: %s", index + 1, e)
                raise ChangeApplicationError(index, change, self._document.source_label, e) from e
            logger.info("Change #%d: %s", index + 1, result)
            results.append(result)
        return results

    def apply_change_file(self, path: str | Path) -> list[ChangeResult]:
        """Load changes from a JSON or YAML file and apply them."""
        return self.apply_changes(load_changes(Path(path)))
