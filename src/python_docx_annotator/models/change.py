"""
Change request models: what to find and what to attach there.

A change list is usually authored as JSON:

    [
      {"position": {"searchText": "governing law", "occurrence": 2},
       "text": "Check jurisdiction", "type": "Comment"},
      {"position": {"searchText": "30 days", "caseSensitive": true},
       "text": "45 days", "type": "Suggestion"}
    ]
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from python_docx_annotator.errors import InvalidInputError, MalformedChangeError


class ChangeType(Enum):
    """Kinds of annotation a change attaches.

    Attributes:
        COMMENT: Anchor a reviewer comment on the located span
        SUGGESTION: Replace the located span with a tracked deletion + insertion
    """

    COMMENT = "Comment"
    SUGGESTION = "Suggestion"

    @classmethod
    def parse(cls, value: "str | ChangeType") -> "ChangeType":
        """Parse a change type name, ignoring case.

        Raises:
            MalformedChangeError: If the name is not a known change type
        """
        if isinstance(value, ChangeType):
            return value
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        raise MalformedChangeError(f"Unknown change type: {value!r}")


@dataclass(frozen=True)
class TextSearchPosition:
    """Where a change applies, addressed by the text found there.

    Without end_search_text the range is exactly the Nth occurrence of
    search_text. With it, the range runs from the start of the Nth occurrence
    of search_text to the end of the Mth occurrence of end_search_text; both
    are resolved independently against the same text stream.

    Attributes:
        search_text: Text to look for (non-empty)
        occurrence: Which occurrence to use, 1-based
        case_sensitive: Compare exactly instead of ignoring case
        end_search_text: Optional text marking the end of the range
        end_occurrence: Which occurrence of end_search_text to use, 1-based
    """

    search_text: str
    occurrence: int = 1
    case_sensitive: bool = False
    end_search_text: str | None = None
    end_occurrence: int = 1

    def __post_init__(self) -> None:
        if not self.search_text:
            raise InvalidInputError("search_text")
        if self.occurrence < 1:
            raise InvalidInputError("occurrence", f"occurrence must be >= 1, got {self.occurrence}")
        if self.end_occurrence < 1:
            raise InvalidInputError(
                "end_occurrence", f"end_occurrence must be >= 1, got {self.end_occurrence}"
            )
        # An empty end marker means "no end marker"
        if self.end_search_text == "":
            object.__setattr__(self, "end_search_text", None)

    @property
    def is_range(self) -> bool:
        """Whether the position spans from search_text to end_search_text."""
        return self.end_search_text is not None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TextSearchPosition":
        """Build a position from its camelCase JSON form.

        Unknown keys are ignored. Occurrences that are not integers fall back
        to 1.

        Raises:
            MalformedChangeError: If data is not a mapping or searchText is missing
        """
        if not isinstance(data, dict):
            raise MalformedChangeError("'position' must be an object")
        search_text = data.get("searchText")
        if not isinstance(search_text, str) or not search_text:
            raise MalformedChangeError("'position.searchText' must be a non-empty string")
        end_search_text = data.get("endSearchText")
        if end_search_text is not None and not isinstance(end_search_text, str):
            raise MalformedChangeError("'position.endSearchText' must be a string")
        try:
            return cls(
                search_text=search_text,
                occurrence=_as_occurrence(data.get("occurrence")),
                case_sensitive=bool(data.get("caseSensitive", False)),
                end_search_text=end_search_text,
                end_occurrence=_as_occurrence(data.get("endOccurrence")),
            )
        except InvalidInputError as e:
            raise MalformedChangeError(str(e)) from e

    def to_dict(self) -> dict[str, Any]:
        """Serialize back to the camelCase JSON form."""
        data: dict[str, Any] = {
            "searchText": self.search_text,
            "occurrence": self.occurrence,
            "caseSensitive": self.case_sensitive,
        }
        if self.end_search_text is not None:
            data["endSearchText"] = self.end_search_text
            data["endOccurrence"] = self.end_occurrence
        return data


@dataclass(frozen=True)
class Change:
    """One requested annotation.

    Attributes:
        position: Where the annotation goes
        text: Comment body, or the replacement text for a suggestion
        type: Comment or suggestion
    """

    position: TextSearchPosition
    text: str
    type: ChangeType

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Change":
        """Build a change from its JSON form.

        Raises:
            MalformedChangeError: If a required field is missing or has the wrong shape
        """
        if not isinstance(data, dict):
            raise MalformedChangeError(f"Change must be an object, got {type(data).__name__}")
        if "position" not in data:
            raise MalformedChangeError("Missing 'position'")
        if "type" not in data:
            raise MalformedChangeError("Missing 'type'")
        text = data.get("text", "")
        if text is None:
            text = ""
        if not isinstance(text, str):
            raise MalformedChangeError("'text' must be a string")
        return cls(
            position=TextSearchPosition.from_dict(data["position"]),
            text=text,
            type=ChangeType.parse(data["type"]),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"position": self.position.to_dict(), "text": self.text, "type": self.type.value}


def _as_occurrence(value: Any) -> int:
    # bool is an int subclass; true/false are not occurrences
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return 1
