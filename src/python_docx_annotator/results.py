"""
Result classes for document operations.

This module provides result types that report how each requested change was
applied, including which locator tier placed it.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .text_search import MatchTier


@dataclass
class ChangeResult:
    """Result of applying a single change.

    Attributes:
        success: Whether the change was applied
        change_type: "comment" or "suggestion"
        message: Human-readable message about the result
        tier: Locator tier that placed the change
        matched_text: Document text the change was attached to
        record_id: Comment id or revision id written
    """

    success: bool
    change_type: str
    message: str
    tier: "MatchTier | None" = None
    matched_text: str = ""
    record_id: str | None = None

    @property
    def used_fallback(self) -> bool:
        """Whether the text was not found as requested and a fallback anchor was used."""
        return self.tier is not None and self.tier.is_fallback

    def __str__(self) -> str:
        """Get string representation of the result."""
        status = "✓" if self.success else "✗"
        suffix = f" [{self.tier.value}]" if self.used_fallback else ""
        return f"{status} {self.change_type}: {self.message}{suffix}"
