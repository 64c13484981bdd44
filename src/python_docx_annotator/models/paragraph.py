"""
Paragraph wrapper class for convenient access to paragraph elements.
"""

from lxml import etree

from python_docx_annotator.constants import WORD_NAMESPACE
from python_docx_annotator.tree import iter_runs, run_text


class Paragraph:
    """Wrapper around a w:p (paragraph) element.

    Provides convenient Python API for reading paragraphs.
    """

    def __init__(self, element: etree._Element):
        """Initialize Paragraph wrapper.

        Args:
            element: The w:p XML element to wrap
        """
        if element.tag != f"{{{WORD_NAMESPACE}}}p":
            raise ValueError(f"Expected w:p element, got {element.tag}")
        self._element = element

    @property
    def element(self) -> etree._Element:
        """Get the underlying XML element."""
        return self._element

    @property
    def runs(self) -> list[etree._Element]:
        """Runs owned by this paragraph, including runs inside inline wrappers."""
        return list(iter_runs(self._element))

    @property
    def text(self) -> str:
        """Get the visible text of the paragraph.

        Only w:t content counts; text inside tracked deletions (w:delText) is
        excluded, matching what the locator searches.
        """
        return "".join(run_text(run) for run in iter_runs(self._element))

    @property
    def style(self) -> str | None:
        """Get the paragraph style ID, if any."""
        p_style = self._element.find(
            f"{{{WORD_NAMESPACE}}}pPr/{{{WORD_NAMESPACE}}}pStyle"
        )
        if p_style is None:
            return None
        return p_style.get(f"{{{WORD_NAMESPACE}}}val")

    def contains(self, text: str, case_sensitive: bool = True) -> bool:
        """Check if paragraph contains specific text."""
        if case_sensitive:
            return text in self.text
        return text.lower() in self.text.lower()

    def __repr__(self) -> str:
        text_preview = self.text[:50] + "..." if len(self.text) > 50 else self.text
        return f"<Paragraph: {text_preview!r}>"
