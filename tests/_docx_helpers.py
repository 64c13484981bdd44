"""Helpers shared by the test modules: build minimal .docx files and XML trees."""

import zipfile
from pathlib import Path

from lxml import etree

WORD_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
NS = {"w": WORD_NS}

CONTENT_TYPES = """<?xml version="1.0" encoding="UTF-8"?>
<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">
    <Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>
    <Default Extension="xml" ContentType="application/xml"/>
    <Override PartName="/word/document.xml" ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>
</Types>"""

PACKAGE_RELS = """<?xml version="1.0" encoding="UTF-8"?>
<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">
    <Relationship Id="rId1" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument" Target="word/document.xml"/>
</Relationships>"""

EMPTY_DOCUMENT_RELS = """<?xml version="1.0" encoding="UTF-8"?>
<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">
</Relationships>"""


def w(tag: str) -> str:
    return f"{{{WORD_NS}}}{tag}"


def document_xml(body: str) -> str:
    """Wrap body content in a w:document."""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<w:document xmlns:w="{WORD_NS}"><w:body>{body}</w:body></w:document>'
    )


def paragraphs(*texts: str) -> str:
    """Body XML with one single-run paragraph per text."""
    return "".join(f'<w:p><w:r><w:t xml:space="preserve">{t}</w:t></w:r></w:p>' for t in texts)


def create_test_docx(
    path: Path,
    body: str,
    comments: str | None = None,
    settings: str | None = None,
    document_rels: str = EMPTY_DOCUMENT_RELS,
    content_types: str = CONTENT_TYPES,
) -> Path:
    """Write a minimal valid .docx whose body is the given XML."""
    with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("[Content_Types].xml", content_types)
        zf.writestr("_rels/.rels", PACKAGE_RELS)
        zf.writestr("word/_rels/document.xml.rels", document_rels)
        zf.writestr("word/document.xml", document_xml(body))
        if comments is not None:
            zf.writestr("word/comments.xml", comments)
        if settings is not None:
            zf.writestr("word/settings.xml", settings)
    return path


def parse_body(body: str) -> etree._Element:
    """Parse body content into a w:body element."""
    root = etree.fromstring(document_xml(body).encode("utf-8"))
    return root.find(w("body"))


def read_part(docx_path: Path, part_name: str) -> etree._Element | None:
    """Parse one part of a saved .docx, or None if it is missing."""
    with zipfile.ZipFile(docx_path) as zf:
        if part_name not in zf.namelist():
            return None
        return etree.fromstring(zf.read(part_name))


def visible_text(root: etree._Element) -> str:
    """Concatenated w:t text under root."""
    return "".join(t.text or "" for t in root.iter(w("t")))


def paragraph_texts(root: etree._Element) -> list[str]:
    """Visible text of every body paragraph."""
    return ["".join(t.text or "" for t in p.iter(w("t"))) for p in root.iter(w("p"))]
