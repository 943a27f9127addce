"""HTML preview of DOCX documents (headings, paragraphs and tables)."""

import io
import logging
from html import escape

from docx import Document as open_docx
from docx.text.paragraph import Paragraph

from ...core.exceptions import ExtractionError
from .extractor import iter_docx_blocks

logger = logging.getLogger(__name__)

_STYLE = (
    "<style>"
    "body{font-family:Georgia,serif;max-width:860px;margin:24px auto;padding:0 16px;color:#1f1f1f;}"
    "h1,h2,h3,h4{margin:18px 0 8px;}"
    "p{line-height:1.5;margin:6px 0;}"
    "table{border-collapse:collapse;margin:12px 0;}"
    "td{border:1px solid #ccc;padding:4px 8px;vertical-align:top;}"
    "</style>"
)


def _heading_level(paragraph: Paragraph) -> int:
    name = (paragraph.style.name if paragraph.style is not None else "") or ""
    if name == "Title":
        return 1
    if name.startswith("Heading "):
        suffix = name[len("Heading "):]
        if suffix.isdigit():
            return min(max(int(suffix), 1), 4)
    return 0


def _render_paragraph(paragraph: Paragraph) -> str:
    text = escape(paragraph.text)
    level = _heading_level(paragraph)
    if level:
        return f"<h{level}>{text}</h{level}>"
    if not text.strip():
        return ""
    return f"<p>{text}</p>"


def _render_table(table) -> str:
    rows = []
    for row in table.rows:
        cells = "".join(f"<td>{escape(cell.text)}</td>" for cell in row.cells)
        rows.append(f"<tr>{cells}</tr>")
    return "<table>" + "".join(rows) + "</table>"


def render_docx_html(data: bytes, title: str) -> str:
    """Render a DOCX body as a minimal standalone HTML page.

    Raises:
        ExtractionError: If the DOCX cannot be parsed
    """
    try:
        document = open_docx(io.BytesIO(data))
        body = []
        for block in iter_docx_blocks(document):
            if isinstance(block, Paragraph):
                body.append(_render_paragraph(block))
            else:
                body.append(_render_table(block))
    except Exception as e:
        logger.error(f"Failed to render DOCX preview: {e}")
        raise ExtractionError(f"Could not parse DOCX document: {e}") from e

    return (
        "<!doctype html>"
        f"<html><head><meta charset='utf-8'><title>{escape(title)}</title>"
        + _STYLE
        + "</head><body>"
        + "".join(body)
        + "</body></html>"
    )
