"""Per-page text extraction from PDF and DOCX binaries."""

import io
import logging
from enum import Enum
from typing import Callable, Dict, Iterator, List, Optional

import pypdf
from docx import Document as open_docx
from docx.oxml.ns import qn
from docx.table import Table
from docx.text.paragraph import Paragraph

from ...core.exceptions import ExtractionError, UnsupportedMediaType

logger = logging.getLogger(__name__)


class DocumentKind(str, Enum):
    """Supported document formats, keyed by MIME type."""

    PDF = "application/pdf"
    DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

    @classmethod
    def from_mime(cls, mime: Optional[str]) -> Optional["DocumentKind"]:
        """Resolve a MIME type, ignoring parameters such as ``; charset=``."""
        if not mime:
            return None
        essence = mime.split(";", 1)[0].strip().lower()
        try:
            return cls(essence)
        except ValueError:
            return None


ALLOWED_MIME_TYPES = frozenset(kind.value for kind in DocumentKind)


def iter_docx_blocks(document) -> Iterator[object]:
    """Yield body paragraphs and tables in document order."""
    for child in document.element.body.iterchildren():
        if child.tag == qn("w:p"):
            yield Paragraph(child, document)
        elif child.tag == qn("w:tbl"):
            yield Table(child, document)


class TextExtractor:
    """Turns a document binary into an ordered sequence of page texts.

    PDFs produce one element per physical page. DOCX has no stable page
    model, so its whole body is a single page.
    """

    def __init__(self):
        self._handlers: Dict[DocumentKind, Callable[[bytes], Iterator[str]]] = {
            DocumentKind.PDF: self._iter_pdf_pages,
            DocumentKind.DOCX: self._iter_docx_pages,
        }

    def supports(self, mime: Optional[str]) -> bool:
        return DocumentKind.from_mime(mime) is not None

    def iter_pages(self, data: bytes, mime: str) -> Iterator[str]:
        """Lazily yield page texts.

        Raises:
            UnsupportedMediaType: If ``mime`` is not PDF or DOCX
            ExtractionError: If the binary cannot be parsed
        """
        kind = DocumentKind.from_mime(mime)
        if kind is None:
            raise UnsupportedMediaType(mime)
        return self._guarded(self._handlers[kind], data, kind)

    def extract_pages(self, data: bytes, mime: str) -> List[str]:
        return list(self.iter_pages(data, mime))

    def _guarded(self, handler, data: bytes, kind: DocumentKind) -> Iterator[str]:
        try:
            yield from handler(data)
        except Exception as e:
            logger.error(f"Failed to extract text from {kind.name} document: {e}")
            raise ExtractionError(f"Could not parse {kind.name} document: {e}") from e

    def _iter_pdf_pages(self, data: bytes) -> Iterator[str]:
        """Extract text from PDF pages, collapsing whitespace runs."""
        reader = pypdf.PdfReader(io.BytesIO(data))
        for page in reader.pages:
            yield " ".join((page.extract_text() or "").split())

    def _iter_docx_pages(self, data: bytes) -> Iterator[str]:
        """Extract raw DOCX body text, including table cells."""
        document = open_docx(io.BytesIO(data))
        lines = []
        for block in iter_docx_blocks(document):
            if isinstance(block, Paragraph):
                lines.append(block.text)
            else:
                for row in block.rows:
                    for cell in row.cells:
                        lines.extend(p.text for p in cell.paragraphs)
        yield "\n".join(lines)
