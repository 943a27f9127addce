"""Document text extraction."""

from .extractor import ALLOWED_MIME_TYPES, DocumentKind, TextExtractor
from .html_preview import render_docx_html

__all__ = ["ALLOWED_MIME_TYPES", "DocumentKind", "TextExtractor", "render_docx_html"]
