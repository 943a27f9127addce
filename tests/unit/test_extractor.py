"""Unit tests for PDF/DOCX text extraction and the DOCX HTML preview."""

import types

import pytest

from novafolio_api.core.exceptions import ExtractionError, UnsupportedMediaType
from novafolio_api.infrastructure.extraction import DocumentKind, TextExtractor, render_docx_html

PDF = "application/pdf"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


@pytest.fixture
def extractor():
    return TextExtractor()


@pytest.mark.unit
class TestDocumentKind:

    def test_known_types(self):
        assert DocumentKind.from_mime(PDF) is DocumentKind.PDF
        assert DocumentKind.from_mime(DOCX) is DocumentKind.DOCX

    def test_parameters_are_ignored(self):
        assert DocumentKind.from_mime("application/pdf; charset=binary") is DocumentKind.PDF

    def test_unknown_types(self):
        assert DocumentKind.from_mime("text/plain") is None
        assert DocumentKind.from_mime(None) is None
        assert DocumentKind.from_mime("") is None


@pytest.mark.unit
class TestTextExtractor:

    def test_pdf_yields_one_element_per_page(self, extractor, pdf_factory):
        data = pdf_factory(["first page", "second   page text", "third"])

        pages = extractor.extract_pages(data, PDF)

        assert pages == ["first page", "second page text", "third"]

    def test_pdf_page_without_text_is_empty(self, extractor, pdf_factory):
        pages = extractor.extract_pages(pdf_factory(["intro", ""]), PDF)
        assert pages == ["intro", ""]

    def test_iter_pages_is_lazy_and_reinvocable(self, extractor, pdf_factory):
        data = pdf_factory(["a page", "b page"])
        pages = extractor.iter_pages(data, PDF)

        assert isinstance(pages, types.GeneratorType)
        assert list(pages) == list(extractor.iter_pages(data, PDF))

    def test_docx_is_a_single_page(self, extractor, docx_factory):
        data = docx_factory(["Lease agreement", "Rent is due monthly"], table=[["Party", "Acme"]])

        pages = extractor.extract_pages(data, DOCX)

        assert len(pages) == 1
        assert pages[0].split("\n") == ["Lease agreement", "Rent is due monthly", "Party", "Acme"]

    def test_unsupported_mime(self, extractor):
        with pytest.raises(UnsupportedMediaType):
            extractor.iter_pages(b"hello", "text/plain")

    def test_corrupt_pdf(self, extractor):
        with pytest.raises(ExtractionError):
            extractor.extract_pages(b"not a pdf at all", PDF)

    def test_corrupt_docx(self, extractor):
        with pytest.raises(ExtractionError):
            extractor.extract_pages(b"not a zip archive", DOCX)


@pytest.mark.unit
class TestRenderDocxHtml:

    def test_renders_headings_paragraphs_and_tables(self, docx_factory):
        data = docx_factory(["Body text"], heading="Summary", table=[["k", "v"]])

        html = render_docx_html(data, "lease.docx")

        assert html.startswith("<!doctype html>")
        assert "<title>lease.docx</title>" in html
        assert "<h1>Summary</h1>" in html
        assert "<p>Body text</p>" in html
        assert "<td>k</td><td>v</td>" in html
        assert "<style>" in html

    def test_text_is_escaped(self, docx_factory):
        html = render_docx_html(docx_factory(["<script>alert(1)</script> & more"]), "x")
        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_corrupt_docx_raises_extraction_error(self):
        with pytest.raises(ExtractionError):
            render_docx_html(b"not a zip", "broken.docx")
