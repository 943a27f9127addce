"""Shared fixtures: per-test database and blob root, ASGI client, file builders."""

import io
from typing import List

import httpx
import pytest
from docx import Document as DocxDocument

from novafolio_api.config.settings import Settings
from novafolio_api.main import create_app, lifespan

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def _pdf_string(text: str) -> str:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def build_pdf(pages: List[str]) -> bytes:
    """Minimal PDF with one Helvetica text line per page ("" = no text layer)."""
    objects = {
        1: b"<< /Type /Catalog /Pages 2 0 R >>",
        3: b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    }
    kids = []
    for index, text in enumerate(pages):
        page_id = 4 + 2 * index
        content_id = page_id + 1
        kids.append(f"{page_id} 0 R")
        objects[page_id] = (
            "<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
            f"/Resources << /Font << /F1 3 0 R >> >> /Contents {content_id} 0 R >>"
        ).encode("ascii")
        stream = f"BT /F1 12 Tf 72 720 Td ({_pdf_string(text)}) Tj ET".encode("latin-1") if text else b""
        objects[content_id] = (
            f"<< /Length {len(stream)} >>\nstream\n".encode("ascii") + stream + b"\nendstream"
        )
    objects[2] = f"<< /Type /Pages /Kids [{' '.join(kids)}] /Count {len(pages)} >>".encode("ascii")

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number in range(1, len(objects) + 1):
        offsets.append(len(out))
        out += f"{number} 0 obj\n".encode("ascii") + objects[number] + b"\nendobj\n"

    xref_offset = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode("ascii")
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode("ascii")
    out += (
        f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\n"
        f"startxref\n{xref_offset}\n%%EOF\n"
    ).encode("ascii")
    return bytes(out)


def build_docx(paragraphs: List[str], heading: str = None, table: List[List[str]] = None) -> bytes:
    document = DocxDocument()
    if heading:
        document.add_heading(heading, level=1)
    for text in paragraphs:
        document.add_paragraph(text)
    if table:
        grid = document.add_table(rows=len(table), cols=len(table[0]))
        for r, row in enumerate(table):
            for c, value in enumerate(row):
                grid.cell(r, c).text = value
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def pdf_factory():
    return build_pdf


@pytest.fixture
def docx_factory():
    return build_docx


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        storage_dir=str(tmp_path / "uploads"),
        startup_retries=0,
        indexing_workers=2,
        sweep_orphans_on_startup=False,
    )


@pytest.fixture
async def app(settings):
    application = create_app(settings)
    async with lifespan(application):
        yield application


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        yield http


@pytest.fixture
async def case_id(client):
    """A case under a fresh client."""
    response = await client.post("/v1/clients", json={"name": "Acme Corp"})
    assert response.status_code == 201
    response = await client.post(
        "/v1/cases", json={"client_id": response.json()["id"], "title": "Contract review"}
    )
    assert response.status_code == 201
    return response.json()["id"]


@pytest.fixture
def upload(client, app):
    """Upload a file and wait until its indexing job has run."""
    async def _upload(case: str, filename: str, data: bytes, mime: str):
        response = await client.post(
            "/v1/documents/upload",
            data={"case_id": case},
            files={"file": (filename, data, mime)},
        )
        await app.state.indexing_queue.wait_for_idle(timeout=10)
        return response

    return _upload
