"""Document management business logic."""

import asyncio
import logging
from typing import List, Optional
from ..infrastructure.database import DatabaseClient
from ..infrastructure.database.models import DocumentModel
from ..infrastructure.extraction import DocumentKind, render_docx_html
from ..infrastructure.storage import BlobStore, sanitize_filename
from ..models import Document, TenantContext
from .exceptions import (
    CaseNotFound,
    DocumentNotFound,
    IndexingQueueFull,
    NotFoundError,
    UnsupportedMediaType,
    ValidationFailed,
)
from .indexing_queue import IndexingQueue
from .job_manager import Job

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 255


class DocumentManager:
    """Business logic for document upload, indexing and lifecycle."""

    def __init__(
        self,
        db_client: DatabaseClient,
        blob_store: BlobStore,
        indexing_queue: IndexingQueue,
        tenant: TenantContext,
    ):
        """Initialize document manager.

        Args:
            db_client: Database client for document records
            blob_store: Storage for the uploaded binaries
            indexing_queue: Worker pool that rebuilds page indexes
            tenant: Tenant all operations are scoped to
        """
        self.db = db_client
        self.blobs = blob_store
        self.queue = indexing_queue
        self.tenant = tenant

    async def _require_case(self, case_id: str):
        if await self.db.get_case(case_id, self.tenant.id) is None:
            raise CaseNotFound(case_id)

    async def _require_document(self, document_id: str) -> DocumentModel:
        row = await self.db.get_document(document_id, self.tenant.id)
        if row is None:
            raise DocumentNotFound(document_id)
        return row

    async def upload(self, case_id: str, filename: Optional[str], mime: Optional[str], stream) -> Document:
        """Store an uploaded file and record it.

        The case and MIME type are checked before anything is written. The
        file is written first and the row inserted after, so a row never
        points at a missing file. Indexing is scheduled separately with
        ``schedule_indexing``.

        Args:
            case_id: Owning case
            filename: Client-supplied filename
            mime: Declared MIME type
            stream: Object with an async ``read(size)`` method

        Returns:
            The created document

        Raises:
            CaseNotFound: If the case does not exist
            UnsupportedMediaType: If the MIME type is not PDF or DOCX
            OSError: If the file cannot be written
        """
        await self._require_case(case_id)
        kind = DocumentKind.from_mime(mime)
        if kind is None:
            raise UnsupportedMediaType(mime)

        blob = await self.blobs.write(stream, filename)
        try:
            row = await self.db.create_document(DocumentModel(
                tenant_id=self.tenant.id,
                case_id=case_id,
                name=sanitize_filename(filename),
                mime=kind.value,
                storage_url=blob.locator,
                sha256=None,
                version=1,
            ))
        except Exception:
            logger.error(f"Failed to record upload {blob.locator}, removing file")
            await self.blobs.remove(blob.locator)
            raise
        logger.info(f"Uploaded document {row.id} ({blob.size} bytes) to case {case_id}")
        return Document.model_validate(row)

    async def schedule_indexing(self, document: Document) -> Optional[Job]:
        """Queue indexing for a new upload; a full queue is logged, not raised."""
        try:
            return self.queue.submit(
                document.id, document.mime, self.blobs.resolve_path(document.storage_url)
            )
        except IndexingQueueFull:
            logger.error(f"Indexing queue full, document {document.id} left unindexed")
            return None

    async def get(self, document_id: str) -> Document:
        return Document.model_validate(await self._require_document(document_id))

    async def list(self, case_id: str, q: Optional[str] = None) -> List[Document]:
        """List a case's documents, newest first, optionally filtered by name."""
        await self._require_case(case_id)
        term = (q or "").strip().lower()
        rows = await self.db.list_documents(self.tenant.id, case_id, term or None)
        return [Document.model_validate(row) for row in rows]

    async def rename(self, document_id: str, name: str):
        cleaned = name.strip()
        if not cleaned or len(cleaned) > MAX_NAME_LENGTH:
            raise ValidationFailed("name", f"name must be 1-{MAX_NAME_LENGTH} characters")
        if not await self.db.rename_document(document_id, self.tenant.id, cleaned):
            raise DocumentNotFound(document_id)
        logger.info(f"Renamed document {document_id}")

    async def delete(self, document_id: str) -> str:
        """Delete the document row and its pages.

        Returns:
            Storage locator of the file, which the caller removes afterwards
        """
        locator = await self.db.delete_document(document_id, self.tenant.id)
        if locator is None:
            raise DocumentNotFound(document_id)
        logger.info(f"Deleted document {document_id}")
        return locator

    async def remove_file(self, locator: str) -> bool:
        return await self.blobs.remove(locator)

    async def reindex(self, document_id: str) -> Job:
        """Queue a rebuild of the document's pages and wait for its outcome.

        Raises:
            DocumentNotFound: If the document does not exist
            IndexingQueueFull: If the backlog is at capacity
        """
        row = await self._require_document(document_id)
        job = self.queue.submit(row.id, row.mime, self.blobs.resolve_path(row.storage_url))
        return await self.queue.wait(job.job_id) or job

    async def render_html(self, document_id: str) -> str:
        """HTML preview of a DOCX document.

        Raises:
            DocumentNotFound: If the document does not exist
            UnsupportedMediaType: If the document is not a DOCX
            NotFoundError: If the stored file is missing (``file_not_found``)
        """
        row = await self._require_document(document_id)
        if DocumentKind.from_mime(row.mime) is not DocumentKind.DOCX:
            raise UnsupportedMediaType(row.mime)

        try:
            data = await self.blobs.read(row.storage_url)
        except FileNotFoundError as e:
            logger.warning(f"File for document {document_id} is missing: {row.storage_url}")
            raise NotFoundError(str(e), code="file_not_found") from e
        return await asyncio.to_thread(render_docx_html, data, row.name)

    async def reconcile_storage(self, min_age_seconds: float = 3600) -> List[str]:
        """Remove stored files that no document references.

        Only files older than ``min_age_seconds`` are considered, so uploads
        whose row is about to be inserted are left alone.

        Returns:
            Locators of the removed files
        """
        known = await self.db.storage_locators()
        orphans = await asyncio.to_thread(self.blobs.orphans, known, min_age_seconds)
        removed = [locator for locator in orphans if await self.blobs.remove(locator)]
        if removed:
            logger.info(f"Reconciliation removed {len(removed)} orphaned files")
        return removed
