"""Persistence of per-page document text and the page search query."""

import logging
from typing import List, Optional, Sequence
from sqlalchemy import select, delete, insert, or_, func
from sqlalchemy.engine import Row
from .client import DatabaseClient
from .models import DocumentModel, DocumentPageModel

logger = logging.getLogger(__name__)

# Keeps each multi-row INSERT well below driver parameter limits
INSERT_BATCH_SIZE = 200


class PageStore:
    """Reads and writes rows of the ``doc_pages`` table."""

    def __init__(self, db_client: DatabaseClient):
        self.db = db_client

    async def replace(self, document_id: str, pages: Sequence[str]) -> int:
        """Replace a document's page set in a single transaction.

        All existing rows are deleted, then one row per page is inserted with
        ``page`` = 1-based position.

        Raises:
            sqlalchemy.exc.IntegrityError: If the document row does not exist.
        """
        dialect = self.db.search
        async with self.db.async_session() as session:
            async with session.begin():
                await session.execute(
                    delete(DocumentPageModel).where(DocumentPageModel.doc_id == document_id)
                )
                rows = [
                    {
                        "doc_id": document_id,
                        "page": number,
                        "text": page_text,
                        "search_vector": dialect.vector_expression(page_text),
                    }
                    for number, page_text in enumerate(pages, start=1)
                ]
                for start in range(0, len(rows), INSERT_BATCH_SIZE):
                    batch = rows[start:start + INSERT_BATCH_SIZE]
                    await session.execute(insert(DocumentPageModel).values(batch))
        return len(pages)

    async def delete(self, document_id: str) -> int:
        async with self.db.async_session() as session:
            result = await session.execute(
                delete(DocumentPageModel).where(DocumentPageModel.doc_id == document_id)
            )
            await session.commit()
            return result.rowcount

    async def list_pages(self, document_id: str) -> List[DocumentPageModel]:
        async with self.db.async_session() as session:
            result = await session.scalars(
                select(DocumentPageModel)
                .where(DocumentPageModel.doc_id == document_id)
                .order_by(DocumentPageModel.page)
            )
            return list(result.all())

    async def count(self, document_id: str) -> int:
        async with self.db.async_session() as session:
            return await session.scalar(
                select(func.count()).select_from(DocumentPageModel).where(
                    DocumentPageModel.doc_id == document_id
                )
            )

    async def search(
        self,
        tenant_id: str,
        query: str,
        limit: int,
        case_id: Optional[str] = None,
    ) -> List[Row]:
        """Find pages matching ``query`` as a substring or a full-text match.

        Rows carry ``doc_id, page, text, doc_name, case_id`` and are ordered by
        trigram similarity (descending, NULLs last) then page number.
        """
        dialect = self.db.search
        page = DocumentPageModel
        doc = DocumentModel

        score = dialect.similarity(page.text, query)
        stmt = (
            select(
                page.doc_id,
                page.page,
                page.text,
                doc.name.label("doc_name"),
                doc.case_id,
            )
            .join(doc, doc.id == page.doc_id)
            .where(doc.tenant_id == tenant_id)
            .where(
                or_(
                    dialect.substring_match(page.text, query),
                    dialect.fulltext_match(page.search_vector, query),
                )
            )
            .order_by(score.desc().nulls_last(), page.page.asc())
            .limit(limit)
        )
        if case_id:
            stmt = stmt.where(doc.case_id == case_id)

        async with self.db.async_session() as session:
            result = await session.execute(stmt)
            return list(result.all())
