"""Page index: extracted page text persisted for search."""

import asyncio
import logging
from pathlib import Path
from typing import List, Union

from sqlalchemy.exc import IntegrityError

from ..infrastructure.database import PageStore
from ..infrastructure.database.models import DocumentPageModel
from ..infrastructure.extraction import TextExtractor
from .exceptions import DocumentNotFound

logger = logging.getLogger(__name__)


class PageIndex:
    """Rebuilds and queries the per-page text of documents."""

    def __init__(self, page_store: PageStore, extractor: TextExtractor):
        self.store = page_store
        self.extractor = extractor

    async def reindex(self, document_id: str, mime: str, path: Union[str, Path]) -> int:
        """Replace a document's pages with freshly extracted text.

        File reading and parsing run in worker threads. The delete and insert
        share one transaction, so running this twice leaves the same rows.

        Returns:
            Number of pages written

        Raises:
            DocumentNotFound: If the document row was deleted meanwhile
            UnsupportedMediaType, ExtractionError: From the extractor
            OSError: If the file cannot be read
        """
        data = await asyncio.to_thread(Path(path).read_bytes)
        pages = await asyncio.to_thread(self.extractor.extract_pages, data, mime)

        try:
            count = await self.store.replace(document_id, pages)
        except IntegrityError as e:
            logger.warning(f"Document {document_id} vanished during indexing: {e.orig}")
            raise DocumentNotFound(document_id) from e

        logger.info(f"Indexed {count} pages for document {document_id}")
        return count

    async def drop_for_document(self, document_id: str) -> int:
        return await self.store.delete(document_id)

    async def page_count(self, document_id: str) -> int:
        return await self.store.count(document_id)

    async def pages(self, document_id: str) -> List[DocumentPageModel]:
        return await self.store.list_pages(document_id)
