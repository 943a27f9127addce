"""Page search business logic."""

import logging
from typing import List, Optional
from ..infrastructure.database import PageStore
from ..models import SearchHit, TenantContext
from .exceptions import ValidationFailed

logger = logging.getLogger(__name__)


def make_snippet(text: str, query: str, lead: int = 50, length: int = 180) -> str:
    """Window of ``text`` starting ``lead`` characters before the first match.

    The match is case-insensitive. Without a match the window starts at 0.
    """
    idx = text.lower().find(query.lower()) if query else -1
    start = max(0, idx - lead) if idx >= 0 else 0
    return text[start:start + length]


class SearchManager:
    """Business logic for ranked page search."""

    def __init__(
        self,
        page_store: PageStore,
        tenant: TenantContext,
        default_limit: int = 30,
        max_limit: int = 100,
        snippet_lead: int = 50,
        snippet_length: int = 180,
    ):
        """Initialize search manager.

        Args:
            page_store: Page rows and the search query
            tenant: Tenant all searches are scoped to
            default_limit: Hits returned when no limit is given
            max_limit: Largest accepted limit
            snippet_lead: Characters kept before the first match
            snippet_length: Maximum snippet length
        """
        self.pages = page_store
        self.tenant = tenant
        self.default_limit = default_limit
        self.max_limit = max_limit
        self.snippet_lead = snippet_lead
        self.snippet_length = snippet_length

    async def search(
        self,
        query: str,
        case_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[SearchHit]:
        """Search extracted page text.

        Pages match when they contain ``query`` as a case-insensitive
        substring or satisfy the full-text query. Results are ordered by
        trigram similarity to the query, then by page number.

        Args:
            query: Search text, required and non-blank
            case_id: Optional case scope
            limit: Maximum hits, within ``[1, max_limit]``

        Returns:
            Hits with snippets

        Raises:
            ValidationFailed: If the query is blank or the limit out of range
        """
        if query is None or not query.strip():
            raise ValidationFailed("q", "q is required")
        if limit is None:
            limit = self.default_limit
        if limit < 1 or limit > self.max_limit:
            raise ValidationFailed("limit", f"limit must be between 1 and {self.max_limit}")

        rows = await self.pages.search(self.tenant.id, query, limit, case_id=case_id)
        hits = [
            SearchHit(
                doc_id=row.doc_id,
                page=row.page,
                snippet=make_snippet(row.text or "", query, self.snippet_lead, self.snippet_length),
                doc_name=row.doc_name,
                case_id=row.case_id,
            )
            for row in rows
        ]
        logger.debug(f"Search for {query!r} returned {len(hits)} hits")
        return hits
