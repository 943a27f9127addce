"""Search endpoint."""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from ...core.search_manager import SearchManager
from ...models import SearchResponse
from ..dependencies import get_search_manager

router = APIRouter(prefix="/v1/search", tags=["search"])


@router.get(
    "",
    response_model=SearchResponse,
    summary="Search Pages",
    description="""
Search the extracted text of every indexed page.

A page matches when it contains `q` (case-insensitive, wildcards taken
literally) or matches `q` as a web-style full-text query. Hits are ordered by
trigram similarity to `q`, then by page number. `limit` defaults to 30 and
must be within 1-100.
    """,
    responses={400: {"description": "Missing `q` or `limit` out of range"}},
)
async def search_pages(
    q: str = Query(..., description="Search text"),
    case_id: Optional[str] = Query(None, description="Restrict to one case"),
    limit: Optional[int] = Query(None, description="Maximum number of hits"),
    search: SearchManager = Depends(get_search_manager),
):
    hits = await search.search(q, case_id=case_id, limit=limit)
    return SearchResponse(items=hits)
