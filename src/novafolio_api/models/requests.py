"""Request and response models for API endpoints."""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class SearchHit(BaseModel):
    """Single page matching a search query."""
    doc_id: str
    page: int = Field(..., ge=1)
    snippet: str = Field(..., description="Window of page text around the first match")
    doc_name: str
    case_id: str


class SearchResponse(BaseModel):
    """Search response model."""
    items: List[SearchHit]


class CreatedResponse(BaseModel):
    id: str


class JobStatus(BaseModel):
    """Job status response model."""
    job_id: str
    job_type: str
    document_id: Optional[str] = None
    status: str = Field(..., description="pending, processing, completed or failed")
    attempts: int = 0
    created_at: str
    updated_at: str
    result: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    service: str
    version: str
    database_connected: bool
    indexing: Dict[str, int] = Field(default_factory=dict)


class TenantContext(BaseModel):
    """Tenant every request is scoped to, resolved once at startup."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
