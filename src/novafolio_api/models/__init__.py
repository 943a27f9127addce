"""Data models for the NovaFolio API."""

from .document import Document, DocumentRename, DocumentListResponse, UploadResponse
from .records import (
    Case,
    CaseCreate,
    CaseListResponse,
    CaseUpdate,
    Client,
    ClientCreate,
    ClientListResponse,
    ClientUpdate,
)
from .requests import (
    CreatedResponse,
    HealthResponse,
    JobStatus,
    SearchHit,
    SearchResponse,
    TenantContext,
)

__all__ = [
    "Document",
    "DocumentRename",
    "DocumentListResponse",
    "UploadResponse",
    "Case",
    "CaseCreate",
    "CaseListResponse",
    "CaseUpdate",
    "Client",
    "ClientCreate",
    "ClientListResponse",
    "ClientUpdate",
    "CreatedResponse",
    "HealthResponse",
    "JobStatus",
    "SearchHit",
    "SearchResponse",
    "TenantContext",
]
