"""Document data models."""

from datetime import datetime
from typing import List
from pydantic import BaseModel, Field


class Document(BaseModel):
    """Document metadata as stored; the binary lives in the blob store."""
    id: str
    case_id: str
    name: str
    mime: str
    storage_url: str
    version: int
    created_at: datetime

    class Config:
        from_attributes = True


class DocumentRename(BaseModel):
    """Body of PATCH /v1/documents/{id}."""
    name: str = Field(..., min_length=1, max_length=255)


class DocumentListResponse(BaseModel):
    items: List[Document]


class UploadResponse(BaseModel):
    """Response of a successful upload."""
    id: str
    url: str = Field(..., description="Public locator of the stored file")
