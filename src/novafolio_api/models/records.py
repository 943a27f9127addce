"""Client and case data models."""

from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID
from pydantic import BaseModel, Field

CaseStatus = Literal["open", "closed"]


class ClientCreate(BaseModel):
    """Model for creating a client."""
    name: str = Field(..., min_length=1, max_length=200)
    tags: List[str] = Field(default_factory=list)


class ClientUpdate(BaseModel):
    """Model for updating a client. At least one field is required."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    tags: Optional[List[str]] = None


class Client(BaseModel):
    id: str
    name: str
    tags: List[str]
    created_at: datetime

    class Config:
        from_attributes = True


class ClientListResponse(BaseModel):
    items: List[Client]


class CaseCreate(BaseModel):
    """Model for creating a case under an existing client."""
    client_id: UUID
    title: str = Field(..., min_length=1, max_length=200)
    status: CaseStatus = "open"


class CaseUpdate(BaseModel):
    """Model for updating a case. At least one field is required."""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    status: Optional[CaseStatus] = None


class Case(BaseModel):
    id: str
    client_id: str
    title: str
    status: CaseStatus
    created_at: datetime

    class Config:
        from_attributes = True


class CaseListResponse(BaseModel):
    items: List[Case]
