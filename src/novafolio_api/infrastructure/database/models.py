"""SQLAlchemy ORM models for tenants, clients, cases, documents and pages."""

from datetime import datetime, timezone
from uuid import uuid4
from sqlalchemy import Column, String, DateTime, Text, JSON, Integer, ForeignKey, CheckConstraint
from sqlalchemy.dialects.postgresql import TSVECTOR
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _new_id() -> str:
    return str(uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TenantModel(Base):
    """Tenant row; the service runs against a single default tenant."""
    __tablename__ = "tenants"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(200), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


class ClientModel(Base):
    __tablename__ = "clients"

    id = Column(String(36), primary_key=True, default=_new_id)
    tenant_id = Column(String(36), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    tags = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    def __repr__(self):
        return f"<ClientModel(id={self.id}, name={self.name})>"


class CaseModel(Base):
    __tablename__ = "cases"
    __table_args__ = (
        CheckConstraint("status IN ('open', 'closed')", name="ck_cases_status"),
    )

    id = Column(String(36), primary_key=True, default=_new_id)
    tenant_id = Column(String(36), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    client_id = Column(String(36), ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    status = Column(String(20), nullable=False, default="open")
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    def __repr__(self):
        return f"<CaseModel(id={self.id}, title={self.title})>"


class DocumentModel(Base):
    """Uploaded document metadata; bytes live in the blob store."""
    __tablename__ = "documents"

    id = Column(String(36), primary_key=True, default=_new_id)
    tenant_id = Column(String(36), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    case_id = Column(String(36), ForeignKey("cases.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    mime = Column(String(127), nullable=False)
    storage_url = Column(String(512), nullable=False, unique=True)
    sha256 = Column(String(64), nullable=True)  # reserved, not computed yet
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)

    def __repr__(self):
        return f"<DocumentModel(id={self.id}, name={self.name})>"


class DocumentPageModel(Base):
    """Extracted text of one page; the searchable projection of a document."""
    __tablename__ = "doc_pages"
    __table_args__ = (
        CheckConstraint("page >= 1", name="ck_doc_pages_page_positive"),
    )

    doc_id = Column(String(36), ForeignKey("documents.id", ondelete="CASCADE"), primary_key=True)
    page = Column(Integer, primary_key=True, autoincrement=False)
    text = Column(Text, nullable=False, default="")
    # TSVECTOR on PostgreSQL, space separated lexemes elsewhere
    search_vector = Column(Text().with_variant(TSVECTOR(), "postgresql"), nullable=True)

    def __repr__(self):
        return f"<DocumentPageModel(doc_id={self.doc_id}, page={self.page})>"
