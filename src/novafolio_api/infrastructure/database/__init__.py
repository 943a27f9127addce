"""Relational persistence (SQLAlchemy async)."""

from .client import DatabaseClient
from .pages import PageStore

__all__ = ["DatabaseClient", "PageStore"]
