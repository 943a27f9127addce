"""Search Dialect Interface

Backend-neutral abstraction for the two text-matching strategies the page
search combines in a single predicate:
- trigram similarity (``similarity(text, query)``), used for ranking and
  fuzzy name filters
- full-text matching of a persisted search vector against a web-search
  style query

Supports:
- PostgreSQL (pg_trgm + tsvector)
- SQLite (Python functions registered on each connection)
"""

from abc import ABC, abstractmethod
from typing import Any

from sqlalchemy import Text, cast, func
from sqlalchemy.ext.asyncio import AsyncConnection
from sqlalchemy.sql.elements import ColumnElement

LIKE_ESCAPE = "/"


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so ``term`` matches literally (escape char ``/``)."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )


class SearchDialect(ABC):
    """Abstract base class for SQL backends of the page search."""

    name: str = "abstract"

    def __init__(self, config: str = "english"):
        """Initialize the dialect.

        Args:
            config: Full-text search configuration (PostgreSQL regconfig name)
        """
        self.config = config

    async def prepare(self, conn: AsyncConnection) -> None:
        """Install database extensions needed before tables are created."""

    def on_connect(self, dbapi_connection: Any) -> None:
        """Configure a freshly opened DBAPI connection."""

    def lower(self, column: ColumnElement) -> ColumnElement:
        """Case-folded ``column`` for comparisons against lowercased terms."""
        return func.lower(column)

    def substring_match(self, column: ColumnElement, query: str) -> ColumnElement:
        """Case-insensitive literal substring match of ``query`` in ``column``."""
        return column.ilike(f"%{escape_like(query)}%", escape=LIKE_ESCAPE)

    def similarity(self, column: ColumnElement, query: str) -> ColumnElement:
        """Trigram similarity between ``column`` and ``query`` (NULL-safe)."""
        return func.similarity(column, cast(query, Text))

    @abstractmethod
    def vector_expression(self, text: str) -> Any:
        """Value (or SQL expression) stored in ``doc_pages.search_vector``."""

    @abstractmethod
    def fulltext_match(self, vector_column: ColumnElement, query: str) -> ColumnElement:
        """Boolean expression: ``vector_column`` matches ``query``."""
