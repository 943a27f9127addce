"""Page search infrastructure.

SQL dialect abstraction for trigram similarity and full-text matching:
- PostgreSQL (pg_trgm + tsvector)
- SQLite (registered Python functions)
"""

from .factory import get_search_dialect
from .provider import SearchDialect, escape_like, LIKE_ESCAPE
from .postgres import PostgresSearchDialect
from .sqlite import SqliteSearchDialect

__all__ = [
    "get_search_dialect",
    "SearchDialect",
    "escape_like",
    "LIKE_ESCAPE",
    "PostgresSearchDialect",
    "SqliteSearchDialect",
]
