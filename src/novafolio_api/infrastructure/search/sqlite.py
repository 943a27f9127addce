"""SQLite search dialect (Python functions registered per connection)."""

import logging
from typing import Any

from sqlalchemy import func
from sqlalchemy.sql.elements import ColumnElement

from .provider import LIKE_ESCAPE, SearchDialect, escape_like
from .trigram import similarity, to_search_vector, websearch_match

logger = logging.getLogger(__name__)


def _casefold(value):
    return value.lower() if value is not None else None


class SqliteSearchDialect(SearchDialect):
    """Search dialect for SQLite development and test databases.

    Note:
        The search vector is stored as a space separated lexeme string. The
        ``config`` setting is accepted for interface parity; SQLite always
        uses the built-in english stop word list.

        SQLite's own ``lower()`` and ``LIKE`` only fold ASCII letters, so
        case-insensitive comparisons go through ``py_lower``.
    """

    name = "sqlite"

    def on_connect(self, dbapi_connection: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
        dbapi_connection.create_function("py_lower", 1, _casefold)
        dbapi_connection.create_function("similarity", 2, similarity)
        dbapi_connection.create_function("ts_match", 2, websearch_match)

    def lower(self, column: ColumnElement) -> ColumnElement:
        return func.py_lower(column)

    def substring_match(self, column: ColumnElement, query: str) -> ColumnElement:
        return self.lower(column).like(f"%{escape_like(query.lower())}%", escape=LIKE_ESCAPE)

    def vector_expression(self, page_text: str) -> Any:
        return to_search_vector(page_text)

    def fulltext_match(self, vector_column: ColumnElement, query: str) -> ColumnElement:
        return func.ts_match(vector_column, query) == 1
