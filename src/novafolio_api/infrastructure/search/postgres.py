"""PostgreSQL search dialect (pg_trgm + tsvector)."""

import logging
from typing import Any

from sqlalchemy import Text, cast, func, literal_column, text
from sqlalchemy.ext.asyncio import AsyncConnection
from sqlalchemy.sql.elements import ColumnElement

from .provider import SearchDialect

logger = logging.getLogger(__name__)


class PostgresSearchDialect(SearchDialect):
    """Search dialect backed by PostgreSQL extensions.

    The search vector column is a ``TSVECTOR`` filled with
    ``to_tsvector(config, text)`` at insert time, and queries are parsed with
    ``websearch_to_tsquery`` so quoted phrases, ``or`` and ``-term`` work as in
    a web search box.
    """

    name = "postgresql"

    async def prepare(self, conn: AsyncConnection) -> None:
        await conn.execute(text("CREATE EXTENSION IF NOT EXISTS pg_trgm"))
        logger.info("pg_trgm extension available")

    def _regconfig(self):
        # config is restricted to ^[a-z_]+$ by Settings
        return literal_column(f"'{self.config}'::regconfig")

    def vector_expression(self, page_text: str) -> Any:
        return func.to_tsvector(self._regconfig(), cast(page_text, Text))

    def fulltext_match(self, vector_column: ColumnElement, query: str) -> ColumnElement:
        tsquery = func.websearch_to_tsquery(self._regconfig(), cast(query, Text))
        return vector_column.op("@@")(tsquery)
