"""Search Dialect Factory

Chooses the page-search implementation matching the SQLAlchemy dialect of the
configured database URL.
"""

import logging
import re

from .provider import SearchDialect
from .postgres import PostgresSearchDialect
from .sqlite import SqliteSearchDialect

logger = logging.getLogger(__name__)

_CONFIG_RE = re.compile(r"^[a-z_]+$")


def get_search_dialect(dialect_name: str, config: str = "english") -> SearchDialect:
    """Create the search dialect for a database backend.

    Args:
        dialect_name: SQLAlchemy dialect name (``engine.dialect.name``)
        config: Full-text search configuration name

    Returns:
        SearchDialect instance (PostgresSearchDialect or SqliteSearchDialect)

    Raises:
        ValueError: If the backend is unsupported or config is malformed
    """
    if not _CONFIG_RE.match(config):
        raise ValueError(f"Invalid search configuration name: {config!r}")

    if dialect_name == "postgresql":
        dialect: SearchDialect = PostgresSearchDialect(config)
    elif dialect_name == "sqlite":
        dialect = SqliteSearchDialect(config)
    else:
        raise ValueError(
            f"Unsupported database backend: {dialect_name}. "
            f"Must be 'postgresql' or 'sqlite'"
        )

    logger.info(f"Search dialect initialized: backend={dialect.name}, config={config}")
    return dialect
