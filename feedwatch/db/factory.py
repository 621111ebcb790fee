"""Storage backend selection."""

import logging

from ..config import DatabaseConfig
from .articles import PostgresArticleStore
from .base import ArticleStore
from .sqlite import SQLiteArticleStore

logger = logging.getLogger(__name__)


def create_store(config: DatabaseConfig) -> ArticleStore:
    """Create the article store for the configured backend."""
    if config.backend == "postgres":
        logger.info("Using Postgres database at %s:%s/%s", config.host, config.port, config.database)
        return PostgresArticleStore(config)

    logger.info("Using SQLite database at %s", config.sqlite_path)
    return SQLiteArticleStore(config.sqlite_path)
