"""Article storage on relational databases."""

import logging
from abc import abstractmethod
from contextlib import contextmanager
from typing import Any, ContextManager, Dict, Iterator, List, Optional, Sequence, Tuple

import psycopg

from ..config import CATEGORIES, DatabaseConfig, SourceConfig
from ..errors import StorageError
from ..ingestion.models import FeedItem
from ..models import Article
from .base import ArticleStore, InsertResult
from .connection import create_pool
from .init import (
    INSERT_CATEGORY_SQL,
    POSTGRES_SCHEMA_SQL,
    UPSERT_ARTICLE_SQL,
    UPSERT_SOURCE_SQL,
)

logger = logging.getLogger(__name__)

ARTICLE_COLUMNS = """
    id, title, content, image_url, canonical_url, published_at,
    published_date, duration, source_name, category, created_at
"""

NEWEST_FIRST = "ORDER BY published_at DESC NULLS LAST, created_at DESC"


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term matches literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SQLArticleStore(ArticleStore):
    """
    Article store over a DB-API style connection.

    Subclasses provide the connection, the schema and the driver's error
    types. Queries are written with ``%s`` placeholders.
    """

    driver_errors: Tuple[type, ...] = ()
    schema_sql: str = ""

    @abstractmethod
    def _connect(self) -> ContextManager[Any]:
        """Yield a connection; commit on success, roll back on error."""
        pass

    @contextmanager
    def _row_transaction(self, conn: Any) -> Iterator[None]:
        """Isolate a single row write so its failure leaves the batch usable."""
        yield

    def _create_schema(self, conn: Any) -> None:
        conn.execute(self.schema_sql)

    def _sql(self, query: str) -> str:
        return query

    def _adapt(self, value: Any) -> Any:
        return value

    def _execute(self, conn: Any, query: str, params: Sequence[Any] = ()) -> Any:
        return conn.execute(self._sql(query), [self._adapt(p) for p in params])

    def _fetch_articles(self, query: str, params: Sequence[Any]) -> List[Article]:
        try:
            with self._connect() as conn:
                rows = self._execute(conn, query, params).fetchall()
        except self.driver_errors as e:
            raise StorageError(f"Query failed: {e}") from e
        return [Article(**dict(row)) for row in rows]

    def initialize(self) -> None:
        """Create tables and seed categories."""
        try:
            with self._connect() as conn:
                self._create_schema(conn)
                for name, description in CATEGORIES.items():
                    self._execute(conn, INSERT_CATEGORY_SQL, (name, description))
        except self.driver_errors as e:
            raise StorageError(f"Failed to initialize database schema: {e}") from e
        logger.info("Database schema initialized")

    def sync_sources(self, sources: Sequence[SourceConfig]) -> None:
        """Upsert sources by name."""
        try:
            with self._connect() as conn:
                for source in sources:
                    self._execute(conn, UPSERT_SOURCE_SQL, (source.name, source.url, source.category))
        except self.driver_errors as e:
            raise StorageError(f"Failed to sync sources: {e}") from e

    def insert_many(self, items: Sequence[FeedItem]) -> InsertResult:
        """Upsert articles one row at a time, counting failures."""
        result = InsertResult()
        if not items:
            return result

        try:
            with self._connect() as conn:
                for item in items:
                    try:
                        with self._row_transaction(conn):
                            self._execute(
                                conn,
                                UPSERT_ARTICLE_SQL,
                                (
                                    item.title,
                                    item.content,
                                    item.image_url,
                                    item.canonical_url,
                                    item.published_at,
                                    item.published_date,
                                    item.duration,
                                    item.source_name,
                                    item.category,
                                ),
                            )
                        result.stored += 1
                    except self.driver_errors as e:
                        result.failed += 1
                        logger.warning("Error inserting article %s: %s", item.canonical_url, e)
        except self.driver_errors as e:
            raise StorageError(f"Failed to store articles: {e}") from e

        logger.info("Stored %d articles (%d failed)", result.stored, result.failed)
        return result

    def query(self, term: str, limit: int = 50) -> List[Article]:
        """Search titles and content."""
        pattern = f"%{escape_like(term.lower())}%"
        return self._fetch_articles(
            f"""
            SELECT {ARTICLE_COLUMNS} FROM articles
            WHERE LOWER(title) LIKE %s ESCAPE '\\'
               OR LOWER(content) LIKE %s ESCAPE '\\'
            {NEWEST_FIRST}
            LIMIT %s
            """,
            (pattern, pattern, limit),
        )

    def find_by_url(self, url: str) -> Optional[Article]:
        """Look up an article by canonical URL."""
        articles = self._fetch_articles(
            f"SELECT {ARTICLE_COLUMNS} FROM articles WHERE canonical_url = %s LIMIT 1",
            (url,),
        )
        return articles[0] if articles else None

    def get_by_category(self, category: str, limit: int = 50) -> List[Article]:
        """Get articles by category."""
        return self._fetch_articles(
            f"SELECT {ARTICLE_COLUMNS} FROM articles WHERE category = %s {NEWEST_FIRST} LIMIT %s",
            (category, limit),
        )

    def get_by_source(self, source_name: str, limit: int = 50) -> List[Article]:
        """Get articles by source."""
        return self._fetch_articles(
            f"SELECT {ARTICLE_COLUMNS} FROM articles WHERE source_name = %s {NEWEST_FIRST} LIMIT %s",
            (source_name, limit),
        )

    def get_all(self, limit: int = 100, offset: int = 0) -> List[Article]:
        """Get all articles with pagination."""
        return self._fetch_articles(
            f"SELECT {ARTICLE_COLUMNS} FROM articles {NEWEST_FIRST} LIMIT %s OFFSET %s",
            (limit, offset),
        )

    def get_statistics(self) -> List[Dict]:
        """Get article counts per category and source."""
        try:
            with self._connect() as conn:
                rows = self._execute(
                    conn,
                    """
                    SELECT
                        category,
                        source_name,
                        COUNT(*) AS count,
                        MAX(published_at) AS latest_article
                    FROM articles
                    GROUP BY category, source_name
                    ORDER BY count DESC
                    """,
                ).fetchall()
        except self.driver_errors as e:
            raise StorageError(f"Query failed: {e}") from e
        return [dict(row) for row in rows]


class PostgresArticleStore(SQLArticleStore):
    """Article store backed by Postgres through a psycopg connection pool."""

    driver_errors = (psycopg.Error,)
    schema_sql = POSTGRES_SCHEMA_SQL

    def __init__(self, config: DatabaseConfig) -> None:
        """Initialize Postgres store."""
        self.config = config
        self.pool = create_pool(config)
        self._opened = False

    @contextmanager
    def _connect(self) -> Iterator[psycopg.Connection]:
        if not self._opened:
            self.pool.open(wait=True, timeout=30.0)
            self._opened = True
        with self.pool.connection() as conn:
            yield conn

    @contextmanager
    def _row_transaction(self, conn: psycopg.Connection) -> Iterator[None]:
        # Nested transaction blocks become savepoints
        with conn.transaction():
            yield

    def close(self) -> None:
        """Close the connection pool."""
        if self._opened:
            self.pool.close()
            self._opened = False
            logger.info("Database connection closed")
