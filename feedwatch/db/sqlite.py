"""Article storage on a local SQLite file."""

import logging
import os
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Iterator, Optional

from .articles import SQLArticleStore
from .init import SQLITE_SCHEMA_SQL

logger = logging.getLogger(__name__)


def _lower(value: Any) -> Any:
    # SQLite's built-in LOWER only folds ASCII
    return value.lower() if isinstance(value, str) else value


class SQLiteArticleStore(SQLArticleStore):
    """Article store backed by SQLite."""

    driver_errors = (sqlite3.Error,)
    schema_sql = SQLITE_SCHEMA_SQL

    def __init__(self, path: str) -> None:
        """Initialize SQLite store; ``:memory:`` keeps everything in memory."""
        self.path = path if path == ":memory:" else os.path.expanduser(path)
        self._conn: Optional[sqlite3.Connection] = None

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            if self.path != ":memory:":
                directory = os.path.dirname(self.path)
                if directory:
                    os.makedirs(directory, exist_ok=True)
            # Cycles call the store from worker threads, one at a time
            self._conn = sqlite3.connect(self.path, check_same_thread=False)
            self._conn.create_function("LOWER", 1, _lower, deterministic=True)
            self._conn.row_factory = sqlite3.Row
        return self._conn

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn = self._connection()
        # Connection context manager commits or rolls back, it does not close
        with conn:
            yield conn

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.executescript(self.schema_sql)

    def _sql(self, query: str) -> str:
        return query.replace("%s", "?")

    def _adapt(self, value: Any) -> Any:
        # ISO strings in UTC keep lexical and chronological order identical
        if isinstance(value, datetime):
            if value.tzinfo is None:
                value = value.replace(tzinfo=timezone.utc)
            return value.astimezone(timezone.utc).isoformat()
        return value

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            logger.info("Database connection closed")
