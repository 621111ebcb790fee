"""Postgres connection management."""

from psycopg.conninfo import make_conninfo
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from ..config import DatabaseConfig


def connection_string(config: DatabaseConfig) -> str:
    """Get psycopg connection string."""
    return make_conninfo(
        host=config.host,
        port=config.port,
        dbname=config.database,
        user=config.user,
        password=config.password or "",
    )


def create_pool(config: DatabaseConfig, min_size: int = 1, max_size: int = 5) -> ConnectionPool:
    """Create a closed connection pool; open it with ``pool.open()``."""
    return ConnectionPool(
        connection_string(config),
        min_size=min_size,
        max_size=max_size,
        kwargs={"row_factory": dict_row},
        open=False,
    )
