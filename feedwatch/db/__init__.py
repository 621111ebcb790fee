"""Article storage for feedwatch."""

from .articles import PostgresArticleStore, SQLArticleStore
from .base import ArticleStore, InsertResult
from .factory import create_store
from .sqlite import SQLiteArticleStore

__all__ = [
    "ArticleStore",
    "InsertResult",
    "PostgresArticleStore",
    "SQLArticleStore",
    "SQLiteArticleStore",
    "create_store",
]
