"""Storage interface used by the scraping core."""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from ..config import SourceConfig
from ..ingestion.models import FeedItem
from ..models import Article


class InsertResult(BaseModel):
    """Outcome of a batch insert."""

    stored: int = Field(0, description="Rows inserted or updated")
    failed: int = Field(0, description="Rows that could not be written")


class ArticleStore(ABC):
    """
    Article persistence.

    Implementations are used from one logical flow at a time and need not
    be safe for concurrent use.
    """

    @abstractmethod
    def initialize(self) -> None:
        """Create the schema and seed categories. Safe to call repeatedly."""
        pass

    @abstractmethod
    def sync_sources(self, sources: Sequence[SourceConfig]) -> None:
        """Upsert the configured feed sources by name."""
        pass

    @abstractmethod
    def insert_many(self, items: Sequence[FeedItem]) -> InsertResult:
        """
        Upsert articles by canonical URL.

        Individual row failures are counted, never raised.

        Raises:
            StorageError: if the store itself is unavailable
        """
        pass

    @abstractmethod
    def query(self, term: str, limit: int = 50) -> List[Article]:
        """Case-insensitive substring search over title and content, newest first."""
        pass

    @abstractmethod
    def find_by_url(self, url: str) -> Optional[Article]:
        """Get the article stored under an exact canonical URL."""
        pass

    @abstractmethod
    def get_by_category(self, category: str, limit: int = 50) -> List[Article]:
        """Get newest articles in a category."""
        pass

    @abstractmethod
    def get_by_source(self, source_name: str, limit: int = 50) -> List[Article]:
        """Get newest articles from a source."""
        pass

    @abstractmethod
    def get_all(self, limit: int = 100, offset: int = 0) -> List[Article]:
        """Get newest articles with pagination."""
        pass

    @abstractmethod
    def get_statistics(self) -> List[Dict]:
        """Article counts and latest publication per category and source."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Release connections."""
        pass
