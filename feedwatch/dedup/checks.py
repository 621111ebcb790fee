"""Individual duplicate checks, run in order by the resolver."""

from abc import ABC, abstractmethod

from ..db.base import ArticleStore
from ..ingestion.models import FeedItem
from .similarity import jaccard_similarity


class DuplicateCheck(ABC):
    """Base class for duplicate checks."""

    name: str = "check"

    @abstractmethod
    def matches(self, item: FeedItem, store: ArticleStore) -> bool:
        """
        Check whether the store already holds this item.

        Args:
            item: Incoming feed item
            store: Article store to look in

        Returns:
            True if a stored article matches
        """
        pass


class URLCheck(DuplicateCheck):
    """Exact canonical URL match."""

    name = "url"

    def matches(self, item: FeedItem, store: ArticleStore) -> bool:
        return store.find_by_url(item.canonical_url) is not None


class TitleSourceCheck(DuplicateCheck):
    """Same title (ignoring case) from the same source."""

    name = "title"

    def __init__(self, limit: int = 10) -> None:
        self.limit = limit

    def matches(self, item: FeedItem, store: ArticleStore) -> bool:
        title = item.title.lower()
        for existing in store.query(item.title, self.limit):
            if existing.title.lower() == title and existing.source_name == item.source_name:
                return True
        return False


class ContentSimilarityCheck(DuplicateCheck):
    """Near-identical title from the same source, found through the opening words of the body."""

    name = "content"

    def __init__(
        self,
        min_content_length: int = 50,
        phrase_words: int = 20,
        similarity_threshold: float = 0.8,
        limit: int = 20,
    ) -> None:
        """
        Initialize content similarity check.

        Args:
            min_content_length: Only check items whose body is longer than this
            phrase_words: Number of leading body words to search for
            similarity_threshold: Title similarity above which items match
            limit: Max stored articles to compare against
        """
        self.min_content_length = min_content_length
        self.phrase_words = phrase_words
        self.similarity_threshold = similarity_threshold
        self.limit = limit

    def phrase(self, content: str) -> str:
        """Get the leading words of the body as a search phrase."""
        return " ".join(content.lower().split()[: self.phrase_words])

    def matches(self, item: FeedItem, store: ArticleStore) -> bool:
        if not item.content or len(item.content) <= self.min_content_length:
            return False

        for existing in store.query(self.phrase(item.content), self.limit):
            if existing.source_name != item.source_name:
                continue
            if jaccard_similarity(existing.title, item.title) > self.similarity_threshold:
                return True
        return False
