"""Duplicate resolver that checks incoming items against stored articles."""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, Field

from ..db.base import ArticleStore
from ..ingestion.models import FeedItem
from .checks import ContentSimilarityCheck, DuplicateCheck, TitleSourceCheck, URLCheck

logger = logging.getLogger(__name__)


class ResolutionResult(BaseModel):
    """Result of resolving a batch of items."""

    new: List[FeedItem] = Field(default_factory=list, description="Items not found in storage")
    duplicates: int = Field(0, description="Items already stored")
    check_errors: int = Field(0, description="Checks that failed and defaulted to new")
    matched_by: Dict[str, int] = Field(default_factory=dict, description="Duplicates per check")


class DuplicateResolver:
    """Decide whether incoming items already exist in storage."""

    def __init__(
        self,
        store: ArticleStore,
        checks: Optional[Sequence[DuplicateCheck]] = None,
    ) -> None:
        """
        Initialize duplicate resolver.

        Args:
            store: Article store to check against
            checks: Checks in evaluation order; defaults to URL, title+source,
                then content similarity
        """
        self.store = store
        self.checks = list(checks) if checks is not None else [
            URLCheck(),
            TitleSourceCheck(),
            ContentSimilarityCheck(),
        ]

    def _match(self, item: FeedItem) -> Tuple[Optional[str], bool]:
        """
        Run checks in order until one matches.

        Returns:
            Tuple of (name of the matching check or None, whether a check errored)
        """
        try:
            for check in self.checks:
                if check.matches(item, self.store):
                    return check.name, False
        except Exception as e:
            # A failed check counts as new
            logger.warning("Error checking article %r, treating as new: %s", item.title, e)
            return None, True
        return None, False

    def exists(self, item: FeedItem) -> bool:
        """Check if an item is already stored. Never raises."""
        matched, _ = self._match(item)
        return matched is not None

    def resolve(self, items: Sequence[FeedItem]) -> ResolutionResult:
        """Split items into new ones and duplicates."""
        result = ResolutionResult()

        logger.info("Checking %d articles for duplicates", len(items))
        for item in items:
            matched, errored = self._match(item)
            if errored:
                result.check_errors += 1
            if matched is None:
                result.new.append(item)
            else:
                result.duplicates += 1
                result.matched_by[matched] = result.matched_by.get(matched, 0) + 1
                logger.debug("Duplicate (%s): %s", matched, item.title)

        logger.info(
            "Duplicate check: %d new, %d duplicates", len(result.new), result.duplicates
        )
        return result
