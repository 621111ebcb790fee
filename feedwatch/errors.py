"""Exception types raised by the scraping core."""

from typing import Optional


class FeedwatchError(Exception):
    """Base class for feedwatch errors."""


class ParseError(FeedwatchError):
    """A feed document or a single feed entry could not be parsed."""


class FetchError(FeedwatchError):
    """A feed could not be fetched after exhausting all retry attempts."""

    def __init__(self, source_name: str, cause: Optional[BaseException] = None) -> None:
        self.source_name = source_name
        self.cause = cause
        message = f"Failed to fetch {source_name}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class StorageError(FeedwatchError):
    """A storage query or write failed."""


class ConsecutiveFailureExceeded(FeedwatchError):
    """Too many scrape cycles failed in a row; the scraper must stop."""

    def __init__(self, count: int, threshold: int) -> None:
        self.count = count
        self.threshold = threshold
        super().__init__(
            f"Too many consecutive errors ({count}, threshold {threshold}). Stopping scraper."
        )
