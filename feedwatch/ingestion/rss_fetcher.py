"""RSS feed fetcher with retries and concurrent processing."""

import asyncio
import html
import logging
import re
from datetime import datetime
from typing import Any, Awaitable, Callable, List, Optional, Tuple

import pendulum
from rich.console import Console

from ..config import SourceConfig
from ..errors import FetchError, ParseError
from .models import FeedItem, FeedResult
from .parser import FeedParser, HTTPFeedParser

console = Console()
logger = logging.getLogger(__name__)

DISPLAY_DATE_FORMAT = "MMM D, YYYY"

_TAG_RE = re.compile(r"<[^>]+>")
_WS_RE = re.compile(r"\s+")


def strip_html(text: Optional[str]) -> str:
    """Strip HTML tags and entities and collapse whitespace."""
    if not text:
        return ""
    text = _TAG_RE.sub(" ", text)
    text = html.unescape(text)
    return _WS_RE.sub(" ", text).strip()


def _first_url(entries: Any, key: str) -> Optional[str]:
    if not entries:
        return None
    if isinstance(entries, dict):
        entries = [entries]
    for entry in entries:
        value = entry.get(key) if hasattr(entry, "get") else None
        if value:
            return value
    return None


def extract_content(entry: Any) -> str:
    """Pick the body text: text snippet, then description, then stripped full content."""
    snippet = strip_html(entry.get("summary"))
    if snippet:
        return snippet

    description = strip_html(entry.get("description"))
    if description:
        return description

    for content in entry.get("content") or []:
        text = strip_html(content.get("value"))
        if text:
            return text

    return ""


def extract_image(entry: Any) -> Optional[str]:
    """Pick the image URL: media content, media thumbnail, itunes image, enclosure."""
    return (
        _first_url(entry.get("media_content"), "url")
        or _first_url(entry.get("media_thumbnail"), "url")
        or _first_url(entry.get("image"), "href")
        or _first_url(entry.get("enclosures"), "href")
        or _first_url(entry.get("enclosures"), "url")
    )


def extract_duration(entry: Any) -> Optional[str]:
    """Get the itunes duration, if any."""
    duration = entry.get("itunes_duration")
    return str(duration) if duration else None


def normalize_date(entry: Any) -> Tuple[Optional[datetime], Optional[str]]:
    """
    Parse the publication date of an entry.

    Returns:
        Tuple of (UTC datetime or None, display string). The display string
        is the raw feed value when the date cannot be parsed.
    """
    raw = entry.get("published") or entry.get("updated")
    parsed = entry.get("published_parsed") or entry.get("updated_parsed")

    published_at = None
    if parsed:
        try:
            # feedparser normalizes time tuples to UTC
            published_at = pendulum.datetime(*parsed[:6], tz="UTC")
        except (TypeError, ValueError, OverflowError):
            published_at = None

    if published_at is None and raw:
        try:
            value = pendulum.parse(raw, strict=False)
        except (TypeError, ValueError, OverflowError):
            value = None
        if isinstance(value, datetime):
            published_at = pendulum.instance(value).in_timezone("UTC")

    if published_at is None:
        return None, raw

    return published_at, published_at.format(DISPLAY_DATE_FORMAT)


def parse_entry(entry: Any, source: SourceConfig) -> Optional[FeedItem]:
    """Map a feed entry to a FeedItem, or None when title or link is missing."""
    title = entry.get("title")
    link = entry.get("link")
    if not title or not title.strip() or not link:
        return None

    published_at, published_date = normalize_date(entry)

    return FeedItem(
        title=title.strip(),
        content=extract_content(entry),
        image_url=extract_image(entry),
        canonical_url=link.strip(),
        published_at=published_at,
        published_date=published_date,
        duration=extract_duration(entry),
        source_name=source.name,
        category=source.category,
    )


class FeedFetcher:
    """Fetch and normalize RSS feeds."""

    def __init__(
        self,
        parser: Optional[FeedParser] = None,
        max_attempts: int = 3,
        base_delay: float = 2.0,
        max_concurrent: int = 5,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize feed fetcher."""
        self.parser = parser or HTTPFeedParser()
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_concurrent = max_concurrent
        self._sleep = sleep

    async def download(self, source: SourceConfig) -> Any:
        """
        Download and parse a single feed, retrying with backoff.

        Raises:
            FetchError: after the last attempt fails
        """
        last_error: Optional[BaseException] = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                return await self.parser.parse(source.url)
            except Exception as e:
                last_error = e
                if attempt == self.max_attempts:
                    break
                delay = self.base_delay * attempt
                logger.warning(
                    "Fetch of %s failed (attempt %d/%d): %s. Retrying in %.1fs",
                    source.name, attempt, self.max_attempts, e, delay,
                )
                await self._sleep(delay)

        raise FetchError(source.name, last_error) from last_error

    def parse_entries(self, feed: Any, source: SourceConfig) -> Tuple[List[FeedItem], int]:
        """
        Map feed entries to items.

        Returns:
            Tuple of (valid items, number of entries dropped)
        """
        items = []
        dropped = 0
        for entry in feed.get("entries") or []:
            try:
                item = parse_entry(entry, source)
            except (ParseError, ValueError, TypeError, AttributeError) as e:
                logger.warning("Error parsing item from %s: %s", source.name, e)
                dropped += 1
                continue
            if item is None or not item.is_valid():
                dropped += 1
                continue
            items.append(item)

        if dropped:
            logger.info("Dropped %d unusable entries from %s", dropped, source.name)
        return items, dropped

    async def fetch(self, source: SourceConfig) -> List[FeedItem]:
        """
        Fetch and parse a single feed, retrying with backoff.

        Raises:
            FetchError: after the last attempt fails
        """
        items, _ = self.parse_entries(await self.download(source), source)
        return items

    async def fetch_feed(self, source: SourceConfig) -> FeedResult:
        """Fetch a single feed, reporting failure in the result instead of raising."""
        try:
            feed = await self.download(source)
        except FetchError as e:
            logger.warning("Skipping source %s: %s", source.name, e)
            return FeedResult(
                source_name=source.name,
                source_url=source.url,
                success=False,
                error=str(e.cause or e),
            )

        items, dropped = self.parse_entries(feed, source)
        return FeedResult(
            source_name=source.name,
            source_url=source.url,
            success=True,
            items=items,
            item_count=len(items),
            dropped=dropped,
        )

    async def fetch_all_feeds(
        self,
        sources: List[SourceConfig],
        stop_event: Optional[asyncio.Event] = None,
    ) -> List[FeedResult]:
        """Fetch all enabled feeds concurrently."""
        enabled_sources = [s for s in sources if s.enabled]

        if not enabled_sources:
            return []

        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def fetch_with_semaphore(source: SourceConfig) -> FeedResult:
            async with semaphore:
                if stop_event is not None and stop_event.is_set():
                    return FeedResult(
                        source_name=source.name,
                        source_url=source.url,
                        success=False,
                        error="Stop requested",
                    )
                return await self.fetch_feed(source)

        tasks = [fetch_with_semaphore(source) for source in enabled_sources]
        return list(await asyncio.gather(*tasks))

    def fetch_feeds_sync(self, sources: List[SourceConfig]) -> List[FeedResult]:
        """Synchronous wrapper for fetch_all_feeds."""
        return asyncio.run(self.fetch_all_feeds(sources))


def print_feed_summary(results: List[FeedResult]) -> None:
    """Print summary of feed fetch results."""
    total_items = sum(r.item_count for r in results)
    successful = sum(1 for r in results if r.success)
    failed = len(results) - successful

    console.print("\n[bold]RSS Feed Summary:[/bold]")
    console.print(f"  Sources fetched: {len(results)}")
    console.print(f"  Successful: [green]{successful}[/green]")
    console.print(f"  Failed: [red]{failed}[/red]")
    console.print(f"  Total items: {total_items}")
    dropped = sum(r.dropped for r in results)
    if dropped:
        console.print(f"  Dropped entries: [yellow]{dropped}[/yellow]")

    if failed > 0:
        console.print("\n[bold red]Failed feeds:[/bold red]")
        for result in results:
            if not result.success:
                console.print(f"  - {result.source_name}: {result.error}")
