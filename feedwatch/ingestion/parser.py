"""Feed document retrieval and parsing."""

from abc import ABC, abstractmethod
from typing import Optional

import feedparser
import httpx

from ..errors import ParseError


class FeedParser(ABC):
    """Turns a feed URL into a parsed feed document."""

    @abstractmethod
    async def parse(self, url: str) -> feedparser.FeedParserDict:
        """
        Retrieve and parse the feed at ``url``.

        Raises:
            ParseError: on network failure or an unreadable document
        """
        pass


class HTTPFeedParser(FeedParser):
    """Fetch feeds over HTTP with httpx and parse them with feedparser."""

    def __init__(
        self,
        timeout: float = 30.0,
        user_agent: str = "feedwatch/1.0 (RSS reader)",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize HTTP feed parser."""
        self.timeout = timeout
        self.user_agent = user_agent
        self.transport = transport

    async def parse(self, url: str) -> feedparser.FeedParserDict:
        """Download a feed and parse it."""
        headers = {
            "User-Agent": self.user_agent,
            "Accept": "application/rss+xml, application/atom+xml, application/xml, text/xml;q=0.9, */*;q=0.8",
        }
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers=headers,
                transport=self.transport,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.TimeoutException as e:
            raise ParseError(f"Request timed out: {url}") from e
        except httpx.HTTPStatusError as e:
            raise ParseError(f"HTTP {e.response.status_code} from {url}") from e
        except httpx.HTTPError as e:
            raise ParseError(f"HTTP error: {e}") from e

        feed = feedparser.parse(response.content)

        # feedparser flags recoverable quirks as bozo too; only reject empty results
        if feed.bozo and not feed.entries:
            raise ParseError(f"Invalid RSS feed: {feed.bozo_exception}")

        return feed
