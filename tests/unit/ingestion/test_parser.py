"""Tests for feedwatch.ingestion.parser module."""

import asyncio

import httpx
import pytest

from feedwatch.errors import ParseError
from feedwatch.ingestion.parser import HTTPFeedParser

RSS = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Example</title>
    <item>
      <title>First story</title>
      <link>https://example.com/first</link>
      <pubDate>Mon, 01 Jan 2024 12:00:00 GMT</pubDate>
    </item>
  </channel>
</rss>
"""


def _parser(handler) -> HTTPFeedParser:
    return HTTPFeedParser(timeout=5, transport=httpx.MockTransport(handler))


class TestHTTPFeedParser:
    def test_parses_feed(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["user_agent"] = request.headers["User-Agent"]
            return httpx.Response(200, content=RSS)

        feed = asyncio.run(_parser(handler).parse("https://example.com/rss"))

        assert [entry.title for entry in feed.entries] == ["First story"]
        assert feed.entries[0].published_parsed[:3] == (2024, 1, 1)
        assert seen["user_agent"].startswith("feedwatch/")

    def test_http_error_status(self) -> None:
        parser = _parser(lambda request: httpx.Response(404))
        with pytest.raises(ParseError, match="HTTP 404"):
            asyncio.run(parser.parse("https://example.com/rss"))

    def test_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ParseError, match="HTTP error"):
            asyncio.run(_parser(handler).parse("https://example.com/rss"))

    def test_unreadable_document(self) -> None:
        parser = _parser(lambda request: httpx.Response(200, content=b"this is not a feed"))
        with pytest.raises(ParseError, match="Invalid RSS feed"):
            asyncio.run(parser.parse("https://example.com/rss"))
