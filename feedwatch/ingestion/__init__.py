"""RSS ingestion, recency filtering and aggregation."""

from .aggregate import aggregate_items, dedupe_items, sort_items_newest
from .models import FeedItem, FeedResult
from .parser import FeedParser, HTTPFeedParser
from .recency import RecencyReport, filter_recent
from .rss_fetcher import FeedFetcher, print_feed_summary

__all__ = [
    "FeedFetcher",
    "FeedItem",
    "FeedParser",
    "FeedResult",
    "HTTPFeedParser",
    "RecencyReport",
    "aggregate_items",
    "dedupe_items",
    "filter_recent",
    "print_feed_summary",
    "sort_items_newest",
]
