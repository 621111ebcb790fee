"""Shared fixtures."""

from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from feedwatch.ingestion.models import FeedItem


@pytest.fixture
def make_item():
    def _make(
        title: str = "Headline",
        url: Optional[str] = None,
        source: str = "BBC News",
        category: str = "international",
        content: str = "",
        published_at: Optional[datetime] = None,
        minutes_ago: Optional[float] = None,
    ) -> FeedItem:
        if minutes_ago is not None:
            published_at = datetime.now(timezone.utc) - timedelta(minutes=minutes_ago)
        return FeedItem(
            title=title,
            content=content,
            canonical_url=url or f"https://example.com/{title.lower().replace(' ', '-')}",
            published_at=published_at,
            published_date=published_at.strftime("%b %d, %Y") if published_at else None,
            source_name=source,
            category=category,
        )

    return _make
