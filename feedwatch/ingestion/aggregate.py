from datetime import datetime, timezone
from typing import Iterable, List

from .models import FeedItem

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def dedupe_key(item: FeedItem) -> str:
    return f"{item.title.lower()}-{item.canonical_url}"


# Remove duplicate items across sources within one cycle; first occurrence wins.
def dedupe_items(items: Iterable[FeedItem]) -> List[FeedItem]:
    """Remove duplicate items based on lowercase title + URL keys."""
    seen = set()
    unique_items = []
    for item in items:
        key = dedupe_key(item)
        if key in seen:
            continue
        seen.add(key)
        unique_items.append(item)
    return unique_items


def _sort_key(item: FeedItem) -> datetime:
    published = item.published_at
    if published is None:
        return _OLDEST
    if published.tzinfo is None:
        return published.replace(tzinfo=timezone.utc)
    return published


# Sort items so the newest are processed first; undated items go last.
def sort_items_newest(items: Iterable[FeedItem]) -> List[FeedItem]:
    """Sort items by publication date, most recent first."""
    return sorted(items, key=_sort_key, reverse=True)


def aggregate_items(items: Iterable[FeedItem]) -> List[FeedItem]:
    """Dedupe and sort items merged from all sources."""
    return sort_items_newest(dedupe_items(items))
