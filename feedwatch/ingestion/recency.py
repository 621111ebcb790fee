"""Recency window filter for feed items."""

from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Tuple

import pendulum
from pydantic import BaseModel, Field

from .models import FeedItem


class RecencyReport(BaseModel):
    """Counts of what the recency filter kept and dropped."""

    recent: int = Field(0, description="Kept, published inside the window")
    stale: int = Field(0, description="Dropped, published before the cutoff")
    undated_kept: int = Field(0, description="Kept without a usable date")
    undated_dropped: int = Field(0, description="Dropped without a usable date")

    @property
    def kept(self) -> int:
        return self.recent + self.undated_kept

    def merge(self, other: "RecencyReport") -> "RecencyReport":
        """Return the sum of two reports."""
        return RecencyReport(
            recent=self.recent + other.recent,
            stale=self.stale + other.stale,
            undated_kept=self.undated_kept + other.undated_kept,
            undated_dropped=self.undated_dropped + other.undated_dropped,
        )


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return pendulum.instance(value, tz="UTC")
    return pendulum.instance(value).in_timezone("UTC")


def filter_recent(
    items: Iterable[FeedItem],
    max_age_minutes: int,
    include_undated: bool = False,
    now: Optional[datetime] = None,
) -> Tuple[List[FeedItem], RecencyReport]:
    """
    Keep items published within the last ``max_age_minutes``.

    Items without a parsable publication date are kept only when
    ``include_undated`` is set. Naive datetimes are treated as UTC.

    Returns:
        Tuple of (kept items in input order, report)
    """
    now = _as_utc(now) if now is not None else pendulum.now("UTC")
    cutoff = now - timedelta(minutes=max_age_minutes)

    kept = []
    report = RecencyReport()
    for item in items:
        if item.published_at is None:
            if include_undated:
                report.undated_kept += 1
                kept.append(item)
            else:
                report.undated_dropped += 1
            continue

        if _as_utc(item.published_at) >= cutoff:
            report.recent += 1
            kept.append(item)
        else:
            report.stale += 1

    return kept, report
