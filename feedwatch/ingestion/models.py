"""Data models for ingestion."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class FeedItem(BaseModel):
    """Normalized RSS feed item, before it is stored."""

    title: str = Field(..., description="Article title")
    content: str = Field("", description="Article body text or snippet")
    image_url: Optional[str] = Field(None, description="Lead image URL")
    canonical_url: str = Field(..., description="Article URL")
    published_at: Optional[datetime] = Field(None, description="Publication date (UTC), if parsable")
    published_date: Optional[str] = Field(None, description="Display date, or the raw feed value")
    duration: Optional[str] = Field(None, description="Media duration (itunes:duration)")
    source_name: str = Field(..., description="Source name")
    category: str = Field(..., description="Source category")

    def is_valid(self) -> bool:
        """Check the item has a usable title and URL."""
        return bool(self.title and self.title.strip()) and bool(self.canonical_url)


class FeedResult(BaseModel):
    """Result of fetching an RSS feed."""

    source_name: str = Field(..., description="Source name")
    source_url: str = Field(..., description="RSS feed URL")
    success: bool = Field(..., description="Whether fetch was successful")
    items: list[FeedItem] = Field(default_factory=list, description="Parsed feed items")
    error: Optional[str] = Field(None, description="Error message if failed")
    item_count: int = Field(0, description="Number of items fetched")
    dropped: int = Field(0, description="Entries skipped for a missing title or link or a parse error")
