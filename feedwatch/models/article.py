"""Article model for stored news articles."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from .base import DBModel


class Article(DBModel):
    """Article model."""

    title: str = Field(..., description="Article title")
    content: str = Field("", description="Article body text or snippet")
    image_url: Optional[str] = Field(None, description="Lead image URL")
    canonical_url: str = Field(..., description="Canonical URL of the article")
    published_at: Optional[datetime] = Field(None, description="Publication timestamp (UTC)")
    published_date: Optional[str] = Field(None, description="Publication date as displayed")
    duration: Optional[str] = Field(None, description="Media duration for audio/video items")
    source_name: str = Field(..., description="Feed source name")
    category: str = Field(..., description="Feed source category")
