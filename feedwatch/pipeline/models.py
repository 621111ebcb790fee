"""Scrape loop state and per-cycle reports."""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

import pendulum
from pydantic import BaseModel, Field

from ..ingestion.models import FeedItem
from ..ingestion.recency import RecencyReport


class OrchestratorState(str, Enum):
    """Lifecycle of the scrape loop."""

    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class CycleStats(BaseModel):
    """Running statistics, owned by the orchestrator."""

    state: OrchestratorState = Field(OrchestratorState.IDLE, description="Current state")
    started_at: datetime = Field(default_factory=lambda: pendulum.now("UTC"), description="When the scraper was created")
    cycle_count: int = Field(0, description="Cycles completed")
    total_articles_added: int = Field(0, description="Articles stored across all cycles")
    consecutive_error_count: int = Field(0, description="Failed cycles in a row")
    last_cycle_started_at: Optional[datetime] = Field(None, description="Start of the latest cycle")
    last_success_at: Optional[datetime] = Field(None, description="End of the latest successful cycle")


class CycleReport(BaseModel):
    """What happened during one cycle."""

    cycle: int = Field(..., description="Cycle number, starting at 1")
    started_at: datetime = Field(..., description="Cycle start time")
    fetched: int = Field(0, description="Valid items parsed from all feeds")
    failed_sources: Dict[str, str] = Field(default_factory=dict, description="Skipped sources and why")
    dropped: int = Field(0, description="Feed entries that could not be used")
    recency: RecencyReport = Field(default_factory=RecencyReport)
    aggregated: int = Field(0, description="Unique items after merging sources")
    duplicates: int = Field(0, description="Items already stored")
    check_errors: int = Field(0, description="Duplicate checks that failed")
    new_items: List[FeedItem] = Field(default_factory=list, description="Items sent to storage")
    stored: int = Field(0, description="Rows written")
    store_failed: int = Field(0, description="Rows that failed to write")
    duration: float = Field(0.0, description="Cycle duration in seconds")
    error: Optional[str] = Field(None, description="Cycle-level failure, if any")

    @property
    def success(self) -> bool:
        return self.error is None
