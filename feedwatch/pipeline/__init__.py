"""Scrape cycle orchestration."""

from .models import CycleReport, CycleStats, OrchestratorState
from .orchestrator import ScrapeOrchestrator

__all__ = [
    "CycleReport",
    "CycleStats",
    "OrchestratorState",
    "ScrapeOrchestrator",
]
