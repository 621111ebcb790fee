"""Scrape orchestrator that runs fetch, filter, dedupe and store cycles on a schedule."""

import asyncio
import logging
import time
from typing import List, Optional, Sequence

import pendulum

from ..config import Config, ScrapeConfig, SourceConfig
from ..db import ArticleStore, create_store
from ..dedup import DuplicateResolver
from ..errors import ConsecutiveFailureExceeded
from ..ingestion import FeedFetcher, FeedItem, HTTPFeedParser, aggregate_items, filter_recent
from .models import CycleReport, CycleStats, OrchestratorState
from .reporting import print_cycle_summary, print_new_articles, print_status

logger = logging.getLogger(__name__)


class ScrapeOrchestrator:
    """
    Runs scrape cycles and schedules them.

    Cycles start at a fixed rate measured from the start of the previous
    cycle. A cycle that overruns the interval is followed immediately by the
    next one; cycles never overlap.
    """

    def __init__(
        self,
        sources: Sequence[SourceConfig],
        fetcher: FeedFetcher,
        store: ArticleStore,
        config: Optional[ScrapeConfig] = None,
        resolver: Optional[DuplicateResolver] = None,
        show_new_articles: bool = True,
    ) -> None:
        """Initialize scrape orchestrator."""
        self.sources = list(sources)
        self.fetcher = fetcher
        self.store = store
        self.config = config or ScrapeConfig()
        self.resolver = resolver or DuplicateResolver(store)
        self.show_new_articles = show_new_articles
        self._stats = CycleStats()
        self._stop_event = asyncio.Event()

    @classmethod
    def from_config(cls, config: Config, store: Optional[ArticleStore] = None) -> "ScrapeOrchestrator":
        """Build an orchestrator with HTTP fetching and the configured store."""
        settings = config.config
        parser = HTTPFeedParser(timeout=settings.fetch.timeout, user_agent=settings.fetch.user_agent)
        fetcher = FeedFetcher(
            parser=parser,
            max_attempts=settings.fetch.max_attempts,
            base_delay=settings.fetch.base_delay,
            max_concurrent=settings.fetch.max_concurrent,
        )
        if store is None:
            store = create_store(config.get_db_config())
        return cls(
            sources=config.get_active_sources(),
            fetcher=fetcher,
            store=store,
            config=settings.scrape,
            show_new_articles=settings.logging.show_new_articles,
        )

    def get_stats(self) -> CycleStats:
        """Get a snapshot of the running statistics."""
        return self._stats.model_copy()

    def stop(self) -> None:
        """Stop scheduling cycles and starting fetches."""
        if not self._stop_event.is_set():
            logger.info("Stopping continuous scraper")
        self._stop_event.set()

    async def run_one_cycle(self) -> CycleReport:
        """
        Run a single fetch, filter, dedupe and store cycle.

        Failures inside the cycle are recorded in the report and counted
        toward the consecutive error limit.

        Raises:
            ConsecutiveFailureExceeded: when the consecutive error limit is reached
        """
        if self._stats.state == OrchestratorState.STOPPED:
            raise ConsecutiveFailureExceeded(
                self._stats.consecutive_error_count, self.config.max_consecutive_errors
            )

        started = pendulum.now("UTC")
        start_time = time.monotonic()
        self._stats.state = OrchestratorState.RUNNING
        self._stats.last_cycle_started_at = started

        report = CycleReport(cycle=self._stats.cycle_count + 1, started_at=started)
        logger.info("Scrape #%d started", report.cycle)

        try:
            if self.config.cycle_timeout_seconds > 0:
                await asyncio.wait_for(self._execute_cycle(report), timeout=self.config.cycle_timeout_seconds)
            else:
                await self._execute_cycle(report)
        except asyncio.TimeoutError:
            report.error = f"Cycle timed out after {self.config.cycle_timeout_seconds:.0f}s"
            logger.error("Error during scrape #%d: %s", report.cycle, report.error)
        except Exception as e:
            report.error = str(e) or type(e).__name__
            logger.error("Error during scrape #%d: %s", report.cycle, report.error, exc_info=True)

        report.duration = time.monotonic() - start_time
        self._record(report)

        print_cycle_summary(report)
        if self.show_new_articles and report.stored:
            print_new_articles(report.new_items)

        if self._stats.consecutive_error_count >= self.config.max_consecutive_errors:
            self._stats.state = OrchestratorState.STOPPED
            self._stop_event.set()
            logger.critical(
                "Too many consecutive errors (%d). Stopping scraper.",
                self._stats.consecutive_error_count,
            )
            raise ConsecutiveFailureExceeded(
                self._stats.consecutive_error_count, self.config.max_consecutive_errors
            )

        self._stats.state = OrchestratorState.IDLE
        return report

    async def _execute_cycle(self, report: CycleReport) -> None:
        """Execute the cycle stages in order, filling in the report."""
        # Stage 1: fetch every source, skipping the ones that fail
        results = await self.fetcher.fetch_all_feeds(self.sources, self._stop_event)

        # Stage 2: recency filter per source
        candidates: List[FeedItem] = []
        for result in results:
            if not result.success:
                report.failed_sources[result.source_name] = result.error or "Unknown error"
                continue
            report.fetched += result.item_count
            report.dropped += result.dropped
            kept, recency = filter_recent(
                result.items,
                self.config.max_age_minutes,
                self.config.include_undated,
            )
            report.recency = report.recency.merge(recency)
            candidates.extend(kept)

        # Stage 3: merge and sort
        items = aggregate_items(candidates)
        report.aggregated = len(items)

        # Stage 4: drop articles that are already stored
        # Storage calls block; they run off the event loop
        resolution = await asyncio.to_thread(self.resolver.resolve, items)
        report.duplicates = resolution.duplicates
        report.check_errors = resolution.check_errors

        new_items = resolution.new
        if self.config.max_articles_per_cycle:
            new_items = new_items[: self.config.max_articles_per_cycle]
        report.new_items = new_items

        # Stage 5: store
        if new_items:
            result = await asyncio.to_thread(self.store.insert_many, new_items)
            report.stored = result.stored
            report.store_failed = result.failed
        else:
            logger.info("No new articles found")

    def _record(self, report: CycleReport) -> None:
        """Fold a finished cycle into the running statistics."""
        self._stats.cycle_count += 1
        self._stats.total_articles_added += report.stored
        if report.success:
            self._stats.consecutive_error_count = 0
            self._stats.last_success_at = pendulum.now("UTC")
        else:
            self._stats.consecutive_error_count += 1

    async def start(
        self,
        interval_seconds: Optional[float] = None,
        stop_event: Optional[asyncio.Event] = None,
    ) -> None:
        """
        Run cycles until stopped, the first one immediately.

        Args:
            interval_seconds: Time between cycle starts; defaults to the
                configured interval
            stop_event: Host-owned event that stops the loop when set

        Raises:
            ConsecutiveFailureExceeded: when the consecutive error limit is reached
        """
        if stop_event is not None:
            if self._stop_event.is_set():
                stop_event.set()
            self._stop_event = stop_event
        if interval_seconds is None:
            interval_seconds = self.config.interval_minutes * 60

        status_interval = self.config.status_interval_minutes * 60
        loop = asyncio.get_running_loop()
        last_status = loop.time()

        logger.info(
            "Starting continuous scraper: %d sources, every %.1f minutes",
            len(self.sources), interval_seconds / 60,
        )

        while not self._stop_event.is_set():
            next_start = loop.time() + interval_seconds
            await self.run_one_cycle()

            if status_interval and loop.time() - last_status >= status_interval:
                print_status(self.get_stats(), interval_seconds, self.config)
                last_status = loop.time()

            delay = next_start - loop.time()
            if delay <= 0:
                if interval_seconds > 0:
                    logger.warning("Scrape overran the interval by %.1fs, starting next one now", -delay)
                await asyncio.sleep(0)
                continue

            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=delay)
            except asyncio.TimeoutError:
                pass

        logger.info(
            "Continuous scraper stopped: %d articles added over %d scrapes",
            self._stats.total_articles_added, self._stats.cycle_count,
        )
