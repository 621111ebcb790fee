"""Tests for feedwatch.pipeline.orchestrator module."""

import asyncio
import time

import pytest

from feedwatch.config import ScrapeConfig, SourceConfig
from feedwatch.db import SQLiteArticleStore
from feedwatch.errors import ConsecutiveFailureExceeded, ParseError
from feedwatch.ingestion import FeedFetcher, FeedParser
from feedwatch.pipeline import OrchestratorState, ScrapeOrchestrator

SOURCE_A = SourceConfig(name="Source A", url="https://a.example.com/rss", category="world")
SOURCE_B = SourceConfig(name="Source B", url="https://b.example.com/rss", category="business")
SOURCE_C = SourceConfig(name="Source C", url="https://c.example.com/rss", category="technology")


def _entry(title: str, link: str, seconds_ago: float) -> dict:
    return {
        "title": title,
        "link": link,
        "summary": f"{title} summary",
        "published_parsed": time.gmtime(time.time() - seconds_ago),
    }


class StaticParser(FeedParser):
    def __init__(self, feeds, failures=None) -> None:
        self.feeds = feeds
        self.failures = failures or {}
        self.calls = {}

    async def parse(self, url: str):
        self.calls[url] = self.calls.get(url, 0) + 1
        if self.calls[url] <= self.failures.get(url, 0):
            raise ParseError(f"HTTP 503 ({self.calls[url]})")
        return self.feeds[url]


class RecordingSleep:
    def __init__(self) -> None:
        self.delays = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class SlowLookupStore(SQLiteArticleStore):
    def find_by_url(self, url: str):
        time.sleep(0.5)
        return super().find_by_url(url)


class FailingFetcher:
    def __init__(self, fail_pattern=None) -> None:
        self.calls = 0
        self.fail_pattern = fail_pattern

    async def fetch_all_feeds(self, sources, stop_event=None):
        self.calls += 1
        if self.fail_pattern is None or self.fail_pattern[self.calls - 1]:
            raise RuntimeError(f"network down ({self.calls})")
        return []


@pytest.fixture
def store():
    store = SQLiteArticleStore(":memory:")
    store.initialize()
    yield store
    store.close()


def _orchestrator(fetcher, store, sources=(SOURCE_A,), **config) -> ScrapeOrchestrator:
    return ScrapeOrchestrator(
        sources=list(sources),
        fetcher=fetcher,
        store=store,
        config=ScrapeConfig(**config),
        show_new_articles=False,
    )


class TestRunOneCycle:
    def test_three_sources_end_to_end(self, store) -> None:
        feeds = {
            SOURCE_A.url: {"entries": [
                _entry("A fresh", "https://a.example.com/1", 60),
                _entry("A stale", "https://a.example.com/2", 2 * 3600),
            ]},
            SOURCE_B.url: {"entries": [_entry("B fresh", "https://b.example.com/1", 30)]},
            SOURCE_C.url: {"entries": [_entry("C fresh", "https://c.example.com/1", 90)]},
        }
        sleep = RecordingSleep()
        # B's feed is unreachable for the first two attempts
        parser = StaticParser(feeds, failures={SOURCE_B.url: 2})
        fetcher = FeedFetcher(parser=parser, max_attempts=3, base_delay=0.5, sleep=sleep)

        # C's article is already stored from an earlier run
        seed_fetcher = FeedFetcher(parser=StaticParser(feeds), max_attempts=1)
        store.insert_many(asyncio.run(seed_fetcher.fetch(SOURCE_C)))

        orchestrator = _orchestrator(fetcher, store, sources=[SOURCE_A, SOURCE_B, SOURCE_C])
        report = asyncio.run(orchestrator.run_one_cycle())

        assert report.success
        assert report.failed_sources == {}
        assert parser.calls[SOURCE_B.url] == 3
        assert sleep.delays == [0.5, 1.0]
        assert report.fetched == 4
        assert report.recency.stale == 1
        assert report.duplicates == 1
        assert report.stored == 2
        assert sorted(item.title for item in report.new_items) == ["A fresh", "B fresh"]
        assert store.find_by_url("https://b.example.com/1") is not None
        assert len(store.get_all()) == 3
        assert store.find_by_url("https://a.example.com/2") is None

        stats = orchestrator.get_stats()
        assert stats.cycle_count == 1
        assert stats.total_articles_added == 2
        assert stats.state == OrchestratorState.IDLE
        assert stats.last_success_at is not None

    def test_dropped_entries_are_reported(self, store) -> None:
        entries = [_entry("Kept", "https://a.example.com/1", 60), {"title": "No link"}]
        fetcher = FeedFetcher(parser=StaticParser({SOURCE_A.url: {"entries": entries}}), max_attempts=1)

        report = asyncio.run(_orchestrator(fetcher, store).run_one_cycle())

        assert report.fetched == 1
        assert report.dropped == 1

    def test_failed_source_does_not_fail_cycle(self, store) -> None:
        class BrokenParser(FeedParser):
            async def parse(self, url: str):
                raise RuntimeError("connection refused")

        fetcher = FeedFetcher(parser=BrokenParser(), max_attempts=1)
        report = asyncio.run(_orchestrator(fetcher, store).run_one_cycle())

        assert report.success
        assert report.failed_sources == {"Source A": "connection refused"}
        assert report.stored == 0

    def test_caps_new_articles_per_cycle(self, store) -> None:
        entries = [_entry(f"Story {i}", f"https://a.example.com/{i}", 10 * i) for i in range(1, 5)]
        fetcher = FeedFetcher(parser=StaticParser({SOURCE_A.url: {"entries": entries}}), max_attempts=1)

        report = asyncio.run(_orchestrator(fetcher, store, max_articles_per_cycle=2).run_one_cycle())

        assert report.stored == 2
        assert [item.title for item in report.new_items] == ["Story 1", "Story 2"]

    def test_exception_marks_cycle_failed(self, store) -> None:
        orchestrator = _orchestrator(FailingFetcher(), store)

        report = asyncio.run(orchestrator.run_one_cycle())

        assert not report.success
        assert "network down" in report.error
        assert orchestrator.get_stats().consecutive_error_count == 1

    def test_timeout_marks_cycle_failed(self, store) -> None:
        class SlowFetcher:
            async def fetch_all_feeds(self, sources, stop_event=None):
                await asyncio.sleep(5)
                return []

        orchestrator = _orchestrator(SlowFetcher(), store, cycle_timeout_seconds=0.05)
        report = asyncio.run(orchestrator.run_one_cycle())

        assert "timed out" in report.error

    def test_timeout_covers_blocking_storage(self) -> None:
        store = SlowLookupStore(":memory:")
        store.initialize()
        entries = [_entry("Fresh story", "https://a.example.com/1", 60)]
        fetcher = FeedFetcher(parser=StaticParser({SOURCE_A.url: {"entries": entries}}), max_attempts=1)
        orchestrator = _orchestrator(fetcher, store, cycle_timeout_seconds=0.1)

        report = asyncio.run(orchestrator.run_one_cycle())
        store.close()

        assert "timed out" in report.error
        assert report.duration < 0.5
        assert report.stored == 0
        assert orchestrator.get_stats().consecutive_error_count == 1

    def test_success_resets_error_count(self, store) -> None:
        fetcher = FailingFetcher(fail_pattern=[True, True, False])
        orchestrator = _orchestrator(fetcher, store)

        async def run():
            for _ in range(3):
                await orchestrator.run_one_cycle()

        asyncio.run(run())

        stats = orchestrator.get_stats()
        assert stats.consecutive_error_count == 0
        assert stats.cycle_count == 3


class TestStart:
    def test_stops_after_consecutive_failures(self, store) -> None:
        fetcher = FailingFetcher()
        orchestrator = _orchestrator(fetcher, store, max_consecutive_errors=5)

        with pytest.raises(ConsecutiveFailureExceeded):
            asyncio.run(orchestrator.start(interval_seconds=0))

        assert fetcher.calls == 5
        assert orchestrator.get_stats().state == OrchestratorState.STOPPED

        with pytest.raises(ConsecutiveFailureExceeded):
            asyncio.run(orchestrator.run_one_cycle())
        assert fetcher.calls == 5

    def test_stop_event_ends_loop(self, store) -> None:
        class StoppingFetcher:
            def __init__(self) -> None:
                self.calls = 0

            async def fetch_all_feeds(self, sources, stop_event=None):
                self.calls += 1
                stop_event.set()
                return []

        fetcher = StoppingFetcher()
        orchestrator = _orchestrator(fetcher, store)

        async def run():
            await orchestrator.start(interval_seconds=3600, stop_event=asyncio.Event())

        asyncio.run(run())

        assert fetcher.calls == 1
        assert orchestrator.get_stats().state == OrchestratorState.IDLE

    def test_stop_before_start_runs_nothing(self, store) -> None:
        fetcher = FailingFetcher()
        orchestrator = _orchestrator(fetcher, store)

        async def run():
            stop_event = asyncio.Event()
            stop_event.set()
            await orchestrator.start(interval_seconds=1, stop_event=stop_event)

        asyncio.run(run())

        assert fetcher.calls == 0

    def test_stop_before_start_carries_over_to_host_event(self, store) -> None:
        fetcher = FailingFetcher()
        orchestrator = _orchestrator(fetcher, store)
        orchestrator.stop()

        async def run():
            stop_event = asyncio.Event()
            await orchestrator.start(interval_seconds=1, stop_event=stop_event)
            return stop_event

        stop_event = asyncio.run(run())

        assert fetcher.calls == 0
        assert stop_event.is_set()
