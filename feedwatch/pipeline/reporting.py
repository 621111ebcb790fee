"""Console output for scrape cycles."""

from collections import defaultdict
from typing import Dict, List, Sequence

import pendulum
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..config import ScrapeConfig
from ..ingestion.models import FeedItem
from .models import CycleReport, CycleStats

console = Console()


def print_cycle_summary(report: CycleReport):
    """Print a one-table summary of a finished cycle."""
    status = "[green]✓[/green]" if report.success else "[red]✗[/red]"

    table = Table(title=f"Scrape #{report.cycle} {status}")
    table.add_column("Stage", style="cyan")
    table.add_column("Count", style="bold", justify="right")
    table.add_column("Details", style="dim")

    fetch_details = []
    if report.dropped:
        fetch_details.append(f"{report.dropped} entries dropped")
    if report.failed_sources:
        fetch_details.append(f"skipped: {escape(', '.join(sorted(report.failed_sources)))}")
    table.add_row("Fetched", str(report.fetched), ", ".join(fetch_details))
    table.add_row(
        "Recent",
        str(report.recency.kept),
        f"{report.recency.stale} stale, {report.recency.undated_dropped} undated dropped",
    )
    table.add_row("Unique", str(report.aggregated), "")
    table.add_row(
        "Duplicates",
        str(report.duplicates),
        f"{report.check_errors} check errors" if report.check_errors else "",
    )
    table.add_row(
        "Stored",
        str(report.stored),
        f"{report.store_failed} failed" if report.store_failed else "",
    )

    console.print(table)
    if report.success:
        console.print(f"[dim]Completed in {report.duration:.1f}s[/dim]")
    else:
        console.print(f"[red]Scrape failed after {report.duration:.1f}s: {escape(report.error)}[/red]")


def print_new_articles(items: Sequence[FeedItem], per_source: int = 3):
    """Print new articles grouped by source, a few per source."""
    by_source: Dict[str, List[FeedItem]] = defaultdict(list)
    for item in items:
        by_source[item.source_name].append(item)

    console.print(f"\n[bold green]{len(items)} new articles[/bold green]")
    for source_name, source_items in by_source.items():
        console.print(f"[cyan]{escape(source_name)}[/cyan] ({len(source_items)})")
        for item in source_items[:per_source]:
            console.print(f"  • {escape(item.title)} [dim]{escape(item.published_date or '')}[/dim]")
        if len(source_items) > per_source:
            console.print(f"  [dim]... and {len(source_items) - per_source} more[/dim]")


def print_status(stats: CycleStats, interval_seconds: float, config: ScrapeConfig):
    """Print a status panel for the running scraper."""
    uptime = pendulum.now("UTC") - pendulum.instance(stats.started_at)
    last_success = (
        pendulum.instance(stats.last_success_at).diff_for_humans()
        if stats.last_success_at
        else "never"
    )

    console.print(Panel(
        f"State: {stats.state.value}\n"
        f"Uptime: {uptime.in_words()}\n"
        f"Scrapes: {stats.cycle_count}\n"
        f"Articles added: {stats.total_articles_added}\n"
        f"Last success: {last_success}\n"
        f"Consecutive errors: {stats.consecutive_error_count}/{config.max_consecutive_errors}\n"
        f"Interval: {interval_seconds / 60:.1f} minutes",
        title="Scraper status",
        style="blue",
    ))
