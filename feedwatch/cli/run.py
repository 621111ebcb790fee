"""Run command implementation."""

import asyncio
import signal
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ..config import Config
from ..config.loader import DEFAULT_CONFIG_PATH
from ..db import create_store
from ..errors import ConsecutiveFailureExceeded, StorageError
from ..pipeline import ScrapeOrchestrator
from .logs import configure_logging

console = Console()


async def _run_scraper(
    orchestrator: ScrapeOrchestrator,
    once: bool,
    interval_seconds: Optional[float],
) -> bool:
    """
    Run one cycle or the continuous loop, stopping cleanly on SIGINT/SIGTERM.

    Returns:
        False if a single requested scrape failed
    """
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()

    def request_stop(signame: str) -> None:
        console.print(f"\n[yellow]Received {signame}, shutting down after the current scrape...[/yellow]")
        orchestrator.stop()
        stop_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, request_stop, sig.name)
        except NotImplementedError:
            # Not available on Windows event loops; Ctrl+C raises KeyboardInterrupt instead
            pass

    if once:
        report = await orchestrator.run_one_cycle()
        return report.success

    await orchestrator.start(interval_seconds=interval_seconds, stop_event=stop_event)
    return True


def run_command(
    once: bool = typer.Option(False, "--once", help="Run a single scrape and exit"),
    interval: Optional[float] = typer.Option(
        None,
        "--interval",
        "-i",
        help="Minutes between scrapes. Default: from config",
        min=0.1,
    ),
    config_path: Path = typer.Option(
        DEFAULT_CONFIG_PATH,
        "--config",
        "-c",
        help="Path to config.yaml",
    ),
) -> None:
    """Scrape the configured RSS feeds continuously and store new articles."""
    config = Config(config_path)
    try:
        settings = config.config
    except FileNotFoundError:
        console.print(f"[red]Config file not found: {config_path}. Run 'feedwatch init' first.[/red]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    configure_logging(settings.logging.level)

    store = create_store(config.get_db_config())
    try:
        # Prepare storage
        console.print("[dim]Preparing database...[/dim]")
        try:
            store.initialize()
            orchestrator = ScrapeOrchestrator.from_config(config, store=store)
            store.sync_sources(orchestrator.sources)
        except StorageError as e:
            console.print(f"[red]❌ Database setup failed: {e}[/red]")
            raise typer.Exit(1)

        if not any(s.enabled for s in orchestrator.sources):
            console.print("[yellow]No enabled sources. Add one with 'feedwatch sources add'.[/yellow]")
            raise typer.Exit(1)

        interval_seconds = interval * 60 if interval is not None else None

        try:
            succeeded = asyncio.run(_run_scraper(orchestrator, once, interval_seconds))
        except ConsecutiveFailureExceeded as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(1)
        except KeyboardInterrupt:
            console.print("\n[yellow]Scraper interrupted by user[/yellow]")
            raise typer.Exit(1)

        stats = orchestrator.get_stats()
        console.print(
            f"[green]Done: {stats.total_articles_added} articles added over {stats.cycle_count} scrapes[/green]"
        )
        if not succeeded:
            raise typer.Exit(1)
    finally:
        store.close()
