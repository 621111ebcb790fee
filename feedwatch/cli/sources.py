"""Sources management commands."""

from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..config import CATEGORIES, Config, SourceConfig, save_sources
from ..ingestion import FeedFetcher, HTTPFeedParser, print_feed_summary

console = Console()
sources_app = typer.Typer(help="Manage RSS sources")


def _load(config: Config):
    try:
        return config.get_sources()
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


@sources_app.command("list")
def sources_list() -> None:
    """List all configured sources."""
    config = Config()
    sources = _load(config)

    if not sources:
        console.print("[yellow]No sources configured.[/yellow]")
        return

    table = Table(title="Configured Sources")
    table.add_column("Name", style="cyan")
    table.add_column("Category", style="magenta")
    table.add_column("Enabled", style="yellow")
    table.add_column("URL", style="blue")

    for source in sources:
        table.add_row(
            source.name,
            source.category,
            "✓" if source.enabled else "✗",
            source.url,
        )

    console.print(table)
    if not config.sources_path.exists():
        console.print(f"[dim]Built-in sources; run 'feedwatch init' to write {config.sources_path}[/dim]")


@sources_app.command("add")
def sources_add(
    name: str = typer.Option(..., "--name", "-n", help="Source name"),
    url: str = typer.Option(..., "--url", "-u", help="RSS feed URL"),
    category: str = typer.Option(
        "international",
        "--category",
        "-c",
        help=f"Source category ({', '.join(CATEGORIES)})",
    ),
) -> None:
    """Add a new RSS source."""
    config = Config()
    sources = _load(config)

    # Check if source already exists
    if any(s.name == name or s.url == url for s in sources):
        console.print(f"[red]Source '{name}' or URL already exists.[/red]")
        raise typer.Exit(1)

    try:
        new_source = SourceConfig(name=name, url=url, category=category, enabled=True)
    except ValidationError as e:
        console.print(f"[red]Invalid source: {e.errors()[0]['msg']}[/red]")
        raise typer.Exit(1)

    sources.append(new_source)
    save_sources(sources, config.sources_path)

    console.print(f"[green]✅ Added source: {name}[/green]")


@sources_app.command("remove")
def sources_remove(
    name: str = typer.Argument(..., help="Source name to remove"),
) -> None:
    """Remove a source."""
    config = Config()
    sources = _load(config)

    original_count = len(sources)
    sources = [s for s in sources if s.name != name]

    if len(sources) == original_count:
        console.print(f"[red]Source '{name}' not found.[/red]")
        raise typer.Exit(1)

    save_sources(sources, config.sources_path)
    console.print(f"[green]✅ Removed source: {name}[/green]")


@sources_app.command("test")
def sources_test(
    name: Optional[str] = typer.Argument(None, help="Source name to test (or test all)"),
    timeout: float = typer.Option(10.0, "--timeout", "-t", help="HTTP timeout in seconds"),
) -> None:
    """Fetch and parse feeds once, without retries or storage."""
    config = Config()
    sources = _load(config)

    if name:
        sources = [s for s in sources if s.name == name]
        if not sources:
            console.print(f"[red]Source '{name}' not found.[/red]")
            raise typer.Exit(1)

    for source in sources:
        if not source.enabled:
            console.print(f"[yellow]⚠️  {source.name}: Disabled[/yellow]")

    fetcher = FeedFetcher(parser=HTTPFeedParser(timeout=timeout), max_attempts=1)
    results = fetcher.fetch_feeds_sync(sources)

    for result in results:
        if result.success:
            console.print(f"[green]✅ {result.source_name}: OK ({result.item_count} items)[/green]")
        else:
            console.print(f"[red]❌ {result.source_name}: Failed - {escape(result.error or '')}[/red]")

    print_feed_summary(results)
