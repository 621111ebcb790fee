"""Commands for browsing stored articles."""

from contextlib import contextmanager
from typing import Iterator, List

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..config import Config
from ..db import ArticleStore, create_store
from ..errors import StorageError
from ..models import Article

console = Console()
db_app = typer.Typer(help="Browse stored articles")


@contextmanager
def _open_store() -> Iterator[ArticleStore]:
    try:
        store = create_store(Config().get_db_config())
    except FileNotFoundError:
        console.print("[red]Config file not found. Run 'feedwatch init' first.[/red]")
        raise typer.Exit(1)
    try:
        yield store
    except StorageError as e:
        console.print(f"[red]❌ Database error: {e}[/red]")
        raise typer.Exit(1)
    finally:
        store.close()


def _print_articles(articles: List[Article], title: str) -> None:
    if not articles:
        console.print("[yellow]No articles found.[/yellow]")
        return

    table = Table(title=f"{title} ({len(articles)})")
    table.add_column("Published", style="green", no_wrap=True)
    table.add_column("Source", style="cyan")
    table.add_column("Title", style="bold")
    table.add_column("URL", style="blue", overflow="fold")

    for article in articles:
        table.add_row(
            article.published_date or "-",
            article.source_name,
            escape(article.title),
            article.canonical_url,
        )

    console.print(table)


@db_app.command("stats")
def db_stats() -> None:
    """Show article counts per category and source."""
    with _open_store() as store:
        rows = store.get_statistics()

    if not rows:
        console.print("[yellow]No articles stored yet.[/yellow]")
        return

    table = Table(title="Database Statistics")
    table.add_column("Category", style="magenta")
    table.add_column("Source", style="cyan")
    table.add_column("Articles", style="bold", justify="right")
    table.add_column("Latest", style="green")

    for row in rows:
        table.add_row(
            row["category"],
            row["source_name"],
            str(row["count"]),
            str(row["latest_article"] or "-"),
        )

    console.print(table)
    console.print(f"Total articles: {sum(row['count'] for row in rows)}")


@db_app.command("category")
def db_category(
    name: str = typer.Argument(..., help="Category name"),
    limit: int = typer.Option(10, "--limit", "-l", help="Max articles to show"),
) -> None:
    """Show the newest articles in a category."""
    with _open_store() as store:
        articles = store.get_by_category(name, limit)
    _print_articles(articles, f"Category: {name}")


@db_app.command("source")
def db_source(
    name: str = typer.Argument(..., help="Source name"),
    limit: int = typer.Option(10, "--limit", "-l", help="Max articles to show"),
) -> None:
    """Show the newest articles from a source."""
    with _open_store() as store:
        articles = store.get_by_source(name, limit)
    _print_articles(articles, f"Source: {name}")


@db_app.command("search")
def db_search(
    term: str = typer.Argument(..., help="Text to look for in titles and content"),
    limit: int = typer.Option(10, "--limit", "-l", help="Max articles to show"),
) -> None:
    """Search stored articles."""
    with _open_store() as store:
        articles = store.query(term, limit)
    _print_articles(articles, f"Search: {term}")
