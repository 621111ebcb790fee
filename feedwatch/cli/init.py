"""Init command implementation."""

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel

from ..config import DEFAULT_SOURCES, Config, ConfigModel, DatabaseConfig, save_config, save_sources
from ..db import create_store
from ..errors import StorageError

console = Console()


def init_command(
    config_dir: Path = typer.Option(
        Path.home() / ".config" / "feedwatch",
        "--config-dir",
        "-c",
        help="Configuration directory",
    ),
    backend: str = typer.Option("sqlite", "--backend", "-b", help="Storage backend (sqlite, postgres)"),
    sqlite_path: str = typer.Option(
        "~/.local/share/feedwatch/news.db",
        "--sqlite-path",
        help="SQLite database file",
    ),
    db_host: str = typer.Option("localhost", "--db-host", help="Postgres host"),
    db_port: int = typer.Option(5432, "--db-port", help="Postgres port"),
    db_name: str = typer.Option("feedwatch", "--db-name", help="Database name"),
    db_user: str = typer.Option("feedwatch", "--db-user", help="Database user"),
    seed_sources: bool = typer.Option(
        True,
        "--seed-sources/--no-seed-sources",
        help="Seed the default news sources",
    ),
) -> None:
    """Initialize feedwatch configuration and storage."""
    console.print(Panel.fit("📰 Feedwatch - Initialization", style="bold blue"))

    if backend not in ("sqlite", "postgres"):
        console.print(f"[red]Unknown backend '{backend}', expected sqlite or postgres.[/red]")
        raise typer.Exit(1)

    # Create configuration directory
    config_dir.mkdir(parents=True, exist_ok=True)
    config_path = config_dir / "config.yaml"
    sources_path = config_dir / "sources.yaml"

    # Create default configuration
    config = ConfigModel(
        database=DatabaseConfig(
            backend=backend,
            sqlite_path=sqlite_path,
            host=db_host,
            port=db_port,
            database=db_name,
            user=db_user,
            password_env="FEEDWATCH_DB_PASSWORD",
        ),
    )

    save_config(config, config_path)
    console.print(f"✅ Created config: {config_path}")

    if seed_sources:
        sources = list(DEFAULT_SOURCES)
        save_sources(sources, sources_path)
        console.print(f"✅ Created sources: {sources_path} (seeded with {len(sources)} sources)")
    else:
        sources = []
        save_sources(sources, sources_path)
        console.print(f"✅ Created sources: {sources_path} (empty)")

    # Initialize storage schema
    console.print("\n[bold]Initializing storage...[/bold]")
    store = create_store(Config(config_path).get_db_config())
    try:
        store.initialize()
        store.sync_sources(sources)
    except StorageError as e:
        console.print(f"[red]❌ Failed to initialize storage: {e}[/red]")
        if backend == "postgres":
            console.print(
                "Please ensure Postgres is running and credentials are correct.\n"
                "Set the password via environment variable: "
                "[bold]export FEEDWATCH_DB_PASSWORD=your_password[/bold]"
            )
        raise typer.Exit(1)
    finally:
        store.close()
    console.print("✅ Storage initialized")

    console.print(
        Panel(
            f"[green]✅ Feedwatch initialized successfully![/green]\n\n"
            f"Configuration: {config_path}\n"
            f"Sources: {sources_path}\n"
            f"Backend: {backend}\n\n"
            f"Next steps:\n"
            f"1. Review sources: [bold]feedwatch sources list[/bold]\n"
            f"2. Run once: [bold]feedwatch run --once[/bold]\n"
            f"3. Run continuously: [bold]feedwatch run[/bold]",
            style="green",
        )
    )
