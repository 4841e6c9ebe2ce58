"""Init command implementation."""

from pathlib import Path
from typing import List

import psycopg
import typer
from rich.console import Console
from rich.panel import Panel

from ..config import ConfigModel, SourceConfig, load_config, save_config, save_sources
from ..db import init_database, validate_connection

console = Console()


def create_default_sources() -> List[SourceConfig]:
    """Create default Marathi news sources."""
    return [
        SourceConfig(name="TV9 Marathi", url="https://www.tv9marathi.com/feed", enabled=True),
        SourceConfig(name="Saam TV", url="https://www.saamtv.com/feed/", enabled=True),
        SourceConfig(
            name="Divya Marathi",
            url="https://divyamarathi.bhaskar.com/rss-v1--category-12019.xml",
            enabled=True,
        ),
    ]


def init_command(
    config_dir: Path = typer.Option(
        Path.home() / ".config" / "newsdesk",
        "--config-dir",
        "-c",
        help="Configuration directory",
    ),
    db_host: str = typer.Option("localhost", "--db-host", help="Postgres host"),
    db_port: int = typer.Option(5432, "--db-port", help="Postgres port"),
    db_name: str = typer.Option("newsdesk", "--db-name", help="Database name"),
    db_user: str = typer.Option("newsdesk_user", "--db-user", help="Database user"),
    seed_sources: bool = typer.Option(
        True,
        "--seed-sources/--no-seed-sources",
        help="Seed default Marathi news sources",
    ),
    skip_db: bool = typer.Option(False, "--skip-db", help="Only write configuration files"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing configuration files"),
) -> None:
    """Initialize configuration and database."""
    console.print(Panel.fit("Marathi News Desk - Initialization", style="bold blue"))

    config_dir.mkdir(parents=True, exist_ok=True)
    config_path = config_dir / "config.yaml"
    sources_path = config_dir / "sources.yaml"

    if config_path.exists() and not force:
        try:
            config = load_config(config_path)
        except ValueError as e:
            console.print(f"[red]{e}[/red]\nRe-run with [bold]--force[/bold] to replace it.")
            raise typer.Exit(1)
        console.print(f"[yellow]Keeping existing config:[/yellow] {config_path}")
    else:
        config = ConfigModel(
            postgres={
                "host": db_host,
                "port": db_port,
                "database": db_name,
                "user": db_user,
                "password_env": "NEWSDESK_DB_PASSWORD",
            },
        )
        save_config(config, config_path)
        console.print(f"[green]Created config:[/green] {config_path}")

    if sources_path.exists() and not force:
        console.print(f"[yellow]Keeping existing sources:[/yellow] {sources_path}")
    elif seed_sources:
        sources = create_default_sources()
        save_sources(sources, sources_path)
        console.print(f"[green]Created sources:[/green] {sources_path} (seeded with {len(sources)} sources)")
    else:
        save_sources([], sources_path)
        console.print(f"[green]Created sources:[/green] {sources_path} (empty)")

    if skip_db:
        return

    console.print("\n[bold]Testing database connection...[/bold]")
    db_config = config.postgres.model_dump()

    if not validate_connection(db_config):
        console.print(
            "[red]Database connection failed![/red]\n"
            "Please ensure Postgres is running and credentials are correct.\n"
            "Set the password via environment variable: [bold]export NEWSDESK_DB_PASSWORD=your_password[/bold]"
        )
        raise typer.Exit(1)

    console.print("[green]Database connection successful[/green]")

    console.print("\n[bold]Initializing database schema...[/bold]")
    try:
        init_database(db_config)
    except psycopg.Error as e:
        console.print(f"[red]Failed to initialize database: {e}[/red]")
        raise typer.Exit(1)

    console.print(
        Panel(
            f"[green]News desk initialized successfully![/green]\n\n"
            f"Configuration: {config_path}\n"
            f"Sources: {sources_path}\n\n"
            f"Next steps:\n"
            f"1. Set database password: [bold]export NEWSDESK_DB_PASSWORD=your_password[/bold]\n"
            f"2. Set LLM API key: [bold]export OPENAI_API_KEY=your_key[/bold]\n"
            f"3. Optional: R2_ACCESS_KEY_ID, R2_SECRET_ACCESS_KEY, UNSPLASH_ACCESS_KEY, PEXELS_API_KEY\n"
            f"4. Run: [bold]newsdesk fetch[/bold] then [bold]newsdesk process[/bold]",
            style="green",
        )
    )
