"""Fetch command implementation."""

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ..classification import CategoryCatalog, default_tables
from ..config import Config, select_sources
from ..db import close_connection_pool
from ..pipeline import FetchReport, build_fetch_orchestrator

console = Console()


def fetch_command(
    source: Optional[str] = typer.Option(
        None,
        "--source",
        "-s",
        help="Only sources whose name contains this text (case-insensitive)",
    ),
    limit: Optional[int] = typer.Option(
        None,
        "--limit",
        "-l",
        help="Maximum new articles in this run",
        min=1,
    ),
    per_source: Optional[int] = typer.Option(
        None,
        "--per-source",
        help="Maximum new articles per source (default: limit split evenly)",
        min=1,
    ),
    category: Optional[str] = typer.Option(
        None,
        "--category",
        "-c",
        help="Keep only articles detected in this category",
    ),
    strict: Optional[bool] = typer.Option(
        None,
        "--strict/--no-strict",
        help="Skip blocked and off-topic articles (default: from config)",
    ),
) -> None:
    """Fetch feeds and store new unprocessed articles."""
    try:
        config = Config()
        fetch_defaults = config.config.fetch
        sources = select_sources(config.get_sources(), source)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]{e}[/red]")
        console.print("Run 'newsdesk init' first.")
        raise typer.Exit(1)

    if not sources:
        console.print(f"[red]No enabled sources match '{source}'.[/red]" if source else "[red]No enabled sources.[/red]")
        raise typer.Exit(1)

    if category and category not in CategoryCatalog(default_tables()):
        console.print(f"[red]Unknown category '{category}'. See 'newsdesk categories'.[/red]")
        raise typer.Exit(1)

    orchestrator = build_fetch_orchestrator(config, strict_filter=strict)

    try:
        report = orchestrator.fetch_all(
            sources,
            per_source_limit=per_source or fetch_defaults.per_source_limit,
            total_limit=limit or fetch_defaults.total_limit,
            category=category,
        )
    except KeyboardInterrupt:
        console.print("\n[yellow]Fetch interrupted by user[/yellow]")
        raise typer.Exit(1)
    finally:
        close_connection_pool()

    print_articles_table(report)


def print_articles_table(report: FetchReport) -> None:
    """Print the articles stored by a fetch run."""
    if not report.articles:
        return

    table = Table(title="New Articles")
    table.add_column("ID", style="dim")
    table.add_column("Source", style="cyan")
    table.add_column("Title")
    table.add_column("Categories", style="magenta")
    table.add_column("Image", style="green")

    for article in report.articles:
        if article.image_downloaded:
            image = "re-hosted"
        elif article.image_url:
            image = article.stock_image_source or "original"
        else:
            image = "-"
        table.add_row(
            str(article.id),
            article.source_name,
            article.title[:60],
            ", ".join(article.categories),
            image,
        )

    console.print(table)
