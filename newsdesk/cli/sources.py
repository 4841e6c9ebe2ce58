"""Sources management commands."""

from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from ..config import Config, FetchConfig, SourceConfig, load_sources, save_sources, select_sources
from ..ingestion import RSSFetcher, print_feed_summary

console = Console()
sources_app = typer.Typer(help="Manage feed sources")


def _load(config: Config) -> List[SourceConfig]:
    try:
        return load_sources(config.sources_path)
    except FileNotFoundError:
        console.print("[red]Sources file not found. Run 'newsdesk init' first.[/red]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


@sources_app.command("list")
def sources_list() -> None:
    """List all configured sources."""
    sources = _load(Config())

    if not sources:
        console.print("[yellow]No sources configured.[/yellow]")
        return

    table = Table(title="Configured Sources")
    table.add_column("Name", style="cyan")
    table.add_column("Enabled", style="yellow")
    table.add_column("URL", style="blue")

    for source in sources:
        table.add_row(source.name, "yes" if source.enabled else "no", source.url)

    console.print(table)


@sources_app.command("add")
def sources_add(
    name: str = typer.Option(..., "--name", "-n", help="Source name"),
    url: str = typer.Option(..., "--url", "-u", help="Feed URL"),
    disabled: bool = typer.Option(False, "--disabled", help="Add the source disabled"),
) -> None:
    """Add a new feed source."""
    config = Config()
    try:
        sources = load_sources(config.sources_path)
    except FileNotFoundError:
        sources = []

    if any(s.name == name or s.url == url for s in sources):
        console.print(f"[red]Source '{name}' or URL already exists.[/red]")
        raise typer.Exit(1)

    sources.append(SourceConfig(name=name, url=url, enabled=not disabled))
    save_sources(sources, config.sources_path)

    console.print(f"[green]Added source: {name}[/green]")


@sources_app.command("remove")
def sources_remove(
    name: str = typer.Argument(..., help="Source name to remove"),
) -> None:
    """Remove a source."""
    config = Config()
    sources = _load(config)

    remaining = [s for s in sources if s.name != name]
    if len(remaining) == len(sources):
        console.print(f"[red]Source '{name}' not found.[/red]")
        raise typer.Exit(1)

    save_sources(remaining, config.sources_path)
    console.print(f"[green]Removed source: {name}[/green]")


@sources_app.command("test")
def sources_test(
    name: Optional[str] = typer.Argument(None, help="Source name fragment to test (or test all)"),
) -> None:
    """Fetch and parse feeds without storing anything."""
    config = Config()
    sources = select_sources(_load(config), name)
    if not sources:
        console.print(f"[red]No enabled source matches '{name}'.[/red]" if name else "[red]No enabled sources.[/red]")
        raise typer.Exit(1)

    try:
        fetch = config.config.fetch
    except (FileNotFoundError, ValueError):
        fetch = FetchConfig()
    fetcher = RSSFetcher(timeout=fetch.timeout, max_concurrent=fetch.max_concurrent)
    results = fetcher.fetch_feeds_sync(sources)

    for result in results:
        if result.success:
            console.print(f"[green]{result.source_name}: OK ({result.item_count} items)[/green]")
        else:
            console.print(f"[red]{result.source_name}: Failed - {result.error}[/red]")

    print_feed_summary(results)
