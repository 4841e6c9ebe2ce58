"""Categories command implementation."""

import typer
from rich.console import Console
from rich.table import Table

from ..classification import CategoryCatalog, default_tables

console = Console()


def categories_command(
    keywords: bool = typer.Option(False, "--keywords", "-k", help="Show matching keywords"),
) -> None:
    """List article categories."""
    tables = default_tables()
    catalog = CategoryCatalog(tables)

    table = Table(title="Categories")
    table.add_column("Key", style="cyan")
    table.add_column("Kind", style="magenta")
    table.add_column("Title")
    table.add_column("Stock search", style="green")
    if keywords:
        table.add_column("Keywords", style="dim")

    for key, label in catalog.labels().items():
        spec = tables.categories[key]
        row = [key, spec.kind, label.title, spec.search_term]
        if keywords:
            row.append(", ".join(spec.keywords))
        table.add_row(*row)

    console.print(table)
