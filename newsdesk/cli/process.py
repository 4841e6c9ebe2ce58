"""Process command implementation."""

from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel

from ..config import Config
from ..db import StoreError, close_connection_pool
from ..generation import GenerationConfigError
from ..pipeline import build_rewrite_stage

console = Console()


def process_command(
    category: Optional[str] = typer.Option(
        None,
        "--category",
        "-c",
        help="Only process articles in this category",
    ),
    count: int = typer.Option(
        1,
        "--count",
        "-n",
        help="Number of articles to process",
        min=1,
    ),
) -> None:
    """Rewrite the oldest pending articles."""
    try:
        config = Config()
        stage = build_rewrite_stage(config)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    except GenerationConfigError as e:
        console.print(f"[red]Text generation is not configured: {e}[/red]")
        raise typer.Exit(1)

    try:
        results = stage.process_batch(count, category)
    except StoreError as e:
        console.print(f"[red]Database error: {e}[/red]")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Processing interrupted by user[/yellow]")
        raise typer.Exit(1)
    finally:
        close_connection_pool()

    processed = [r for r in results if r.processed]
    remaining = results[-1].remaining if results else 0
    remaining_text = "unknown" if remaining is None else str(remaining)
    warnings = sum(len(r.warnings) for r in results)
    usage = stage.rewriter.generator.get_usage_stats()

    if not processed:
        console.print(f"[yellow]No articles processed.[/yellow] Remaining: {remaining_text}")
        return

    lines = [f"[green]Processed {len(processed)} article(s)[/green]", ""]
    for result in processed:
        article = result.article
        marker = "" if article.is_title_rewritten else " [dim](original title)[/dim]"
        lines.append(f"#{result.unprocessed_id} {article.title[:70]}{marker}")
    lines.append("")
    lines.append(f"Remaining: {remaining_text}")
    lines.append(f"LLM calls: {usage['api_calls']} ({usage['model']}, {usage['total_tokens']} tokens)")
    if warnings:
        lines.append(f"[yellow]Warnings: {warnings}[/yellow]")

    console.print(Panel("\n".join(lines), style="green"))
