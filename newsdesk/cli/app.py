"""Main CLI application."""

import typer
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()

from .categories import categories_command
from .fetch import fetch_command
from .init import init_command
from .process import process_command
from .sources import sources_app

app = typer.Typer(
    name="newsdesk",
    help="Marathi news desk - feed ingestion and AI rewriting",
    no_args_is_help=True,
)

# Register commands
app.command("init")(init_command)
app.command("fetch")(fetch_command)
app.command("process")(process_command)
app.command("categories")(categories_command)
app.add_typer(sources_app, name="sources", help="Manage feed sources")


if __name__ == "__main__":
    app()
