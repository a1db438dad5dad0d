"""
Database management CLI for chatprompt.
"""

import logging

import typer
from rich.console import Console
from sqlalchemy.exc import SQLAlchemyError

from chatprompt.database.engine import get_engine
from chatprompt.database.init_db import create_schema, drop_schema

# Configure logger
logger = logging.getLogger(__name__)
console = Console()

# Create Typer app
app = typer.Typer(help="Database management commands")


@app.command()
def init(
    drop: bool = typer.Option(False, "--drop", help="Drop existing tables first (destroys data)"),
):
    """
    Create the chatprompt tables on the configured database.
    """
    url = get_engine().url.render_as_string(hide_password=True)
    try:
        if drop:
            drop_schema()
            console.print(f"[yellow]Dropped existing tables on {url}[/yellow]")
        create_schema()
    except SQLAlchemyError as e:
        logger.error(f"Schema creation failed: {e}")
        console.print(f"[red]Error creating schema: {e}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[green]Schema ready on {url}[/green]")
