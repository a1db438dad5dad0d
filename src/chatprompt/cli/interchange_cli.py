"""
CLI commands for moving data between chatprompt and IDE workspaces.
"""

import json
import logging
import uuid
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from sqlalchemy.exc import SQLAlchemyError

from chatprompt.cli.options import user_option
from chatprompt.interchange import (
    export_corpus, generate_snippet, generate_workspace_config, import_corpus,
)
from chatprompt.services.prompt_service import get_prompt

logger = logging.getLogger(__name__)
console = Console()


def _write_or_echo(text: str, output_file: Optional[Path]) -> None:
    if output_file:
        output_file.write_text(text, encoding="utf-8")
        console.print(f"[green]Written to {output_file}[/green]")
    else:
        typer.echo(text)


def export(
    user_id: uuid.UUID = user_option(),
    output_file: Optional[Path] = typer.Option(None, "--output", "-o", help="File to write the document to"),
):
    """
    Export the user's conversations and prompts as an interchange document.
    """
    try:
        document = export_corpus(user_id)
    except SQLAlchemyError as e:
        logger.error(f"Export failed: {e}")
        console.print(f"[red]Error exporting data: {e}[/red]")
        raise typer.Exit(code=1)

    _write_or_echo(json.dumps(document.model_dump(mode="json"), indent=2), output_file)


def import_(
    input_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Interchange document to import"),
    user_id: uuid.UUID = user_option(),
):
    """
    Import conversations and prompts from an interchange document.

    Records that fail are reported and skipped; the rest are still imported.
    """
    result = import_corpus(user_id, input_file.read_bytes())

    console.print(
        f"Imported [bold]{result.conversations}[/bold] conversations "
        f"and [bold]{result.prompts}[/bold] prompts"
    )
    if result.errors:
        console.print(f"[yellow]{len(result.errors)} errors:[/yellow]")
        for error in result.errors:
            console.print(f"  - {error}", markup=False, highlight=False)


def snippet(
    prompt_id: uuid.UUID = typer.Argument(..., help="Prompt ID"),
    user_id: uuid.UUID = user_option(),
):
    """
    Print a prompt as a comment snippet ready to paste into source code.
    """
    prompt = get_prompt(prompt_id, user_id)
    if prompt is None:
        console.print(f"[red]Prompt {prompt_id} not found[/red]")
        raise typer.Exit(code=1)

    typer.echo(generate_snippet(prompt))


def workspace_config(
    user_id: uuid.UUID = user_option(),
    api_endpoint: Optional[str] = typer.Option(None, "--api-endpoint", help="Integration endpoint (defaults to APP_URL)"),
    output_file: Optional[Path] = typer.Option(None, "--output", "-o", help="File to write the settings to"),
):
    """
    Generate IDE workspace settings for the user's prompts.
    """
    try:
        document = export_corpus(user_id)
    except SQLAlchemyError as e:
        console.print(f"[red]Error loading prompts: {e}[/red]")
        raise typer.Exit(code=1)

    config = generate_workspace_config(document.prompts, api_endpoint)
    _write_or_echo(json.dumps(config, indent=2), output_file)
