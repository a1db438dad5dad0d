"""
CLI interface for the unified search system.

This module provides commands for searching conversations, prompts and
messages, and for autocomplete suggestions.
"""

import json
import logging
import uuid
from datetime import datetime
from enum import Enum
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table
from sqlalchemy.exc import SQLAlchemyError

from chatprompt.cli.options import user_option
from chatprompt.core.config import settings
from chatprompt.search.suggestions import get_search_suggestions
from chatprompt.search.unified import (
    DateRange, SearchFilters, SearchManager, SearchResponse, SearchType, SortBy, SortOrder, Visibility
)

# Set up logging
logger = logging.getLogger(__name__)
console = Console()


class OutputFormat(str, Enum):
    """Output formats for search results."""
    TABLE = "table"
    JSON = "json"


def search(
    query: Optional[str] = typer.Argument(None, help="Text to search for"),
    user_id: uuid.UUID = user_option(),
    search_type: SearchType = typer.Option(
        SearchType.ALL, "--type", "-t", help="Entity kinds: all, conversations, prompts, messages"
    ),
    tags: Optional[List[str]] = typer.Option(None, "--tag", help="Match records sharing any of these tags"),
    categories: Optional[List[str]] = typer.Option(None, "--category", help="Prompt category IDs"),
    status: Optional[List[str]] = typer.Option(None, "--status", help="Conversation statuses"),
    visibility: Visibility = typer.Option(Visibility.ALL, "--visibility", help="Prompt visibility"),
    start_date: Optional[datetime] = typer.Option(None, "--start-date", help="Created on or after"),
    end_date: Optional[datetime] = typer.Option(None, "--end-date", help="Created on or before"),
    sort_by: SortBy = typer.Option(SortBy.RELEVANCE, "--sort", "-s", help="relevance, date or usage"),
    sort_order: SortOrder = typer.Option(SortOrder.DESC, "--order", help="asc or desc"),
    limit: int = typer.Option(settings.default_search_limit, "--limit", "-l", help="Maximum number of results"),
    offset: int = typer.Option(0, "--offset", "-o", help="Results to skip in each entity kind"),
    format: OutputFormat = typer.Option(OutputFormat.TABLE, "--format", "-f", help="Output format: table, json"),
):
    """
    Search conversations, prompts and messages with ranked results.

    Examples:

    # Everything mentioning "refactor"
    chatprompt search refactor --user <id>

    # Most used public prompts tagged "python"
    chatprompt search --user <id> --type prompts --visibility public --tag python --sort usage
    """
    date_range = None
    if start_date or end_date:
        date_range = DateRange(start=start_date, end=end_date)

    filters = SearchFilters(
        query=query,
        type=search_type,
        tags=tags or None,
        categories=categories or None,
        status=status or None,
        visibility=visibility,
        date_range=date_range,
        sort_by=sort_by,
        sort_order=sort_order,
    )

    try:
        response = SearchManager().search(user_id, filters, limit=limit, offset=offset)
    except SQLAlchemyError as e:
        logger.error(f"Search failed: {e}")
        console.print(f"[red]Error executing search: {e}[/red]")
        raise typer.Exit(code=1)

    if format == OutputFormat.JSON:
        typer.echo(json.dumps(response.model_dump(mode="json", by_alias=True), indent=2))
    else:
        _print_results_table(response)


def _print_results_table(response: SearchResponse) -> None:
    if not response.results:
        console.print("No results found.")
        return

    table = Table(title="Search results")
    table.add_column("Type", style="cyan")
    table.add_column("Title", style="bold")
    table.add_column("Score", justify="right")
    table.add_column("Updated")
    table.add_column("Excerpt")

    for result in response.results:
        table.add_row(
            result.type.value,
            result.title,
            f"{result.score:g}",
            result.updated_at.strftime("%Y-%m-%d %H:%M"),
            result.excerpt,
        )

    console.print(table)
    console.print(f"Found {response.total} results (showing {len(response.results)})")


def suggest(
    query: str = typer.Argument(..., help="Partial query"),
    user_id: uuid.UUID = user_option(),
):
    """
    Print autocomplete suggestions, one per line.
    """
    try:
        suggestions = get_search_suggestions(user_id, query)
    except SQLAlchemyError as e:
        console.print(f"[red]Error fetching suggestions: {e}[/red]")
        raise typer.Exit(code=1)

    for suggestion in suggestions:
        typer.echo(suggestion)
