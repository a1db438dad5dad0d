"""
Shared options for CLI commands.
"""

import typer


def user_option():
    """Required --user option; Typer parses it into a UUID."""
    return typer.Option(..., "--user", "-u", help="Acting user ID")
