"""
Server management CLI for chatprompt.
"""

import logging

import typer

logger = logging.getLogger(__name__)


def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind"),
    port: int = typer.Option(5000, "--port", "-p", help="Port to listen on"),
    debug: bool = typer.Option(False, "--debug", help="Run Flask in debug mode"),
):
    """
    Start the chatprompt API server.
    """
    from chatprompt.api import create_app

    logger.info(f"Starting API server on {host}:{port}")
    create_app().run(host=host, port=port, debug=debug)
