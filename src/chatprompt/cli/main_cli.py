"""
Top-level CLI that aggregates the database, search, interchange and server commands.
"""

import logging

import typer

from chatprompt.cli.db_cli import app as db_app
from chatprompt.cli.interchange_cli import export, import_, snippet, workspace_config
from chatprompt.cli.search_cli import search, suggest
from chatprompt.cli.server_cli import serve

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s %(name)s - %(message)s"
)

main_app = typer.Typer(help="chatprompt CLI")

# Sub-apps
main_app.add_typer(db_app, name="db")

# Commands
main_app.command("search")(search)
main_app.command("suggest")(suggest)
main_app.command("export")(export)
main_app.command("import")(import_)
main_app.command("snippet")(snippet)
main_app.command("workspace-config")(workspace_config)
main_app.command("serve")(serve)


def main():
    main_app()


if __name__ == "__main__":
    main()
