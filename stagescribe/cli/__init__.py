"""CLI entry point for stagescribe.

This module combines the main command and the config subcommands into a
single typer application.
"""

import typer

from stagescribe.cli.config import config_app
from stagescribe.cli.main import main_command

# Main application
app = typer.Typer(
    name="stagescribe",
    help="stagescribe: commit messages for staged changes, written by an LLM",
    add_completion=False,
)

app.add_typer(config_app, name="config")

# The main callback generates the message when no subcommand is given
app.callback(invoke_without_command=True)(main_command)


__all__ = [
    "app",
    "config_app",
    "main_command",
]
