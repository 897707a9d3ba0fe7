"""CLI entry point for gitscribe.

This module provides the main CLI application that combines all commands
and subcommands into a single unified interface.
"""

import typer

from gitscribe.cli.config import config_app
from gitscribe.cli.main import main_command
from gitscribe.cli.models import models_command

# Main application
app = typer.Typer(
    name="gitscribe",
    help="gitscribe: AI-generated git commit messages",
    add_completion=False,
)

# Add subcommand groups
app.add_typer(config_app, name="config")

# Add individual commands
app.command("models")(models_command)

# Set the main callback for default behavior (includes --version flag)
app.callback(invoke_without_command=True)(main_command)


__all__ = [
    "app",
    "config_app",
    "main_command",
    "models_command",
]
