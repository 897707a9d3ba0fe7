"""Main CLI command for generating and committing a message."""

from typing import Optional

import typer

from gitscribe import __version__
from gitscribe.cli.utils import setup_logging
from gitscribe.commit_flow import CommitOrchestrator
from gitscribe.git import GitError
from gitscribe.global_config import GlobalConfigError, load_app_config
from gitscribe.interaction import EditorError, TyperInteraction
from gitscribe.llm import LLMError


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"gitscribe {__version__}")
        raise typer.Exit()


def main_command(
    ctx: typer.Context,
    all_files: bool = typer.Option(
        False,
        "--all",
        "-a",
        help="Stage all changes before generating the message",
    ),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Commit the generated message without asking",
    ),
    model: Optional[str] = typer.Option(
        None,
        "--model",
        "-m",
        help="Model to use instead of the configured one",
    ),
    context: Optional[str] = typer.Option(
        None,
        "--context",
        "-c",
        help="Extra guidance for the message (e.g. why the change was made)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Generate a commit message for the staged changes and commit them.

    Without staged changes you are asked whether to stage modified and
    untracked files first.
    """
    setup_logging(is_verbose=verbose)

    # Subcommands run on their own
    if ctx.invoked_subcommand is not None:
        return

    try:
        config = load_app_config()
        orchestrator = CommitOrchestrator(config, TyperInteraction(editor=config.ui.editor))
        orchestrator.run(
            stage_all_first=all_files,
            auto_accept=yes,
            model_override=model,
            context=context,
        )
    except (GitError, LLMError, GlobalConfigError, EditorError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
