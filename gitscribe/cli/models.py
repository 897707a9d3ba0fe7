"""CLI command listing the known models."""

from typing import Optional

import typer

from gitscribe.global_config import GlobalConfigError, load_stored_config
from gitscribe.llm import LLMError, list_models


def models_command(
    provider: Optional[str] = typer.Option(
        None,
        "--provider",
        "-p",
        help="Provider to list (defaults to the configured one)",
    ),
) -> None:
    """List known models for the active provider.

    The configured default model is marked with ●. Names not listed here can
    still be used.
    """
    try:
        config = load_stored_config()
        provider_id = provider or config.ai.provider
        models = list_models(provider_id)
    except (LLMError, GlobalConfigError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Available models for {provider_id.lower()}:")
    for name in models:
        if name == config.ai.model and provider_id.lower() == config.ai.provider:
            typer.echo(typer.style(f"  ● {name}", fg=typer.colors.GREEN))
        else:
            typer.echo(f"    {name}")
