"""CLI commands for global configuration management."""

import typer

from gitscribe import global_config
from gitscribe.cli.utils import mask_secret
from gitscribe.config import LLMProvider, get_api_key_env_var, provider_names
from gitscribe.llm import LLMError

# Subcommand group for configuration management
config_app = typer.Typer(
    name="config",
    help="Manage gitscribe configuration in ~/.gitscribe/",
    add_completion=False,
)


def _fail(e: Exception) -> None:
    typer.echo(f"Error: {e}", err=True)
    raise typer.Exit(1)


def _done(text: str) -> None:
    typer.echo(typer.style(f"✓ {text}", fg=typer.colors.GREEN))


@config_app.command("show")
def config_show() -> None:
    """Show the current configuration."""
    try:
        config = global_config.load_stored_config()
    except global_config.GlobalConfigError as e:
        _fail(e)

    typer.echo(f"Current gitscribe configuration ({global_config.get_config_file_path()}):")
    typer.echo()
    typer.echo(typer.style("[ai]", bold=True))
    typer.echo(f"  Provider: {config.ai.provider}")
    typer.echo(f"  Model: {config.ai.model}")
    typer.echo(f"  API Key: {mask_secret(config.ai.api_key)}")
    typer.echo(f"  Temperature: {config.ai.temperature}")
    typer.echo(f"  Max Tokens: {config.ai.max_tokens}")
    if config.ai.request_timeout is not None:
        typer.echo(f"  Request Timeout: {config.ai.request_timeout}s")
    typer.echo()
    typer.echo(typer.style("[git]", bold=True))
    typer.echo(f"  Auto Stage: {config.git.auto_stage}")
    typer.echo(f"  Conventional Commits: {config.git.conventional_commits}")
    typer.echo(f"  Diff Context: {config.git.diff_context}")
    typer.echo()
    typer.echo(typer.style("[ui]", bold=True))
    typer.echo(f"  Interactive: {config.ui.interactive}")
    typer.echo(f"  Show Diff: {config.ui.show_diff}")
    typer.echo(f"  Editor: {config.ui.editor or 'not set'}")

    # Key from the credentials file, used when ai.api_key is not set
    try:
        env_var = get_api_key_env_var(LLMProvider(config.ai.provider))
        credential = global_config.get_credential(env_var)
    except (ValueError, global_config.GlobalConfigError):
        return
    typer.echo()
    typer.echo(f"  Credentials ({env_var}): {mask_secret(credential)}")


@config_app.command("set-provider")
def config_set_provider(
    provider: str = typer.Argument(..., help=f"Provider name ({', '.join(provider_names())})"),
) -> None:
    """Set the active LLM provider."""
    try:
        previous_key = global_config.load_stored_config().ai.api_key
        config = global_config.set_provider(provider)
    except (LLMError, global_config.GlobalConfigError) as e:
        _fail(e)
    _done(f"Provider set to {config.ai.provider}")
    if previous_key is not None and config.ai.api_key is None:
        typer.echo("API key cleared. Set one for this provider with: gitscribe config set-api-key")


@config_app.command("set-api-key")
def config_set_api_key(
    api_key: str = typer.Argument(..., help="API key, or an ${ENV_VAR} reference"),
    credentials: bool = typer.Option(
        False,
        "--credentials",
        help="Store the key in ~/.gitscribe/credentials for the active provider",
    ),
) -> None:
    """Set the API key used for the active provider."""
    try:
        if credentials:
            config = global_config.load_stored_config()
            env_var = get_api_key_env_var(LLMProvider(config.ai.provider))
            global_config.save_credential(env_var, api_key)
            _done(f"API key saved to credentials as {env_var}")
            return
        global_config.set_api_key(api_key)
    except (ValueError, global_config.GlobalConfigError) as e:
        _fail(e)
    _done("API key saved")


@config_app.command("set-model")
def config_set_model(
    model: str = typer.Argument(..., help="Model name (see 'gitscribe models')"),
) -> None:
    """Set the default model."""
    try:
        config = global_config.set_model(model)
    except global_config.GlobalConfigError as e:
        _fail(e)
    _done(f"Model set to {config.ai.model}")


@config_app.command("set-temperature")
def config_set_temperature(
    temperature: float = typer.Argument(..., help="Sampling temperature (0.0-2.0)"),
) -> None:
    """Set the sampling temperature."""
    try:
        config = global_config.set_temperature(temperature)
    except global_config.GlobalConfigError as e:
        _fail(e)
    _done(f"Temperature set to {config.ai.temperature}")


@config_app.command("set-max-tokens")
def config_set_max_tokens(
    max_tokens: int = typer.Argument(..., help="Maximum tokens in the response"),
) -> None:
    """Set the output token budget."""
    try:
        config = global_config.set_max_tokens(max_tokens)
    except global_config.GlobalConfigError as e:
        _fail(e)
    _done(f"Max tokens set to {config.ai.max_tokens}")


@config_app.command("set-interactive")
def config_set_interactive(
    enabled: bool = typer.Argument(..., help="true to choose Commit/Edit/Cancel from a menu"),
) -> None:
    """Enable or disable the interactive commit menu."""
    try:
        config = global_config.set_interactive(enabled)
    except global_config.GlobalConfigError as e:
        _fail(e)
    _done(f"Interactive mode set to {config.ui.interactive}")


@config_app.command("set-conventional")
def config_set_conventional(
    enabled: bool = typer.Argument(..., help="true to ask for Conventional Commits messages"),
) -> None:
    """Enable or disable Conventional Commits formatting."""
    try:
        config = global_config.set_conventional(enabled)
    except global_config.GlobalConfigError as e:
        _fail(e)
    _done(f"Conventional commits set to {config.git.conventional_commits}")


@config_app.command("set-show-diff")
def config_set_show_diff(
    enabled: bool = typer.Argument(..., help="true to print the staged diff before generating"),
) -> None:
    """Enable or disable showing the staged diff."""
    try:
        config = global_config.set_show_diff(enabled)
    except global_config.GlobalConfigError as e:
        _fail(e)
    _done(f"Show diff set to {config.ui.show_diff}")


@config_app.command("set-editor")
def config_set_editor(
    editor: str = typer.Argument(..., help="Editor command, e.g. 'code --wait'"),
) -> None:
    """Set the editor used to edit generated messages."""
    try:
        config = global_config.set_editor(editor)
    except global_config.GlobalConfigError as e:
        _fail(e)
    _done(f"Editor set to {config.ui.editor}")


@config_app.command("path")
def config_path() -> None:
    """Print the configuration file path."""
    try:
        typer.echo(str(global_config.get_config_file_path()))
    except global_config.GlobalConfigError as e:
        _fail(e)
