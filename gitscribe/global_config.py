"""Global configuration management for gitscribe.

Handles user-level configuration stored in ~/.gitscribe/:
- config.yaml: Provider, model, generation and UI settings
- credentials: API keys for LLM providers

The configuration file is created with defaults on first load. Values of the
form ``${ENV_VAR}`` in ``ai.api_key`` and ``ui.editor`` are resolved from the
environment when loading; the unresolved form is what stays on disk.
"""

import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from gitscribe.config import (
    MAX_TEMPERATURE,
    MIN_TEMPERATURE,
    AppConfig,
    LLMProvider,
    provider_names,
)

logger = logging.getLogger(__name__)


class GlobalConfigError(Exception):
    """Raised when there's an error reading or writing global configuration."""

    pass


class ConfigLocationError(GlobalConfigError):
    """Raised when the configuration directory cannot be determined."""

    pass


class InvalidTemperatureError(GlobalConfigError, ValueError):
    """Raised when a temperature outside the accepted range is given."""

    def __init__(self, value: float):
        self.value = value
        super().__init__(
            f"Invalid temperature value {value}. "
            f"Must be between {MIN_TEMPERATURE} and {MAX_TEMPERATURE}"
        )


# Set to override the configuration directory
_CONFIG_DIR: Optional[Path] = None

CONFIG_DIR_ENV_VAR = "GITSCRIBE_CONFIG_DIR"


def get_global_config_dir() -> Path:
    """Get the global gitscribe configuration directory.

    Returns:
        Path to ~/.gitscribe/ (or $GITSCRIBE_CONFIG_DIR when set).

    Raises:
        ConfigLocationError: If no home directory can be determined.
    """
    if _CONFIG_DIR is not None:
        return _CONFIG_DIR

    override = os.environ.get(CONFIG_DIR_ENV_VAR)
    if override:
        return Path(override)

    try:
        return Path.home() / ".gitscribe"
    except RuntimeError as e:
        raise ConfigLocationError(f"Configuration directory not found: {e}")


def ensure_global_config_dir() -> Path:
    """Ensure the global config directory exists.

    Returns:
        Path to the configuration directory.
    """
    config_dir = get_global_config_dir()
    try:
        config_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise GlobalConfigError(f"Failed to create config directory {config_dir}: {e}")
    return config_dir


def get_config_file_path() -> Path:
    """Get path to config.yaml file."""
    return get_global_config_dir() / "config.yaml"


def get_credentials_file_path() -> Path:
    """Get path to credentials file."""
    return get_global_config_dir() / "credentials"


def is_configured() -> bool:
    """Check if the configuration file exists."""
    return get_config_file_path().exists()


class _ConfigDumper(yaml.SafeDumper):
    """YAML dumper writing multi-line strings as literal blocks."""


def _represent_str(dumper: yaml.SafeDumper, data: str) -> yaml.Node:
    if "\n" in data:
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", data)


_ConfigDumper.add_representer(str, _represent_str)


def _atomic_write(path: Path, content: str) -> None:
    """Write a file by writing a sibling temp file and renaming it into place."""
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w") as f:
            f.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


def load_raw_config() -> Dict[str, Any]:
    """Load the configuration file as a plain dictionary.

    Returns:
        The parsed YAML. Empty dict if the file doesn't exist.

    Raises:
        GlobalConfigError: If the file cannot be read or parsed.
    """
    config_file = get_config_file_path()

    if not config_file.exists():
        return {}

    try:
        with open(config_file, "r") as f:
            data = yaml.safe_load(f) or {}
    except Exception as e:
        raise GlobalConfigError(f"Failed to load config from {config_file}: {e}")

    if not isinstance(data, dict):
        raise GlobalConfigError(f"Failed to load config from {config_file}: expected a mapping")
    return data


def save_app_config(config: AppConfig) -> None:
    """Save a configuration snapshot to config.yaml atomically.

    Args:
        config: The configuration to write.

    Raises:
        GlobalConfigError: If the file cannot be written.
    """
    ensure_global_config_dir()
    config_file = get_config_file_path()

    try:
        content = yaml.dump(
            config.model_dump(mode="json"),
            Dumper=_ConfigDumper,
            default_flow_style=False,
            sort_keys=False,
        )
        _atomic_write(config_file, content)
    except Exception as e:
        raise GlobalConfigError(f"Failed to save config to {config_file}: {e}")

    logger.debug("Saved configuration to %s", config_file)


def load_stored_config() -> AppConfig:
    """Load the configuration exactly as stored, creating it on first use.

    ``${ENV_VAR}`` references are left unresolved.

    Returns:
        The stored configuration.

    Raises:
        GlobalConfigError: If the file cannot be read, parsed or validated.
    """
    if not is_configured():
        config = AppConfig()
        save_app_config(config)
        logger.info("Created default configuration at %s", get_config_file_path())
        return config

    data = load_raw_config()
    try:
        return AppConfig.model_validate(data)
    except ValidationError as e:
        raise GlobalConfigError(f"Invalid configuration in {get_config_file_path()}:\n{e}")


def expand_env_reference(value: Optional[str]) -> Optional[str]:
    """Resolve a ``${ENV_VAR}`` reference.

    Args:
        value: A configured value, possibly of the form ``${NAME}``.

    Returns:
        The environment variable's value when ``value`` is a reference to a
        variable that is set, otherwise ``value`` unchanged.
    """
    if value and value.startswith("${") and value.endswith("}"):
        resolved = os.environ.get(value[2:-1])
        if resolved is not None:
            return resolved
    return value


def expand_env_vars(config: AppConfig) -> AppConfig:
    """Return a copy of the configuration with ``${ENV_VAR}`` references resolved."""
    config = config.with_changes("ai", api_key=expand_env_reference(config.ai.api_key))
    return config.with_changes("ui", editor=expand_env_reference(config.ui.editor))


def load_app_config() -> AppConfig:
    """Load the configuration snapshot used for one command.

    Returns:
        The configuration with environment references resolved.
    """
    return expand_env_vars(load_stored_config())


def update_config(section: str, **changes) -> AppConfig:
    """Change stored settings and write them back.

    Args:
        section: Section name (ai, git, ui, prompts).
        **changes: Field values to set.

    Returns:
        The new stored configuration.

    Raises:
        GlobalConfigError: If a value is invalid or the file cannot be written.
    """
    stored = load_stored_config()
    try:
        updated = stored.with_changes(section, **changes)
    except ValidationError as e:
        raise GlobalConfigError(f"Invalid value for {section}: {e}")
    save_app_config(updated)
    return updated


def set_provider(provider: str) -> AppConfig:
    """Set the active LLM provider.

    A stored ``ai.api_key`` belongs to the provider it was set for, so it is
    cleared when the provider changes.

    Raises:
        UnsupportedProviderError: If the provider is not known.
    """
    from gitscribe.llm.exceptions import UnsupportedProviderError

    name = provider.lower()
    try:
        LLMProvider(name)
    except ValueError:
        raise UnsupportedProviderError(provider, provider_names())

    stored = load_stored_config()
    if name == stored.ai.provider or stored.ai.api_key is None:
        return update_config("ai", provider=name)

    logger.info("Clearing the API key stored for %s", stored.ai.provider)
    return update_config("ai", provider=name, api_key=None)


def set_api_key(api_key: str) -> AppConfig:
    """Set the API key (a literal key or a ``${ENV_VAR}`` reference)."""
    return update_config("ai", api_key=api_key)


def set_model(model: str) -> AppConfig:
    """Set the default model."""
    return update_config("ai", model=model)


def set_temperature(temperature: float) -> AppConfig:
    """Set the sampling temperature.

    Raises:
        InvalidTemperatureError: If the value is outside [0.0, 2.0]. The stored
            configuration is left unchanged.
    """
    if not MIN_TEMPERATURE <= temperature <= MAX_TEMPERATURE:
        raise InvalidTemperatureError(temperature)
    return update_config("ai", temperature=temperature)


def set_max_tokens(max_tokens: int) -> AppConfig:
    """Set the output token budget."""
    if max_tokens <= 0:
        raise GlobalConfigError(f"Invalid max tokens value {max_tokens}. Must be positive")
    return update_config("ai", max_tokens=max_tokens)


def set_interactive(interactive: bool) -> AppConfig:
    """Enable or disable the interactive commit menu."""
    return update_config("ui", interactive=interactive)


def set_show_diff(show_diff: bool) -> AppConfig:
    """Enable or disable showing the staged diff before generation."""
    return update_config("ui", show_diff=show_diff)


def set_editor(editor: str) -> AppConfig:
    """Set the editor command used to edit messages."""
    return update_config("ui", editor=editor)


def set_conventional(conventional: bool) -> AppConfig:
    """Enable or disable Conventional Commits formatting."""
    return update_config("git", conventional_commits=conventional)


def load_credentials() -> Dict[str, str]:
    """Load API keys from the credentials file.

    Returns:
        Dictionary mapping environment variable names to API keys.
    """
    credentials_file = get_credentials_file_path()

    if not credentials_file.exists():
        return {}

    credentials = {}

    try:
        with open(credentials_file, "r") as f:
            for line in f:
                line = line.strip()
                # Skip empty lines and comments
                if not line or line.startswith("#"):
                    continue

                # Parse KEY=value format
                if "=" in line:
                    key, value = line.split("=", 1)
                    credentials[key.strip()] = value.strip()

        return credentials
    except Exception as e:
        raise GlobalConfigError(f"Failed to load credentials from {credentials_file}: {e}")


def save_credential(env_var: str, api_key: str) -> None:
    """Save or update an API key in the credentials file.

    Args:
        env_var: Environment variable name (e.g., "OPENAI_API_KEY").
        api_key: The API key value.
    """
    ensure_global_config_dir()
    credentials_file = get_credentials_file_path()

    credentials = load_credentials()
    credentials[env_var] = api_key

    lines = [
        "# gitscribe API credentials\n",
        "# Format: PROVIDER_API_KEY=your_key_here\n",
        "\n",
    ]
    lines += [f"{key}={value}\n" for key, value in credentials.items()]

    try:
        _atomic_write(credentials_file, "".join(lines))
        # Owner read/write only
        os.chmod(credentials_file, stat.S_IRUSR | stat.S_IWUSR)
    except Exception as e:
        raise GlobalConfigError(f"Failed to save credential: {e}")


def get_credential(env_var: str) -> Optional[str]:
    """Get an API key from the credentials file.

    Args:
        env_var: Environment variable name (e.g., "OPENAI_API_KEY").

    Returns:
        The API key if found, None otherwise.
    """
    return load_credentials().get(env_var)
