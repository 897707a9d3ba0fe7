"""Configuration model for gitscribe.

The settings themselves live in ~/.gitscribe/config.yaml and are read and
written by gitscribe.global_config. This module defines their shape, the
defaults used to create the file, and the static model catalog.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from gitscribe.prompts.system import DEFAULT_SYSTEM_PROMPT


class LLMProvider(Enum):
    """Supported LLM providers."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"
    GROQ = "groq"
    DEEPSEEK = "deepseek"
    XAI = "xai"
    COHERE = "cohere"
    OLLAMA = "ollama"
    OPENROUTER = "openrouter"
    GITHUB = "github"


# ============================================================
# DEFAULT VALUES
# ============================================================
# Written to ~/.gitscribe/config.yaml on first run

DEFAULT_PROVIDER = LLMProvider.OPENAI
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_MAX_TOKENS = 150
DEFAULT_TEMPERATURE = 0.1

MIN_TEMPERATURE = 0.0
MAX_TEMPERATURE = 2.0


# ============================================================
# AVAILABLE MODELS PER PROVIDER
# ============================================================
# Hand-maintained and advisory only: any model name is accepted.

AVAILABLE_MODELS = {
    LLMProvider.OPENAI: [
        "gpt-4o",
        "gpt-4o-mini",
        "gpt-4-turbo",
        "gpt-3.5-turbo",
    ],
    LLMProvider.ANTHROPIC: [
        "claude-3-5-sonnet-20241022",
        "claude-3-haiku-20240307",
        "claude-3-opus-20240229",
    ],
    LLMProvider.GEMINI: [
        "gemini-2.0-flash",
        "gemini-1.5-pro",
        "gemini-1.5-flash",
    ],
    LLMProvider.GROQ: [
        "llama-3.1-8b-instant",
        "llama-3.1-70b-versatile",
        "mixtral-8x7b-32768",
    ],
    LLMProvider.DEEPSEEK: [
        "deepseek-chat",
        "deepseek-coder",
    ],
    LLMProvider.XAI: [
        "grok-beta",
    ],
    LLMProvider.COHERE: [
        "command-r-plus",
        "command-r",
        "command-light",
    ],
    LLMProvider.OLLAMA: [
        "gpt-oss:20b",
    ],
    LLMProvider.OPENROUTER: [
        "anthropic/claude-3.5-sonnet",
        "openai/gpt-4o",
        "google/gemini-2.0-flash-exp",
        "meta-llama/llama-3.3-70b-instruct",
        "deepseek/deepseek-chat",
    ],
    LLMProvider.GITHUB: [
        "gpt-4.1",
        "gpt-4.1-mini",
        "gpt-4.1-nano",
    ],
}


# ============================================================
# API KEY ENVIRONMENT VARIABLES
# ============================================================

API_KEY_ENV_VARS = {
    LLMProvider.OPENAI: "OPENAI_API_KEY",
    LLMProvider.ANTHROPIC: "ANTHROPIC_API_KEY",
    LLMProvider.GEMINI: "GEMINI_API_KEY",
    LLMProvider.GROQ: "GROQ_API_KEY",
    LLMProvider.DEEPSEEK: "DEEPSEEK_API_KEY",
    LLMProvider.XAI: "XAI_API_KEY",
    LLMProvider.COHERE: "COHERE_API_KEY",
    LLMProvider.OLLAMA: "OLLAMA_API_KEY",
    LLMProvider.OPENROUTER: "OPENROUTER_API_KEY",
    LLMProvider.GITHUB: "GITHUB_TOKEN",
}


def get_api_key_env_var(provider: LLMProvider) -> str:
    """Get the environment variable name for the API key.

    Args:
        provider: The LLM provider.

    Returns:
        The environment variable name.
    """
    return API_KEY_ENV_VARS[provider]


def provider_names() -> list[str]:
    """Names of all supported providers, in declaration order."""
    return [p.value for p in LLMProvider]


# ============================================================
# CONFIGURATION MODEL
# ============================================================


class AiConfig(BaseModel):
    """Provider and generation settings."""

    model_config = ConfigDict(frozen=True)

    provider: str = DEFAULT_PROVIDER.value
    model: str = DEFAULT_MODEL
    api_key: Optional[str] = None
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS
    request_timeout: Optional[float] = None

    @field_validator("temperature")
    @classmethod
    def temperature_in_range(cls, v: float) -> float:
        """Ensure temperature is within the range providers accept."""
        if not MIN_TEMPERATURE <= v <= MAX_TEMPERATURE:
            raise ValueError(
                f"temperature must be between {MIN_TEMPERATURE} and {MAX_TEMPERATURE}"
            )
        return v

    @field_validator("max_tokens")
    @classmethod
    def max_tokens_positive(cls, v: int) -> int:
        """Ensure the token budget is positive."""
        if v <= 0:
            raise ValueError("max_tokens must be positive")
        return v


class GitConfig(BaseModel):
    """Repository handling settings."""

    model_config = ConfigDict(frozen=True)

    auto_stage: bool = False
    conventional_commits: bool = True
    diff_context: int = 3


class UiConfig(BaseModel):
    """Interaction settings."""

    model_config = ConfigDict(frozen=True)

    interactive: bool = True
    show_diff: bool = True
    editor: Optional[str] = None


class PromptsConfig(BaseModel):
    """Prompt text settings."""

    model_config = ConfigDict(frozen=True)

    system_prompt: str = DEFAULT_SYSTEM_PROMPT


class AppConfig(BaseModel):
    """Complete gitscribe configuration snapshot.

    Instances are immutable. Use ``with_changes`` to derive an updated copy,
    and gitscribe.global_config to persist it.
    """

    model_config = ConfigDict(frozen=True)

    ai: AiConfig = AiConfig()
    git: GitConfig = GitConfig()
    ui: UiConfig = UiConfig()
    prompts: PromptsConfig = PromptsConfig()

    def with_changes(self, section: str, **changes) -> "AppConfig":
        """Return a validated copy with fields of one section replaced.

        Args:
            section: Section name (ai, git, ui, prompts).
            **changes: Field values to replace within the section.

        Returns:
            A new AppConfig.

        Raises:
            pydantic.ValidationError: If a new value is invalid.
        """
        current = getattr(self, section)
        updated = type(current).model_validate({**current.model_dump(), **changes})
        return self.model_copy(update={section: updated})
