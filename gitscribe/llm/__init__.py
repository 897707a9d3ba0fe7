"""LLM provider module for gitscribe.

This module provides a unified interface to multiple LLM providers.
The active provider and model come from the loaded configuration.
"""

import logging
from typing import Optional

from dotenv import load_dotenv

from gitscribe.config import AVAILABLE_MODELS, AppConfig, LLMProvider, provider_names
from gitscribe.llm.base import (
    BaseLLMProvider,
    ChatCompletionProvider,
    GenerationOptions,
    GenerationRequest,
)
from gitscribe.llm.exceptions import (
    AuthenticationError,
    LLMError,
    MissingAPIKeyError,
    NoResponseError,
    UnsupportedProviderError,
)
from gitscribe.prompts import Message

logger = logging.getLogger(__name__)

# Load environment variables from .env file
load_dotenv()


def _resolve_provider(provider_id: str) -> LLMProvider:
    try:
        return LLMProvider(provider_id.lower())
    except ValueError:
        raise UnsupportedProviderError(provider_id, provider_names())


def get_provider(
    provider_id: str,
    api_key: Optional[str] = None,
    timeout: Optional[float] = None,
) -> BaseLLMProvider:
    """Get an LLM provider instance.

    Args:
        provider_id: The provider id (e.g., "openai", "gemini").
        api_key: Explicit API key. Falls back to env var and credentials file.
        timeout: Request timeout in seconds, or None.

    Returns:
        An instance of the appropriate LLM provider.

    Raises:
        UnsupportedProviderError: If the provider is not supported.
    """
    provider = _resolve_provider(provider_id)

    if provider == LLMProvider.OPENAI:
        from gitscribe.llm.openai_provider import OpenAIProvider

        return OpenAIProvider(api_key=api_key, timeout=timeout)

    elif provider == LLMProvider.ANTHROPIC:
        from gitscribe.llm.anthropic_provider import AnthropicProvider

        return AnthropicProvider(api_key=api_key, timeout=timeout)

    elif provider == LLMProvider.GEMINI:
        from gitscribe.llm.google_provider import GoogleProvider

        return GoogleProvider(api_key=api_key, timeout=timeout)

    elif provider == LLMProvider.GROQ:
        from gitscribe.llm.groq_provider import GroqProvider

        return GroqProvider(api_key=api_key, timeout=timeout)

    elif provider == LLMProvider.DEEPSEEK:
        from gitscribe.llm.openai_provider import DeepSeekProvider

        return DeepSeekProvider(api_key=api_key, timeout=timeout)

    elif provider == LLMProvider.XAI:
        from gitscribe.llm.openai_provider import XAIProvider

        return XAIProvider(api_key=api_key, timeout=timeout)

    elif provider == LLMProvider.COHERE:
        from gitscribe.llm.cohere_provider import CohereProvider

        return CohereProvider(api_key=api_key, timeout=timeout)

    elif provider == LLMProvider.OLLAMA:
        from gitscribe.llm.openai_provider import OllamaProvider

        return OllamaProvider(api_key=api_key, timeout=timeout)

    elif provider == LLMProvider.OPENROUTER:
        from gitscribe.llm.openrouter_provider import OpenRouterProvider

        return OpenRouterProvider(api_key=api_key, timeout=timeout)

    elif provider == LLMProvider.GITHUB:
        from gitscribe.llm.copilot_provider import CopilotProvider

        return CopilotProvider(api_key=api_key, timeout=timeout)

    else:
        raise UnsupportedProviderError(provider_id, provider_names())


def build_generation_options(config: AppConfig, model_override: Optional[str] = None) -> GenerationOptions:
    """Build generation options from the configuration.

    Args:
        config: The configuration snapshot.
        model_override: Model name that replaces the configured model.

    Returns:
        The options for one generation request.
    """
    return GenerationOptions(
        model=model_override or config.ai.model,
        temperature=config.ai.temperature,
        max_tokens=config.ai.max_tokens,
    )


def generate_commit_message(
    config: AppConfig,
    conversation: list[Message],
    model_override: Optional[str] = None,
) -> str:
    """Generate a commit message for the conversation.

    This is the main entry point for generation. It uses the provider and
    model from the configuration snapshot.

    Args:
        config: The configuration snapshot.
        conversation: The messages built by gitscribe.prompts.build_conversation.
        model_override: Model name that replaces the configured model.

    Returns:
        The generated commit message, trimmed.

    Raises:
        UnsupportedProviderError: If the configured provider is unknown.
        MissingAPIKeyError: If the API key is not set.
        AuthenticationError: If a provider session cannot be established.
        NoResponseError: If the provider returns no completion.
        LLMError: For other LLM-related errors.
    """
    request = GenerationRequest(
        provider=_resolve_provider(config.ai.provider),
        options=build_generation_options(config, model_override),
        conversation=tuple(conversation),
    )
    provider = get_provider(
        request.provider.value,
        api_key=config.ai.api_key,
        timeout=config.ai.request_timeout,
    )

    ignored = [
        name for name in ("temperature", "max_tokens") if name not in provider.honored_options
    ]
    logger.debug(
        "Generation request: provider=%s model=%s messages=%d%s",
        request.provider.value,
        request.options.model,
        len(request.conversation),
        f" (not forwarded: {', '.join(ignored)})" if ignored else "",
    )

    return provider.generate(list(request.conversation), request.options)


def list_models(provider_id: str) -> list[str]:
    """List the known models for a provider.

    Args:
        provider_id: The provider id.

    Returns:
        The model names from the static catalog. Other model names are
        still accepted by ``set-model``.

    Raises:
        UnsupportedProviderError: If the provider is not supported.
    """
    return list(AVAILABLE_MODELS[_resolve_provider(provider_id)])


# Export commonly used items
__all__ = [
    "AuthenticationError",
    "BaseLLMProvider",
    "ChatCompletionProvider",
    "GenerationOptions",
    "GenerationRequest",
    "LLMError",
    "MissingAPIKeyError",
    "NoResponseError",
    "UnsupportedProviderError",
    "build_generation_options",
    "generate_commit_message",
    "get_provider",
    "list_models",
]
