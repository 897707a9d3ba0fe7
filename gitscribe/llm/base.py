"""Base classes and shared utilities for LLM providers."""

import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from gitscribe.config import API_KEY_ENV_VARS, LLMProvider
from gitscribe.llm.exceptions import LLMError, MissingAPIKeyError, NoResponseError
from gitscribe.prompts import SYSTEM_ROLE, Message

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationOptions:
    """Per-request generation settings.

    Not every provider honors every field; see ``honored_options`` on the
    provider class.
    """

    model: str
    temperature: float
    max_tokens: int


@dataclass(frozen=True)
class GenerationRequest:
    """A fully resolved generation request."""

    provider: LLMProvider
    options: GenerationOptions
    conversation: tuple[Message, ...]


def split_system_prompt(conversation: list[Message]) -> tuple[str, list[Message]]:
    """Separate system messages from the rest of the conversation.

    Some APIs take the system prompt as a dedicated parameter instead of a
    message.

    Args:
        conversation: The full conversation.

    Returns:
        The joined system prompt text and the remaining messages in order.
    """
    system_parts = [m.content for m in conversation if m.role == SYSTEM_ROLE]
    rest = [m for m in conversation if m.role != SYSTEM_ROLE]
    return "\n\n".join(system_parts), rest


class BaseLLMProvider(ABC):
    """Abstract base class for LLM providers."""

    provider: LLMProvider
    display_name: str

    # GenerationOptions fields this provider forwards to the API
    honored_options: tuple[str, ...] = ("model",)

    def __init__(self, api_key: Optional[str] = None, timeout: Optional[float] = None):
        """Initialize the provider.

        Args:
            api_key: Explicit API key (from configuration). When not given the
                key is looked up in the environment and credentials file.
            timeout: Request timeout in seconds. None waits indefinitely.
        """
        self.api_key = api_key
        self.timeout = timeout
        self.api_key_env_var = API_KEY_ENV_VARS[self.provider]

    @abstractmethod
    def generate(self, conversation: list[Message], options: GenerationOptions) -> str:
        """Generate a commit message for the conversation.

        Args:
            conversation: The ordered messages to send.
            options: Generation settings.

        Returns:
            The generated text, trimmed.

        Raises:
            MissingAPIKeyError: If the API key is not set.
            NoResponseError: If the provider returns no completion.
            LLMError: For other LLM-related errors.
        """
        pass

    def get_api_key(self) -> str:
        """Get the API key.

        Checks in order:
        1. Key passed from configuration
        2. Environment variable
        3. ~/.gitscribe/credentials file

        Returns:
            The API key string.

        Raises:
            MissingAPIKeyError: If the API key is not found.
        """
        if self.api_key:
            return self.api_key
        return self._get_api_key_with_fallback(self.api_key_env_var, self.display_name)

    def _get_api_key_with_fallback(self, env_var_name: str, provider_name: str) -> str:
        """Helper to get API key with fallback to credentials file.

        Args:
            env_var_name: Environment variable name to check.
            provider_name: Human-readable provider name for error messages.

        Returns:
            The API key string.

        Raises:
            MissingAPIKeyError: If the API key is not found.
        """
        # First check environment variable
        api_key = os.getenv(env_var_name)
        if api_key:
            return api_key

        # Then check credentials file
        from gitscribe.global_config import GlobalConfigError, get_credential

        try:
            api_key = get_credential(env_var_name)
        except GlobalConfigError as e:
            logger.warning("Could not read credentials file: %s", e)
            api_key = None
        if api_key:
            return api_key

        raise MissingAPIKeyError(
            f"{provider_name} API key not found. Set it using:\n"
            f"  1. Environment variable: export {env_var_name}=your_key_here\n"
            f"  2. Run: gitscribe config set-api-key <key>\n"
            f"  3. Manually add {env_var_name}=... to ~/.gitscribe/credentials"
        )


class ChatCompletionProvider(BaseLLMProvider):
    """Provider reached through a single chat-completion call.

    Subclasses implement ``_complete`` for their SDK and return the first
    completion's text, or None when the API returned no choices.
    """

    honored_options = ("model", "temperature", "max_tokens")

    @abstractmethod
    def _complete(
        self, api_key: str, conversation: list[Message], options: GenerationOptions
    ) -> Optional[str]:
        """Issue the SDK call and return the first completion text (or None)."""
        pass

    def generate(self, conversation: list[Message], options: GenerationOptions) -> str:
        """Generate a commit message through the provider's chat API."""
        api_key = self.get_api_key()

        logger.debug(
            "Sending %d message(s) to %s (model=%s, temperature=%s, max_tokens=%s)",
            len(conversation),
            self.display_name,
            options.model,
            options.temperature,
            options.max_tokens,
        )

        try:
            text = self._complete(api_key, conversation, options)
        except LLMError:
            raise
        except Exception as e:
            raise LLMError(f"{self.display_name} API call failed: {e}")

        if text is None:
            raise NoResponseError(self.display_name)
        return text.strip()
