"""OpenAI and OpenAI-compatible provider implementations.

DeepSeek, xAI and Ollama expose OpenAI-compatible chat-completion endpoints,
so they share the OpenAI SDK with a different base URL.
"""

import os
from typing import Optional

from openai import OpenAI

from gitscribe.config import LLMProvider
from gitscribe.llm.base import ChatCompletionProvider, GenerationOptions
from gitscribe.prompts import Message


class OpenAIProvider(ChatCompletionProvider):
    """OpenAI GPT LLM provider."""

    provider = LLMProvider.OPENAI
    display_name = "OpenAI"
    base_url: Optional[str] = None

    def _client_kwargs(self, api_key: str) -> dict:
        kwargs = {"api_key": api_key}
        if self.base_url:
            kwargs["base_url"] = self.base_url
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        return kwargs

    def _request_kwargs(self) -> dict:
        return {}

    def _complete(
        self, api_key: str, conversation: list[Message], options: GenerationOptions
    ) -> Optional[str]:
        client = OpenAI(**self._client_kwargs(api_key))

        response = client.chat.completions.create(
            model=options.model,
            max_tokens=options.max_tokens,
            temperature=options.temperature,
            messages=[m.as_dict() for m in conversation],
            **self._request_kwargs(),
        )

        if not response.choices:
            return None
        return response.choices[0].message.content


class DeepSeekProvider(OpenAIProvider):
    """DeepSeek provider (OpenAI-compatible API)."""

    provider = LLMProvider.DEEPSEEK
    display_name = "DeepSeek"
    base_url = "https://api.deepseek.com"


class XAIProvider(OpenAIProvider):
    """xAI Grok provider (OpenAI-compatible API)."""

    provider = LLMProvider.XAI
    display_name = "xAI"
    base_url = "https://api.x.ai/v1"


class OllamaProvider(OpenAIProvider):
    """Local Ollama server (OpenAI-compatible API).

    No API key is required; OLLAMA_HOST points at a non-default server.
    """

    provider = LLMProvider.OLLAMA
    display_name = "Ollama"

    @property
    def base_url(self) -> str:
        host = os.getenv("OLLAMA_HOST", "http://localhost:11434").rstrip("/")
        if not host.startswith(("http://", "https://")):
            host = f"http://{host}"
        return f"{host}/v1"

    def get_api_key(self) -> str:
        """Ollama ignores the key, but the OpenAI client requires one."""
        return self.api_key or os.getenv(self.api_key_env_var) or "ollama"
