"""Groq provider implementation."""

from typing import Optional

from groq import Groq

from gitscribe.config import LLMProvider
from gitscribe.llm.base import ChatCompletionProvider, GenerationOptions
from gitscribe.prompts import Message


class GroqProvider(ChatCompletionProvider):
    """Groq LLM provider (fast inference for open-source models)."""

    provider = LLMProvider.GROQ
    display_name = "Groq"

    def _complete(
        self, api_key: str, conversation: list[Message], options: GenerationOptions
    ) -> Optional[str]:
        client_kwargs = {"api_key": api_key}
        if self.timeout is not None:
            client_kwargs["timeout"] = self.timeout
        client = Groq(**client_kwargs)

        # OpenAI-compatible chat API
        response = client.chat.completions.create(
            model=options.model,
            max_tokens=options.max_tokens,
            temperature=options.temperature,
            messages=[m.as_dict() for m in conversation],
        )

        if not response.choices:
            return None
        return response.choices[0].message.content
