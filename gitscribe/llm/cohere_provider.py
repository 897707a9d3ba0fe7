"""Cohere provider implementation."""

from typing import Optional

import cohere

from gitscribe.config import LLMProvider
from gitscribe.llm.base import ChatCompletionProvider, GenerationOptions
from gitscribe.prompts import Message


class CohereProvider(ChatCompletionProvider):
    """Cohere LLM provider."""

    provider = LLMProvider.COHERE
    display_name = "Cohere"

    def _complete(
        self, api_key: str, conversation: list[Message], options: GenerationOptions
    ) -> Optional[str]:
        client_kwargs = {"api_key": api_key}
        if self.timeout is not None:
            client_kwargs["timeout"] = self.timeout
        client = cohere.ClientV2(**client_kwargs)

        response = client.chat(
            model=options.model,
            max_tokens=options.max_tokens,
            temperature=options.temperature,
            messages=[m.as_dict() for m in conversation],
        )

        content = response.message.content if response.message else None
        if not content:
            return None
        return content[0].text
