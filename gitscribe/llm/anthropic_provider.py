"""Anthropic Claude provider implementation."""

from typing import Optional

from anthropic import Anthropic

from gitscribe.config import LLMProvider
from gitscribe.llm.base import ChatCompletionProvider, GenerationOptions, split_system_prompt
from gitscribe.prompts import Message


class AnthropicProvider(ChatCompletionProvider):
    """Anthropic Claude LLM provider."""

    provider = LLMProvider.ANTHROPIC
    display_name = "Anthropic"

    def _complete(
        self, api_key: str, conversation: list[Message], options: GenerationOptions
    ) -> Optional[str]:
        client_kwargs = {"api_key": api_key}
        if self.timeout is not None:
            client_kwargs["timeout"] = self.timeout
        client = Anthropic(**client_kwargs)

        # The system prompt is a separate parameter in the Messages API
        system_prompt, messages = split_system_prompt(conversation)

        message = client.messages.create(
            model=options.model,
            max_tokens=options.max_tokens,
            temperature=options.temperature,
            system=system_prompt,
            messages=[m.as_dict() for m in messages],
        )

        texts = [block.text for block in message.content if getattr(block, "type", None) == "text"]
        if not texts:
            return None
        return texts[0]
