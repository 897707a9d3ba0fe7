"""Google Gemini provider implementation."""

from typing import Optional

from google import genai
from google.genai import types

from gitscribe.config import LLMProvider
from gitscribe.llm.base import ChatCompletionProvider, GenerationOptions, split_system_prompt
from gitscribe.llm.exceptions import LLMError
from gitscribe.prompts import Message

# Models whose internal "thinking" consumes tokens from max_output_tokens
THINKING_MODELS = [
    "gemini-2.5-flash",
    "gemini-2.5-pro",
    "gemini-2.0-flash-thinking",
]

# Multiplier for max_output_tokens on thinking models
THINKING_TOKEN_MULTIPLIER = 3


def is_thinking_model(model: str) -> bool:
    """Check if the model uses the thinking feature.

    Args:
        model: The model name.

    Returns:
        True if thinking tokens count against the output budget.
    """
    return any(thinking_model in model.lower() for thinking_model in THINKING_MODELS)


class GoogleProvider(ChatCompletionProvider):
    """Google Gemini LLM provider."""

    provider = LLMProvider.GEMINI
    display_name = "Google Gemini"

    def _complete(
        self, api_key: str, conversation: list[Message], options: GenerationOptions
    ) -> Optional[str]:
        client_kwargs = {"api_key": api_key}
        if self.timeout is not None:
            # HttpOptions takes milliseconds
            client_kwargs["http_options"] = types.HttpOptions(timeout=int(self.timeout * 1000))
        client = genai.Client(**client_kwargs)

        system_prompt, messages = split_system_prompt(conversation)

        max_tokens = options.max_tokens
        if is_thinking_model(options.model):
            max_tokens = options.max_tokens * THINKING_TOKEN_MULTIPLIER

        config = types.GenerateContentConfig(
            system_instruction=system_prompt or None,
            temperature=options.temperature,
            max_output_tokens=max_tokens,
        )
        contents = [
            types.Content(role="user", parts=[types.Part(text=m.content)]) for m in messages
        ]

        response = client.models.generate_content(
            model=options.model,
            contents=contents,
            config=config,
        )

        if not response.candidates:
            return None

        candidate = response.candidates[0]
        finish_reason = str(getattr(candidate, "finish_reason", "") or "")
        if "SAFETY" in finish_reason:
            raise LLMError(f"Google Gemini blocked response due to safety filters: {finish_reason}")

        return response.text
