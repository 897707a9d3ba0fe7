"""OpenRouter provider implementation.

OpenRouter provides unified access to many models through a single API.
It uses an OpenAI-compatible API format.
"""

from gitscribe.config import LLMProvider
from gitscribe.llm.openai_provider import OpenAIProvider

# OpenRouter API base URL
OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


class OpenRouterProvider(OpenAIProvider):
    """OpenRouter LLM provider.

    Model names use the provider/model-name form (e.g., openai/gpt-4o).
    """

    provider = LLMProvider.OPENROUTER
    display_name = "OpenRouter"
    base_url = OPENROUTER_BASE_URL

    def _request_kwargs(self) -> dict:
        return {
            "extra_headers": {
                "HTTP-Referer": "https://github.com/gitscribe",
                "X-Title": "gitscribe",
            }
        }
