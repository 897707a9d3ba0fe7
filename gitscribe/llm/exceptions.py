"""LLM-related exception classes.

Contains all exception classes for LLM operations:
- LLMError: Base exception for LLM-related errors
- MissingAPIKeyError: Raised when API key is not set
- UnsupportedProviderError: Raised for an unknown provider id
- NoResponseError: Raised when the provider returns no completion
- AuthenticationError: Raised when a provider session cannot be established
"""


class LLMError(Exception):
    """Base exception for LLM-related errors."""

    pass


class MissingAPIKeyError(LLMError):
    """Raised when the required API key is not set."""

    pass


class UnsupportedProviderError(LLMError, ValueError):
    """Raised when a provider id is not one gitscribe knows."""

    def __init__(self, provider: str, known: list[str] | None = None):
        self.provider = provider
        message = f"Unsupported provider: {provider}"
        if known:
            message += f" (valid providers: {', '.join(known)})"
        super().__init__(message)


class NoResponseError(LLMError):
    """Raised when the provider returns no choices or candidates."""

    def __init__(self, provider_name: str):
        super().__init__(f"No response received from {provider_name}")


class AuthenticationError(LLMError):
    """Raised when authenticating with a provider fails."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Authentication error: {detail}")
