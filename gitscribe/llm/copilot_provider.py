"""GitHub Copilot provider implementation.

Copilot is reached with a short-lived session token obtained by exchanging a
GitHub OAuth token. The chat endpoint only accepts the model name; temperature
and max tokens are not forwarded.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import httpx

from gitscribe import __version__
from gitscribe.config import LLMProvider
from gitscribe.llm.base import BaseLLMProvider, GenerationOptions
from gitscribe.llm.exceptions import AuthenticationError, LLMError, NoResponseError
from gitscribe.prompts import Message

logger = logging.getLogger(__name__)

COPILOT_TOKEN_URL = "https://api.github.com/copilot_internal/v2/token"
COPILOT_API_BASE = "https://api.githubcopilot.com"

# Environment variables checked for a GitHub token, in order
GITHUB_TOKEN_ENV_VARS = ["GITHUB_TOKEN", "GH_TOKEN"]

# Files written by the official Copilot editor plugins
COPILOT_TOKEN_FILES = ["hosts.json", "apps.json"]


@dataclass(frozen=True)
class CopilotSession:
    """An authenticated Copilot chat session."""

    token: str
    api_base: str


def _copilot_config_dir() -> Path:
    xdg = os.getenv("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / "github-copilot"


def read_copilot_oauth_token(config_dir: Optional[Path] = None) -> Optional[str]:
    """Read the OAuth token stored by a Copilot editor plugin.

    Args:
        config_dir: Directory holding hosts.json/apps.json. Defaults to
            ~/.config/github-copilot.

    Returns:
        The first ``oauth_token`` found for github.com, or None.
    """
    config_dir = config_dir or _copilot_config_dir()

    for name in COPILOT_TOKEN_FILES:
        path = config_dir / name
        if not path.exists():
            continue
        try:
            data = json.loads(path.read_text())
        except (OSError, ValueError) as e:
            logger.debug("Skipping unreadable Copilot token file %s: %s", path, e)
            continue
        if not isinstance(data, dict):
            continue
        # Keys are "github.com" (hosts.json) or "github.com:<app id>" (apps.json)
        for key, entry in data.items():
            if key.startswith("github.com") and isinstance(entry, dict) and entry.get("oauth_token"):
                return entry["oauth_token"]
    return None


def _editor_headers() -> dict:
    return {
        "Editor-Version": f"gitscribe/{__version__}",
        "Editor-Plugin-Version": f"gitscribe/{__version__}",
        "User-Agent": f"gitscribe/{__version__}",
    }


class CopilotProvider(BaseLLMProvider):
    """GitHub Copilot chat provider."""

    provider = LLMProvider.GITHUB
    display_name = "GitHub Copilot"
    honored_options = ("model",)

    def get_github_token(self) -> str:
        """Get a GitHub OAuth token.

        Checks in order:
        1. Key passed from configuration
        2. GITHUB_TOKEN / GH_TOKEN environment variables
        3. ~/.gitscribe/credentials file
        4. Copilot editor plugin token files

        Raises:
            AuthenticationError: If no token is found.
        """
        if self.api_key:
            return self.api_key

        for env_var in GITHUB_TOKEN_ENV_VARS:
            token = os.getenv(env_var)
            if token:
                return token

        from gitscribe.global_config import GlobalConfigError, get_credential

        try:
            token = get_credential(self.api_key_env_var)
        except GlobalConfigError as e:
            logger.warning("Could not read credentials file: %s", e)
            token = None
        if token:
            return token

        token = read_copilot_oauth_token()
        if token:
            return token

        raise AuthenticationError(
            "No GitHub token found. Set GITHUB_TOKEN, run "
            "`gitscribe config set-api-key <token>`, or sign in to Copilot in your editor"
        )

    def create_session(self) -> CopilotSession:
        """Exchange the GitHub token for a Copilot session token.

        Raises:
            AuthenticationError: If the exchange fails.
        """
        github_token = self.get_github_token()
        headers = {
            "Authorization": f"token {github_token}",
            "Accept": "application/json",
            **_editor_headers(),
        }

        try:
            response = httpx.get(COPILOT_TOKEN_URL, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise AuthenticationError(
                f"Copilot token exchange failed with HTTP {e.response.status_code}"
            )
        except (httpx.HTTPError, ValueError) as e:
            raise AuthenticationError(f"Copilot token exchange failed: {e}")

        token = data.get("token") if isinstance(data, dict) else None
        if not token:
            raise AuthenticationError("Copilot token exchange returned no token")

        endpoints = data.get("endpoints") or {}
        api_base = (endpoints.get("api") or COPILOT_API_BASE).rstrip("/")
        return CopilotSession(token=token, api_base=api_base)

    def generate(self, conversation: list[Message], options: GenerationOptions) -> str:
        """Generate a commit message through the Copilot chat endpoint.

        Only ``options.model`` is sent.

        Raises:
            AuthenticationError: If no session can be established.
            NoResponseError: If the response has no choices.
            LLMError: If the chat request fails.
        """
        session = self.create_session()

        logger.debug(
            "Sending %d message(s) to %s (model=%s)",
            len(conversation),
            self.display_name,
            options.model,
        )

        headers = {
            "Authorization": f"Bearer {session.token}",
            "Copilot-Integration-Id": "vscode-chat",
            **_editor_headers(),
        }
        payload = {
            "model": options.model,
            "messages": [m.as_dict() for m in conversation],
        }

        try:
            response = httpx.post(
                f"{session.api_base}/chat/completions",
                headers=headers,
                json=payload,
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            if e.response.status_code in (401, 403):
                raise AuthenticationError(
                    f"Copilot rejected the session (HTTP {e.response.status_code})"
                )
            raise LLMError(f"{self.display_name} API call failed: {e}")
        except (httpx.HTTPError, ValueError) as e:
            raise LLMError(f"{self.display_name} API call failed: {e}")

        choices = data.get("choices") if isinstance(data, dict) else None
        if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
            raise NoResponseError(self.display_name)

        message = choices[0].get("message")
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str):
            raise NoResponseError(self.display_name)
        return content.strip()
