"""Prompt assembly for gitscribe."""

from gitscribe.prompts.builder import (
    CLOSING_DIRECTIVE,
    SYSTEM_ROLE,
    USER_ROLE,
    Message,
    build_conversation,
    build_system_prompt,
)
from gitscribe.prompts.system import DEFAULT_SYSTEM_PROMPT, PLAIN_FORMAT_RULE

__all__ = [
    "CLOSING_DIRECTIVE",
    "DEFAULT_SYSTEM_PROMPT",
    "PLAIN_FORMAT_RULE",
    "SYSTEM_ROLE",
    "USER_ROLE",
    "Message",
    "build_conversation",
    "build_system_prompt",
]
