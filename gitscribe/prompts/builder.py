"""Conversation builder for commit message generation.

Contains:
- Message: A single role-tagged chat message
- build_conversation: Assemble the ordered conversation sent to a provider
- build_system_prompt: Resolve the system prompt from configuration
"""

from dataclasses import dataclass

from gitscribe.prompts.system import PLAIN_FORMAT_RULE

SYSTEM_ROLE = "system"
USER_ROLE = "user"

CLOSING_DIRECTIVE = "Generate a conventional commit message based on the changes above:"


@dataclass(frozen=True)
class Message:
    """A role-tagged chat message."""

    role: str
    content: str

    def as_dict(self) -> dict[str, str]:
        """Render as the ``{"role", "content"}`` dict most chat APIs accept."""
        return {"role": self.role, "content": self.content}


def build_conversation(
    system_prompt: str,
    status_text: str,
    diff_text: str,
    context: str | None = None,
) -> list[Message]:
    """Build the ordered conversation for a generation request.

    Order is fixed: system prompt, optional context, status block, diff block
    (only when the diff has content), closing directive.

    Args:
        system_prompt: The system instructions.
        status_text: Short status lines of the repository.
        diff_text: The staged diff.
        context: Optional extra guidance from the user.

    Returns:
        The list of messages.
    """
    messages = [Message(SYSTEM_ROLE, system_prompt)]

    if context is not None:
        messages.append(Message(USER_ROLE, f"Context: {context}\n\n"))

    messages.append(Message(USER_ROLE, f"`git status`:\n```\n{status_text.strip()}\n```\n\n"))

    if diff_text.strip():
        messages.append(
            Message(USER_ROLE, f"`git diff --staged`:\n```diff\n{diff_text.strip()}\n```\n\n")
        )

    messages.append(Message(USER_ROLE, CLOSING_DIRECTIVE))
    return messages


def build_system_prompt(system_prompt: str, conventional_commits: bool = True) -> str:
    """Resolve the system prompt to send.

    Args:
        system_prompt: The configured system prompt.
        conventional_commits: Whether Conventional Commits formatting is wanted.

    Returns:
        The system prompt, with a plain-format rule appended when
        conventional commits are turned off.
    """
    if conventional_commits:
        return system_prompt
    return system_prompt.rstrip() + "\n" + PLAIN_FORMAT_RULE
