"""Tests for gitscribe.prompts module."""

import pytest

from gitscribe.prompts import (
    CLOSING_DIRECTIVE,
    DEFAULT_SYSTEM_PROMPT,
    PLAIN_FORMAT_RULE,
    Message,
    build_conversation,
    build_system_prompt,
)

STATUS = "A  a.txt\n"
DIFF = "+hello\n"


class TestBuildConversation:
    """Tests for build_conversation function."""

    @pytest.mark.parametrize("context", [None, "fixes the login bug"])
    @pytest.mark.parametrize("diff", ["", "  \n", DIFF])
    def test_shape(self, context, diff):
        """Test the message count and order for every context/diff combination."""
        conversation = build_conversation("system text", STATUS, diff, context)

        has_diff = bool(diff.strip())
        expected_len = 3 + (context is not None) + has_diff
        assert len(conversation) == expected_len
        assert conversation[0] == Message("system", "system text")
        assert all(m.role == "user" for m in conversation[1:])
        assert conversation[-1].content == CLOSING_DIRECTIVE

        contents = [m.content for m in conversation]
        assert any(c.startswith("`git status`") for c in contents)
        assert any(c.startswith("`git diff --staged`") for c in contents) == has_diff
        assert any(c.startswith("Context:") for c in contents) == (context is not None)

    def test_exact_blocks(self):
        """Test the exact text of each user message."""
        conversation = build_conversation("sys", "M  b.py\n", "-old\n+new\n", "why")

        assert [m.content for m in conversation[1:]] == [
            "Context: why\n\n",
            "`git status`:\n```\nM  b.py\n```\n\n",
            "`git diff --staged`:\n```diff\n-old\n+new\n```\n\n",
            "Generate a conventional commit message based on the changes above:",
        ]

    def test_context_comes_before_status(self):
        """Test that context precedes the status block."""
        conversation = build_conversation("sys", STATUS, DIFF, "ctx")

        assert conversation[1].content.startswith("Context:")
        assert conversation[2].content.startswith("`git status`")

    def test_empty_context_is_kept(self):
        """Test that an empty context string still adds a context message."""
        conversation = build_conversation("sys", STATUS, DIFF, "")
        assert conversation[1].content == "Context: \n\n"

    def test_as_dict(self):
        """Test rendering a message for chat APIs."""
        assert Message("user", "hi").as_dict() == {"role": "user", "content": "hi"}


class TestBuildSystemPrompt:
    """Tests for build_system_prompt function."""

    def test_conventional_keeps_prompt(self):
        """Test that the prompt is unchanged with conventional commits on."""
        assert build_system_prompt(DEFAULT_SYSTEM_PROMPT, True) == DEFAULT_SYSTEM_PROMPT

    def test_plain_appends_rule(self):
        """Test that the plain-format rule is appended when turned off."""
        prompt = build_system_prompt("Be brief.\n", False)

        assert prompt.startswith("Be brief.")
        assert prompt.endswith(PLAIN_FORMAT_RULE)
