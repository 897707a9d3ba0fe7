"""The commit flow: from repository state to a committed change.

``CommitOrchestrator.run`` walks the decision state machine:

    Start -> StageCheck -> DiffDisplay -> Generating -> Decision -> Terminal

Every failure propagates to the caller. The flow never retries and never
undoes staging it performed.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, Optional

import typer
from rich.console import Console

from gitscribe.config import AppConfig
from gitscribe.git import (
    NotInRepositoryError,
    RepositoryHandle,
    create_commit,
    get_staged_diff,
    get_status,
    get_status_lines,
    is_usable,
    open_repository,
    stage_all,
    stage_modified,
    stage_untracked,
)
from gitscribe.interaction import InteractionPort
from gitscribe.llm import generate_commit_message
from gitscribe.prompts import Message, build_conversation, build_system_prompt

logger = logging.getLogger(__name__)

# Spinner output goes to stderr so stdout stays clean
console = Console(stderr=True)

DECISION_CHOICES = ["Commit", "Edit message", "Cancel"]
COMMIT_CHOICE, EDIT_CHOICE, CANCEL_CHOICE = range(len(DECISION_CHOICES))

GenerateFn = Callable[[AppConfig, list[Message], Optional[str]], str]


class CommitStatus(Enum):
    """Terminal states of the commit flow."""

    COMMITTED = "committed"
    CANCELLED = "cancelled"
    NOTHING_TO_COMMIT = "nothing_to_commit"


@dataclass(frozen=True)
class CommitOutcome:
    """Result of one run of the commit flow."""

    status: CommitStatus
    commit_id: Optional[str] = None
    message: Optional[str] = None
    edited: bool = False


@contextmanager
def loading_spinner(message: str) -> Iterator[None]:
    """Show a spinner while a blocking call runs.

    Nothing is drawn when stderr is not a terminal.
    """
    if not console.is_terminal:
        yield
        return

    with console.status(message):
        yield


class CommitOrchestrator:
    """Drive one commit from staged changes to a new commit.

    Args:
        config: The configuration snapshot for this invocation.
        interaction: Prompts and the editor.
        generate: Produces a message from (config, conversation, model_override).
        echo: Writes user-facing output.
    """

    def __init__(
        self,
        config: AppConfig,
        interaction: InteractionPort,
        generate: GenerateFn = generate_commit_message,
        echo: Callable[..., None] = typer.echo,
    ):
        self.config = config
        self.interaction = interaction
        self.generate = generate
        self.echo = echo

    def run(
        self,
        path: str = ".",
        stage_all_first: bool = False,
        auto_accept: bool = False,
        model_override: Optional[str] = None,
        context: Optional[str] = None,
    ) -> CommitOutcome:
        """Run the commit flow.

        Args:
            path: A path inside the repository.
            stage_all_first: Stage every change before checking status.
            auto_accept: Commit the generated message without asking.
            model_override: Model name that replaces the configured model.
            context: Extra guidance included in the prompt.

        Returns:
            The terminal outcome. "Nothing to commit" and "cancelled" are
            successful outcomes, not errors.

        Raises:
            NotInRepositoryError: If ``path`` is not inside a usable work tree.
            GitError: If a git operation fails.
            LLMError: If generation fails.
        """
        handle = open_repository(path)
        if not is_usable(handle):
            raise NotInRepositoryError(
                f"No work tree found for repository at {handle.git_dir}"
            )

        if stage_all_first:
            stage_all(handle)
            self._success("✓ Staged all files")

        if not self._ensure_staged(handle, auto_accept):
            return CommitOutcome(CommitStatus.NOTHING_TO_COMMIT)

        diff = get_staged_diff(handle, self.config.git.diff_context)
        if self.config.ui.show_diff:
            self.echo("")
            self.echo(typer.style("Staged changes:", bold=True))
            self.echo(diff)

        message = self._generate(handle, diff, model_override, context)

        self.echo("")
        self.echo(typer.style("Generated commit message:", bold=True))
        self.echo(typer.style(message, fg=typer.colors.CYAN))

        return self._decide(handle, message, auto_accept)

    def _ensure_staged(self, handle: RepositoryHandle, auto_accept: bool) -> bool:
        """Stage changes if nothing is staged yet.

        Returns:
            True when the index holds changes to commit.
        """
        snapshot = get_status(handle)
        if snapshot.staged:
            if snapshot.has_unstaged:
                logger.debug(
                    "Committing staged paths only; %d modified and %d untracked left out",
                    len(snapshot.modified),
                    len(snapshot.untracked),
                )
            return True

        if snapshot.is_empty:
            self._notice("No changes to commit")
            return False

        auto_stage = self.config.git.auto_stage

        if snapshot.modified:
            if auto_stage or self._ask("Stage modified files?", True, auto_accept):
                stage_modified(handle)
                self._success("✓ Staged modified files")

        if snapshot.untracked:
            if auto_stage or self._ask("Stage untracked files?", False, auto_accept):
                stage_untracked(handle)
                self._success("✓ Staged untracked files")

        # Staging changed the index, so read it again
        if not get_status(handle).staged:
            self._notice("No staged changes to commit")
            return False
        return True

    def _ask(self, prompt: str, default: bool, auto_accept: bool) -> bool:
        if auto_accept:
            return default
        return self.interaction.confirm(prompt, default)

    def _generate(
        self,
        handle: RepositoryHandle,
        diff: str,
        model_override: Optional[str],
        context: Optional[str],
    ) -> str:
        status_text = get_status_lines(handle)
        system_prompt = build_system_prompt(
            self.config.prompts.system_prompt,
            self.config.git.conventional_commits,
        )
        conversation = build_conversation(system_prompt, status_text, diff, context)

        with loading_spinner("Generating commit message..."):
            return self.generate(self.config, conversation, model_override)

    def _decide(self, handle: RepositoryHandle, message: str, auto_accept: bool) -> CommitOutcome:
        if auto_accept:
            return self._commit(handle, message)

        if self.config.ui.interactive:
            choice = self.interaction.select(
                "What would you like to do?", DECISION_CHOICES, default=COMMIT_CHOICE
            )
            if choice == COMMIT_CHOICE:
                return self._commit(handle, message)
            if choice == EDIT_CHOICE:
                edited = self.interaction.edit_text(message)
                if edited:
                    return self._commit(handle, edited, edited=True)
            return self._cancel()

        if self.interaction.confirm("Commit with this message?", True):
            return self._commit(handle, message)
        return self._cancel()

    def _commit(self, handle: RepositoryHandle, message: str, edited: bool = False) -> CommitOutcome:
        commit_id = create_commit(handle, message)
        suffix = " with edited message" if edited else ""
        self.echo("", err=True)
        self._success(f"✓ Committed successfully{suffix} [{commit_id[:7]}]")
        return CommitOutcome(CommitStatus.COMMITTED, commit_id=commit_id, message=message, edited=edited)

    def _cancel(self) -> CommitOutcome:
        self._notice("Commit cancelled")
        return CommitOutcome(CommitStatus.CANCELLED)

    def _success(self, text: str) -> None:
        self.echo(typer.style(text, fg=typer.colors.GREEN), err=True)

    def _notice(self, text: str) -> None:
        self.echo(typer.style(text, fg=typer.colors.YELLOW), err=True)
