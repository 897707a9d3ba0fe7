"""Index staging utilities.

Contains:
- stage_all: Stage every change, new files included
- stage_modified: Stage changes to tracked files only
- stage_untracked: Stage untracked files only
"""

import logging

from gitscribe.git.repository import RepositoryHandle
from gitscribe.git.runner import _run_git_command
from gitscribe.git.status import get_status

logger = logging.getLogger(__name__)


def stage_all(handle: RepositoryHandle) -> None:
    """Stage all changes in the work tree (new, modified and deleted paths)."""
    _run_git_command(["add", "--all", "--", "."], cwd=handle.cwd)
    logger.debug("Staged all changes")


def stage_modified(handle: RepositoryHandle) -> None:
    """Update tracked index entries to match the work tree without adding new paths."""
    _run_git_command(["add", "--update", "--", "."], cwd=handle.cwd)
    logger.debug("Staged modified tracked files")


def stage_untracked(handle: RepositoryHandle) -> list[str]:
    """Stage untracked files, leaving modified tracked files alone.

    Args:
        handle: The repository.

    Returns:
        The paths that were staged.
    """
    untracked = get_status(handle).untracked
    if not untracked:
        return []

    # NUL-separated literal paths on stdin
    _run_git_command(
        ["--literal-pathspecs", "add", "--pathspec-from-file=-", "--pathspec-file-nul"],
        cwd=handle.cwd,
        input_text="\0".join(untracked),
    )
    logger.debug("Staged %d untracked file(s)", len(untracked))
    return untracked
