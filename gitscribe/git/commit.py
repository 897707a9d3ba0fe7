"""Commit creation.

Contains:
- create_commit: Write the index as a new commit on the current branch
"""

import logging

from gitscribe.git.repository import RepositoryHandle, get_head_commit
from gitscribe.git.runner import _run_git_command

logger = logging.getLogger(__name__)


def create_commit(handle: RepositoryHandle, message: str) -> str:
    """Commit the current index tree with the given message.

    The commit is authored and committed with the repository's configured
    identity. It has no parents when the branch is unborn and the current HEAD
    as its only parent otherwise. HEAD (and the branch it points to) is moved
    to the new commit.

    Args:
        handle: The repository.
        message: The commit message.

    Returns:
        The new commit id.

    Raises:
        GitError: If any git step fails.
    """
    parent = get_head_commit(handle)
    tree = _run_git_command(["write-tree"], cwd=handle.cwd)

    args = ["commit-tree", tree]
    if parent:
        args += ["-p", parent]
    # Message on stdin keeps it verbatim
    commit_id = _run_git_command(args, cwd=handle.cwd, input_text=message)

    subject = message.strip().splitlines()[0] if message.strip() else ""
    reflog = "commit (initial): " if parent is None else "commit: "
    # An empty old value asserts the branch does not exist yet
    _run_git_command(
        ["update-ref", "-m", reflog + subject, "HEAD", commit_id, parent or ""],
        cwd=handle.cwd,
    )

    logger.info("Created commit %s (parent: %s)", commit_id, parent or "none")
    return commit_id
