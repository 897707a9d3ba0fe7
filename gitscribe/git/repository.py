"""Repository discovery and HEAD inspection.

Contains:
- RepositoryHandle: An opened git repository
- open_repository: Discover the repository containing a path
- is_usable: Check that a repository has a work tree
- get_head_commit / has_commits: Inspect the current branch tip
"""

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from gitscribe.git.exceptions import GitError, NotInRepositoryError
from gitscribe.git.runner import _run_git_command


@dataclass(frozen=True)
class RepositoryHandle:
    """An opened git repository.

    Attributes:
        git_dir: Absolute path of the repository's git directory.
        root: Work tree root, or None for bare repositories.
        is_bare: True if the repository has no work tree.
    """

    git_dir: Path
    root: Optional[Path]
    is_bare: bool

    @property
    def cwd(self) -> Path:
        """Directory git commands for this repository should run in."""
        return self.root if self.root is not None else self.git_dir


def open_repository(path: Path | str = ".") -> RepositoryHandle:
    """Discover the git repository containing ``path``.

    The search walks from ``path`` upward, the same way git itself does.

    Args:
        path: Any path inside the repository.

    Returns:
        A RepositoryHandle for the discovered repository.

    Raises:
        NotInRepositoryError: If no repository is found.
    """
    start = Path(path).resolve()
    if not start.is_dir():
        raise NotInRepositoryError(f"Not in a git repository: {start} is not a directory.")

    try:
        output = _run_git_command(
            ["rev-parse", "--absolute-git-dir", "--is-bare-repository"],
            cwd=start,
            errors="surrogateescape",
        )
    except GitError:
        raise NotInRepositoryError(
            "Not in a git repository. Please run this command from within a git repo."
        )

    git_dir_line, bare_line = output.splitlines()[:2]
    is_bare = bare_line.strip() == "true"

    root = None
    if not is_bare:
        try:
            root = Path(
                _run_git_command(
                    ["rev-parse", "--show-toplevel"], cwd=start, errors="surrogateescape"
                )
            )
        except GitError:
            # Inside the .git directory itself: there is no work tree to use
            root = None

    return RepositoryHandle(git_dir=Path(git_dir_line), root=root, is_bare=is_bare)


def is_usable(handle: RepositoryHandle) -> bool:
    """Check whether the repository has a work tree to diff and commit against."""
    return not handle.is_bare and handle.root is not None


def get_head_commit(handle: RepositoryHandle) -> str | None:
    """Get the commit id HEAD points to.

    Args:
        handle: The repository.

    Returns:
        The full commit id, or None if the current branch is unborn.

    Raises:
        GitError: If git fails for any reason other than an unborn branch.
    """
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--verify", "--quiet", "HEAD^{commit}"],
            capture_output=True,
            encoding="utf-8",
            errors="replace",
            cwd=handle.cwd,
        )
    except FileNotFoundError:
        raise GitError("Git is not installed or not in PATH.")

    if result.returncode == 0:
        return result.stdout.strip()
    # --verify --quiet exits 1 without output when HEAD does not resolve yet
    if result.returncode == 1 and not result.stderr.strip():
        return None
    raise GitError(f"Failed to resolve HEAD:\n{result.stderr.strip()}")


def has_commits(handle: RepositoryHandle) -> bool:
    """Check whether the current branch has at least one commit."""
    return get_head_commit(handle) is not None
