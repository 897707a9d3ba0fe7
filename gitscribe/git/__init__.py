"""Git repository inspection for gitscribe.

This package wraps the git executable with:
- exceptions: GitError, NotInRepositoryError
- runner: _run_git_command
- repository: RepositoryHandle, open_repository, is_usable, get_head_commit, has_commits
- status: StatusFlag, StatusEntry, StatusSnapshot, get_status, get_status_lines
- staging: stage_all, stage_modified, stage_untracked
- diff: get_staged_diff, filter_diff_lines
- commit: create_commit
"""

# Exceptions
from gitscribe.git.exceptions import (
    GitError,
    NotInRepositoryError,
)

# Runner utilities
from gitscribe.git.runner import _run_git_command

# Repository discovery
from gitscribe.git.repository import (
    RepositoryHandle,
    open_repository,
    is_usable,
    get_head_commit,
    has_commits,
)

# Status utilities
from gitscribe.git.status import (
    StatusFlag,
    StatusEntry,
    StatusSnapshot,
    parse_status_code,
    parse_porcelain_status,
    classify_entries,
    format_status_lines,
    get_status_entries,
    get_status,
    get_status_lines,
)

# Staging
from gitscribe.git.staging import (
    stage_all,
    stage_modified,
    stage_untracked,
)

# Diff utilities
from gitscribe.git.diff import (
    DEFAULT_CONTEXT_LINES,
    filter_diff_lines,
    get_empty_tree,
    get_staged_diff,
)

# Commit creation
from gitscribe.git.commit import create_commit


__all__ = [
    # Exceptions
    "GitError",
    "NotInRepositoryError",
    # Runner
    "_run_git_command",
    # Repository
    "RepositoryHandle",
    "open_repository",
    "is_usable",
    "get_head_commit",
    "has_commits",
    # Status
    "StatusFlag",
    "StatusEntry",
    "StatusSnapshot",
    "parse_status_code",
    "parse_porcelain_status",
    "classify_entries",
    "format_status_lines",
    "get_status_entries",
    "get_status",
    "get_status_lines",
    # Staging
    "stage_all",
    "stage_modified",
    "stage_untracked",
    # Diff
    "DEFAULT_CONTEXT_LINES",
    "filter_diff_lines",
    "get_empty_tree",
    "get_staged_diff",
    # Commit
    "create_commit",
]
