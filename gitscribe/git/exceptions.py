"""Git-related exception classes.

Contains all exception classes for Git operations:
- GitError: Base exception for git-related errors
- NotInRepositoryError: Raised when no usable repository is found
"""


class GitError(Exception):
    """Custom exception for git-related errors."""

    pass


class NotInRepositoryError(GitError):
    """Raised when the path is not inside a git work tree."""

    pass
