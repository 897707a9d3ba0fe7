"""Git diff utilities.

Contains:
- get_staged_diff: Get the diff between the last commit (or an empty tree) and the index
- filter_diff_lines: Keep only added, removed and context lines of a patch
- get_empty_tree: Get the object id of the empty tree
"""

from gitscribe.git.repository import RepositoryHandle, has_commits
from gitscribe.git.runner import _run_git_command

DEFAULT_CONTEXT_LINES = 3


def filter_diff_lines(patch: str) -> str:
    """Reduce a unified diff to its hunk body lines.

    Only lines inside hunks that start with ``+``, ``-`` or a space are kept.
    File headers (``diff --git``, ``index``, ``---``/``+++``, mode lines), hunk
    headers (``@@``), binary notices and ``\\ No newline at end of file``
    markers are dropped.

    Args:
        patch: Raw ``git diff`` output.

    Returns:
        The filtered patch text.
    """
    kept = []
    in_hunk = False

    # Only "\n" ends a line; "\r", form feeds and the like belong to the content
    for line in patch.split("\n"):
        if line.startswith("diff --git "):
            in_hunk = False
            continue
        if line.startswith("@@"):
            in_hunk = True
            continue
        if in_hunk and line[:1] in ("+", "-", " "):
            kept.append(line + "\n")

    return "".join(kept)


def get_empty_tree(handle: RepositoryHandle) -> str:
    """Get the object id of the empty tree for the repository's hash algorithm."""
    return _run_git_command(["hash-object", "-t", "tree", "--stdin"], cwd=handle.cwd, input_text="")


def get_staged_diff(handle: RepositoryHandle, context_lines: int = DEFAULT_CONTEXT_LINES) -> str:
    """Get the staged changes as patch text.

    The index is compared against HEAD's tree, or against the empty tree when
    the current branch has no commits yet.

    Args:
        handle: The repository.
        context_lines: Lines of context around each change.

    Returns:
        The filtered diff text (may be empty).
    """
    base = "HEAD" if has_commits(handle) else get_empty_tree(handle)

    patch = _run_git_command(
        [
            "diff",
            "--cached",
            "--no-color",
            "--no-ext-diff",
            "--no-renames",
            f"--unified={context_lines}",
            base,
            "--",
        ],
        cwd=handle.cwd,
        strip=False,
    )
    return filter_diff_lines(patch)
