"""Git command runner.

Contains:
- _run_git_command: Run a git command and return its output
"""

import logging
import subprocess
from pathlib import Path

from gitscribe.git.exceptions import GitError

logger = logging.getLogger(__name__)


def _run_git_command(
    args: list[str],
    cwd: Path | str | None = None,
    strip: bool = True,
    input_text: str | None = None,
    errors: str = "replace",
) -> str:
    """Run a git command and return its output.

    Output is read as bytes and decoded as UTF-8 without newline translation,
    so ``\\r`` and other control characters reach the caller unchanged.

    Args:
        args: List of arguments to pass to git.
        cwd: Directory to run the command in. Defaults to the process cwd.
        strip: Strip surrounding whitespace from stdout. Disable for output
            where leading spaces are significant (porcelain status, diffs).
        input_text: Optional text fed to the command's stdin. Surrogate
            escapes are written back as the raw bytes they stand for.
        errors: How undecodable bytes in stdout are handled. "replace" for
            text shown to people or models, "surrogateescape" for paths
            that are passed back to git.

    Returns:
        The stdout of the git command.

    Raises:
        GitError: If the command fails.
    """
    logger.debug("Running: git %s (cwd=%s)", " ".join(args), cwd or ".")
    stdin = None
    if input_text is not None:
        stdin = input_text.encode("utf-8", errors="surrogateescape")

    try:
        result = subprocess.run(
            ["git"] + args,
            capture_output=True,
            check=True,
            cwd=cwd,
            input=stdin,
        )
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or b"").decode("utf-8", errors="replace").strip()
        raise GitError(f"Git command failed: git {' '.join(args)}\n{stderr}")
    except FileNotFoundError:
        raise GitError("Git is not installed or not in PATH.")

    output = result.stdout.decode("utf-8", errors=errors)
    return output.strip() if strip else output
