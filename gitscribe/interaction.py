"""User interaction for the commit flow.

The commit flow never talks to the terminal directly; it asks an
``InteractionPort``. ``TyperInteraction`` is the terminal implementation.
"""

import logging
import os
import shlex
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Optional, Protocol, Sequence

import typer

logger = logging.getLogger(__name__)


class EditorError(Exception):
    """Raised when the message editor cannot be run."""

    pass


class InteractionPort(Protocol):
    """Prompts and editing used by the commit flow."""

    def confirm(self, prompt: str, default: bool) -> bool:
        ...

    def select(self, prompt: str, options: Sequence[str], default: int = 0) -> int:
        ...

    def edit_text(self, initial: str) -> Optional[str]:
        ...


def find_editor(configured: Optional[str] = None) -> list[str]:
    """Find an available text editor.

    Preference order:
    1. The configured ``ui.editor`` command
    2. $VISUAL, then $EDITOR
    3. nano as fallback
    4. vi as last resort

    Args:
        configured: Editor command from the configuration, may include arguments.

    Returns:
        List of command parts to run the editor.
    """
    for command in (configured, os.environ.get("VISUAL"), os.environ.get("EDITOR")):
        if command and command.strip():
            return shlex.split(command)

    # noinspection PyArgumentList
    if shutil.which("nano"):
        return ["nano"]

    return ["vi"]


def open_editor(file_path: Path, configured: Optional[str] = None) -> None:
    """Open the file in an editor and wait for it to close.

    Args:
        file_path: Path to the file to edit.
        configured: Editor command from the configuration.

    Raises:
        EditorError: If the editor cannot be started or exits with an error.
    """
    editor_cmd = find_editor(configured)
    logger.debug("Opening editor: %s", " ".join(editor_cmd))

    try:
        result = subprocess.run(editor_cmd + [str(file_path)], check=False)
    except FileNotFoundError:
        raise EditorError(f"Editor not found: {editor_cmd[0]}")

    if result.returncode != 0:
        raise EditorError(f"Editor exited with code {result.returncode}")


class TyperInteraction:
    """Terminal prompts via typer and an external editor."""

    def __init__(self, editor: Optional[str] = None):
        self.editor = editor

    def confirm(self, prompt: str, default: bool) -> bool:
        return typer.confirm(prompt, default=default)

    def select(self, prompt: str, options: Sequence[str], default: int = 0) -> int:
        """Show a numbered list and return the chosen index."""
        typer.echo(prompt)
        for i, option in enumerate(options, start=1):
            typer.echo(f"  {i}) {option}")

        while True:
            choice = typer.prompt("Select", type=int, default=default + 1)
            if 1 <= choice <= len(options):
                return choice - 1
            typer.echo(f"Please enter a number between 1 and {len(options)}", err=True)

    def edit_text(self, initial: str) -> Optional[str]:
        """Let the user edit text in an external editor.

        Args:
            initial: Text placed in the file before the editor opens.

        Returns:
            The edited text trimmed, or None if it is empty.
        """
        fd, tmp_name = tempfile.mkstemp(prefix="gitscribe-", suffix=".txt")
        path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w") as f:
                f.write(initial)
            open_editor(path, self.editor)
            edited = path.read_text().strip()
        finally:
            path.unlink(missing_ok=True)

        return edited or None
