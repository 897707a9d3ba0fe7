"""Git status utilities.

Status is read from ``git status --porcelain=v1 -z`` and every entry is turned
into a set of StatusFlag bits, one group for the index and one for the work
tree. Categories (staged, modified, untracked) and short status lines are both
derived from those bits.

Contains:
- StatusFlag: Per-entry index and work tree change bits
- StatusEntry / StatusSnapshot: Parsed status data
- parse_status_code: Map a porcelain XY code to flags
- parse_porcelain_status: Parse NUL-separated porcelain output
- classify_entries: Split entries into staged/modified/untracked
- format_status_lines: Render entries as two-character status lines
- display_path: Printable form of a path that may hold non-UTF-8 bytes
- get_status_entries / get_status / get_status_lines: Query a repository
"""

from dataclasses import dataclass, field
from enum import Flag, auto

from gitscribe.git.repository import RepositoryHandle
from gitscribe.git.runner import _run_git_command


class StatusFlag(Flag):
    """Change bits for a single status entry."""

    CURRENT = 0
    INDEX_NEW = auto()
    INDEX_MODIFIED = auto()
    INDEX_DELETED = auto()
    INDEX_RENAMED = auto()
    INDEX_TYPECHANGE = auto()
    WT_NEW = auto()
    WT_MODIFIED = auto()
    WT_DELETED = auto()
    WT_RENAMED = auto()
    WT_TYPECHANGE = auto()
    IGNORED = auto()
    CONFLICTED = auto()


INDEX_CHANGE_FLAGS = (
    StatusFlag.INDEX_NEW
    | StatusFlag.INDEX_MODIFIED
    | StatusFlag.INDEX_DELETED
    | StatusFlag.INDEX_RENAMED
    | StatusFlag.INDEX_TYPECHANGE
)

WORKTREE_CHANGE_FLAGS = (
    StatusFlag.WT_MODIFIED
    | StatusFlag.WT_DELETED
    | StatusFlag.WT_TYPECHANGE
    | StatusFlag.WT_RENAMED
)

# Porcelain codes for unmerged paths
_CONFLICT_CODES = {"DD", "AU", "UD", "UA", "DU", "AA", "UU"}

_INDEX_CODE_FLAGS = {
    "A": StatusFlag.INDEX_NEW,
    "C": StatusFlag.INDEX_NEW,
    "M": StatusFlag.INDEX_MODIFIED,
    "D": StatusFlag.INDEX_DELETED,
    "R": StatusFlag.INDEX_RENAMED,
    "T": StatusFlag.INDEX_TYPECHANGE,
}

_WORKTREE_CODE_FLAGS = {
    "A": StatusFlag.WT_NEW,
    "M": StatusFlag.WT_MODIFIED,
    "D": StatusFlag.WT_DELETED,
    "R": StatusFlag.WT_RENAMED,
    "C": StatusFlag.WT_RENAMED,
    "T": StatusFlag.WT_TYPECHANGE,
}

# First match wins, in this order
_INDEX_CHARS = (
    (StatusFlag.INDEX_NEW, "A"),
    (StatusFlag.INDEX_MODIFIED, "M"),
    (StatusFlag.INDEX_DELETED, "D"),
    (StatusFlag.INDEX_RENAMED, "R"),
    (StatusFlag.INDEX_TYPECHANGE, "T"),
)

_WORKTREE_CHARS = (
    (StatusFlag.WT_NEW, "?"),
    (StatusFlag.WT_MODIFIED, "M"),
    (StatusFlag.WT_DELETED, "D"),
    (StatusFlag.WT_RENAMED, "R"),
    (StatusFlag.WT_TYPECHANGE, "T"),
)


@dataclass(frozen=True)
class StatusEntry:
    """A single path reported by git status.

    Bytes in a path that are not UTF-8 are kept as surrogate escapes, so the
    path can be handed back to git unchanged.
    """

    path: str
    flags: StatusFlag
    orig_path: str | None = None


@dataclass
class StatusSnapshot:
    """Staged, modified and untracked paths at one point in time."""

    staged: list[str] = field(default_factory=list)
    modified: list[str] = field(default_factory=list)
    untracked: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True if there is nothing staged, modified or untracked."""
        return not (self.staged or self.modified or self.untracked)

    @property
    def has_unstaged(self) -> bool:
        """True if there are modified or untracked paths."""
        return bool(self.modified or self.untracked)


def parse_status_code(code: str) -> StatusFlag:
    """Map a two-character porcelain v1 status code to StatusFlag bits.

    Args:
        code: The XY code, e.g. "M ", " M", "A ", "??".

    Returns:
        The combined flags for the entry.
    """
    if code == "??":
        return StatusFlag.WT_NEW
    if code == "!!":
        return StatusFlag.IGNORED
    if code in _CONFLICT_CODES:
        return StatusFlag.CONFLICTED

    index_code, worktree_code = code[0], code[1]
    flags = StatusFlag.CURRENT
    flags |= _INDEX_CODE_FLAGS.get(index_code, StatusFlag.CURRENT)
    flags |= _WORKTREE_CODE_FLAGS.get(worktree_code, StatusFlag.CURRENT)
    return flags


def parse_porcelain_status(output: str) -> list[StatusEntry]:
    """Parse ``git status --porcelain=v1 -z`` output.

    Records are NUL-terminated. Rename and copy records are followed by an
    extra record holding the original path.

    Args:
        output: Raw command output.

    Returns:
        Entries in the order git reported them.
    """
    entries = []
    records = output.split("\0")
    i = 0
    while i < len(records):
        record = records[i]
        i += 1
        if len(record) < 4:
            continue

        code, path = record[:2], record[3:]
        orig_path = None
        if code[0] in "RC" or code[1] in "RC":
            if i < len(records):
                orig_path = records[i]
                i += 1

        entries.append(StatusEntry(path=path, flags=parse_status_code(code), orig_path=orig_path))

    return entries


def classify_entries(entries: list[StatusEntry]) -> StatusSnapshot:
    """Split status entries into staged, modified and untracked paths.

    A path lands in every category whose flags it carries, so a file staged
    and then edited again shows up in both ``staged`` and ``modified``.

    Args:
        entries: Parsed status entries.

    Returns:
        The StatusSnapshot.
    """
    snapshot = StatusSnapshot()
    for entry in entries:
        if entry.flags & StatusFlag.IGNORED:
            continue
        if entry.flags & INDEX_CHANGE_FLAGS:
            snapshot.staged.append(entry.path)
        if entry.flags & WORKTREE_CHANGE_FLAGS:
            snapshot.modified.append(entry.path)
        if entry.flags & StatusFlag.WT_NEW:
            snapshot.untracked.append(entry.path)
    return snapshot


def display_path(path: str) -> str:
    """Make a path read from git printable, replacing bytes that are not UTF-8."""
    return path.encode("utf-8", errors="surrogateescape").decode("utf-8", errors="replace")


def _status_char(flags: StatusFlag, table: tuple) -> str:
    for flag, char in table:
        if flags & flag:
            return char
    return " "


def format_status_lines(entries: list[StatusEntry]) -> str:
    """Render entries as short status lines (``XY path``), one per entry.

    Args:
        entries: Parsed status entries.

    Returns:
        The rendered lines, each terminated by a newline.
    """
    lines = []
    for entry in entries:
        if entry.flags & StatusFlag.IGNORED:
            continue
        index_char = _status_char(entry.flags, _INDEX_CHARS)
        worktree_char = _status_char(entry.flags, _WORKTREE_CHARS)
        lines.append(f"{index_char}{worktree_char} {display_path(entry.path)}\n")
    return "".join(lines)


def get_status_entries(handle: RepositoryHandle) -> list[StatusEntry]:
    """Read the current status of the repository.

    Args:
        handle: The repository.

    Returns:
        Status entries, ignored paths excluded.
    """
    output = _run_git_command(
        ["status", "--porcelain=v1", "-z", "--untracked-files=all", "--ignored=no"],
        cwd=handle.cwd,
        strip=False,
        errors="surrogateescape",
    )
    return [e for e in parse_porcelain_status(output) if not e.flags & StatusFlag.IGNORED]


def get_status(handle: RepositoryHandle) -> StatusSnapshot:
    """Get staged, modified and untracked paths. Never cached."""
    return classify_entries(get_status_entries(handle))


def get_status_lines(handle: RepositoryHandle) -> str:
    """Get the short status text sent to the model."""
    return format_status_lines(get_status_entries(handle))
