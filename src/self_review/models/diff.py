"""Diff data models."""

from dataclasses import dataclass, field
from enum import Enum

from self_review.models.provenance import Provenance, WelcomeProvenance


class LineType(Enum):
    """Type of a diff line."""

    CONTEXT = "context"
    ADDITION = "addition"
    DELETION = "deletion"


class ChangeType(Enum):
    """How a file changed between the two sides of a diff."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"

    @property
    def letter(self) -> str:
        """Single-letter status used in file listings."""
        return self.value[0].upper()


@dataclass
class DiffLine:
    """A single line in a diff."""

    line_type: LineType
    content: str
    old_line_no: int | None = None
    new_line_no: int | None = None


@dataclass
class DiffHunk:
    """A contiguous block of changes."""

    header: str
    old_start: int
    old_lines: int
    new_start: int
    new_lines: int
    lines: list[DiffLine] = field(default_factory=list)

    @property
    def section(self) -> str:
        """Text after the closing ``@@`` (usually the enclosing function)."""
        _, sep, rest = self.header[2:].partition("@@")
        return rest.strip() if sep else ""


@dataclass
class DiffFile:
    """A single file's diff.

    An empty ``old_path`` means the file did not exist before the change,
    an empty ``new_path`` means it no longer exists after it.
    """

    old_path: str = ""
    new_path: str = ""
    change_type: ChangeType = ChangeType.MODIFIED
    is_binary: bool = False
    is_untracked: bool = False
    hunks: list[DiffHunk] = field(default_factory=list)

    @property
    def path(self) -> str:
        """Canonical path: the new path, or the old one for deletions."""
        return self.new_path or self.old_path

    @property
    def added_lines(self) -> int:
        """Count of added lines."""
        return sum(
            1
            for hunk in self.hunks
            for line in hunk.lines
            if line.line_type == LineType.ADDITION
        )

    @property
    def removed_lines(self) -> int:
        """Count of removed lines."""
        return sum(
            1
            for hunk in self.hunks
            for line in hunk.lines
            if line.line_type == LineType.DELETION
        )


@dataclass
class DiffSet:
    """Complete set of diffs for a review."""

    files: list[DiffFile]
    provenance: Provenance = field(default_factory=WelcomeProvenance)

    @property
    def total_added(self) -> int:
        """Total lines added across all files."""
        return sum(f.added_lines for f in self.files)

    @property
    def total_removed(self) -> int:
        """Total lines removed across all files."""
        return sum(f.removed_lines for f in self.files)

    def get_file(self, path: str) -> DiffFile | None:
        """Find a file by its canonical path."""
        for diff_file in self.files:
            if diff_file.path == path:
                return diff_file
        return None
