"""Comment data models."""

from dataclasses import dataclass, field
from enum import Enum
from uuid import uuid4


def new_id() -> str:
    """Mint a fresh comment/attachment identifier."""
    return str(uuid4())


class Side(Enum):
    """Which version of a file a line number refers to."""

    OLD = "old"
    NEW = "new"


@dataclass(frozen=True)
class LineRange:
    """An inclusive range of line numbers on one side of a diff."""

    side: Side
    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(
                f"line range start {self.start} is after end {self.end}"
            )

    @classmethod
    def single(cls, side: Side, line_no: int) -> "LineRange":
        """Range covering exactly one line."""
        return cls(side=side, start=line_no, end=line_no)

    @property
    def is_single_line(self) -> bool:
        return self.start == self.end

    def contains(self, line_no: int, side: Side) -> bool:
        """Check if this range covers ``line_no`` on ``side``."""
        return self.side == side and self.start <= line_no <= self.end


@dataclass(frozen=True)
class Suggestion:
    """A proposed replacement for the code at a comment's line range."""

    original_code: str
    proposed_code: str


@dataclass(frozen=True)
class Attachment:
    """A binary file (usually an image) attached to a comment.

    ``data`` holds the bytes for attachments created during a session.
    Attachments loaded from a saved review only carry the relative asset
    path in ``file_name``; reading the bytes back is up to the caller.
    """

    file_name: str
    media_type: str
    data: bytes | None = None
    id: str = field(default_factory=new_id)

    @property
    def extension(self) -> str:
        """File extension derived from the media type (``image/png`` -> ``png``)."""
        subtype = self.media_type.partition("/")[2]
        return subtype.split("+")[0] or "png"


@dataclass(frozen=True)
class ReviewComment:
    """A review comment, anchored to a line range or to the whole file."""

    file_path: str
    body: str
    line_range: LineRange | None = None  # None = file-level comment
    category: str | None = None
    suggestion: Suggestion | None = None
    attachments: tuple[Attachment, ...] | None = None
    id: str = field(default_factory=new_id)

    @property
    def is_file_level(self) -> bool:
        return self.line_range is None

    def covers_line(self, line_no: int, side: Side) -> bool:
        """Check if this comment covers the given line on the given side."""
        if self.line_range is None:
            return False
        return self.line_range.contains(line_no, side)

    @property
    def location(self) -> str:
        """Get formatted location string.

        Format:
        - Old-side lines: `path:~start-end`
        - Line range: `path:start-end`
        - Single line: `path:linenum`
        - File comments: `path`
        """
        if self.line_range is None:
            return self.file_path
        start, end = self.line_range.start, self.line_range.end
        marker = "~" if self.line_range.side == Side.OLD else ""
        if start == end:
            return f"{self.file_path}:{marker}{start}"
        return f"{self.file_path}:{marker}{start}-{end}"

    @property
    def location_short(self) -> str:
        """Get short location string for inline display."""
        if self.line_range is None:
            return "file"
        prefix = "L" if self.line_range.side == Side.NEW else "~L"
        if self.line_range.is_single_line:
            return f"{prefix}{self.line_range.start}"
        return f"{prefix}{self.line_range.start}-{self.line_range.end}"
