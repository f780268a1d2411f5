"""Parse unified diff text into DiffFile records.

The parser is forgiving: it never raises, and anything it
cannot make sense of is dropped or read as context. Markers and the hunk
header pattern come from ``unidiff`` so both agree on the format.
"""

import logging
import re

from unidiff.constants import (
    DEV_NULL,
    LINE_TYPE_ADDED,
    LINE_TYPE_CONTEXT,
    LINE_TYPE_NO_NEWLINE,
    LINE_TYPE_REMOVED,
    RE_HUNK_HEADER,
)

from self_review.models.diff import ChangeType, DiffFile, DiffHunk, DiffLine, LineType

logger = logging.getLogger(__name__)

GIT_HEADER = "diff --git "
BINARY_MARKER = "Binary files "

# Each side is /dev/null or a one-letter prefixed path, so file names
# containing " and " still split in the right place
RE_BINARY_PATHS = re.compile(
    r"^Binary files (?P<old>/dev/null|[^/\s]/.+?) and (?P<new>/dev/null|[^/\s]/.+) differ$"
)
RE_BINARY_PATHS_LOOSE = re.compile(r"^Binary files (?P<old>.+?) and (?P<new>.+) differ$")

_BODY_MARKERS = (LINE_TYPE_ADDED, LINE_TYPE_REMOVED, LINE_TYPE_CONTEXT, LINE_TYPE_NO_NEWLINE)


def strip_prefix(path: str) -> str:
    """Remove a one-letter ``x/`` prefix (``a/``, ``b/``, or mnemonic ``c/ i/ w/ o/``).

    Paths of two characters or fewer are left alone so a bare ``a/`` or a
    single-letter file name is never mangled.
    """
    if len(path) > 2 and path[1] == "/":
        return path[2:]
    return path


def _header_path(raw: str) -> str:
    """Path from a ``---``/``+++``/``Binary files`` field."""
    path = raw.split("\t", 1)[0]
    if path == DEV_NULL:
        return ""
    return strip_prefix(path)


def parse_git_header(line: str) -> tuple[str, str]:
    """Extract (old, new) paths from ``diff --git a/<old> b/<new>``.

    Paths may contain spaces, so the split happens at the first `` b/``.
    With mnemonic prefixes there is no `` b/``; the header is then split
    in half when both halves name the same file. Returns empty strings when
    neither works.
    """
    rest = line[len(GIT_HEADER):]
    idx = rest.find(" b/")
    if idx != -1:
        return strip_prefix(rest[:idx]), strip_prefix(rest[idx + 1:])

    half = len(rest) // 2
    if len(rest) % 2 == 1 and rest[half] == " ":
        old, new = strip_prefix(rest[:half]), strip_prefix(rest[half + 1:])
        if old == new:
            return old, new
    return "", ""


class _DiffParser:
    """Line-by-line state machine behind :func:`parse_diff`."""

    def __init__(self) -> None:
        self.files: list[DiffFile] = []
        self.file: DiffFile | None = None
        self.hunk: DiffHunk | None = None
        self.old_no = 0
        self.new_no = 0
        # Lines the current hunk header still promises on each side
        self.old_left = 0
        self.new_left = 0
        # Whether ---/+++ lines set the paths (they beat every fallback)
        self.old_from_header = False
        self.new_from_header = False

    def feed(self, line: str) -> None:
        if line.startswith(GIT_HEADER):
            self._open_file(*parse_git_header(line))
            return

        if self.hunk is not None and (
            (self.old_left > 0 or self.new_left > 0) and line.startswith(_BODY_MARKERS)
            # A blank context line whose leading space was stripped
            or (line == "" and self.old_left > 0 and self.new_left > 0)
        ):
            self._body_line(line)
            return

        if line.startswith("@@"):
            self._hunk_header(line)
        elif line.startswith("--- "):
            if self.file is None or self.file.hunks or self.hunk is not None:
                self._open_file()
            self.file.old_path = _header_path(line[4:])
            self.old_from_header = True
        elif line.startswith("+++ "):
            if self.file is None:
                self._open_file()
            self.file.new_path = _header_path(line[4:])
            self.new_from_header = True
        elif line.startswith(BINARY_MARKER):
            self._binary(line)
        elif self.file is not None and self.hunk is None:
            self._metadata(line)
        elif self.hunk is not None and line:
            self._body_line(line)

    def finish(self) -> list[DiffFile]:
        self._flush_file()
        return self.files

    def _open_file(self, old_path: str = "", new_path: str = "") -> None:
        self._flush_file()
        self.file = DiffFile(old_path=old_path, new_path=new_path)
        self.old_from_header = False
        self.new_from_header = False

    def _flush_hunk(self) -> None:
        if self.hunk is not None and self.file is not None:
            self.file.hunks.append(self.hunk)
        self.hunk = None
        self.old_left = self.new_left = 0

    def _flush_file(self) -> None:
        self._flush_hunk()
        if self.file is not None and (self.file.is_binary or self.file.hunks):
            self.files.append(self.file)
        self.file = None

    def _metadata(self, line: str) -> None:
        if line.startswith("new file mode"):
            self.file.change_type = ChangeType.ADDED
        elif line.startswith("deleted file mode"):
            self.file.change_type = ChangeType.DELETED
        elif line.startswith("rename from "):
            self.file.change_type = ChangeType.RENAMED
            if not self.old_from_header:
                self.file.old_path = line[len("rename from "):]
        elif line.startswith("rename to "):
            self.file.change_type = ChangeType.RENAMED
            if not self.new_from_header:
                self.file.new_path = line[len("rename to "):]

    def _binary(self, line: str) -> None:
        if self.file is None:
            self._open_file()
        self._flush_hunk()
        self.file.is_binary = True
        match = RE_BINARY_PATHS.match(line) or RE_BINARY_PATHS_LOOSE.match(line)
        if match is None:
            return
        # Paths from the git header win; /dev/null still marks a side absent
        old_path = _header_path(match.group("old"))
        new_path = _header_path(match.group("new"))
        if not self.old_from_header and (not self.file.old_path or not old_path):
            self.file.old_path = old_path
        if not self.new_from_header and (not self.file.new_path or not new_path):
            self.file.new_path = new_path

    def _hunk_header(self, line: str) -> None:
        match = RE_HUNK_HEADER.match(line)
        if match is None:
            logger.debug("Skipping unparsable hunk header: %r", line)
            return
        if self.file is None:
            self._open_file()
        self._flush_hunk()

        old_start = int(match.group(1))
        old_lines = int(match.group(2)) if match.group(2) is not None else 1
        new_start = int(match.group(3))
        new_lines = int(match.group(4)) if match.group(4) is not None else 1

        self.hunk = DiffHunk(
            header=line,
            old_start=old_start,
            old_lines=old_lines,
            new_start=new_start,
            new_lines=new_lines,
        )
        self.old_no, self.new_no = old_start, new_start
        self.old_left, self.new_left = old_lines, new_lines

    def _body_line(self, line: str) -> None:
        marker, content = line[:1], line[1:]

        if marker == LINE_TYPE_NO_NEWLINE:
            return

        if marker == LINE_TYPE_ADDED:
            self.hunk.lines.append(
                DiffLine(LineType.ADDITION, content, new_line_no=self.new_no)
            )
            self.new_no += 1
            self.new_left -= 1
        elif marker == LINE_TYPE_REMOVED:
            self.hunk.lines.append(
                DiffLine(LineType.DELETION, content, old_line_no=self.old_no)
            )
            self.old_no += 1
            self.old_left -= 1
        else:
            # Unrecognised lines are kept whole and read as context.
            if marker != LINE_TYPE_CONTEXT:
                content = line
            self.hunk.lines.append(
                DiffLine(
                    LineType.CONTEXT,
                    content,
                    old_line_no=self.old_no,
                    new_line_no=self.new_no,
                )
            )
            self.old_no += 1
            self.new_no += 1
            self.old_left -= 1
            self.new_left -= 1


def parse_diff(raw_text: str) -> list[DiffFile]:
    """Parse unified diff text into a list of DiffFile.

    Args:
        raw_text: Output of ``git diff`` (or compatible unified diff)

    Returns:
        One DiffFile per file that is binary or has at least one hunk;
        empty or whitespace-only input gives an empty list
    """
    if not raw_text.strip():
        return []

    lines = raw_text.split("\n")
    # The final newline ends the last line, it does not start a blank one
    if lines[-1] == "":
        lines.pop()

    parser = _DiffParser()
    for line in lines:
        parser.feed(line)
    files = parser.finish()

    logger.debug("Parsed %d file(s) from diff text", len(files))
    return files
