"""Synthetic unified diffs for files with no previous version.

Untracked files in a repository, and every file of a plain directory, are
presented as brand-new files: each line is an addition. The text produced
here is fed straight back into :func:`self_review.core.diff_parser.parse_diff`.
"""

import logging
from pathlib import Path

from self_review.core.diff_parser import parse_diff
from self_review.models.diff import DiffFile

logger = logging.getLogger(__name__)

BINARY_SNIFF_BYTES = 8192
NO_NEWLINE_MARKER = "\\ No newline at end of file"


def is_binary_content(content: bytes) -> bool:
    """Check for a NUL byte in the first 8 KiB."""
    return b"\0" in content[:BINARY_SNIFF_BYTES]


def _binary_stanza(path: str) -> str:
    return (
        f"diff --git a/{path} b/{path}\n"
        "new file mode 100644\n"
        f"Binary files /dev/null and b/{path} differ"
    )


def _text_stanza(path: str, text: str) -> str:
    lines = text.split("\n")
    # A final newline leaves an empty element that is not a visible line
    if lines and lines[-1] == "":
        lines.pop()

    stanza = (
        f"diff --git a/{path} b/{path}\n"
        "new file mode 100644\n"
        "--- /dev/null\n"
        f"+++ b/{path}\n"
        f"@@ -0,0 +1,{len(lines)} @@\n"
        + "\n".join(f"+{line}" for line in lines)
    )
    if text and not text.endswith("\n"):
        stanza += f"\n{NO_NEWLINE_MARKER}"
    return stanza


def generate_synthetic_diff(paths: list[str], root_dir: Path | str) -> str:
    """Generate a unified diff that adds every file in ``paths``.

    Args:
        paths: File paths relative to ``root_dir`` (e.g. ``src/foo.py``)
        root_dir: Directory the paths are relative to

    Returns:
        Unified diff text covering every readable path. Files that vanish
        between listing and reading are skipped.
    """
    root = Path(root_dir)
    stanzas = []

    for path in paths:
        try:
            content = (root / path).read_bytes()
        except OSError as e:
            logger.debug("Skipping unreadable file %s: %s", path, e)
            continue

        if is_binary_content(content):
            stanzas.append(_binary_stanza(path))
        else:
            stanzas.append(_text_stanza(path, content.decode("utf-8", errors="replace")))

    return "\n".join(stanzas)


def scan_directory(directory: Path | str) -> list[DiffFile]:
    """Treat every file under ``directory`` as a new addition.

    Returns an empty list (and logs why) when the path is missing or is not
    a directory.
    """
    root = Path(directory)
    if not root.is_dir():
        logger.error("Not a directory: %s", root)
        return []

    try:
        paths = sorted(
            p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file()
        )
    except OSError as e:
        logger.error("Error reading directory %s: %s", root, e)
        return []

    if not paths:
        return []
    return parse_diff(generate_synthetic_diff(paths, root))


def scan_file(file_path: Path | str) -> list[DiffFile]:
    """Treat a single file as a new addition, path relative to its parent."""
    path = Path(file_path)
    if not path.is_file():
        logger.error("Not a file: %s", path)
        return []
    return parse_diff(generate_synthetic_diff([path.name], path.parent))
