"""Diff source implementations."""

import logging
import re
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path

from self_review.core.diff_parser import parse_diff
from self_review.core.synthetic import generate_synthetic_diff, scan_directory, scan_file
from self_review.models.diff import DiffHunk, DiffSet
from self_review.models.provenance import DirectoryProvenance, GitProvenance

logger = logging.getLogger(__name__)

DEFAULT_GIT_TIMEOUT = 30

RE_UNIFIED_FLAG = re.compile(r"^(-U\d+|--unified=\d+)$")


class GitError(RuntimeError):
    """git is unavailable, this is not a repository, or a git command failed."""


def _run_git(args: list[str], cwd: Path, timeout: float = DEFAULT_GIT_TIMEOUT) -> str:
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=str(cwd),
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=True,
            timeout=timeout,
        )
    except FileNotFoundError as e:
        raise GitError("git is not installed or not in PATH") from e
    except subprocess.TimeoutExpired as e:
        raise GitError(f"git {args[0]} timed out after {timeout}s") from e
    except subprocess.CalledProcessError as e:
        message = (e.stderr or "").strip() or f"exit status {e.returncode}"
        raise GitError(f"git {args[0]} failed: {message}") from e
    return result.stdout


def get_repo_root(cwd: Path, timeout: float = DEFAULT_GIT_TIMEOUT) -> Path:
    """Absolute path of the repository containing ``cwd``."""
    return Path(_run_git(["rev-parse", "--show-toplevel"], cwd, timeout).strip())


def run_git_diff(args: list[str], cwd: Path, timeout: float = DEFAULT_GIT_TIMEOUT) -> str:
    """Raw ``git diff`` output for ``args``."""
    return _run_git(["diff", *args], cwd, timeout)


def list_untracked_files(cwd: Path, timeout: float = DEFAULT_GIT_TIMEOUT) -> list[str]:
    """Untracked, non-ignored files relative to ``cwd``."""
    output = _run_git(["ls-files", "--others", "--exclude-standard"], cwd, timeout)
    return [line for line in output.split("\n") if line]


def strip_context_args(args: list[str]) -> list[str]:
    """Drop ``-U``/``--unified`` flags and any trailing ``--`` pathspec."""
    kept = []
    skip_next = False
    for arg in args:
        if skip_next:
            skip_next = False
            continue
        if arg == "--":
            break
        if arg in ("-U", "--unified"):
            skip_next = True
            continue
        if RE_UNIFIED_FLAG.match(arg):
            continue
        kept.append(arg)
    return kept


def count_lines(path: Path) -> int:
    """Visible line count of a text file, 0 if it cannot be read."""
    try:
        content = path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return 0
    lines = content.split("\n")
    if content.endswith("\n"):
        lines.pop()
    return len(lines) if content else 0


class DiffSource(ABC):
    """Abstract base class for diff sources."""

    @abstractmethod
    def get_diff(self) -> DiffSet:
        """Fetch and return the diff."""

    @property
    @abstractmethod
    def source_type(self) -> str:
        """Type identifier for this source."""


class GitDiffSource(DiffSource):
    """``git diff <args>`` plus untracked files shown as additions."""

    def __init__(
        self,
        repo_path: Path,
        diff_args: list[str] | tuple[str, ...] = (),
        include_untracked: bool = True,
        timeout: float = DEFAULT_GIT_TIMEOUT,
    ):
        self.repo_path = repo_path
        self.diff_args = list(diff_args)
        self.include_untracked = include_untracked
        self.timeout = timeout

    def get_diff(self) -> DiffSet:
        """Get the parsed diff, untracked files appended at the end."""
        repository = get_repo_root(self.repo_path, self.timeout)
        files = parse_diff(run_git_diff(self.diff_args, self.repo_path, self.timeout))

        if self.include_untracked:
            untracked = list_untracked_files(repository, self.timeout)
            if untracked:
                untracked_files = parse_diff(generate_synthetic_diff(untracked, repository))
                for diff_file in untracked_files:
                    diff_file.is_untracked = True
                files = files + untracked_files

        logger.debug("Loaded %d file(s) from git diff %s", len(files), " ".join(self.diff_args))
        return DiffSet(
            files=files,
            provenance=GitProvenance(
                git_diff_args=" ".join(self.diff_args),
                repository=str(repository),
            ),
        )

    def expand_context(
        self, file_path: str, context_lines: int
    ) -> tuple[list[DiffHunk], int] | None:
        """Re-diff one file with ``context_lines`` lines of context.

        Returns the new hunks and the file's current line count, or None if
        git fails or the file is no longer part of the diff.
        """
        args = [*strip_context_args(self.diff_args), f"-U{context_lines}", "--", file_path]
        try:
            repository = get_repo_root(self.repo_path, self.timeout)
            files = parse_diff(run_git_diff(args, repository, self.timeout))
        except GitError as e:
            logger.error("Failed to expand context for %s: %s", file_path, e)
            return None

        if not files:
            return None
        return files[0].hunks, count_lines(repository / file_path)

    @property
    def source_type(self) -> str:
        return "git"


class DirectoryDiffSource(DiffSource):
    """Every file under a directory (or one file) shown as an addition."""

    def __init__(self, path: Path):
        self.path = path

    def get_diff(self) -> DiffSet:
        if self.path.is_file():
            files = scan_file(self.path)
        else:
            files = scan_directory(self.path)
        return DiffSet(
            files=files,
            provenance=DirectoryProvenance(source_path=str(self.path.resolve())),
        )

    @property
    def source_type(self) -> str:
        return "directory"


def get_diff_source(
    repo_path: Path,
    diff_args: list[str] | tuple[str, ...] = (),
    directory: Path | None = None,
    include_untracked: bool = True,
) -> DiffSource:
    """Factory function to create the appropriate diff source.

    A directory (or file) path selects directory mode; otherwise git mode
    in ``repo_path``.
    """
    if directory is not None:
        return DirectoryDiffSource(directory)
    return GitDiffSource(repo_path, diff_args, include_untracked=include_untracked)
