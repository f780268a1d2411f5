"""Where a review's file set came from."""

from dataclasses import dataclass


@dataclass(frozen=True)
class GitProvenance:
    """Files came from ``git diff`` in a repository."""

    git_diff_args: str
    repository: str

    @property
    def description(self) -> str:
        args = self.git_diff_args or "(working tree)"
        return f"git diff {args}"


@dataclass(frozen=True)
class DirectoryProvenance:
    """Every file under a directory (or a single file) treated as new."""

    source_path: str

    @property
    def description(self) -> str:
        return f"directory {self.source_path}"


@dataclass(frozen=True)
class WelcomeProvenance:
    """No source chosen yet."""

    @property
    def description(self) -> str:
        return "no source"


Provenance = GitProvenance | DirectoryProvenance | WelcomeProvenance
