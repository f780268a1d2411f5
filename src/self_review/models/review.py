"""Review state data models.

Both types are frozen: changes go through :mod:`self_review.core.annotations`,
which hands back new tuples instead of editing these in place.
"""

from dataclasses import dataclass, field

from self_review.models.comment import ReviewComment
from self_review.models.diff import ChangeType
from self_review.models.provenance import Provenance, WelcomeProvenance


@dataclass(frozen=True)
class FileReviewState:
    """Review state for a single file."""

    path: str
    change_type: ChangeType = ChangeType.MODIFIED
    viewed: bool = False
    comments: tuple[ReviewComment, ...] = ()

    @property
    def comment_count(self) -> int:
        """Number of comments on this file."""
        return len(self.comments)


@dataclass(frozen=True)
class ReviewState:
    """Everything written to a review document."""

    timestamp: str
    provenance: Provenance = field(default_factory=WelcomeProvenance)
    files: tuple[FileReviewState, ...] = ()

    @property
    def all_comments(self) -> list[ReviewComment]:
        """All comments across all files, in file order."""
        return [c for state in self.files for c in state.comments]

    @property
    def viewed_count(self) -> int:
        """Number of files marked as viewed."""
        return sum(1 for f in self.files if f.viewed)
