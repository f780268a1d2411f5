"""Data models for self-review."""

from self_review.models.comment import (
    Attachment,
    LineRange,
    ReviewComment,
    Side,
    Suggestion,
)
from self_review.models.diff import (
    ChangeType,
    DiffFile,
    DiffHunk,
    DiffLine,
    DiffSet,
    LineType,
)
from self_review.models.provenance import (
    DirectoryProvenance,
    GitProvenance,
    Provenance,
    WelcomeProvenance,
)
from self_review.models.review import FileReviewState, ReviewState

__all__ = [
    "Attachment",
    "ChangeType",
    "DiffFile",
    "DiffHunk",
    "DiffLine",
    "DiffSet",
    "DirectoryProvenance",
    "FileReviewState",
    "GitProvenance",
    "LineRange",
    "LineType",
    "Provenance",
    "ReviewComment",
    "ReviewState",
    "Side",
    "Suggestion",
    "WelcomeProvenance",
]
