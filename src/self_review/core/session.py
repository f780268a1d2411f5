"""Review session: the loaded diff plus the review state built on top of it.

A session is the single owner of the review state for one run. It holds the
current ``FileReviewState`` tuple and swaps it for the tuple returned by each
transition in :mod:`self_review.core.annotations`.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path

from self_review.core import annotations
from self_review.core.document import write_review
from self_review.core.document_parser import load_review_document
from self_review.models.comment import Attachment, LineRange, ReviewComment, Side, Suggestion
from self_review.models.diff import DiffSet
from self_review.models.review import FileReviewState, ReviewState

logger = logging.getLogger(__name__)


def utc_timestamp() -> str:
    """Current time as an ISO 8601 string with UTC offset."""
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


class ReviewSession:
    """A review of one DiffSet."""

    def __init__(self, diff_set: DiffSet):
        self.diff_set = diff_set
        self.files: tuple[FileReviewState, ...] = annotations.init_file_states(diff_set.files)

    @property
    def provenance(self):
        return self.diff_set.provenance

    @property
    def total_files(self) -> int:
        return len(self.files)

    @property
    def viewed_count(self) -> int:
        """Number of files marked as viewed."""
        return sum(1 for f in self.files if f.viewed)

    @property
    def total_comments(self) -> int:
        return sum(f.comment_count for f in self.files)

    def get_file_state(self, file_path: str) -> FileReviewState | None:
        for state in self.files:
            if state.path == file_path:
                return state
        return None

    def add_comment(
        self,
        file_path: str,
        line_range: LineRange | None,
        body: str,
        category: str | None = None,
        suggestion: Suggestion | None = None,
        attachments: list[Attachment] | None = None,
    ) -> bool:
        """Add a comment. Returns False if the file is not part of the review."""
        before = self.files
        self.files = annotations.add_comment(
            self.files, file_path, line_range, body, category, suggestion, attachments
        )
        return self.files is not before

    def add_suggestion_comment(
        self,
        file_path: str,
        line_range: LineRange,
        body: str,
        proposed_code: str,
        category: str | None = None,
    ) -> bool:
        """Add a comment proposing ``proposed_code`` for the lines in ``line_range``.

        The original code is copied from the diff; an empty string is used
        when the range is outside every hunk.
        """
        original = None
        diff_file = self.diff_set.get_file(file_path)
        if diff_file is not None:
            original = annotations.extract_original_code(diff_file, line_range)
        suggestion = Suggestion(original_code=original or "", proposed_code=proposed_code)
        return self.add_comment(file_path, line_range, body, category, suggestion)

    def update_comment(self, comment_id: str, **changes) -> bool:
        before = self.files
        self.files = annotations.update_comment(self.files, comment_id, **changes)
        return self.files is not before

    def delete_comment(self, comment_id: str) -> bool:
        before = self.files
        self.files = annotations.delete_comment(self.files, comment_id)
        return self.files is not before

    def toggle_viewed(self, file_path: str) -> bool:
        """Toggle viewed status for a file. Returns new status."""
        self.files = annotations.toggle_viewed(self.files, file_path)
        state = self.get_file_state(file_path)
        return state.viewed if state is not None else False

    def mark_viewed(self, file_path: str) -> bool:
        """Mark a file as viewed. Returns False if the file is unknown."""
        self.files = annotations.set_viewed(self.files, file_path, True)
        return self.get_file_state(file_path) is not None

    def comments_for_file(self, file_path: str) -> tuple[ReviewComment, ...]:
        return annotations.comments_for_file(self.files, file_path)

    def comments_for_line(self, file_path: str, line_number: int, side: Side) -> list[ReviewComment]:
        return annotations.comments_for_line(self.files, file_path, line_number, side)

    def seed(self, comments: list[ReviewComment]) -> list[ReviewComment]:
        """Merge previously saved comments in. Returns the orphaned ones."""
        self.files, orphans = annotations.seed_comments(self.files, comments)
        return orphans

    def resume_from(self, path: Path | str) -> list[ReviewComment]:
        """Seed comments from a saved review document.

        Returns:
            Comments whose file is not in the current diff (not seeded)

        Raises:
            ReviewDocumentError: If the document cannot be read
        """
        parsed = load_review_document(path)
        orphans = self.seed(parsed.comments)
        logger.debug(
            "Resumed %d comment(s) from %s (%d orphaned)",
            len(parsed.comments) - len(orphans),
            path,
            len(orphans),
        )
        return orphans

    def to_review_state(self, timestamp: str | None = None) -> ReviewState:
        """Snapshot the session as a ReviewState."""
        return ReviewState(
            timestamp=timestamp or utc_timestamp(),
            provenance=self.provenance,
            files=self.files,
        )

    def save(self, output_path: Path | str, timestamp: str | None = None) -> Path:
        """Write the review document.

        Raises:
            ReviewValidationError: If the document does not validate
        """
        return write_review(self.to_review_state(timestamp), output_path)
