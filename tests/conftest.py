"""
Shared fixtures for self-review tests.

Sample diff texts live in tests/samples.py.
"""

import pytest

from self_review.models import (
    ChangeType,
    FileReviewState,
    GitProvenance,
    LineRange,
    ReviewComment,
    ReviewState,
    Side,
    Suggestion,
)
from tests.samples import TIMESTAMP


@pytest.fixture
def review_state():
    """A git review with one commented file and one untouched file."""
    comments = (
        ReviewComment(
            file_path="src/app.py",
            line_range=LineRange(side=Side.NEW, start=2, end=3),
            body="Is json needed here?",
            category="question",
        ),
        ReviewComment(
            file_path="src/app.py",
            body="Whole-file note",
        ),
        ReviewComment(
            file_path="src/app.py",
            line_range=LineRange.single(Side.OLD, 2),
            body="Keep this import",
            suggestion=Suggestion(original_code="import sys", proposed_code="import sys  # noqa"),
        ),
    )
    return ReviewState(
        timestamp=TIMESTAMP,
        provenance=GitProvenance(git_diff_args="--staged", repository="/home/dev/project"),
        files=(
            FileReviewState(
                path="src/app.py",
                change_type=ChangeType.MODIFIED,
                viewed=True,
                comments=comments,
            ),
            FileReviewState(path="new_name.py", change_type=ChangeType.RENAMED),
        ),
    )
