"""
Tests for the data models.
"""

import dataclasses

import pytest

from self_review.models import (
    Attachment,
    ChangeType,
    DiffHunk,
    DirectoryProvenance,
    FileReviewState,
    GitProvenance,
    LineRange,
    ReviewComment,
    ReviewState,
    Side,
    WelcomeProvenance,
)


class TestLineRange:
    """Test line ranges."""

    def test_start_after_end_rejected(self):
        with pytest.raises(ValueError):
            LineRange(side=Side.NEW, start=5, end=4)

    def test_single(self):
        line_range = LineRange.single(Side.OLD, 7)
        assert (line_range.start, line_range.end) == (7, 7)
        assert line_range.is_single_line

    def test_contains_checks_side(self):
        line_range = LineRange(side=Side.NEW, start=3, end=5)
        assert line_range.contains(3, Side.NEW)
        assert line_range.contains(5, Side.NEW)
        assert not line_range.contains(6, Side.NEW)
        assert not line_range.contains(4, Side.OLD)

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            LineRange.single(Side.NEW, 1).start = 2


class TestReviewComment:
    """Test comment helpers."""

    @pytest.mark.parametrize(
        "line_range, location, short",
        [
            (None, "a.py", "file"),
            (LineRange.single(Side.NEW, 4), "a.py:4", "L4"),
            (LineRange(Side.NEW, 4, 9), "a.py:4-9", "L4-9"),
            (LineRange(Side.OLD, 2, 3), "a.py:~2-3", "~L2-3"),
        ],
    )
    def test_location(self, line_range, location, short):
        comment = ReviewComment(file_path="a.py", body="x", line_range=line_range)
        assert comment.location == location
        assert comment.location_short == short

    def test_file_level_never_covers_lines(self):
        comment = ReviewComment(file_path="a.py", body="x")
        assert comment.is_file_level
        assert not comment.covers_line(1, Side.NEW)

    def test_ids_are_unique(self):
        assert ReviewComment(file_path="a", body="").id != ReviewComment(file_path="a", body="").id


class TestAttachment:
    """Test attachment file extensions."""

    @pytest.mark.parametrize(
        "media_type, extension",
        [("image/png", "png"), ("image/svg+xml", "svg"), ("image/webp", "webp"), ("", "png")],
    )
    def test_extension(self, media_type, extension):
        assert Attachment(file_name="f", media_type=media_type).extension == extension


class TestDiffModels:
    """Test diff model helpers."""

    def test_hunk_section(self):
        hunk = DiffHunk(header="@@ -1,2 +1,3 @@ class Foo:", old_start=1, old_lines=2, new_start=1, new_lines=3)
        assert hunk.section == "class Foo:"

    def test_hunk_without_section(self):
        hunk = DiffHunk(header="@@ -1 +1 @@", old_start=1, old_lines=1, new_start=1, new_lines=1)
        assert hunk.section == ""

    def test_change_type_letter(self):
        assert [c.letter for c in ChangeType] == ["A", "M", "D", "R"]


class TestReviewState:
    """Test review state aggregates."""

    def test_counts(self):
        comment = ReviewComment(file_path="a.py", body="x")
        state = ReviewState(
            timestamp="2026-01-01T00:00:00+00:00",
            files=(
                FileReviewState(path="a.py", viewed=True, comments=(comment,)),
                FileReviewState(path="b.py"),
            ),
        )
        assert state.all_comments == [comment]
        assert state.viewed_count == 1
        assert state.files[0].comment_count == 1

    def test_provenance_descriptions(self):
        assert GitProvenance(git_diff_args="", repository="/r").description == "git diff (working tree)"
        assert GitProvenance(git_diff_args="--staged", repository="/r").description == "git diff --staged"
        assert DirectoryProvenance(source_path="/src").description == "directory /src"
        assert WelcomeProvenance().description == "no source"
