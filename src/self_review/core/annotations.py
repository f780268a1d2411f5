"""Pure state transitions over a review's file states.

Every mutator takes the current ``tuple[FileReviewState, ...]`` and returns
the next one. Nothing is modified in place:

- the outer tuple is rebuilt whenever something changes;
- only the touched ``FileReviewState`` is replaced, every other entry is the
  same object as before;
- when nothing matches, the input tuple itself is returned, so ``new is old``
  tells a caller that the call was a no-op.
"""

import dataclasses
import logging
from collections.abc import Callable, Iterable

from self_review.models.comment import (
    Attachment,
    LineRange,
    ReviewComment,
    Side,
    Suggestion,
)
from self_review.models.diff import DiffFile
from self_review.models.review import FileReviewState

logger = logging.getLogger(__name__)

FileStates = tuple[FileReviewState, ...]


def init_file_states(diff_files: Iterable[DiffFile]) -> FileStates:
    """One unviewed, comment-free state per diff file."""
    return tuple(
        FileReviewState(path=f.path, change_type=f.change_type)
        for f in diff_files
    )


def _replace_file(
    files: FileStates,
    match: Callable[[FileReviewState], bool],
    update: Callable[[FileReviewState], FileReviewState],
) -> FileStates:
    """Replace the states selected by ``match`` with ``update(state)``."""
    changed = False
    result = []
    for state in files:
        if match(state):
            new_state = update(state)
            changed = changed or new_state is not state
            result.append(new_state)
        else:
            result.append(state)
    return tuple(result) if changed else files


def add_comment(
    files: FileStates,
    file_path: str,
    line_range: LineRange | None,
    body: str,
    category: str | None = None,
    suggestion: Suggestion | None = None,
    attachments: Iterable[Attachment] | None = None,
) -> FileStates:
    """Append a new comment (with a fresh id) to the file at ``file_path``.

    Unknown paths are ignored.
    """
    comment = ReviewComment(
        file_path=file_path,
        line_range=line_range,
        body=body,
        category=category,
        suggestion=suggestion,
        attachments=tuple(attachments) if attachments is not None else None,
    )
    return _replace_file(
        files,
        lambda state: state.path == file_path,
        lambda state: dataclasses.replace(state, comments=state.comments + (comment,)),
    )


def update_comment(files: FileStates, comment_id: str, **changes) -> FileStates:
    """Merge ``changes`` into the comment with ``comment_id``.

    Fields not named in ``changes`` keep their values; the id and the
    file path cannot be changed, so a comment never leaves its file.
    """
    changes.pop("id", None)
    changes.pop("file_path", None)
    if "attachments" in changes and changes["attachments"] is not None:
        changes["attachments"] = tuple(changes["attachments"])

    def update(state: FileReviewState) -> FileReviewState:
        if not any(c.id == comment_id for c in state.comments):
            return state
        comments = tuple(
            dataclasses.replace(c, **changes) if c.id == comment_id else c
            for c in state.comments
        )
        return dataclasses.replace(state, comments=comments)

    return _replace_file(files, lambda state: True, update)


def delete_comment(files: FileStates, comment_id: str) -> FileStates:
    """Remove the comment with ``comment_id``; unknown ids are ignored."""

    def update(state: FileReviewState) -> FileReviewState:
        comments = tuple(c for c in state.comments if c.id != comment_id)
        if len(comments) == len(state.comments):
            return state
        return dataclasses.replace(state, comments=comments)

    return _replace_file(files, lambda state: True, update)


def toggle_viewed(files: FileStates, file_path: str) -> FileStates:
    """Flip the viewed flag of the file at ``file_path``."""
    return _replace_file(
        files,
        lambda state: state.path == file_path,
        lambda state: dataclasses.replace(state, viewed=not state.viewed),
    )


def set_viewed(files: FileStates, file_path: str, viewed: bool = True) -> FileStates:
    """Set the viewed flag explicitly (a no-op if already set)."""
    return _replace_file(
        files,
        lambda state: state.path == file_path and state.viewed != viewed,
        lambda state: dataclasses.replace(state, viewed=viewed),
    )


def comments_for_file(files: FileStates, file_path: str) -> tuple[ReviewComment, ...]:
    for state in files:
        if state.path == file_path:
            return state.comments
    return ()


def comments_for_line(
    files: FileStates, file_path: str, line_number: int, side: Side
) -> list[ReviewComment]:
    """Comments on ``side`` whose range includes ``line_number``.

    File-level comments never match a line.
    """
    return [
        c
        for c in comments_for_file(files, file_path)
        if c.covers_line(line_number, side)
    ]


def find_comment(files: FileStates, comment_id: str) -> ReviewComment | None:
    for state in files:
        for comment in state.comments:
            if comment.id == comment_id:
                return comment
    return None


def seed_comments(
    files: FileStates, comments: Iterable[ReviewComment]
) -> tuple[FileStates, list[ReviewComment]]:
    """Attach previously saved comments to the files they belong to.

    Comments are matched by ``file_path``. Returns the new file states and
    the comments whose file is no longer part of the diff.
    """
    by_path: dict[str, list[ReviewComment]] = {}
    for comment in comments:
        by_path.setdefault(comment.file_path, []).append(comment)

    known = {state.path for state in files}
    orphans = [c for path, group in by_path.items() if path not in known for c in group]
    for comment in orphans:
        logger.warning(
            "Dropping resumed comment on %s: file is not in the current diff",
            comment.location,
        )

    seeded = _replace_file(
        files,
        lambda state: state.path in by_path,
        lambda state: dataclasses.replace(
            state, comments=state.comments + tuple(by_path[state.path])
        ),
    )
    return seeded, orphans


def extract_original_code(diff_file: DiffFile, line_range: LineRange) -> str | None:
    """Diff content at ``line_range`` on its side, joined with newlines.

    Returns None when no diff line falls inside the range.
    """
    lines = []
    for hunk in diff_file.hunks:
        for line in hunk.lines:
            line_no = line.old_line_no if line_range.side == Side.OLD else line.new_line_no
            if line_no is not None and line_range.start <= line_no <= line_range.end:
                lines.append(line.content)
    return "\n".join(lines) if lines else None
