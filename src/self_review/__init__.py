"""self-review: review a diff, leave line comments, save them as XML."""

from self_review.core.annotations import (
    add_comment,
    comments_for_file,
    comments_for_line,
    delete_comment,
    init_file_states,
    seed_comments,
    set_viewed,
    toggle_viewed,
    update_comment,
)
from self_review.core.diff_parser import parse_diff
from self_review.core.document import ReviewValidationError, serialize_review, write_review
from self_review.core.document_parser import (
    ReviewDocumentError,
    load_review_document,
    parse_review_document,
)
from self_review.core.synthetic import generate_synthetic_diff

__all__ = [
    "ReviewDocumentError",
    "ReviewValidationError",
    "add_comment",
    "comments_for_file",
    "comments_for_line",
    "delete_comment",
    "generate_synthetic_diff",
    "init_file_states",
    "load_review_document",
    "parse_diff",
    "parse_review_document",
    "seed_comments",
    "serialize_review",
    "set_viewed",
    "toggle_viewed",
    "update_comment",
    "write_review",
]
