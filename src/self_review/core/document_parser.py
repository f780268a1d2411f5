"""Parse a saved review XML document back into comments.

Reading is lenient (no schema validation): only a missing ``<review>`` root
or XML that does not parse at all is an error. Comment ids are not stored
in the document, so every parsed comment gets a new one.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from lxml import etree

from self_review.models.comment import (
    Attachment,
    LineRange,
    ReviewComment,
    Side,
    Suggestion,
)
from self_review.models.provenance import (
    DirectoryProvenance,
    GitProvenance,
    Provenance,
    WelcomeProvenance,
)

logger = logging.getLogger(__name__)


class ReviewDocumentError(ValueError):
    """The review document cannot be read or has no ``<review>`` root."""


@dataclass
class ParsedReview:
    """Comments and provenance recovered from a review document."""

    comments: list[ReviewComment]
    provenance: Provenance

    @property
    def git_diff_args(self) -> str:
        if isinstance(self.provenance, GitProvenance):
            return self.provenance.git_diff_args
        return ""


def _local_name(element) -> str | None:
    # Comments and processing instructions have non-string tags
    if not isinstance(element.tag, str):
        return None
    return etree.QName(element).localname


def _children(element, name: str) -> list:
    return [child for child in element if _local_name(child) == name]


def _child_text(element, name: str) -> str:
    found = _children(element, name)
    if not found:
        return ""
    return found[0].text or ""


def _parse_provenance(root) -> Provenance:
    source_path = root.get("source-path")
    if source_path is not None:
        return DirectoryProvenance(source_path=source_path)
    git_diff_args = root.get("git-diff-args")
    repository = root.get("repository")
    if git_diff_args is not None or repository is not None:
        return GitProvenance(git_diff_args=git_diff_args or "", repository=repository or "")
    return WelcomeProvenance()


def _parse_line_range(comment) -> LineRange | None:
    for side in (Side.OLD, Side.NEW):
        start = comment.get(f"{side.value}-line-start")
        end = comment.get(f"{side.value}-line-end")
        if start is None or end is None:
            continue
        try:
            return LineRange(side=side, start=int(start), end=int(end))
        except ValueError:
            logger.debug("Ignoring invalid %s line range %r-%r", side.value, start, end)
    return None


def _parse_suggestion(comment) -> Suggestion | None:
    found = _children(comment, "suggestion")
    if not found:
        return None
    return Suggestion(
        original_code=_child_text(found[0], "original-code"),
        proposed_code=_child_text(found[0], "proposed-code"),
    )


def _parse_attachments(comment) -> tuple[Attachment, ...] | None:
    attachments = tuple(
        Attachment(
            file_name=element.get("path", ""),
            media_type=element.get("media-type", ""),
        )
        for element in _children(comment, "attachment")
    )
    return attachments or None


def parse_review_document(text: str | bytes) -> ParsedReview:
    """Parse review XML text.

    Args:
        text: Document contents

    Returns:
        ParsedReview with one comment per ``<comment>`` element, each with
        a freshly generated id

    Raises:
        ReviewDocumentError: If the text is not XML or lacks a ``<review>`` root
    """
    data = text.encode("utf-8") if isinstance(text, str) else text
    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    try:
        root = etree.fromstring(data, parser=parser)
    except etree.XMLSyntaxError as e:
        logger.error("Error parsing review XML: %s", e)
        raise ReviewDocumentError(f"Invalid XML: {e}") from e

    if root is None or _local_name(root) != "review":
        logger.error("Error parsing review XML: missing <review> root element")
        raise ReviewDocumentError("Invalid XML: missing <review> root element")

    comments = []
    for file in _children(root, "file"):
        file_path = file.get("path")
        if not file_path:
            continue
        for comment in _children(file, "comment"):
            comments.append(
                ReviewComment(
                    file_path=file_path,
                    line_range=_parse_line_range(comment),
                    body=_child_text(comment, "body"),
                    category=_child_text(comment, "category"),
                    suggestion=_parse_suggestion(comment),
                    attachments=_parse_attachments(comment),
                )
            )

    logger.debug("Parsed %d comment(s) from review document", len(comments))
    return ParsedReview(comments=comments, provenance=_parse_provenance(root))


def load_review_document(path: Path | str) -> ParsedReview:
    """Read and parse a review document from disk."""
    try:
        with open(path, "rb") as f:
            content = f.read()
    except OSError as e:
        logger.error("Error reading review file %s: %s", path, e)
        raise ReviewDocumentError(f"Cannot read {path}: {e}") from e
    return parse_review_document(content)
