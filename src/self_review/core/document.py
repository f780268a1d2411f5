"""Serialize a ReviewState to the review XML document.

The document is built as text (so the layout stays stable and diffable),
then parsed back with lxml and validated against the embedded schema
before it is handed out.
"""

import logging
from functools import lru_cache
from pathlib import Path

from lxml import etree

from self_review.core.schema import NAMESPACE, XSD_SCHEMA
from self_review.models.comment import Attachment, ReviewComment, Side
from self_review.models.provenance import DirectoryProvenance, GitProvenance
from self_review.models.review import FileReviewState, ReviewState

logger = logging.getLogger(__name__)

ASSETS_DIR_NAME = ".self-review-assets"


class ReviewValidationError(Exception):
    """The generated document does not conform to the schema."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        detail = "; ".join(self.errors) or "unknown error"
        super().__init__(f"Generated XML does not conform to schema: {detail}")


def escape_xml(text: str) -> str:
    """Escape ``& < > " '`` and carriage returns.

    Ampersand goes first so entities are not doubled. ``\\r`` becomes a
    character reference since XML parsers fold raw CR and CRLF into LF.
    """
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
        .replace("\r", "&#13;")
    )


@lru_cache(maxsize=1)
def _load_schema() -> etree.XMLSchema:
    return etree.XMLSchema(etree.fromstring(XSD_SCHEMA.encode("utf-8")))


def validation_errors(schema: etree.XMLSchema, xml: str) -> list[str]:
    """Validate ``xml`` and return the error messages (empty when valid)."""
    try:
        document = etree.fromstring(xml.encode("utf-8"))
    except etree.XMLSyntaxError as e:
        return [str(e)]
    if schema.validate(document):
        return []
    return [f"line {err.line}: {err.message}" for err in schema.error_log]


class AssetWriter:
    """Writes attachment bytes into the asset directory next to a document.

    The directory is only created once there is something to write. With
    ``dry_run`` nothing touches the disk and every attachment gets the path
    it would be written to.
    """

    def __init__(self, document_dir: Path, dry_run: bool = False):
        self.assets_dir = document_dir / ASSETS_DIR_NAME
        self.dry_run = dry_run
        self._created = False

    def write(self, comment_id: str, index: int, attachment: Attachment) -> str | None:
        """Store the attachment and return its document-relative path.

        Returns None (after logging) if the file could not be written.
        """
        name = f"{comment_id}-{index}.{attachment.extension}"
        if self.dry_run:
            return f"{ASSETS_DIR_NAME}/{name}"
        try:
            if not self._created:
                self.assets_dir.mkdir(parents=True, exist_ok=True)
                self._created = True
            (self.assets_dir / name).write_bytes(attachment.data)
        except OSError as e:
            logger.warning("Could not write attachment %s: %s", name, e)
            return None
        return f"{ASSETS_DIR_NAME}/{name}"


def _root_attributes(state: ReviewState) -> str:
    attrs = [f'xmlns="{NAMESPACE}"', f'timestamp="{escape_xml(state.timestamp)}"']
    provenance = state.provenance
    if isinstance(provenance, GitProvenance):
        attrs.append(f'git-diff-args="{escape_xml(provenance.git_diff_args)}"')
        attrs.append(f'repository="{escape_xml(provenance.repository)}"')
    elif isinstance(provenance, DirectoryProvenance):
        attrs.append(f'source-path="{escape_xml(provenance.source_path)}"')
    return " ".join(attrs)


def _comment_lines(comment: ReviewComment, assets: AssetWriter) -> list[str]:
    attrs = ""
    if comment.line_range is not None:
        prefix = "old" if comment.line_range.side == Side.OLD else "new"
        attrs = (
            f' {prefix}-line-start="{comment.line_range.start}"'
            f' {prefix}-line-end="{comment.line_range.end}"'
        )

    lines = [f"    <comment{attrs}>"]
    lines.append(f"      <body>{escape_xml(comment.body)}</body>")

    if comment.category:
        lines.append(f"      <category>{escape_xml(comment.category)}</category>")

    if comment.suggestion is not None:
        lines.append("      <suggestion>")
        lines.append(
            f"        <original-code>{escape_xml(comment.suggestion.original_code)}</original-code>"
        )
        lines.append(
            f"        <proposed-code>{escape_xml(comment.suggestion.proposed_code)}</proposed-code>"
        )
        lines.append("      </suggestion>")

    for index, attachment in enumerate(comment.attachments or ()):
        if attachment.data is not None:
            path = assets.write(comment.id, index, attachment)
            if path is None:
                continue
        else:
            path = attachment.file_name
        lines.append(
            f'      <attachment path="{escape_xml(path)}"'
            f' media-type="{escape_xml(attachment.media_type)}" />'
        )

    lines.append("    </comment>")
    return lines


def _file_lines(file: FileReviewState, assets: AssetWriter) -> list[str]:
    attrs = (
        f'path="{escape_xml(file.path)}"'
        f' change-type="{file.change_type.value}"'
        f' viewed="{"true" if file.viewed else "false"}"'
    )
    if not file.comments:
        return [f"  <file {attrs} />"]

    lines = [f"  <file {attrs}>"]
    for comment in file.comments:
        lines.extend(_comment_lines(comment, assets))
    lines.append("  </file>")
    return lines


def build_review_xml(state: ReviewState, assets: AssetWriter) -> str:
    """Render the document text without validating it."""
    lines = ['<?xml version="1.0" encoding="UTF-8"?>']
    lines.append(f"<review {_root_attributes(state)}>")
    for file in state.files:
        lines.extend(_file_lines(file, assets))
    lines.append("</review>")
    return "\n".join(lines)


def serialize_review(state: ReviewState, output_path: Path | str | None = None) -> str:
    """Serialize a review and validate it against the schema.

    Args:
        state: The review to serialize
        output_path: Where the document will be written; attachment bytes
            go to the asset directory beside it (the working directory
            when omitted)

    Returns:
        The XML document text

    Raises:
        ReviewValidationError: If the document does not validate
    """
    document_dir = Path(output_path).parent if output_path is not None else Path.cwd()

    try:
        schema = _load_schema()
    except etree.LxmlError as e:
        logger.warning("Schema validator unavailable, returning unvalidated review: %s", e)
        return build_review_xml(state, AssetWriter(document_dir))

    # Validate before any attachment is written so a rejected save leaves no files
    errors = validation_errors(schema, build_review_xml(state, AssetWriter(document_dir, dry_run=True)))
    if errors:
        logger.error("Review XML failed validation:")
        for error in errors:
            logger.error("  %s", error)
        raise ReviewValidationError(errors)

    return build_review_xml(state, AssetWriter(document_dir))


def write_review(state: ReviewState, output_path: Path | str) -> Path:
    """Serialize a review and write it to ``output_path``.

    Returns:
        Path where the review was saved
    """
    path = Path(output_path)
    xml = serialize_review(state, path)
    with open(path, "w", encoding="utf-8") as f:
        f.write(xml)
        f.write("\n")
    return path
