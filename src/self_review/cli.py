"""Command-line interface for self-review."""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.text import Text

from self_review.config import AppConfig, filter_ignored, load_config
from self_review.core.diff_source import GitError, get_diff_source
from self_review.core.document import ReviewValidationError, serialize_review
from self_review.core.document_parser import ReviewDocumentError, load_review_document
from self_review.core.session import ReviewSession
from self_review.models.comment import LineRange, Side
from self_review.models.diff import DiffFile, DiffSet

# Passes unknown options such as --staged through to git diff
DIFF_ARGS_SETTINGS = {"ignore_unknown_options": True}

STATUS_COLORS = {
    "modified": "yellow",
    "added": "green",
    "deleted": "red",
    "renamed": "blue",
}


def _load_diff(config: AppConfig, directory: Path | None, git_args: tuple[str, ...]) -> DiffSet:
    diff_args = list(git_args) or config.diff_args
    source = get_diff_source(
        repo_path=Path.cwd(),
        diff_args=diff_args,
        directory=directory,
        include_untracked=config.show_untracked,
    )
    try:
        diff_set = source.get_diff()
    except GitError as e:
        raise click.ClickException(f"Failed to load diff: {e}")
    diff_set.files = filter_ignored(diff_set.files, config.ignore)
    return diff_set


def _resume(session: ReviewSession, path: Path) -> None:
    try:
        orphans = session.resume_from(path)
    except ReviewDocumentError as e:
        raise click.ClickException(str(e))
    if orphans:
        click.echo(
            f"Warning: {len(orphans)} comment(s) refer to files not in this diff and were dropped",
            err=True,
        )


def _save(session: ReviewSession, output: str) -> None:
    try:
        if output == "-":
            click.echo(serialize_review(session.to_review_state()))
        else:
            path = session.save(output)
            click.echo(
                f"Saved review to {path} "
                f"({session.total_comments} comments, {session.viewed_count}/{session.total_files} viewed)",
                err=True,
            )
    except ReviewValidationError as e:
        raise click.ClickException(str(e))


def _parse_lines(value: str) -> tuple[int, int]:
    start, sep, end = value.partition("-")
    try:
        return (int(start), int(end)) if sep else (int(start), int(start))
    except ValueError:
        raise click.BadParameter(f"expected N or START-END, got {value!r}", param_hint="--lines")


def _format_file(file: DiffFile, session: ReviewSession) -> Text:
    """Format a file row with colored status."""
    state = session.get_file_state(file.path)
    viewed = state.viewed if state else False
    comment_count = state.comment_count if state else 0

    label = Text()
    label.append("✓ " if viewed else "○ ")
    label.append(file.change_type.letter, style=STATUS_COLORS.get(file.change_type.value, "white"))
    label.append(f" {file.path}")
    if file.is_untracked:
        label.append(" (untracked)", style="cyan")
    if comment_count > 0:
        label.append(f" ({comment_count})", style="magenta")
    if file.is_binary:
        label.append(" binary", style="dim")
    else:
        label.append(f" +{file.added_lines}", style="green")
        label.append("/")
        label.append(f"-{file.removed_lines}", style="red")
    return label


@click.group()
@click.version_option(package_name="self-review")
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx: click.Context, verbose: bool):
    """self-review - review a git diff (or a directory) and save comments as XML.

    Arguments after the options are passed to git diff. With none, the
    default-diff-args from .self-review.yaml are used, else plain git diff.

    Examples:

        self-review files --staged
        self-review review main..feature -o review.xml
        self-review comment src/app.py --lines 10-12 --body "Needs a test"
        self-review show review.xml
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    ctx.obj = load_config()


@cli.command(context_settings=DIFF_ARGS_SETTINGS)
@click.option("--dir", "directory", type=click.Path(exists=True, path_type=Path), help="Review a directory (or file) as all-new files")
@click.option("--resume-from", type=click.Path(exists=True, path_type=Path), help="Show viewed flags and comment counts from a saved review")
@click.argument("git_args", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
def files(config: AppConfig, directory: Path | None, resume_from: Path | None, git_args: tuple[str, ...]):
    """List the files in the diff."""
    diff_set = _load_diff(config, directory, git_args)
    if not diff_set.files:
        click.echo("No changes to review.")
        return

    session = ReviewSession(diff_set)
    if resume_from is not None:
        _resume(session, resume_from)

    console = Console()
    console.print(Text(diff_set.provenance.description, style="bold"))
    for file in diff_set.files:
        console.print(_format_file(file, session))
    console.print(
        f"{len(diff_set.files)} files, "
        f"[green]+{diff_set.total_added}[/green]/[red]-{diff_set.total_removed}[/red]"
    )


@cli.command(context_settings=DIFF_ARGS_SETTINGS)
@click.option("--dir", "directory", type=click.Path(exists=True, path_type=Path), help="Review a directory (or file) as all-new files")
@click.option("--resume-from", type=click.Path(exists=True, path_type=Path), help="Carry over comments from a previous review")
@click.option("--output", "-o", help="Output file, '-' for stdout (default: output-file from config)")
@click.option("--viewed", multiple=True, help="Mark a file as viewed (repeatable)")
@click.argument("git_args", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
def review(
    config: AppConfig,
    directory: Path | None,
    resume_from: Path | None,
    output: str | None,
    viewed: tuple[str, ...],
    git_args: tuple[str, ...],
):
    """Write a review document for the diff."""
    session = ReviewSession(_load_diff(config, directory, git_args))
    if resume_from is not None:
        _resume(session, resume_from)

    for path in viewed:
        if not session.mark_viewed(path):
            raise click.ClickException(f"{path} is not part of the diff")

    _save(session, output or config.output_file)


@cli.command(context_settings=DIFF_ARGS_SETTINGS)
@click.argument("path")
@click.option("--body", "-m", required=True, help="Comment text")
@click.option("--line", "line_no", type=int, help="Single line number")
@click.option("--lines", "-l", "line_spec", help="Line N or range START-END (omit both for a file-level comment)")
@click.option("--old", is_flag=True, help="Line numbers refer to the old side of the diff")
@click.option("--category", "-c", help="Comment category")
@click.option("--suggest", help="Proposed replacement code for the selected lines")
@click.option("--dir", "directory", type=click.Path(exists=True, path_type=Path), help="Review a directory (or file) as all-new files")
@click.option("--resume-from", type=click.Path(exists=True, path_type=Path), help="Review to add to (default: the output file, if it exists)")
@click.option("--output", "-o", help="Output file, '-' for stdout (default: output-file from config)")
@click.argument("git_args", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
def comment(
    config: AppConfig,
    path: str,
    body: str,
    line_no: int | None,
    line_spec: str | None,
    old: bool,
    category: str | None,
    suggest: str | None,
    directory: Path | None,
    resume_from: Path | None,
    output: str | None,
    git_args: tuple[str, ...],
):
    """Add a comment on PATH and save the review."""
    output = output or config.output_file
    if resume_from is None and output != "-" and Path(output).exists():
        resume_from = Path(output)

    if line_no is not None and line_spec is not None:
        raise click.UsageError("--line and --lines are mutually exclusive")

    line_range = None
    if line_no is not None or line_spec is not None:
        start, end = (line_no, line_no) if line_no is not None else _parse_lines(line_spec)
        try:
            line_range = LineRange(side=Side.OLD if old else Side.NEW, start=start, end=end)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--lines")
    if suggest is not None and line_range is None:
        raise click.UsageError("--suggest needs --lines")

    if category and config.categories and category not in config.category_names:
        click.echo(f"Warning: category {category!r} is not configured", err=True)

    session = ReviewSession(_load_diff(config, directory, git_args))
    if resume_from is not None:
        _resume(session, resume_from)

    if suggest is not None:
        added = session.add_suggestion_comment(path, line_range, body, suggest, category)
    else:
        added = session.add_comment(path, line_range, body, category)
    if not added:
        raise click.ClickException(f"{path} is not part of the diff")

    _save(session, output)


@cli.command()
@click.argument("review_file", type=click.Path(exists=True, path_type=Path))
def show(review_file: Path):
    """List the comments in a saved review."""
    try:
        parsed = load_review_document(review_file)
    except ReviewDocumentError as e:
        raise click.ClickException(str(e))

    console = Console()
    console.print(Text(parsed.provenance.description, style="bold"))
    if not parsed.comments:
        console.print("No comments.")
        return
    for number, c in enumerate(parsed.comments, 1):
        line = Text(f"{number}. ")
        if c.category:
            line.append(f"[{c.category.upper()}] ", style="magenta")
        line.append(c.location, style="cyan")
        line.append(f" - {c.body}")
        console.print(line)
        if c.suggestion is not None:
            console.print(Text(f"   suggest: {c.suggestion.proposed_code}", style="green"))


if __name__ == "__main__":
    cli()
