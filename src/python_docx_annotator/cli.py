"""Command-line interface for python-docx-annotator.

Provides commands for attaching comments and tracked-change suggestions to
Word documents from the terminal.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer

from . import Document, __version__
from .models.change import TextSearchPosition
from .operations.batch import load_changes

app = typer.Typer(
    name="docx-annotator",
    help="Annotate Word documents with comments and tracked changes.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"docx-annotator version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", help="Log each located change and fallback.")
    ] = False,
) -> None:
    """Annotate Word documents with comments and tracked changes."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command()
def apply(
    file: Annotated[Path, typer.Argument(help="Path to the .docx file")],
    changes: Annotated[
        str | None, typer.Option("--changes", "-c", help="Inline JSON array of changes")
    ] = None,
    changes_file: Annotated[
        Path | None,
        typer.Option("--changes-file", "-f", help="JSON or YAML file with the changes"),
    ] = None,
    author: Annotated[
        str | None, typer.Option("--author", help="Author name for comments and revisions")
    ] = None,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
) -> None:
    """Apply a list of comments and suggestions, then save once."""
    if changes is None and changes_file is None:
        typer.echo("Error: Must specify either --changes or --changes-file", err=True)
        raise typer.Exit(1)
    if changes is not None and changes_file is not None:
        typer.echo("Error: Cannot specify both --changes and --changes-file", err=True)
        raise typer.Exit(1)

    try:
        change_list = load_changes(changes if changes is not None else changes_file)
        output_path = output or file
        with Document(str(file), author=author) as doc:
            results = doc.apply_changes(change_list)
            doc.save(str(output_path))
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    for result in results:
        typer.echo(str(result))
    typer.echo(f"Applied {len(results)} change(s) and saved to {output_path}")


@app.command()
def locate(
    file: Annotated[Path, typer.Argument(help="Path to the .docx file")],
    search: Annotated[str, typer.Option("--search", "-s", help="Text to find")],
    occurrence: Annotated[int, typer.Option("--occurrence", "-n", help="Which occurrence")] = 1,
    case_sensitive: Annotated[
        bool, typer.Option("--case-sensitive", help="Match case exactly")
    ] = False,
    end_search: Annotated[
        str | None, typer.Option("--end-search", help="Text marking the end of the range")
    ] = None,
    end_occurrence: Annotated[
        int, typer.Option("--end-occurrence", help="Which occurrence of the end text")
    ] = 1,
) -> None:
    """Show where a search would land, without modifying the file."""
    try:
        position = TextSearchPosition(
            search_text=search,
            occurrence=occurrence,
            case_sensitive=case_sensitive,
            end_search_text=end_search,
            end_occurrence=end_occurrence,
        )
        with Document(str(file)) as doc:
            result = doc.locate(position)
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Tier: {result.tier.value}")
    typer.echo(f"Offsets: [{result.start_offset}, {result.end_offset})")
    typer.echo(f"Matched: {result.matched_text!r}")


@app.command()
def comments(
    file: Annotated[Path, typer.Argument(help="Path to the .docx file")],
) -> None:
    """List the comments in a document."""
    try:
        with Document(str(file)) as doc:
            records = doc.comments
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if not records:
        typer.echo("No comments.")
        return
    for comment in records:
        typer.echo(f"[{comment.id}] {comment.author}: {comment.text}")
        if comment.marked_text:
            typer.echo(f"    on: {comment.marked_text!r}")


@app.command()
def info(
    file: Annotated[Path, typer.Argument(help="Path to the .docx file")],
) -> None:
    """Show paragraph, comment and tracked-change counts."""
    try:
        with Document(str(file)) as doc:
            paragraphs = len(doc.paragraphs)
            comment_count = len(doc.comments)
            changes = doc.tracked_changes
            tracking = doc.tracking_enabled
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    insertions = sum(1 for c in changes if c.is_insertion)
    deletions = sum(1 for c in changes if c.is_deletion)
    typer.echo(f"Document: {file}")
    typer.echo(f"Paragraphs: {paragraphs}")
    typer.echo(f"Comments: {comment_count}")
    typer.echo(f"Tracked changes: {len(changes)} ({insertions} insertions, {deletions} deletions)")
    typer.echo(f"Tracking enabled: {'yes' if tracking else 'no'}")


if __name__ == "__main__":
    app()
