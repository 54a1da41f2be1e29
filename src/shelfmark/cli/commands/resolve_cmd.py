# ABOUTME: The `shelfmark resolve` command for batch metadata correction.
# ABOUTME: Resolves each EPUB's ISBN against every source and writes corrected copies.

import logging
from collections import Counter
from pathlib import Path

import click
from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeRemainingColumn,
)

from shelfmark.cli.commands.identify_cmd import make_arbiter
from shelfmark.cli.options import quiet_option, schedule_dir_option
from shelfmark.core.batch import StopRequest, run_batch
from shelfmark.core.pipeline import apply_metadata_safely
from shelfmark.core.resolver import ResolutionContext, default_sources, resolve_isbn
from shelfmark.formats.epub import EpubReadError, read_epub_metadata
from shelfmark.metadata.provider import CandidateSource
from shelfmark.metadata.reconcile import UnresolvedMetadataError

logger = logging.getLogger(__name__)


def _create_sources() -> list[CandidateSource]:
    """Create the default candidate sources."""
    return default_sources()


def _find_epubs(path: Path) -> list[Path]:
    """Find EPUB files at the given path (single file or directory)."""
    if path.is_file():
        return [path]
    return sorted(path.rglob("*.epub"))


def _make_progress(console: Console) -> Progress:
    """Create a Rich progress bar for batch processing."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[bold]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeRemainingColumn(),
        console=console,
    )


@click.command()
@click.argument("path", type=click.Path(exists=True, path_type=Path))
@click.option(
    "-o",
    "--output-dir",
    type=click.Path(path_type=Path),
    default=None,
    help="Directory for corrected copies (default: ./shelfmark-output).",
)
@quiet_option
@click.option(
    "--use-embedded",
    is_flag=True,
    default=False,
    help="Count the EPUB's own title and authors as one more source.",
)
@schedule_dir_option
def resolve(
    path: Path,
    output_dir: Path | None,
    quiet: bool,
    use_embedded: bool,
    schedule_dir: Path | None,
) -> None:
    """Resolve metadata for EPUBs by ISBN and write corrected copies."""
    console = Console()

    if output_dir is None:
        output_dir = Path("shelfmark-output")

    epubs = _find_epubs(path)
    if not epubs:
        console.print("[yellow]No EPUB files found.[/yellow]")
        return

    context = ResolutionContext.create(schedule_dir, _create_sources())
    arbiter = make_arbiter(quiet, console)
    counts: Counter[str] = Counter()
    total = len(epubs)

    progress = _make_progress(console)
    task_id = progress.add_task("Resolving", total=total)

    def process(epub_path: Path) -> None:
        progress.update(task_id, description=epub_path.name)
        if not quiet:
            progress.stop()
            console.print(
                f"\n[bold][{progress.tasks[task_id].completed + 1}/{total}] "
                f"Processing:[/bold] {epub_path.name}"
            )
        try:
            outcome = _resolve_one(epub_path)
        finally:
            progress.advance(task_id)
            if not quiet:
                progress.start()
        logger.info("%s: %s", epub_path, outcome)
        counts[outcome] += 1

    def _resolve_one(epub_path: Path) -> str:
        try:
            extracted = read_epub_metadata(epub_path)
        except EpubReadError as exc:
            if not quiet:
                console.print(f"  [red]Error reading:[/red] {exc}")
            return "errors"

        if not extracted.isbn:
            if not quiet:
                console.print("  [yellow]No ISBN found.[/yellow]")
            return "skipped"

        embedded = extracted.as_source_record() if use_embedded else None
        try:
            record = resolve_isbn(extracted.isbn, context, arbiter, embedded=embedded)
        except UnresolvedMetadataError as exc:
            if not quiet:
                console.print(f"  [yellow]{exc}[/yellow]")
            return "skipped"

        write_result = apply_metadata_safely(epub_path, record, output_dir)
        if not write_result.success:
            if not quiet:
                console.print(f"  [red]Write failed:[/red] {write_result.error}")
            return "errors"
        if not quiet:
            console.print(f"  [green]Written:[/green] {write_result.path}")
            if record.subject:
                console.print(f"  [dim]Subject:[/dim] {record.subject}")
        return "written"

    progress.start()
    with StopRequest() as stop:
        result = run_batch(epubs, process, should_stop=stop.is_set, catch=(OSError,))
    progress.stop()

    for epub_path, exc in result.failed:
        console.print(f"[red]Error writing {epub_path.name}:[/red] {exc}")
    counts["errors"] += len(result.failed)

    # Summary
    parts = []
    if counts["written"]:
        parts.append(f"[green]{counts['written']} written[/green]")
    if counts["skipped"]:
        parts.append(f"[yellow]{counts['skipped']} skipped[/yellow]")
    if counts["errors"]:
        errors = counts["errors"]
        parts.append(f"[red]{errors} error{'s' if errors != 1 else ''}[/red]")
    if result.stopped_early:
        logger.warning("Interrupted with %d book(s) not processed", len(result.remaining))
        parts.append(f"[dim]{len(result.remaining)} not processed (interrupted)[/dim]")

    console.print(f"\nDone: {', '.join(parts) or 'nothing to do'}")
