# ABOUTME: The `shelfmark identify` command for resolving a single ISBN.
# ABOUTME: Queries every source, reconciles, and prints the resulting record.

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from shelfmark.cli.arbitration import PromptArbiter
from shelfmark.cli.options import quiet_option, schedule_dir_option
from shelfmark.core.resolver import ResolutionContext, default_sources, resolve_isbn
from shelfmark.metadata.arbitration import Arbiter, FirstCandidateArbiter
from shelfmark.metadata.provider import CandidateSource, clean_isbn
from shelfmark.metadata.reconcile import UnresolvedMetadataError

console = Console()


def _create_sources() -> list[CandidateSource]:
    """Create the default candidate sources."""
    return default_sources()


def make_arbiter(quiet: bool, console: Console) -> Arbiter:
    if quiet:
        return FirstCandidateArbiter()
    return PromptArbiter(console=console)


@click.command()
@click.argument("isbn")
@quiet_option
@schedule_dir_option
def identify(isbn: str, quiet: bool, schedule_dir: Path | None) -> None:
    """Resolve title, authors, and subject for an ISBN."""
    isbn = clean_isbn(isbn)
    context = ResolutionContext.create(schedule_dir, _create_sources())

    try:
        record = resolve_isbn(isbn, context, make_arbiter(quiet, console))
    except UnresolvedMetadataError as exc:
        console.print(f"[yellow]{exc}[/yellow]")
        raise SystemExit(1) from exc

    table = Table(title=isbn, show_header=False, pad_edge=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Title", record.title or "[dim]unknown[/dim]")
    table.add_row("Authors", record.authors_joined or "[dim]unknown[/dim]")
    table.add_row("Subject", record.subject or "[dim]none[/dim]")
    console.print(table)
