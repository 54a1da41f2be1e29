# ABOUTME: The `shelfmark lookup` command for resolving call numbers to subjects.
# ABOUTME: Prints each code's subject line from the per-subject schedules.

from pathlib import Path

import click
from rich.console import Console

from shelfmark.classification.codes import normalize_code
from shelfmark.classification.schedule import MissingScheduleError, ScheduleIndex
from shelfmark.cli.options import schedule_dir_option

console = Console(stderr=True)


@click.command()
@click.argument("codes", nargs=-1, required=True)
@schedule_dir_option
def lookup(codes: tuple[str, ...], schedule_dir: Path | None) -> None:
    """Look up the subject for one or more LC call numbers."""
    index = ScheduleIndex(schedule_dir)
    missing = False

    for raw in codes:
        code = normalize_code(raw)
        try:
            subject = index.lookup(code)
        except MissingScheduleError as exc:
            console.print(f"[red]Error:[/red] {exc}")
            console.print("[dim]Run `shelfmark build-schedules` first.[/dim]")
            missing = True
            continue
        if subject is None:
            click.echo(f"{code}: no match")
        else:
            click.echo(subject)

    if missing:
        raise SystemExit(1)
