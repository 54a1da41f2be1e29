# ABOUTME: The `shelfmark build-schedules` command.
# ABOUTME: Builds the per-subject schedule files from the LC classification MARCXML dataset.

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from shelfmark.classification.builder import ScheduleBuildError, build_schedules as build
from shelfmark.classification.schedule import DEFAULT_SCHEDULE_DIR
from shelfmark.classification.subjects import subject_name
from shelfmark.cli.options import schedule_dir_option

console = Console()


@click.command("build-schedules")
@click.argument("xml_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@schedule_dir_option
def build_schedules(xml_path: Path, schedule_dir: Path | None) -> None:
    """Build the subject schedules from a classification MARCXML file."""
    target = schedule_dir or DEFAULT_SCHEDULE_DIR

    with console.status(f"Reading {xml_path.name}..."):
        try:
            report = build(xml_path, target)
        except ScheduleBuildError as exc:
            console.print(f"[red]Error:[/red] {exc}")
            raise SystemExit(1) from exc

    table = Table(title=f"Schedules in {target}")
    table.add_column("Class", style="bold", width=5)
    table.add_column("Subject")
    table.add_column("Entries", justify="right")
    for letter, count in sorted(report.per_letter.items()):
        table.add_row(letter, subject_name(letter) or "", str(count))
    console.print(table)

    console.print(
        f"\n{report.records} records read, "
        f"[green]{report.total_entries} entries written[/green], "
        f"[yellow]{report.skipped} skipped[/yellow]"
    )
