# ABOUTME: Shared Click options for shelfmark CLI commands.
# ABOUTME: Provides reusable decorators for common flags like --schedule-dir and --quiet.

from pathlib import Path

import click

from shelfmark.classification.schedule import DEFAULT_SCHEDULE_DIR

schedule_dir_option = click.option(
    "--schedule-dir",
    "schedule_dir",
    type=click.Path(file_okay=False, path_type=Path),
    envvar="SHELFMARK_SCHEDULE_DIR",
    default=None,
    help=f"Directory holding the per-subject schedules (default: {DEFAULT_SCHEDULE_DIR})",
)

quiet_option = click.option(
    "-q",
    "--quiet",
    is_flag=True,
    default=False,
    help="Never prompt: take the first candidate whenever sources disagree.",
)
