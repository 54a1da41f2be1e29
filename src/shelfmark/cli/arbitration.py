# ABOUTME: Interactive arbiter that asks the user to break reconciliation ties.
# ABOUTME: Displays candidates in a Rich table and prompts with Click.

import click
from rich.console import Console
from rich.table import Table

from shelfmark.metadata.arbitration import CUSTOM


class PromptArbiter:
    """Arbiter backed by the terminal.

    Shows the competing values for a field and lets the user pick one,
    type their own, or decide whether a doubtful author stays.
    """

    def __init__(self, *, console: Console | None = None) -> None:
        self._console = console or Console()

    def choose(self, field: str, candidates: list[str]) -> str:
        if not candidates:
            return CUSTOM

        table = Table(title=f"Conflicting {field}")
        table.add_column("#", style="bold", width=3)
        table.add_column(field.capitalize())
        for i, candidate in enumerate(candidates, start=1):
            table.add_row(str(i), candidate)
        self._console.print(table)

        while True:
            choice = click.prompt("[1-N] Choose  [c] Enter your own", type=str, default="1")
            if choice.lower() == "c":
                return CUSTOM
            try:
                idx = int(choice) - 1
            except ValueError:
                continue
            if 0 <= idx < len(candidates):
                return candidates[idx]

    def enter(self, field: str) -> str | None:
        value = click.prompt(
            f"Enter {field} (blank for none)", type=str, default="", show_default=False
        )
        value = value.strip()
        return value or None

    def confirm(self, field: str, value: str, context: list[str]) -> bool:
        if context:
            self._console.print(f"[dim]Other {field}:[/dim] {'; '.join(context)}")
        self._console.print(f"Only one source reported [bold]{value}[/bold].")
        return click.confirm(f"Keep {value}?", default=True)
