"""Phone number and batch outcome table components."""

from typing import Iterable, Mapping, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from numberdesk.core.models.outcome import Outcome, Success
from numberdesk.core.models.phone_number import PhoneNumber, PhoneNumberId, ResourceSnapshot
from numberdesk.core.models.reputation import ReputationData, ReputationStatus
from numberdesk.utils.console import get_console

STATUS_STYLES = {
    "available": "green",
    "assigned": "cyan",
    "reserved": "yellow",
    "suspended": "magenta",
    "cancelled": "red",
}

REPUTATION_STYLES = {
    ReputationStatus.SAFE: "green",
    ReputationStatus.NEUTRAL: "white",
    ReputationStatus.ANNOYING: "yellow",
    ReputationStatus.DANGEROUS: "bold red",
}


class NumberTable:
    """Phone number list with eligibility markers.

    Used by: batch confirmation.
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console or get_console()

    def display(
        self,
        numbers: Iterable[PhoneNumber],
        title: str = "Phone Numbers",
        eligible: Optional[set] = None,
    ) -> None:
        """Display numbers, marking the ones an action will skip."""
        table = Table(title=title)
        table.add_column("ID", style="dim", no_wrap=True)
        table.add_column("Number", style="bold")
        table.add_column("Status")
        if eligible is not None:
            table.add_column("", width=3, justify="center")

        for number in numbers:
            style = STATUS_STYLES.get(number.status.value, "white")
            row = [number.id.value, number.number, f"[{style}]{number.status.value}[/{style}]"]
            if eligible is not None:
                row.append("[green]✓[/green]" if number.id in eligible else "[red]✗[/red]")
            table.add_row(*row)

        self.console.print(table)


class OutcomeTable:
    """Per-number outcome badges of a batch run.

    Used by: live reputation batch progress.
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console or get_console()

    def build(
        self,
        results: Mapping[PhoneNumberId, Outcome],
        snapshot: Optional[ResourceSnapshot] = None,
        title: str = "Results",
    ) -> Table:
        table = Table(title=title)
        table.add_column("Number", style="bold")
        table.add_column("Result")
        table.add_column("Detail")

        for id, outcome in results.items():
            record = snapshot.get(id) if snapshot is not None else None
            label = record.number if record is not None else id.value

            if isinstance(outcome, Success):
                table.add_row(label, "[green]✓ ok[/green]", self._describe(outcome.payload))
            else:
                table.add_row(label, "[red]✗ failed[/red]", Text(outcome.reason))

        return table

    @staticmethod
    def _describe(payload) -> str:
        if isinstance(payload, ReputationData):
            status = payload.display_status
            style = REPUTATION_STYLES.get(status, "white")
            return f"[{style}]{status.value}[/{style}] (danger {payload.danger_level})"
        return ""
