"""Batch display coordinator (uses shared UI components)."""

from typing import Optional

from rich.console import Console, Group, RenderableType
from rich.live import Live
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn, TimeElapsedColumn

from numberdesk.core.batch import (
    ActionKind,
    BatchJob,
    BatchSummary,
    EligibilitySplit,
    ExecutionMode,
    ProgressSnapshot,
)
from numberdesk.core.models.phone_number import ResourceSnapshot
from numberdesk.ui.components import ConfirmPrompt, Notices, NumberTable, OutcomeTable

PAST_TENSE = {
    ActionKind.ASSIGN: "assigned",
    ActionKind.UNASSIGN: "unassigned",
    ActionKind.DELETE: "deleted",
}


class ProgressTracker:
    """Live progress bar fed by ProgressSnapshot updates.

    Throttled jobs also list each result under the bar as soon as it lands.
    """

    def __init__(
        self,
        job: BatchJob,
        snapshot: ResourceSnapshot,
        console: Console,
        outcomes: Optional[OutcomeTable] = None,
    ):
        self.job = job
        self.snapshot = snapshot
        self.outcomes = outcomes or OutcomeTable(console)
        self.shows_results = job.action.mode is ExecutionMode.SEQUENTIAL_THROTTLED
        self.last: Optional[ProgressSnapshot] = None

        # Rendered inside our own Live display, never started on its own
        self._progress = Progress(
            TextColumn("[bold]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=console,
        )
        self._task_id = self._progress.add_task(self._describe(None), total=len(job))
        self._live = Live(self.render(), console=console, refresh_per_second=4)

    def __enter__(self) -> "ProgressTracker":
        self._live.start()
        return self

    def __exit__(self, exc_type, exc_value, exc_tb) -> None:
        self._live.stop()

    def update(self, snapshot: ProgressSnapshot) -> None:
        self.last = snapshot
        self._progress.update(
            self._task_id,
            completed=snapshot.completed,
            description=self._describe(snapshot),
        )
        self._live.update(self.render(), refresh=True)

    def render(self) -> RenderableType:
        """Progress bar, followed by the results so far for throttled jobs."""
        bar = self._progress.get_renderable()
        if not self.shows_results or self.last is None or not self.last.results:
            return bar
        return Group(
            bar,
            self.outcomes.build(self.last.results, self.snapshot, title="Reputation results"),
        )

    def _describe(self, snapshot: Optional[ProgressSnapshot]) -> str:
        action = self.job.action.value.replace("_", " ")
        if snapshot is None or snapshot.current_item is None:
            return action.capitalize()
        record = self.snapshot.get(snapshot.current_item)
        current = record.number if record is not None else snapshot.current_item.value
        return f"{action.capitalize()}: {current}"


class BatchDisplay:
    """Display for batch operations."""

    def __init__(self, console: Optional[Console] = None):
        self.confirm = ConfirmPrompt(console)
        self.notices = Notices(console)
        self.console = self.notices.console
        self.numbers = NumberTable(self.console)
        self.outcomes = OutcomeTable(self.console)

    def show_split(
        self, action: ActionKind, split: EligibilitySplit, snapshot: ResourceSnapshot
    ) -> None:
        """Show which selected numbers the action will and will not touch."""
        eligible = set(split.eligible)
        selected = [n for n in snapshot if n.id in eligible or n.id in split.ineligible]
        self.numbers.display(selected, title="Selected numbers", eligible=eligible)

        if split.ineligible:
            self.notices.inline(
                "warning",
                f"{len(split.ineligible)} selected number(s) will be skipped "
                f"(requires {action.rule.description})",
            )

    def confirm_run(
        self, action: ActionKind, count: int, estimate_seconds: Optional[float] = None
    ) -> bool:
        """Ask the operator to confirm the batch.

        Returns:
            True if the operator confirms
        """
        notes = []
        if action is ActionKind.DELETE:
            notes.append("This action cannot be undone.")
        if estimate_seconds is not None:
            notes.append(f"This will take approximately {round(estimate_seconds / 60)} minutes.")

        question = f"Are you sure you want to {action.label} {count} phone numbers?"
        return self.confirm.ask(question, notes, default=False)

    def track(self, job: BatchJob, snapshot: ResourceSnapshot) -> ProgressTracker:
        return ProgressTracker(job, snapshot, self.console, self.outcomes)

    def show_summary(self, action: ActionKind, summary: BatchSummary) -> None:
        """Toast-style result of a finished batch."""
        if action is ActionKind.REPUTATION_CHECK:
            self.notices.boxed(
                "success",
                f"Bulk reputation check completed. {summary.success_count}/{summary.total} "
                f"numbers processed successfully.",
                title="Batch Complete",
            )
            return

        if summary.success_count > 0:
            self.notices.boxed(
                "success",
                f"{summary.success_count} phone numbers {PAST_TENSE[action]} successfully",
                title="Batch Complete",
            )
        if summary.failure_count > 0:
            self.notices.boxed(
                "error",
                f"{summary.failure_count} phone numbers failed to {action.label}"
            )

    def show_cancelled(self) -> None:
        """Show operation cancellation."""
        self.notices.inline("warning", "Operation cancelled")

    def show_error(self, message: str) -> None:
        self.notices.boxed("error", message)

    def show_warning(self, message: str) -> None:
        self.notices.inline("warning", message)
