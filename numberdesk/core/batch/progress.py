"""Live batch progress, immutable progress snapshots and summaries.

A ``BatchProgress`` is owned and mutated by the executor running a job.
Everything outside the executor (display, workflow, tests) sees
``ProgressSnapshot`` copies, either pushed to subscribers after every step
or pulled with ``snapshot()``.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Tuple, Union

from numberdesk.core.models.outcome import Failure, Outcome, Success
from numberdesk.core.models.phone_number import PhoneNumberId
from numberdesk.utils.errors import BatchStateError, ErrorHandler
from numberdesk.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ProgressSnapshot:
    """Point-in-time copy of a job's progress."""

    total: int
    completed: int
    current_item: Optional[PhoneNumberId]
    is_running: bool
    results: Mapping[PhoneNumberId, Outcome]

    @property
    def fraction(self) -> float:
        return self.completed / self.total if self.total else 0.0


ProgressListener = Callable[[ProgressSnapshot], None]


class BatchProgress:
    """Mutable progress record of one job."""

    def __init__(self, total: int):
        self.total = total
        self.completed = 0
        self.current_item: Optional[PhoneNumberId] = None
        self.is_running = True
        self._results: Dict[PhoneNumberId, Outcome] = {}
        self._listeners: List[ProgressListener] = []

    @property
    def results(self) -> Mapping[PhoneNumberId, Outcome]:
        return MappingProxyType(self._results)

    def subscribe(self, listener: ProgressListener) -> None:
        self._listeners.append(listener)

    def record(self, id: PhoneNumberId, outcome: Outcome) -> None:
        """Store the outcome of one item; outcomes are written once."""
        if id in self._results:
            raise BatchStateError(
                f"Outcome for {id} was already recorded", details={"id": id.value}
            )
        self._results[id] = outcome

    def advance(self, step: int = 1) -> None:
        if step < 0 or self.completed + step > self.total:
            raise BatchStateError(
                f"Cannot advance progress by {step} at {self.completed}/{self.total}"
            )
        self.completed += step

    def finish(self) -> None:
        """Mark the job as done; every item must have been completed."""
        if self.completed != self.total:
            raise BatchStateError(
                f"Job finished with {self.completed}/{self.total} items completed"
            )
        self.current_item = None
        self.is_running = False

    def snapshot(self) -> ProgressSnapshot:
        return ProgressSnapshot(
            total=self.total,
            completed=self.completed,
            current_item=self.current_item,
            is_running=self.is_running,
            results=MappingProxyType(dict(self._results)),
        )

    def publish(self) -> ProgressSnapshot:
        """Push a fresh snapshot to every subscriber.

        A failing subscriber is logged and skipped; it never aborts the job.
        """
        snapshot = self.snapshot()
        for listener in self._listeners:
            try:
                listener(snapshot)
            except Exception as e:
                ErrorHandler.handle(e, "Progress listener failed", log_traceback=False)
        return snapshot


@dataclass(frozen=True)
class BatchSummary:
    """Success and failure counts over a job's recorded outcomes."""

    total: int
    success_count: int
    failure_count: int
    failures: List[Tuple[PhoneNumberId, str]] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return self.success_count + self.failure_count

    @property
    def success_rate(self) -> float:
        """Calculate success rate as percentage."""
        return (self.success_count / self.processed * 100) if self.processed > 0 else 0.0

    @property
    def has_failures(self) -> bool:
        return self.failure_count > 0


def summarize(progress: Union[BatchProgress, ProgressSnapshot]) -> BatchSummary:
    """Count the outcomes recorded so far; safe to call while a job runs."""
    successes = 0
    failures: List[Tuple[PhoneNumberId, str]] = []

    for id, outcome in list(progress.results.items()):
        if isinstance(outcome, Success):
            successes += 1
        elif isinstance(outcome, Failure):
            failures.append((id, outcome.reason))

    return BatchSummary(
        total=progress.total,
        success_count=successes,
        failure_count=len(failures),
        failures=failures,
    )
