"""Batch coordinator: selection -> eligibility -> job -> executor."""

import asyncio
from typing import Optional

from numberdesk.utils.errors import BatchInProgressError, EmptyBatchError
from numberdesk.utils.logging import async_log_call, get_logger, log_event

from .actions import ActionKind, ExecutionMode
from .delay import DelayPolicy
from .eligibility import EligibilitySplit, filter_selection
from .executors import RemoteCall, Sleeper, ThrottledExecutor, executor_for
from .job import BatchJob
from .progress import BatchProgress, ProgressListener, summarize
from .selection import SelectionStore

logger = get_logger(__name__)


class BatchCoordinator:
    """Turns the current selection into batch jobs and runs them.

    Only one job runs at a time unless ``allow_concurrent_jobs`` is set.
    A started job cannot be cancelled; it runs until every item settled.
    """

    def __init__(
        self,
        selection: SelectionStore,
        delay_policy: DelayPolicy,
        allow_concurrent_jobs: bool = False,
        sleep: Sleeper = asyncio.sleep,
    ):
        self.selection = selection
        self.delay_policy = delay_policy
        self.allow_concurrent_jobs = allow_concurrent_jobs
        self._sleep = sleep
        self._active_jobs = 0

    @property
    def is_busy(self) -> bool:
        return self._active_jobs > 0

    def prepare(self, action: ActionKind) -> EligibilitySplit:
        """Split the current selection for ``action`` without side effects."""
        return filter_selection(self.selection.current(), self.selection.snapshot, action)

    def create_job(self, action: ActionKind) -> BatchJob:
        """Create a job for the eligible part of the current selection.

        Raises:
            EmptyBatchError: If nothing selected is eligible.
        """
        split = self.prepare(action)
        return BatchJob.create(action, split.eligible)

    @async_log_call
    async def run(
        self,
        job: BatchJob,
        call: RemoteCall,
        on_progress: Optional[ProgressListener] = None,
    ) -> BatchProgress:
        """Run ``job`` with the executor its action is bound to.

        Raises:
            BatchInProgressError: If another job is still running.
            EmptyBatchError: If the job has no items.
        """
        if self.is_busy and not self.allow_concurrent_jobs:
            raise BatchInProgressError(details={"action": job.action.value})
        if not job.eligible:
            raise EmptyBatchError(
                job.action.rule.empty_message, details={"action": job.action.value}
            )

        executor = executor_for(job.action.mode, on_progress=on_progress, sleep=self._sleep)

        self._active_jobs += 1
        try:
            log_event(
                "batch_started",
                f"Starting {job.action.value} for {len(job)} numbers",
                action=job.action.value,
                mode=job.action.mode.value,
                total=len(job),
            )

            if isinstance(executor, ThrottledExecutor):
                progress = await executor.run(job, call, self.delay_policy)
            else:
                progress = await executor.run(job, call)

        finally:
            self._active_jobs -= 1

        summary = summarize(progress)
        log_event(
            "batch_completed",
            f"Finished {job.action.value}: {summary.success_count} succeeded, "
            f"{summary.failure_count} failed",
            action=job.action.value,
            total=summary.total,
            succeeded=summary.success_count,
            failed=summary.failure_count,
        )
        return progress

    async def execute(
        self,
        action: ActionKind,
        call: RemoteCall,
        on_progress: Optional[ProgressListener] = None,
    ) -> BatchProgress:
        """Create a job from the current selection and run it."""
        return await self.run(self.create_job(action), call, on_progress)

    def is_throttled(self, action: ActionKind) -> bool:
        return action.mode is ExecutionMode.SEQUENTIAL_THROTTLED
