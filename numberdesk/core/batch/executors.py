"""Executors that drive a BatchJob against the remote admin API.

Two scheduling disciplines are provided:
- FanOutExecutor: every call is issued at once and the job completes when
  all of them have settled
- ThrottledExecutor: calls are issued one at a time, in job order, with a
  jittered pause between consecutive items and live progress after each step

Neither executor retries, cancels or stops early. A call that fails, raises
or times out is recorded as a Failure for that item only. The only error an
executor raises is EmptyBatchError, before any call is made.

Usage Examples
--------------

Fan out assignments:
    >>> progress = await FanOutExecutor().run(job, call)
    >>> summarize(progress).failure_count

Throttled reputation checks with a live listener:
    >>> executor = ThrottledExecutor(on_progress=display.update)
    >>> progress = await executor.run(job, call, DelayPolicy(3.0, 8.0))
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional

from numberdesk.core.models.outcome import Failure, Outcome, Success, is_outcome
from numberdesk.core.models.phone_number import PhoneNumberId
from numberdesk.utils.errors import EmptyBatchError, format_error_message
from numberdesk.utils.logging import async_log_call, get_logger

from .actions import ExecutionMode
from .delay import DelayPolicy
from .job import BatchJob
from .progress import BatchProgress, ProgressListener, ProgressSnapshot

logger = get_logger(__name__)

RemoteCall = Callable[[PhoneNumberId], Awaitable[Any]]
Sleeper = Callable[[float], Awaitable[Any]]


async def settle(call: RemoteCall, id: PhoneNumberId) -> Outcome:
    """Await one remote call and turn whatever happens into an Outcome."""
    try:
        result = await call(id)

    except Exception as e:
        logger.info(f"Remote call for {id} failed: {format_error_message(e)}")
        return Failure(reason=format_error_message(e))

    if is_outcome(result):
        return result
    return Success(payload=result)


class BatchExecutor:
    """Shared state handling for both executors."""

    mode: ExecutionMode

    def __init__(self, on_progress: Optional[ProgressListener] = None):
        self.on_progress = on_progress
        self._progress: Optional[BatchProgress] = None

    def snapshot(self) -> Optional[ProgressSnapshot]:
        """Latest progress of the current or last job, for polling observers."""
        if self._progress is None:
            return None
        return self._progress.snapshot()

    def _start(self, job: BatchJob) -> BatchProgress:
        if not job.eligible:
            raise EmptyBatchError(
                job.action.rule.empty_message, details={"action": job.action.value}
            )

        progress = BatchProgress(total=len(job.eligible))
        if self.on_progress is not None:
            progress.subscribe(self.on_progress)
        self._progress = progress
        return progress


class FanOutExecutor(BatchExecutor):
    """Issue every call concurrently and wait for all of them to settle."""

    mode = ExecutionMode.PARALLEL_FAN_OUT

    @async_log_call
    async def run(self, job: BatchJob, call: RemoteCall) -> BatchProgress:
        progress = self._start(job)
        progress.publish()

        logger.info(f"Fanning out {job.action.value} to {progress.total} numbers")

        async def _run_one(id: PhoneNumberId) -> None:
            progress.record(id, await settle(call, id))

        await asyncio.gather(*(_run_one(id) for id in job.eligible))

        progress.advance(progress.total)
        progress.finish()
        progress.publish()
        return progress


class ThrottledExecutor(BatchExecutor):
    """Issue calls one by one with a jittered pause between items."""

    mode = ExecutionMode.SEQUENTIAL_THROTTLED

    def __init__(
        self,
        on_progress: Optional[ProgressListener] = None,
        sleep: Sleeper = asyncio.sleep,
    ):
        super().__init__(on_progress)
        self._sleep = sleep

    @async_log_call
    async def run(
        self, job: BatchJob, call: RemoteCall, delay_policy: DelayPolicy
    ) -> BatchProgress:
        progress = self._start(job)
        progress.publish()

        last_index = len(job.eligible) - 1
        for index, id in enumerate(job.eligible):
            progress.current_item = id
            progress.publish()

            progress.record(id, await settle(call, id))
            progress.advance()
            progress.publish()

            if index < last_index:
                delay = delay_policy.next_delay()
                logger.debug(f"Waiting {delay:.2f}s before next {job.action.value} call")
                await self._sleep(delay)

        progress.finish()
        progress.publish()
        return progress


def executor_for(
    mode: ExecutionMode,
    on_progress: Optional[ProgressListener] = None,
    sleep: Sleeper = asyncio.sleep,
) -> BatchExecutor:
    """Build the executor that implements ``mode``."""
    if mode is ExecutionMode.SEQUENTIAL_THROTTLED:
        return ThrottledExecutor(on_progress=on_progress, sleep=sleep)
    return FanOutExecutor(on_progress=on_progress)
