"""
Tests for the batch coordinator

Tests cover:
- Selection to job to executor flow
- Single running job guard
- Executor choice per action
"""
import asyncio
from unittest.mock import patch

import pytest

from numberdesk.core.batch import ActionKind, BatchCoordinator, BatchJob, DelayPolicy, SelectionStore
from numberdesk.core.models import PhoneNumberId
from numberdesk.utils.errors import ApiError, BatchInProgressError, EmptyBatchError

from test_helpers import make_ids


@pytest.fixture
def coordinator(selection, fast_delay, fake_sleep):
    return BatchCoordinator(selection, fast_delay, sleep=fake_sleep)


class TestBulkAssign:
    """Tests for a mixed selection sent to assign"""

    @pytest.mark.asyncio
    async def test_only_available_numbers_are_called(self, coordinator, selection):
        selection.select_all()
        called = []

        async def call(id):
            called.append(id.value)
            if id.value == "n3":
                raise ApiError("Number already taken", status_code=409)
            return {"success": True}

        progress = await coordinator.execute(ActionKind.ASSIGN, call)

        assert sorted(called) == ["n1", "n3", "n5"]
        assert progress.total == 3
        assert len(progress.results) == 3
        assert sum(1 for o in progress.results.values() if o.ok) == 2
        assert progress.results[PhoneNumberId("n3")].reason == "Number already taken"

    def test_prepare_has_no_side_effects(self, coordinator, selection):
        selection.select_all()
        split = coordinator.prepare(ActionKind.UNASSIGN)
        assert split.eligible == tuple(make_ids("n2"))
        assert len(selection) == 5

    def test_nothing_eligible(self, coordinator, selection):
        selection.add(PhoneNumberId("n2"))
        with pytest.raises(EmptyBatchError) as exc_info:
            coordinator.create_job(ActionKind.ASSIGN)
        assert "No available numbers" in exc_info.value.message


class TestReputationThroughCoordinator:
    """Tests for throttled runs started by the coordinator"""

    @pytest.mark.asyncio
    async def test_pauses_between_items(self, coordinator, selection, fake_sleep):
        selection.select_all()

        async def call(id):
            return {"status": "safe"}

        progress = await coordinator.execute(ActionKind.REPUTATION_CHECK, call)

        assert progress.completed == 5
        assert len(fake_sleep.delays) == 4
        assert coordinator.is_throttled(ActionKind.REPUTATION_CHECK)
        assert not coordinator.is_throttled(ActionKind.DELETE)


class TestSingleJobGuard:
    """Tests for overlapping jobs"""

    @pytest.mark.asyncio
    async def test_second_job_rejected_while_busy(self, coordinator):
        release = asyncio.Event()

        async def slow_call(id):
            await release.wait()

        first = BatchJob.create(ActionKind.DELETE, make_ids("n1"))
        second = BatchJob.create(ActionKind.DELETE, make_ids("n4"))

        task = asyncio.create_task(coordinator.run(first, slow_call))
        await asyncio.sleep(0)
        assert coordinator.is_busy

        with pytest.raises(BatchInProgressError):
            await coordinator.run(second, slow_call)

        release.set()
        await task
        assert not coordinator.is_busy

    @pytest.mark.asyncio
    async def test_concurrent_jobs_when_allowed(self, snapshot, fast_delay, fake_sleep):
        coordinator = BatchCoordinator(
            SelectionStore(snapshot), fast_delay, allow_concurrent_jobs=True, sleep=fake_sleep
        )

        async def call(id):
            await asyncio.sleep(0)

        results = await asyncio.gather(
            coordinator.run(BatchJob.create(ActionKind.DELETE, make_ids("n1")), call),
            coordinator.run(BatchJob.create(ActionKind.DELETE, make_ids("n4")), call),
        )
        assert all(p.completed == 1 for p in results)

    @pytest.mark.asyncio
    async def test_guard_released_after_error(self, coordinator):
        async def call(id):
            return None

        with pytest.raises(EmptyBatchError):
            await coordinator.run(BatchJob(action=ActionKind.DELETE, eligible=()), call)
        assert not coordinator.is_busy

    @pytest.mark.asyncio
    async def test_empty_job_not_announced(self, coordinator):
        async def call(id):
            return None

        with patch("numberdesk.core.batch.coordinator.log_event") as events:
            with pytest.raises(EmptyBatchError):
                await coordinator.run(BatchJob(action=ActionKind.REPUTATION_CHECK, eligible=()), call)

        events.assert_not_called()
