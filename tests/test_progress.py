"""
Tests for batch jobs, progress tracking and summaries

Tests cover:
- Job creation and de-duplication
- Progress bookkeeping and its guards
- Snapshot immutability and listener isolation
- Summaries
"""
import pytest

from numberdesk.core.batch import ActionKind, BatchJob, BatchProgress, summarize
from numberdesk.core.models import Failure, PhoneNumberId, Success
from numberdesk.utils.errors import BatchStateError, EmptyBatchError

from test_helpers import make_ids


class TestBatchJob:
    """Tests for job creation"""

    def test_duplicates_dropped_in_order(self):
        job = BatchJob.create(ActionKind.DELETE, make_ids("a", "b", "a", "c"))
        assert job.eligible == tuple(make_ids("a", "b", "c"))
        assert len(job) == 3

    def test_constructor_drops_duplicates(self):
        job = BatchJob(action=ActionKind.REPUTATION_CHECK, eligible=tuple(make_ids("a", "a", "b")))
        assert job.eligible == tuple(make_ids("a", "b"))

    def test_empty_job_rejected_with_action_message(self):
        with pytest.raises(EmptyBatchError) as exc_info:
            BatchJob.create(ActionKind.ASSIGN, [])
        assert exc_info.value.message == "No available numbers selected for assignment"

    def test_started_at_is_timezone_aware(self):
        job = BatchJob.create(ActionKind.DELETE, make_ids("a"))
        assert job.started_at.tzinfo is not None


class TestBatchProgress:
    """Tests for progress bookkeeping"""

    def test_initial_state(self):
        progress = BatchProgress(total=2)
        snap = progress.snapshot()
        assert (snap.completed, snap.total, snap.is_running) == (0, 2, True)
        assert snap.current_item is None
        assert snap.fraction == 0.0

    def test_outcome_written_once(self):
        progress = BatchProgress(total=1)
        progress.record(PhoneNumberId("a"), Success())
        with pytest.raises(BatchStateError):
            progress.record(PhoneNumberId("a"), Failure("again"))

    def test_advance_past_total_rejected(self):
        progress = BatchProgress(total=1)
        progress.advance()
        with pytest.raises(BatchStateError):
            progress.advance()

    def test_finish_requires_all_items(self):
        progress = BatchProgress(total=2)
        progress.advance()
        with pytest.raises(BatchStateError):
            progress.finish()

    def test_finish_clears_current_item(self):
        progress = BatchProgress(total=1)
        progress.current_item = PhoneNumberId("a")
        progress.advance()
        progress.finish()
        assert progress.current_item is None
        assert not progress.is_running

    def test_snapshot_does_not_change_afterwards(self):
        progress = BatchProgress(total=2)
        snap = progress.snapshot()
        progress.record(PhoneNumberId("a"), Success())
        progress.advance()
        assert snap.completed == 0
        assert len(snap.results) == 0

    def test_results_are_read_only(self):
        progress = BatchProgress(total=1)
        with pytest.raises(TypeError):
            progress.results[PhoneNumberId("a")] = Success()

    def test_failing_listener_does_not_stop_others(self):
        progress = BatchProgress(total=1)
        seen = []

        def broken(_):
            raise RuntimeError("display went away")

        progress.subscribe(broken)
        progress.subscribe(seen.append)
        progress.publish()

        assert len(seen) == 1


class TestSummary:
    """Tests for summaries"""

    def test_counts(self):
        progress = BatchProgress(total=3)
        progress.record(PhoneNumberId("a"), Success())
        progress.record(PhoneNumberId("b"), Failure("HTTP 500"))
        progress.record(PhoneNumberId("c"), Success())

        summary = summarize(progress)
        assert (summary.success_count, summary.failure_count, summary.total) == (2, 1, 3)
        assert summary.failures == [(PhoneNumberId("b"), "HTTP 500")]
        assert summary.has_failures
        assert summary.success_rate == pytest.approx(200 / 3)

    def test_partial_summary_while_running(self):
        progress = BatchProgress(total=4)
        progress.record(PhoneNumberId("a"), Success())

        summary = summarize(progress.snapshot())
        assert summary.processed == 1
        assert summary.total == 4
