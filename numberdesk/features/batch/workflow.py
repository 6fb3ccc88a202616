"""Batch action workflow orchestration."""

from typing import Iterable, Optional

from rich.console import Console

from numberdesk.core.api import (
    AssignmentRequest,
    PhoneNumberAdminClient,
    UnassignRequest,
    dispatcher_for,
)
from numberdesk.core.batch import (
    ActionKind,
    BatchCoordinator,
    BatchJob,
    BatchSummary,
    DelayPolicy,
    SelectionStore,
    estimate_duration,
    summarize,
)
from numberdesk.core.models.outcome import Success
from numberdesk.core.models.phone_number import PhoneNumberId
from numberdesk.core.models.reputation import ReputationCache, ReputationData
from numberdesk.utils.config_manager import ConfigManager
from numberdesk.utils.errors import NumberDeskError, format_error_message
from numberdesk.utils.logging import async_log_call, get_logger

from .display import BatchDisplay

logger = get_logger(__name__)


class BatchWorkflow:
    """Orchestrates confirmation, execution and reporting of a batch."""

    def __init__(
        self,
        coordinator: BatchCoordinator,
        client: PhoneNumberAdminClient,
        console: Optional[Console] = None,
        reputation_cache: Optional[ReputationCache] = None,
        page: int = 1,
        limit: int = 10,
    ):
        self.coordinator = coordinator
        self.client = client
        self.display = BatchDisplay(console)
        self.reputation_cache = reputation_cache if reputation_cache is not None else ReputationCache()
        self.page = page
        self.limit = limit

    @property
    def selection(self) -> SelectionStore:
        return self.coordinator.selection

    @async_log_call
    async def load(self, page: Optional[int] = None, limit: Optional[int] = None) -> None:
        """Load a page of numbers; the selection is reset."""
        self.page = page or self.page
        self.limit = limit or self.limit
        snapshot = await self.client.list_numbers(page=self.page, limit=self.limit)
        self.selection.replace_snapshot(snapshot)

    def select(self, ids: Iterable[str]) -> list[str]:
        """Select ids on the loaded page.

        Returns:
            The ids that are not on the page and were ignored
        """
        missing = []
        for raw in ids:
            id = PhoneNumberId(raw)
            if id in self.selection.snapshot:
                self.selection.add(id)
            else:
                missing.append(raw)
        return missing

    @async_log_call
    async def run(
        self,
        action: ActionKind,
        assignment: Optional[AssignmentRequest] = None,
        unassignment: Optional[UnassignRequest] = None,
        confirm: bool = True,
    ) -> Optional[BatchSummary]:
        """Run ``action`` over the current selection.

        Returns:
            The batch summary, or None if nothing ran
        """
        snapshot = self.selection.snapshot
        split = self.coordinator.prepare(action)

        if not split.eligible:
            self.display.show_error(action.rule.empty_message)
            return None

        self.display.show_split(action, split, snapshot)

        estimate = None
        if self.coordinator.is_throttled(action):
            estimate = estimate_duration(len(split.eligible), self.coordinator.delay_policy)

        if confirm and not self.display.confirm_run(action, len(split.eligible), estimate):
            self.display.show_cancelled()
            return None

        try:
            call = dispatcher_for(action, self.client, assignment, unassignment)
            job = BatchJob.create(action, split.eligible)

            with self.display.track(job, snapshot) as tracker:
                progress = await self.coordinator.run(job, call, on_progress=tracker.update)

        except NumberDeskError as e:
            logger.error(f"Batch {action.value} not started: {e.message}")
            self.display.show_error(format_error_message(e))
            return None

        summary = summarize(progress)
        self.display.show_summary(action, summary)

        if action is ActionKind.REPUTATION_CHECK:
            self._update_reputation_cache(progress.results, snapshot)
        else:
            await self._reload_after_change()

        return summary

    def _update_reputation_cache(self, results, snapshot) -> None:
        for id, outcome in results.items():
            record = snapshot.get(id)
            if record is None:
                continue
            if isinstance(outcome, Success) and isinstance(outcome.payload, ReputationData):
                self.reputation_cache.update(record.number, outcome.payload)

    async def _reload_after_change(self) -> None:
        try:
            await self.load()
        except NumberDeskError as e:
            logger.warning(f"Reload after batch failed: {e.message}")
            self.display.show_warning(f"Could not refresh the number list: {format_error_message(e)}")


# Factory functions
async def run_batch_action(
    action: ActionKind,
    ids: Iterable[str] = (),
    select_all: bool = False,
    page: int = 1,
    limit: Optional[int] = None,
    assume_yes: bool = False,
    assignment: Optional[AssignmentRequest] = None,
    unassignment: Optional[UnassignRequest] = None,
    console: Optional[Console] = None,
    config: Optional[ConfigManager] = None,
) -> Optional[BatchSummary]:
    """Load a page, select numbers and run a batch action against it."""
    config = config or ConfigManager()
    app_config = config.config

    async with PhoneNumberAdminClient.from_config(app_config.api) as client:
        coordinator = BatchCoordinator(
            SelectionStore(),
            DelayPolicy.from_config(app_config.batch),
            allow_concurrent_jobs=app_config.batch.allow_concurrent_jobs,
        )
        workflow = BatchWorkflow(
            coordinator,
            client,
            console=console,
            page=page,
            limit=limit or app_config.api.page_size,
        )

        try:
            await workflow.load()
        except NumberDeskError as e:
            logger.error(f"Failed to load phone numbers: {e.message}")
            workflow.display.show_error(f"Failed to load phone numbers: {format_error_message(e)}")
            return None

        if select_all:
            workflow.selection.select_all()
        else:
            missing = workflow.select(ids)
            if missing:
                workflow.display.show_warning(
                    f"Not on page {workflow.page}, ignored: {', '.join(missing)}"
                )

        confirm = app_config.batch.confirm_before_run and not assume_yes
        return await workflow.run(action, assignment, unassignment, confirm=confirm)
