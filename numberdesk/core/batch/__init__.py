"""Batch operation coordinator - public API."""

from .actions import ActionKind, EligibilityRule, ExecutionMode
from .coordinator import BatchCoordinator
from .delay import DelayPolicy, estimate_duration
from .eligibility import EligibilitySplit, filter_selection
from .executors import BatchExecutor, FanOutExecutor, ThrottledExecutor, executor_for, settle
from .job import BatchJob
from .progress import BatchProgress, BatchSummary, ProgressSnapshot, summarize
from .selection import SelectionStore

__all__ = [
    "ActionKind",
    "EligibilityRule",
    "ExecutionMode",
    "BatchCoordinator",
    "DelayPolicy",
    "estimate_duration",
    "EligibilitySplit",
    "filter_selection",
    "BatchExecutor",
    "FanOutExecutor",
    "ThrottledExecutor",
    "executor_for",
    "settle",
    "BatchJob",
    "BatchProgress",
    "BatchSummary",
    "ProgressSnapshot",
    "summarize",
    "SelectionStore",
]
