"""Batch action feature (assign, unassign, delete, reputation check).

Public API:
    run_batch_action(action, ids, select_all, page, ...)
"""

from .workflow import BatchWorkflow, run_batch_action

__all__ = ["BatchWorkflow", "run_batch_action"]
