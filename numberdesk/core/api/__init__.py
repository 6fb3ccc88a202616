"""Admin API access - public API."""

from .client import AssignmentRequest, PhoneNumberAdminClient, UnassignRequest
from .dispatch import Dispatcher, dispatcher_for

__all__ = [
    "AssignmentRequest",
    "PhoneNumberAdminClient",
    "UnassignRequest",
    "Dispatcher",
    "dispatcher_for",
]
