"""Per-action remote call dispatchers used by the batch executors."""

from typing import Awaitable, Callable, Optional

from numberdesk.core.batch.actions import ActionKind
from numberdesk.core.models.outcome import Outcome, Success
from numberdesk.core.models.phone_number import PhoneNumberId
from numberdesk.utils.errors import MissingRequiredFieldError

from .client import AssignmentRequest, PhoneNumberAdminClient, UnassignRequest

Dispatcher = Callable[[PhoneNumberId], Awaitable[Outcome]]


def dispatcher_for(
    action: ActionKind,
    client: PhoneNumberAdminClient,
    assignment: Optional[AssignmentRequest] = None,
    unassignment: Optional[UnassignRequest] = None,
) -> Dispatcher:
    """Build ``call(id) -> Outcome`` for ``action``.

    Client errors propagate out of the returned coroutine; the executors
    record them as failures.

    Raises:
        MissingRequiredFieldError: If ASSIGN is requested without a user.
    """
    if action is ActionKind.ASSIGN:
        if assignment is None:
            raise MissingRequiredFieldError("A user id is required to assign numbers")

        async def call(id: PhoneNumberId) -> Outcome:
            return Success(await client.assign(id, assignment))

    elif action is ActionKind.UNASSIGN:
        request = unassignment or UnassignRequest()

        async def call(id: PhoneNumberId) -> Outcome:
            return Success(await client.unassign(id, request))

    elif action is ActionKind.DELETE:

        async def call(id: PhoneNumberId) -> Outcome:
            return Success(await client.delete(id))

    else:

        async def call(id: PhoneNumberId) -> Outcome:
            return Success(await client.check_reputation(id, force_refresh=True))

    return call
