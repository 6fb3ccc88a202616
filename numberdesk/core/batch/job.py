"""BatchJob: one run of an action over its eligible phone numbers."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, Tuple

from numberdesk.core.models.phone_number import PhoneNumberId
from numberdesk.utils.errors import EmptyBatchError

from .actions import ActionKind


@dataclass(frozen=True)
class BatchJob:
    """A confirmed batch action."""

    action: ActionKind
    eligible: Tuple[PhoneNumberId, ...]
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        # Repeated ids are dropped, first occurrence wins
        object.__setattr__(self, "eligible", tuple(dict.fromkeys(self.eligible)))

    @classmethod
    def create(cls, action: ActionKind, eligible: Iterable[PhoneNumberId]) -> "BatchJob":
        """Create a job, dropping repeated ids and refusing an empty set.

        Raises:
            EmptyBatchError: If no phone number is eligible.
        """
        job = cls(action=action, eligible=tuple(eligible))
        if not job.eligible:
            raise EmptyBatchError(
                action.rule.empty_message, details={"action": action.value}
            )
        return job

    def __len__(self) -> int:
        return len(self.eligible)
