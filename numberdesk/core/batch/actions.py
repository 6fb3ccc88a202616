"""Batch actions, their eligibility rules and execution modes."""

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from numberdesk.core.models.phone_number import NumberStatus


class ExecutionMode(Enum):
    """How the remote calls of a batch are scheduled."""

    PARALLEL_FAN_OUT = "parallel_fan_out"
    SEQUENTIAL_THROTTLED = "sequential_throttled"


@dataclass(frozen=True)
class EligibilityRule:
    """Status predicate deciding which numbers may take part in an action."""

    description: str
    predicate: Callable[[NumberStatus], bool]
    empty_message: str

    def allows(self, status: NumberStatus) -> bool:
        return self.predicate(status)


REQUIRES_AVAILABLE = EligibilityRule(
    description="status is available",
    predicate=lambda status: status is NumberStatus.AVAILABLE,
    empty_message="No available numbers selected for assignment",
)

REQUIRES_ASSIGNED = EligibilityRule(
    description="status is assigned",
    predicate=lambda status: status is NumberStatus.ASSIGNED,
    empty_message="No assigned numbers selected for unassignment",
)

NOT_ASSIGNED = EligibilityRule(
    description="status is not assigned",
    predicate=lambda status: status is not NumberStatus.ASSIGNED,
    empty_message="No deletable numbers selected (assigned numbers cannot be deleted)",
)

ANY_STATUS = EligibilityRule(
    description="any status",
    predicate=lambda status: True,
    empty_message="Please select phone numbers to check",
)


class ActionKind(Enum):
    """Administrative actions that can be applied to a selection."""

    ASSIGN = "assign"
    UNASSIGN = "unassign"
    DELETE = "delete"
    REPUTATION_CHECK = "reputation_check"

    @property
    def rule(self) -> EligibilityRule:
        return _RULES[self]

    @property
    def mode(self) -> ExecutionMode:
        return _MODES[self]

    @property
    def label(self) -> str:
        """Verb used in operator-facing messages."""
        return _LABELS[self]

    @classmethod
    def from_string(cls, value: str) -> "ActionKind":
        normalised = value.lower().replace("-", "_")
        if normalised == "reputation":
            return cls.REPUTATION_CHECK
        try:
            return cls(normalised)
        except ValueError:
            raise ValueError(f"Invalid batch action: {value}")


_RULES = {
    ActionKind.ASSIGN: REQUIRES_AVAILABLE,
    ActionKind.UNASSIGN: REQUIRES_ASSIGNED,
    ActionKind.DELETE: NOT_ASSIGNED,
    ActionKind.REPUTATION_CHECK: ANY_STATUS,
}

_MODES = {
    ActionKind.ASSIGN: ExecutionMode.PARALLEL_FAN_OUT,
    ActionKind.UNASSIGN: ExecutionMode.PARALLEL_FAN_OUT,
    ActionKind.DELETE: ExecutionMode.PARALLEL_FAN_OUT,
    # The reputation provider rate limits callers
    ActionKind.REPUTATION_CHECK: ExecutionMode.SEQUENTIAL_THROTTLED,
}

_LABELS = {
    ActionKind.ASSIGN: "assign",
    ActionKind.UNASSIGN: "unassign",
    ActionKind.DELETE: "delete",
    ActionKind.REPUTATION_CHECK: "check reputation for",
}
