"""Per-item batch outcomes."""

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Success:
    """The remote call completed; ``payload`` is whatever it returned."""

    payload: Any = None

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """The remote call failed; ``reason`` is a human readable message."""

    reason: str

    @property
    def ok(self) -> bool:
        return False


Outcome = Union[Success, Failure]


def is_outcome(value: Any) -> bool:
    return isinstance(value, (Success, Failure))
