"""Phone number domain models"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from numberdesk.utils.errors import DuplicateResourceError


class PhoneNumberId:
    """Value object for phone number record identifiers."""

    def __init__(self, value: str):
        if not value or not str(value).strip():
            raise ValueError("Phone number ID cannot be empty")
        self._value = str(value).strip()

    @property
    def value(self) -> str:
        return self._value

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"PhoneNumberId({self._value!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, PhoneNumberId):
            return False
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)


class NumberStatus(Enum):
    """Lifecycle states of a phone number in the pool."""

    AVAILABLE = "available"
    ASSIGNED = "assigned"
    RESERVED = "reserved"
    SUSPENDED = "suspended"
    CANCELLED = "cancelled"

    @classmethod
    def from_string(cls, value: str) -> "NumberStatus":
        """Create NumberStatus from string.

        Raises:
            ValueError: If the status is unknown.
        """
        try:
            return cls(value.lower())

        except (AttributeError, ValueError):
            raise ValueError(f"Invalid phone number status: {value}")


@dataclass(frozen=True)
class PhoneNumber:
    """A phone number record as loaded into the admin list."""

    id: PhoneNumberId
    number: str
    status: NumberStatus
    country: Optional[str] = None
    assigned_to: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "PhoneNumber":
        """Build a PhoneNumber from an admin API list entry."""
        return cls(
            id=PhoneNumberId(data["_id"]),
            number=data.get("number", ""),
            status=NumberStatus.from_string(data.get("status", "")),
            country=data.get("country"),
            assigned_to=data.get("assignedTo"),
        )

    @property
    def is_assigned(self) -> bool:
        return self.status is NumberStatus.ASSIGNED


class ResourceSnapshot:
    """Ordered, read-only view of the phone numbers currently loaded.

    Iteration order is the order the records were loaded in; batch
    processing order is derived from it.
    """

    def __init__(self, numbers: Iterable[PhoneNumber] = ()):
        records: List[PhoneNumber] = []
        index: Dict[PhoneNumberId, PhoneNumber] = {}

        for number in numbers:
            if number.id in index:
                raise DuplicateResourceError(
                    f"Phone number id {number.id} appears more than once",
                    details={"id": number.id.value},
                )
            index[number.id] = number
            records.append(number)

        self._numbers: Tuple[PhoneNumber, ...] = tuple(records)
        self._index = index

    @classmethod
    def from_api(cls, entries: Iterable[Dict[str, Any]]) -> "ResourceSnapshot":
        return cls(PhoneNumber.from_api(entry) for entry in entries)

    def __iter__(self) -> Iterator[PhoneNumber]:
        return iter(self._numbers)

    def __len__(self) -> int:
        return len(self._numbers)

    def __contains__(self, id: object) -> bool:
        return id in self._index

    def get(self, id: PhoneNumberId) -> Optional[PhoneNumber]:
        return self._index.get(id)

    def ids(self) -> Tuple[PhoneNumberId, ...]:
        return tuple(number.id for number in self._numbers)
