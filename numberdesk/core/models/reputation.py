"""Phone number reputation models and the per-number reputation cache."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ReputationStatus(Enum):
    """Reputation verdicts returned by the lookup service."""

    SAFE = "safe"
    NEUTRAL = "neutral"
    ANNOYING = "annoying"
    DANGEROUS = "dangerous"
    UNKNOWN = "unknown"

    @classmethod
    def from_string(cls, value: Optional[str]) -> "ReputationStatus":
        try:
            return cls((value or "").lower())
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class ReputationData:
    """Reputation details for a single phone number."""

    status: ReputationStatus
    danger_level: int = 0
    comment_count: int = 0
    visit_count: int = 0
    source_url: str = ""
    categories: List[str] = field(default_factory=list)
    last_comment: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "ReputationData":
        """Parse the ``reputation`` object of an admin API response."""
        return cls(
            status=ReputationStatus.from_string(data.get("status")),
            danger_level=int(data.get("dangerLevel") or 0),
            comment_count=int(data.get("commentCount") or 0),
            visit_count=int(data.get("visitCount") or 0),
            source_url=data.get("sourceUrl") or "",
            categories=list(data.get("categories") or []),
            last_comment=data.get("lastComment"),
        )

    @property
    def display_status(self) -> ReputationStatus:
        """Status shown to operators; numbers without reports count as safe."""
        if self.status is ReputationStatus.UNKNOWN:
            return ReputationStatus.SAFE
        return self.status


class ReputationCache:
    """Latest known reputation per phone number (keyed by the number itself)."""

    def __init__(self):
        self._entries: Dict[str, ReputationData] = {}

    def update(self, number: str, data: ReputationData) -> None:
        self._entries[number] = data

    def get(self, number: str) -> Optional[ReputationData]:
        return self._entries.get(number)

    def __contains__(self, number: object) -> bool:
        return number in self._entries

    def __len__(self) -> int:
        return len(self._entries)
