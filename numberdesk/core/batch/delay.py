"""Jittered pause inserted between throttled remote calls."""

import random
from dataclasses import dataclass, field
from typing import Optional

from numberdesk.utils.errors import InvalidConfigError


@dataclass
class DelayPolicy:
    """Uniform random delay in ``[min_seconds, max_seconds)``."""

    min_seconds: float
    max_seconds: float
    rng: random.Random = field(default_factory=random.Random, repr=False, compare=False)

    def __post_init__(self):
        if self.min_seconds < 0:
            raise InvalidConfigError(
                f"Minimum delay must not be negative (got {self.min_seconds})"
            )
        if self.max_seconds < self.min_seconds:
            raise InvalidConfigError(
                f"Maximum delay {self.max_seconds} is below minimum {self.min_seconds}"
            )

    @classmethod
    def from_millis(cls, min_ms: float, max_ms: float, rng: Optional[random.Random] = None) -> "DelayPolicy":
        return cls(min_ms / 1000, max_ms / 1000, rng or random.Random())

    @classmethod
    def from_config(cls, batch_config, rng: Optional[random.Random] = None) -> "DelayPolicy":
        return cls(
            batch_config.reputation_delay_min,
            batch_config.reputation_delay_max,
            rng or random.Random(),
        )

    @property
    def mean_seconds(self) -> float:
        return (self.min_seconds + self.max_seconds) / 2

    def next_delay(self) -> float:
        # random() is in [0.0, 1.0), keeping the upper bound exclusive
        return self.min_seconds + self.rng.random() * (self.max_seconds - self.min_seconds)


def estimate_duration(count: int, policy: DelayPolicy) -> float:
    """Rough run time in seconds for ``count`` throttled items.

    Each item is budgeted one average delay, matching the estimate shown to
    operators before a bulk reputation check.
    """
    return max(count, 0) * policy.mean_seconds
