"""Domain models - public API."""

from .outcome import Failure, Outcome, Success, is_outcome
from .phone_number import NumberStatus, PhoneNumber, PhoneNumberId, ResourceSnapshot
from .reputation import ReputationCache, ReputationData, ReputationStatus

__all__ = [
    "Failure",
    "Outcome",
    "Success",
    "is_outcome",
    "NumberStatus",
    "PhoneNumber",
    "PhoneNumberId",
    "ResourceSnapshot",
    "ReputationCache",
    "ReputationData",
    "ReputationStatus",
]
