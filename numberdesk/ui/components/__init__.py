"""Reusable rich components."""

from .notices import Notices
from .prompts import ConfirmPrompt
from .tables import NumberTable, OutcomeTable

__all__ = [
    "Notices",
    "ConfirmPrompt",
    "NumberTable",
    "OutcomeTable",
]
