"""Shared rich console."""

from functools import lru_cache

from rich.console import Console


@lru_cache(maxsize=1)
def get_console() -> Console:
    """Console for UI components that are not handed one.

    Highlighting is off so phone numbers and ids are not coloured as numbers.
    """
    return Console(highlight=False)
