"""Selection store for the currently loaded page of phone numbers."""

from typing import FrozenSet, Set

from numberdesk.core.models.phone_number import PhoneNumberId, ResourceSnapshot
from numberdesk.utils.errors import UnknownResourceError
from numberdesk.utils.logging import get_logger

logger = get_logger(__name__)


class SelectionStore:
    """Holds the ids an operator has ticked in the phone number list.

    Every selected id is part of the current snapshot. Replacing the
    snapshot (page change, refresh, reload after an action) clears the
    selection.
    """

    def __init__(self, snapshot: ResourceSnapshot | None = None):
        self._snapshot = snapshot if snapshot is not None else ResourceSnapshot()
        self._selected: Set[PhoneNumberId] = set()

    @property
    def snapshot(self) -> ResourceSnapshot:
        return self._snapshot

    def replace_snapshot(self, snapshot: ResourceSnapshot) -> None:
        """Adopt a freshly loaded snapshot and drop the old selection."""
        self._snapshot = snapshot
        self.clear()
        logger.debug(f"Snapshot replaced ({len(snapshot)} numbers), selection cleared")

    def add(self, id: PhoneNumberId) -> None:
        if id not in self._snapshot:
            raise UnknownResourceError(
                f"Phone number {id} is not in the current list",
                details={"id": id.value},
            )
        self._selected.add(id)

    def remove(self, id: PhoneNumberId) -> None:
        self._selected.discard(id)

    def toggle(self, id: PhoneNumberId, checked: bool) -> None:
        if checked:
            self.add(id)
        else:
            self.remove(id)

    def clear(self) -> None:
        self._selected.clear()

    def select_all(self, snapshot: ResourceSnapshot | None = None) -> None:
        """Select exactly the ids of ``snapshot`` (the current one by default)."""
        if snapshot is not None and snapshot is not self._snapshot:
            self._snapshot = snapshot
        self._selected = set(self._snapshot.ids())

    def is_selected(self, id: PhoneNumberId) -> bool:
        return id in self._selected

    def current(self) -> FrozenSet[PhoneNumberId]:
        return frozenset(self._selected)

    @property
    def all_selected(self) -> bool:
        """State of the "select all" checkbox."""
        return len(self._snapshot) > 0 and len(self._selected) == len(self._snapshot)

    def __len__(self) -> int:
        return len(self._selected)
