# src/library/selection.py
from __future__ import annotations

from typing import Iterable

from core.models import Item


class SelectionSet:
    """
    Ids the user marked for batch download.

    Membership does not follow the item lifecycle: an id whose item vanished
    from the library simply never matches anything again.
    """

    def __init__(self, ids: Iterable[str] = ()):
        self._ids: set[str] = set(ids)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    @property
    def ids(self) -> frozenset[str]:
        return frozenset(self._ids)

    def toggle(self, item_id: str) -> bool:
        """Flip membership; returns True if the id is now selected."""
        if item_id in self._ids:
            self._ids.discard(item_id)
            return False
        self._ids.add(item_id)
        return True

    def select_all(self, items: Iterable[Item]) -> None:
        self._ids = {item.id for item in items if item.is_retrievable}

    def clear(self) -> None:
        self._ids.clear()

    def selected_in(self, items: Iterable[Item]) -> list[Item]:
        return [item for item in items if item.id in self._ids]
