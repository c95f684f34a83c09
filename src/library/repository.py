# src/library/repository.py
from __future__ import annotations

import logging
from typing import Iterable, Optional

from core.models import Item

logger = logging.getLogger(__name__)


class ItemRepository:
    """
    Client-side cache of the service library.

    The cached sequence is only ever replaced wholesale. `fetch()` is safe to
    call from a worker thread (it does not touch the cache); `replace()` must
    be called by the owner of the repository.
    """

    def __init__(self, client):
        self._client = client
        self._items: tuple[Item, ...] = ()

    @property
    def items(self) -> tuple[Item, ...]:
        return self._items

    def __len__(self) -> int:
        return len(self._items)

    def get(self, item_id: str) -> Optional[Item]:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def fetch(self) -> list[Item]:
        # raises RefreshTransportError; parse failures included
        raw = self._client.get_items()
        return [Item.from_api(entry) for entry in raw]

    def replace(self, items: Iterable[Item]) -> None:
        self._items = tuple(items)
        logger.debug("Repository replaced: %d item(s)", len(self._items))

    def refresh(self) -> list[Item]:
        items = self.fetch()
        self.replace(items)
        return items
