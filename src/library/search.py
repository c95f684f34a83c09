# src/library/search.py
from __future__ import annotations

from typing import Iterable

from core.models import Item


def item_matches(item: Item, query: str) -> bool:
    q = (query or "").lower()
    if not q:
        return True
    title = (item.title or "").lower()
    tags = (item.tags or "").lower()
    return q in title or q in tags


def filter_items(items: Iterable[Item], query: str) -> list[Item]:
    """Case-insensitive substring match over title and style tags, order kept."""
    return [item for item in items if item_matches(item, query)]
