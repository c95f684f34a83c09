import pytest
from conftest import FakeClient

from core.errors import RefreshTransportError
from library.repository import ItemRepository


def test_refresh_replaces_items_wholesale():
    client = FakeClient(items=[{"id": "a", "status": "complete"}, {"id": "b", "status": "queued"}])
    repo = ItemRepository(client)
    repo.refresh()

    client.items = [{"id": "c", "status": "queued"}]
    repo.refresh()

    assert [i.id for i in repo.items] == ["c"]
    assert repo.get("a") is None
    assert repo.get("c").id == "c"


def test_failed_refresh_keeps_previous_items():
    client = FakeClient(items=[{"id": "a", "status": "complete"}])
    repo = ItemRepository(client)
    repo.refresh()

    client.fail_refresh = True
    with pytest.raises(RefreshTransportError):
        repo.refresh()

    assert [i.id for i in repo.items] == ["a"]


def test_parse_failure_keeps_previous_items():
    client = FakeClient(items=[{"id": "a"}])
    repo = ItemRepository(client)
    repo.refresh()

    client.items = [{"id": "b"}, {"title": "missing id"}]
    with pytest.raises(RefreshTransportError):
        repo.refresh()

    assert [i.id for i in repo.items] == ["a"]


def test_fetch_does_not_touch_the_cache():
    client = FakeClient(items=[{"id": "a"}])
    repo = ItemRepository(client)

    fetched = repo.fetch()

    assert [i.id for i in fetched] == ["a"]
    assert len(repo) == 0
