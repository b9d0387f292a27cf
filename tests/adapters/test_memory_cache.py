from __future__ import annotations

from typing import TYPE_CHECKING

from apisource.adapters.memory_cache import MemoryCacheStore

if TYPE_CHECKING:
    from tests.support.fakes import FakeClock


def test_entry_is_returned_until_it_expires(clock: FakeClock) -> None:
    store = MemoryCacheStore(clock=clock)

    entry = store.set("key", {"items": [1, 2]}, ttl_seconds=60)

    assert store.get("key") == entry
    clock.advance(seconds=59)
    cached = store.get("key")
    assert cached is not None
    assert cached.value == {"items": [1, 2]}

    clock.advance(seconds=1)
    assert store.get("key") is None
    assert len(store) == 0


def test_set_replaces_existing_entry(clock: FakeClock) -> None:
    store = MemoryCacheStore(clock=clock)
    store.set("key", "old", ttl_seconds=10)

    store.set("key", "new", ttl_seconds=10)

    cached = store.get("key")
    assert cached is not None
    assert cached.value == "new"
    assert len(store) == 1


def test_missing_key() -> None:
    assert MemoryCacheStore().get("missing") is None
