from __future__ import annotations

import mongomock

from edumanage.auth.sessions import MemorySessionStore, MongoSessionStore


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_memory_store_round_trip_and_destroy():
    store = MemorySessionStore()

    store.set("sid", {"user_id": 1}, 60)
    assert store.get("sid") == {"user_id": 1}

    store.destroy("sid")
    assert store.get("sid") is None


def test_memory_store_expires_entries():
    clock = FakeClock()
    store = MemorySessionStore(clock=clock)
    store.set("a", {"user_id": 1}, 60)
    store.set("b", {"user_id": 2}, 600)

    clock.now += 61

    assert store.get("a") is None
    assert store.get("b") == {"user_id": 2}
    assert len(store) == 1


def test_memory_store_evicts_abandoned_entries_on_write():
    clock = FakeClock()
    store = MemorySessionStore(clock=clock)
    for i in range(100):
        store.set(f"old-{i}", {"user_id": i}, 60)

    clock.now += 10_000
    store.set("fresh", {"user_id": 1}, 60)

    assert list(store._entries) == ["fresh"]


def test_memory_store_returns_copies():
    store = MemorySessionStore()
    store.set("sid", {"user_id": 1}, 60)

    store.get("sid")["user_id"] = 99

    assert store.get("sid") == {"user_id": 1}


def test_mongo_store_round_trip_and_expiry():
    collection = mongomock.MongoClient()["edumanage_test"]["sessions"]
    store = MongoSessionStore(collection)
    store.ensure_indexes()

    store.set("live", {"user_id": 1}, 60)
    store.set("dead", {"user_id": 2}, -1)

    assert store.get("live") == {"user_id": 1}
    assert store.get("dead") is None

    store.destroy("live")
    assert store.get("live") is None
