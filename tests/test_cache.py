"""Tests for the in-memory TTL cache."""

from __future__ import annotations

import threading

from signupgate.cache import TTLCache

from conftest import FakeClock


def test_get_returns_value_until_expiry():
    clock = FakeClock()
    cache = TTLCache(default_ttl=10, clock=clock)

    cache.set("5BAA6", "payload")
    assert cache.get("5BAA6") == "payload"

    clock.advance(9.9)
    assert cache.get("5BAA6") == "payload"

    clock.advance(0.1)
    assert cache.get("5BAA6") is None
    assert "5BAA6" not in cache


def test_missing_key_is_absent():
    cache = TTLCache()
    assert cache.get("nope") is None


def test_set_overwrites_and_refreshes_expiry():
    clock = FakeClock()
    cache = TTLCache(default_ttl=10, clock=clock)

    cache.set("key", "old")
    clock.advance(8)
    cache.set("key", "new")
    clock.advance(8)

    assert cache.get("key") == "new"
    assert len(cache) == 1


def test_explicit_ttl_overrides_default():
    clock = FakeClock()
    cache = TTLCache(default_ttl=1000, clock=clock)

    cache.set("short", "value", ttl=5)
    clock.advance(5)

    assert cache.get("short") is None


def test_expired_entry_is_evicted_on_read():
    clock = FakeClock()
    cache = TTLCache(default_ttl=1, clock=clock)

    cache.set("a", 1)
    clock.advance(2)
    assert len(cache) == 1

    cache.get("a")
    assert len(cache) == 0


def test_concurrent_writers_on_distinct_keys():
    cache = TTLCache(default_ttl=60)

    def writer(start: int) -> None:
        for i in range(start, start + 200):
            cache.set(f"{i:05X}", str(i))

    threads = [threading.Thread(target=writer, args=(n * 200,)) for n in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(cache) == 1600
    assert cache.get(f"{1599:05X}") == "1599"
