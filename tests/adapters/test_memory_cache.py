from __future__ import annotations

from lib_cascade.adapters.cache.memory import MemoryCache


def test_set_get_has_delete() -> None:
    cache = MemoryCache()
    assert cache.get("k") is None
    assert cache.get("k", "fallback") == "fallback"
    assert cache.set("k", 1) is True
    assert cache.has("k") is True
    assert cache.get("k") == 1
    assert cache.delete("k") is True
    assert cache.delete("k") is False
    assert cache.has("k") is False


def test_entries_expire_after_ttl() -> None:
    now = [100.0]
    cache = MemoryCache(clock=lambda: now[0])
    cache.set("short", "a", ttl=1)
    cache.set("forever", "b")
    now[0] = 101.0
    assert cache.has("short") is False
    assert cache.get("forever") == "b"
    assert len(cache) == 1


def test_clear_drops_everything() -> None:
    cache = MemoryCache()
    cache.set("a", 1)
    cache.set("b", 2)
    assert cache.clear() is True
    assert len(cache) == 0
