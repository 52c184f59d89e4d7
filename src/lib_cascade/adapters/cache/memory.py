"""In-process TTL cache.

Purpose
-------
Satisfy the :class:`~lib_cascade.application.ports.Cache` port without an
external service so caching sources and repositories work out of the box and in
tests. Production deployments typically plug a shared cache instead.
"""

from __future__ import annotations

import threading
import time
from typing import Any, Callable, Optional


class MemoryCache:
    """Dictionary-backed cache with per-entry expiry.

    Parameters
    ----------
    clock:
        Monotonic time source in seconds; injectable for tests.

    Examples
    --------
    >>> now = [0.0]
    >>> cache = MemoryCache(clock=lambda: now[0])
    >>> cache.set("k", "v", ttl=10)
    True
    >>> cache.get("k")
    'v'
    >>> now[0] = 11.0
    >>> cache.get("k", "expired")
    'expired'
    """

    def __init__(self, *, clock: Optional[Callable[[], float]] = None) -> None:
        self._clock = clock or time.monotonic
        self._entries: dict[str, tuple[Any, Optional[float]]] = {}
        self._lock = threading.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            entry = self._live_entry(key)
        return default if entry is None else entry[0]

    def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        expires_at = None if ttl is None else self._clock() + ttl
        with self._lock:
            self._entries[key] = (value, expires_at)
        return True

    def has(self, key: str) -> bool:
        with self._lock:
            return self._live_entry(key) is not None

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> bool:
        with self._lock:
            self._entries.clear()
        return True

    def __len__(self) -> int:
        with self._lock:
            return sum(1 for key in list(self._entries) if self._live_entry(key) is not None)

    def _live_entry(self, key: str) -> Optional[tuple[Any, Optional[float]]]:
        """Return the entry for *key*, evicting it first when expired. Caller holds the lock."""

        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at = entry[1]
        if expires_at is not None and self._clock() >= expires_at:
            del self._entries[key]
            return None
        return entry
