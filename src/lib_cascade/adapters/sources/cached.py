"""Caching decorator for sources.

Purpose
-------
Memoise expensive source lookups in an external
:class:`~lib_cascade.application.ports.Cache` while keeping the wrapped source
visible in diagnostics (``<inner>-cached``).

System Role
-----------
Usually installed by :meth:`lib_cascade.conductors.SourceConductor.cache`.
Cache reads propagate errors; cache writes are best effort and only logged on
failure so a broken cache never turns a hit into an exception.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any, Callable, Mapping, Optional

from ...application.ports import Cache, Source
from ...domain.settings import DEFAULT_SETTINGS
from ...observability import log_debug, log_error

KeyGenerator = Callable[[str, Mapping[str, Any]], str]


class CacheSource:
    """Decorate *inner* with a read-through cache.

    Parameters
    ----------
    inner:
        Source queried on cache misses.
    cache:
        External cache collaborator.
    ttl:
        Seconds to keep stored values; defaults to ``DEFAULT_SETTINGS.cache_ttl``.
    key_generator:
        Optional ``key_generator(key, context)`` returning the cache key.
    name:
        Overrides the default ``<inner>-cached`` name.
    prefix:
        Prefix of generated cache keys; defaults to ``DEFAULT_SETTINGS.cache_prefix``.

    Examples
    --------
    >>> from lib_cascade.adapters.cache.memory import MemoryCache
    >>> from lib_cascade.adapters.sources.default import MappingSource
    >>> cached = CacheSource(MappingSource("db", {"k": "v"}), MemoryCache(), ttl=60)
    >>> cached.name, cached.get("k", {})
    ('db-cached', 'v')
    """

    def __init__(
        self,
        inner: Source,
        cache: Cache,
        ttl: Optional[int] = None,
        key_generator: Optional[KeyGenerator] = None,
        *,
        name: Optional[str] = None,
        prefix: Optional[str] = None,
    ) -> None:
        self._inner = inner
        self._cache = cache
        self._ttl = DEFAULT_SETTINGS.cache_ttl if ttl is None else ttl
        self._key_generator = key_generator
        self._name = name or f"{inner.name}-cached"
        self._prefix = DEFAULT_SETTINGS.cache_prefix if prefix is None else prefix

    @property
    def name(self) -> str:
        return self._name

    @property
    def inner(self) -> Source:
        return self._inner

    @property
    def ttl(self) -> int:
        return self._ttl

    def supports(self, key: str, context: Mapping[str, Any]) -> bool:
        return self._inner.supports(key, context)

    def get(self, key: str, context: Mapping[str, Any]) -> Any:
        """Return the cached value for *key*, filling the cache on a miss."""

        cache_key = self.cache_key(key, context)
        cached = self._cache.get(cache_key)
        if cached is not None:
            log_debug("cache_hit", source=self._name, key=key, cache_key=cache_key)
            return cached

        log_debug("cache_miss", source=self._name, key=key, cache_key=cache_key)
        value = self._inner.get(key, context)
        if value is not None:
            self._store(cache_key, value)
        return value

    def metadata(self) -> dict[str, Any]:
        return {
            "name": self._name,
            "type": "cache",
            "ttl": self._ttl,
            "inner": self._inner.name,
            "has_key_generator": self._key_generator is not None,
        }

    def cache_key(self, key: str, context: Mapping[str, Any]) -> str:
        """Return the cache key used for *key* and *context*.

        The default scheme is stable across processes: an MD5 digest of the key
        followed by the canonical JSON form of the context.

        Examples
        --------
        >>> from lib_cascade.adapters.cache.memory import MemoryCache
        >>> from lib_cascade.adapters.sources.default import NullSource
        >>> source = CacheSource(NullSource("n"), MemoryCache())
        >>> source.cache_key("k", {"a": 1, "b": 2}) == source.cache_key("k", {"b": 2, "a": 1})
        True
        >>> source.cache_key("k", {}).startswith("cascade:")
        True
        """

        if self._key_generator is not None:
            return self._key_generator(key, context)
        serialised = json.dumps(dict(context), sort_keys=True, default=repr, separators=(",", ":"))
        digest = hashlib.md5((key + serialised).encode("utf-8")).hexdigest()
        return f"{self._prefix}{digest}"

    def _store(self, cache_key: str, value: Any) -> None:
        try:
            self._cache.set(cache_key, value, self._ttl)
        except Exception as exc:
            log_error("cache_write_failed", source=self._name, cache_key=cache_key, error=str(exc))

    def __repr__(self) -> str:
        return f"CacheSource(inner={self._inner!r}, ttl={self._ttl})"
