"""Read-through cache in front of a definition repository."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from ...application.ports import Cache, ResolverRepository
from ...domain.settings import DEFAULT_SETTINGS
from ...observability import log_debug


class CachedRepository:
    """Cache individual definitions fetched from *inner*.

    ``all()`` is passed through uncached; it is typically called once while
    bootstrapping. ``flush()`` clears the whole cache, so give definitions a
    dedicated cache instance.

    Examples
    --------
    >>> from lib_cascade.adapters.cache.memory import MemoryCache
    >>> from lib_cascade.adapters.repositories.memory import MappingRepository
    >>> cache = MemoryCache()
    >>> repo = CachedRepository(MappingRepository({"prices": {"sources": []}}), cache)
    >>> repo.get("prices")
    {'sources': []}
    >>> cache.has("cascade:resolvers:prices")
    True
    """

    def __init__(
        self,
        inner: ResolverRepository,
        cache: Cache,
        ttl: Optional[int] = None,
        prefix: Optional[str] = None,
    ) -> None:
        self._inner = inner
        self._cache = cache
        self._ttl = ttl
        self._prefix = DEFAULT_SETTINGS.repository_cache_prefix if prefix is None else prefix

    def get(self, name: str) -> Mapping[str, Any]:
        cache_key = self._cache_key(name)
        cached = self._cache.get(cache_key)
        if isinstance(cached, Mapping):
            log_debug("definition_cache_hit", resolver=name)
            return cached
        definition = self._inner.get(name)
        self._cache.set(cache_key, definition, self._ttl)
        return definition

    def has(self, name: str) -> bool:
        if self._cache.has(self._cache_key(name)):
            return True
        return self._inner.has(name)

    def all(self) -> Mapping[str, Mapping[str, Any]]:
        return self._inner.all()

    def get_many(self, names: Iterable[str]) -> dict[str, Mapping[str, Any]]:
        result: dict[str, Mapping[str, Any]] = {}
        uncached: list[str] = []
        for name in names:
            cached = self._cache.get(self._cache_key(name))
            if isinstance(cached, Mapping):
                result[name] = cached
            else:
                uncached.append(name)
        if uncached:
            for name, definition in self._inner.get_many(uncached).items():
                self._cache.set(self._cache_key(name), definition, self._ttl)
                result[name] = definition
        return result

    def forget(self, name: str) -> bool:
        """Drop the cached definition for *name*."""

        return self._cache.delete(self._cache_key(name))

    def flush(self) -> bool:
        """Clear the entire backing cache."""

        return self._cache.clear()

    def _cache_key(self, name: str) -> str:
        return f"{self._prefix}{name}"
