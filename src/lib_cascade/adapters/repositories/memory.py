"""In-memory resolver definition repository.

Also the base for repositories that load everything up front (files).
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Iterable, Mapping

from ...domain.errors import ResolverNotFound


class MappingRepository:
    """Serve resolver definitions from a mapping of ``name -> definition``.

    Examples
    --------
    >>> repo = MappingRepository({"prices": {"sources": []}})
    >>> repo.has("prices"), repo.has("stock")
    (True, False)
    >>> repo.get_many(["prices", "stock"])
    {'prices': {'sources': []}}
    """

    def __init__(self, resolvers: Mapping[str, Mapping[str, Any]] | None = None) -> None:
        self._resolvers: Mapping[str, Mapping[str, Any]] = MappingProxyType(dict(resolvers or {}))

    def has(self, name: str) -> bool:
        return name in self._resolvers

    def get(self, name: str) -> Mapping[str, Any]:
        if name not in self._resolvers:
            raise ResolverNotFound.for_name(name)
        return self._resolvers[name]

    def all(self) -> dict[str, Mapping[str, Any]]:
        return dict(self._resolvers)

    def get_many(self, names: Iterable[str]) -> dict[str, Mapping[str, Any]]:
        return {name: self._resolvers[name] for name in names if name in self._resolvers}

    def __len__(self) -> int:
        return len(self._resolvers)
