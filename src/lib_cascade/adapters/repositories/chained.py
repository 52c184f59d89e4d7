"""Ordered fallback across several definition repositories.

Purpose
-------
Let applications layer definition stores (local overrides, shared files, a
database) with the same first-wins semantics the resolver applies to values.

System Role
-----------
Earlier repositories take precedence everywhere: ``get`` stops at the first
member that has the name and ``all`` lets earlier members win collisions.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence

from ...application.ports import ResolverRepository
from ...domain.errors import EmptyChainedRepository, ResolverNotFound


class ChainedRepository:
    """Compose *repositories* into one, consulting them in order.

    Raises
    ------
    EmptyChainedRepository
        When constructed without any member repository.

    Examples
    --------
    >>> from lib_cascade.adapters.repositories.memory import MappingRepository
    >>> local = MappingRepository({"prices": {"origin": "local"}})
    >>> shared = MappingRepository({"prices": {"origin": "shared"}, "stock": {"origin": "shared"}})
    >>> chain = ChainedRepository([local, shared])
    >>> chain.get("prices")
    {'origin': 'local'}
    >>> sorted((name, body["origin"]) for name, body in chain.all().items())
    [('prices', 'local'), ('stock', 'shared')]
    """

    def __init__(self, repositories: Sequence[ResolverRepository]) -> None:
        members = tuple(repositories)
        if not members:
            raise EmptyChainedRepository.create()
        self._repositories = members

    @property
    def repositories(self) -> tuple[ResolverRepository, ...]:
        return self._repositories

    def has(self, name: str) -> bool:
        return any(repository.has(name) for repository in self._repositories)

    def get(self, name: str) -> Mapping[str, Any]:
        for repository in self._repositories:
            if repository.has(name):
                return repository.get(name)
        raise ResolverNotFound.for_name(name)

    def all(self) -> dict[str, Mapping[str, Any]]:
        merged: dict[str, Mapping[str, Any]] = {}
        for repository in reversed(self._repositories):
            merged.update(repository.all())
        return merged

    def get_many(self, names: Iterable[str]) -> dict[str, Mapping[str, Any]]:
        """Collect *names* member by member until all are found or members run out."""

        remaining = list(dict.fromkeys(names))
        found: dict[str, Mapping[str, Any]] = {}
        for repository in self._repositories:
            if not remaining:
                break
            batch = repository.get_many(remaining)
            for name, definition in batch.items():
                found.setdefault(name, definition)
            remaining = [name for name in remaining if name not in found]
        return found
