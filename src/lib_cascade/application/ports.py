"""Application-layer ports describing collaborator responsibilities.

Purpose
-------
Define the structural contracts that sources, transformers, caches, and
definition repositories must satisfy so the resolver and the manager can
orchestrate behaviour without depending on concrete implementations.

Contents
--------
* :class:`Source` – named value provider queried by the cascade.
* :class:`Transformer` – post-processing step applied to found values.
* :class:`Cache` – external key-value store used by caching decorators.
* :class:`ResolverRepository` – store of persisted resolver definitions.
* :class:`DefinitionLoader` – parser turning a definition file into a mapping.

System Role
-----------
These protocols enforce Dependency Inversion. Every adapter in
``lib_cascade.adapters`` implements one of them; user code may supply its own
implementations without subclassing anything.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Protocol, runtime_checkable


@runtime_checkable
class Source(Protocol):
    """Provide values for keys, optionally depending on a context.

    Why
    ----
    The cascade only needs a pre-check and a lookup; keeping the contract this
    small lets plain objects, decorators, and composites participate equally.

    Contract
    --------
    ``get`` returns ``None`` for a miss. Every other value, including ``0``,
    ``""`` and ``False``, is a hit. ``supports`` must be free of side effects.
    """

    @property
    def name(self) -> str:
        """Unique, stable source name recorded in attempted-source lists."""

    def supports(self, key: str, context: Mapping[str, Any]) -> bool:
        """Return ``True`` when the source should be queried for *key*."""

    def get(self, key: str, context: Mapping[str, Any]) -> Any:
        """Return the value for *key* or ``None``."""

    def metadata(self) -> Mapping[str, Any]:
        """Describe the source for diagnostics attached to results."""


@runtime_checkable
class Transformer(Protocol):
    """Rewrite a found value, optionally depending on the source that produced it."""

    def transform(self, value: Any, source: Source) -> Any:
        """Return the transformed *value*."""


@runtime_checkable
class Cache(Protocol):
    """Minimal TTL key-value store in the spirit of a simple cache interface.

    Why
    ----
    Caches are external collaborators (Redis, memcached, in-process dicts);
    the library only needs these operations.
    """

    def get(self, key: str, default: Any = None) -> Any:
        """Return the cached value or *default*."""

    def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Store *value* for *ttl* seconds (``None`` keeps it indefinitely)."""

    def has(self, key: str) -> bool:
        """Return ``True`` when *key* holds a live entry."""

    def delete(self, key: str) -> bool:
        """Remove *key*; return ``True`` when an entry existed."""

    def clear(self) -> bool:
        """Drop every entry."""


@runtime_checkable
class ResolverRepository(Protocol):
    """Expose persisted resolver definitions by name.

    Contract
    --------
    ``get`` raises :class:`~lib_cascade.domain.errors.ResolverNotFound` when
    the name is absent. ``get_many`` may return partial results; omitted names
    were not found in this repository.
    """

    def has(self, name: str) -> bool:
        """Return ``True`` when a definition named *name* exists."""

    def get(self, name: str) -> Mapping[str, Any]:
        """Return the definition stored under *name*."""

    def all(self) -> Mapping[str, Mapping[str, Any]]:
        """Return every definition keyed by name."""

    def get_many(self, names: Iterable[str]) -> Mapping[str, Mapping[str, Any]]:
        """Return the definitions found for *names*."""


class DefinitionLoader(Protocol):
    """Parse a structured definition file into a mapping.

    Why
    ----
    Segregate parsing concerns (JSON/YAML/TOML) from repository logic.
    """

    def load(self, path: str) -> Mapping[str, object]:
        """Read *path* and return a mapping or raise a ``RepositoryError``."""
