"""Named, prioritised collection of sources.

Purpose
-------
Own the ``(source, priority)`` pairs and transformers of one resolver and run
the cascade defined in :mod:`lib_cascade.application.cascade` against them.

Contents
--------
* :class:`Resolver` – fluent container exposing ``resolve``, ``get`` and
  ``get_or_fail``.

System Role
-----------
Resolvers are registered in the :class:`~lib_cascade.core.Cascade` manager,
either directly (``define_resolver``), from conductors, or from persisted
definitions. The source list is single-writer: configure a resolver before
sharing it between threads.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from .adapters.sources.default import CallbackSource, MappingSource, ResolverCallback, SupportsCallback
from .adapters.transformers import TransformerLike, as_transformer
from .application.cascade import order_sources, run_cascade
from .application.ports import Source, Transformer
from .domain.errors import InvalidSourcePriority, ResolutionFailedForKey
from .domain.result import Result


class Resolver:
    """Resolve keys by querying sources in priority order.

    Why
    ----
    Applications layer values (request context, user settings, tenant
    defaults, global defaults); the resolver encodes that layering once.

    What
    ----
    Lower priorities are queried first and ties keep insertion order. The
    ordering is computed lazily and cached until another source is added.

    Examples
    --------
    >>> resolver = Resolver("settings")
    >>> _ = resolver.from_mapping("A", {"k": "a"}, priority=10).from_mapping("B", {"k": "b"}, priority=1)
    >>> result = resolver.resolve("k")
    >>> result.value, result.source_name, result.attempted_sources
    ('b', 'B', ('B',))
    >>> resolver.get("missing", default=lambda: "computed")
    'computed'
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._entries: list[tuple[Source, int]] = []
        self._transformers: list[Transformer] = []
        self._sorted = False

    @property
    def name(self) -> str:
        return self._name

    @property
    def transformers(self) -> tuple[Transformer, ...]:
        return tuple(self._transformers)

    def add_source(self, source: Source, priority: int = 0) -> Resolver:
        """Register *source* at *priority* (lower is queried earlier)."""

        if isinstance(priority, bool) or not isinstance(priority, int):
            raise InvalidSourcePriority.for_value(priority)
        self._entries.append((source, priority))
        self._sorted = False
        return self

    def from_callback(
        self,
        name: str,
        resolver: ResolverCallback,
        supports: Optional[SupportsCallback] = None,
        priority: int = 0,
    ) -> Resolver:
        """Register a :class:`CallbackSource` built from *resolver* and *supports*."""

        return self.add_source(CallbackSource(name, resolver, supports=supports), priority)

    def from_mapping(self, name: str, values: Mapping[str, Any], priority: int = 0) -> Resolver:
        """Register a :class:`MappingSource` serving *values*."""

        return self.add_source(MappingSource(name, values), priority)

    def transform(self, transformer: TransformerLike) -> Resolver:
        """Append a transformer applied to every found value."""

        self._transformers.append(as_transformer(transformer))
        return self

    def sources(self) -> list[Source]:
        """Return the sources in the order they will be queried."""

        self._ensure_sorted()
        return [source for source, _ in self._entries]

    def resolve(self, key: str, context: Optional[Mapping[str, Any]] = None) -> Result:
        """Run the cascade for *key* and return the full :class:`Result`."""

        return run_cascade(self.sources(), self._transformers, key, context or {})

    def get(
        self,
        key: str,
        context: Optional[Mapping[str, Any]] = None,
        default: Any = None,
    ) -> Any:
        """Return the resolved value or *default*.

        A callable *default* is invoked and its result returned. Defaults never
        pass through transformers.
        """

        result = self.resolve(key, context)
        if result.found:
            return result.value
        return resolve_default(default)

    def get_or_fail(self, key: str, context: Optional[Mapping[str, Any]] = None) -> Any:
        """Return the resolved value or raise :class:`ResolutionFailedForKey`."""

        result = self.resolve(key, context)
        if not result.found:
            raise ResolutionFailedForKey.with_attempted_sources(key, result.attempted_sources)
        return result.value

    def _ensure_sorted(self) -> None:
        if self._sorted:
            return
        self._entries = order_sources(self._entries)
        self._sorted = True

    def __repr__(self) -> str:
        return f"Resolver(name={self._name!r}, sources={len(self._entries)})"


def resolve_default(default: Any) -> Any:
    """Return ``default()`` when callable, otherwise *default* itself.

    Examples
    --------
    >>> resolve_default(lambda: 3), resolve_default("literal")
    (3, 'literal')
    """

    if callable(default):
        return default()
    return default
