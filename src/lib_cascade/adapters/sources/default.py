"""In-process source adapters.

Purpose
-------
Provide the stock :class:`~lib_cascade.application.ports.Source`
implementations: static mappings, callbacks, the always-miss placeholder, and
composites that behave like one source.

Contents
--------
* :class:`BaseSource` – name validation plus default ``supports`` and
  ``metadata``.
* :class:`MappingSource` – immutable key/value lookup.
* :class:`CallbackSource` – delegates to user callables.
* :class:`NullSource` – always misses; a placeholder in chains and tests.
* :class:`ChainedSource` – several sources presented as one.
* :func:`mapping_source_name` – deterministic name for anonymous mappings.
* :func:`context_source` – source echoing values from the resolution context.

System Role
-----------
Registered on resolvers directly, through
:class:`~lib_cascade.conductors.SourceConductor` normalisation, or built from
definitions by :mod:`lib_cascade.definitions`.
"""

from __future__ import annotations

import hashlib
import json
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping, Optional

from ...application.cascade import run_cascade
from ...application.ports import Source
from ...domain.errors import InvalidSourceName

ResolverCallback = Callable[[str, Mapping[str, Any]], Any]
SupportsCallback = Callable[[str, Mapping[str, Any]], bool]


class BaseSource:
    """Common behaviour shared by the stock sources."""

    kind = "source"

    def __init__(self, name: str) -> None:
        if not isinstance(name, str) or not name:
            raise InvalidSourceName.for_name(name)
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def supports(self, key: str, context: Mapping[str, Any]) -> bool:
        return True

    def metadata(self) -> dict[str, Any]:
        return {"name": self._name, "type": self.kind}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r})"


class MappingSource(BaseSource):
    """Serve values from a static mapping.

    Why
    ----
    Defaults, fixtures, and overrides are usually plain dictionaries.

    What
    ----
    The mapping is copied and frozen on construction so later mutation of the
    caller's dict does not leak into resolution.

    Examples
    --------
    >>> source = MappingSource("defaults", {"theme": "dark", "retries": 0})
    >>> source.get("retries", {})
    0
    >>> source.get("missing", {}) is None
    True
    >>> source.metadata()["keys"]
    ['theme', 'retries']
    """

    kind = "mapping"

    def __init__(self, name: str, values: Mapping[str, Any]) -> None:
        super().__init__(name)
        self._values: Mapping[str, Any] = MappingProxyType(dict(values))

    @property
    def values(self) -> Mapping[str, Any]:
        return self._values

    def get(self, key: str, context: Mapping[str, Any]) -> Any:
        return self._values.get(key)

    def metadata(self) -> dict[str, Any]:
        return {**super().metadata(), "key_count": len(self._values), "keys": list(self._values)}


class CallbackSource(BaseSource):
    """Delegate lookups to user supplied callables.

    Parameters
    ----------
    name:
        Source name.
    resolver:
        ``resolver(key, context)`` returning a value or ``None``.
    supports:
        Optional ``supports(key, context)`` predicate; defaults to always true.
    transformer:
        Optional ``transformer(value)`` applied to hits only.

    Examples
    --------
    >>> upper = CallbackSource("upper", lambda key, ctx: key.upper(), supports=lambda key, ctx: key != "skip")
    >>> upper.get("abc", {}), upper.supports("skip", {})
    ('ABC', False)
    """

    kind = "callback"

    def __init__(
        self,
        name: str,
        resolver: ResolverCallback,
        supports: Optional[SupportsCallback] = None,
        transformer: Optional[Callable[[Any], Any]] = None,
    ) -> None:
        super().__init__(name)
        self._resolver = resolver
        self._supports = supports
        self._transformer = transformer

    def supports(self, key: str, context: Mapping[str, Any]) -> bool:
        if self._supports is None:
            return True
        return bool(self._supports(key, context))

    def get(self, key: str, context: Mapping[str, Any]) -> Any:
        value = self._resolver(key, context)
        if value is not None and self._transformer is not None:
            return self._transformer(value)
        return value

    def metadata(self) -> dict[str, Any]:
        return {
            **super().metadata(),
            "has_supports": self._supports is not None,
            "has_transformer": self._transformer is not None,
        }


class NullSource(BaseSource):
    """Never produce a value."""

    kind = "null"

    def get(self, key: str, context: Mapping[str, Any]) -> Any:
        return None


class ChainedSource(BaseSource):
    """Present an ordered group of sources as a single source.

    ``supports`` is true when any member supports the key; ``get`` returns the
    first hit among supporting members in the given order.

    Examples
    --------
    >>> group = ChainedSource("group", [NullSource("off"), MappingSource("on", {"k": False})])
    >>> group.get("k", {})
    False
    >>> group.metadata()["sources"]
    ['off', 'on']
    """

    kind = "chained"

    def __init__(self, name: str, sources: Iterable[Source]) -> None:
        super().__init__(name)
        self._sources: tuple[Source, ...] = tuple(sources)

    def supports(self, key: str, context: Mapping[str, Any]) -> bool:
        return any(source.supports(key, context) for source in self._sources)

    def get(self, key: str, context: Mapping[str, Any]) -> Any:
        return run_cascade(self._sources, (), key, context).value

    def metadata(self) -> dict[str, Any]:
        return {
            **super().metadata(),
            "source_count": len(self._sources),
            "sources": [source.name for source in self._sources],
        }


def mapping_source_name(values: Mapping[str, Any]) -> str:
    """Return a deterministic name derived from the content of *values*.

    Structurally identical mappings receive identical names.

    Examples
    --------
    >>> mapping_source_name({"a": 1, "b": 2}) == mapping_source_name({"b": 2, "a": 1})
    True
    >>> mapping_source_name({"a": 1}).startswith("mapping-")
    True
    """

    return "mapping-" + _fingerprint(values)


def context_source(name: str) -> CallbackSource:
    """Return a source that looks the key up in the resolution context.

    Examples
    --------
    >>> context_source("request").get("locale", {"locale": "de"})
    'de'
    """

    return CallbackSource(name, _echo_context)


def _echo_context(key: str, context: Mapping[str, Any]) -> Any:
    return context.get(key)


def _fingerprint(payload: Any) -> str:
    """Hash *payload* through canonical JSON (sorted keys, ``repr`` fallback)."""

    canonical = json.dumps(payload, sort_keys=True, default=repr, separators=(",", ":"))
    return hashlib.md5(canonical.encode("utf-8")).hexdigest()
