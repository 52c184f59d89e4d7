"""Translate persisted resolver definitions into :class:`Resolver` instances.

Purpose
-------
Repositories hand out plain mappings. This module validates their shape and
builds concrete sources so definitions stored in files or databases become
working resolvers.

Contents
--------
* :class:`ResolverDefinition` – record shape a repository may return.
* :func:`definition_body` – extract the source specification from a record.
* :func:`is_active` – honour the ``is_active`` flag of a record.
* :func:`build_resolver` – validate a body and build a :class:`Resolver`.
* :data:`SOURCE_FACTORIES` – builders for the stock source types.

Definition body
---------------
``{"sources": [{"name": str, "type": str, "priority": int, ...}]}``. Stock
types: ``mapping`` (alias ``array``; requires ``values``), ``context``,
``null``, and ``chained`` (requires nested ``sources``). Callers register
further types through the *factories* argument.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, MutableMapping, Optional, TypedDict

from .adapters.sources.default import ChainedSource, MappingSource, NullSource, context_source
from .application.cascade import order_sources
from .application.ports import Source
from .domain.errors import (
    DuplicateSourceName,
    InvalidSourceName,
    InvalidSourcePriority,
    InvalidSourceType,
    MissingSourceConfiguration,
)
from .resolver import Resolver

SourceFactory = Callable[[str, Mapping[str, Any]], Source]
"""Build a source from its validated ``name`` and raw specification."""


class ResolverDefinition(TypedDict, total=False):
    """Persisted resolver record.

    Attributes
    ----------
    name:
        Resolver name.
    description:
        Optional human readable description.
    definition:
        Source specification (see module documentation).
    metadata:
        Optional application data; not interpreted.
    is_active:
        Inactive records are skipped when loading resolvers.
    """

    name: str
    description: Optional[str]
    definition: Mapping[str, Any]
    metadata: Optional[Mapping[str, Any]]
    is_active: bool


def definition_body(record: Mapping[str, Any]) -> Mapping[str, Any]:
    """Return the source specification of *record*.

    Records in :class:`ResolverDefinition` shape carry it under ``definition``;
    anything else is treated as the body itself.

    Examples
    --------
    >>> definition_body({"name": "prices", "definition": {"sources": []}, "is_active": True})
    {'sources': []}
    >>> definition_body({"sources": []})
    {'sources': []}
    """

    nested = record.get("definition")
    if isinstance(nested, Mapping):
        return nested
    return record


def is_active(record: Mapping[str, Any]) -> bool:
    """Return ``False`` only for records explicitly flagged inactive."""

    return record.get("is_active", True) is not False


def build_resolver(
    name: str,
    body: Mapping[str, Any],
    factories: Optional[Mapping[str, SourceFactory]] = None,
) -> Resolver:
    """Validate *body* and return a populated :class:`Resolver` named *name*.

    Raises
    ------
    MissingSourceConfiguration
        ``sources`` or a type specific field is missing or malformed.
    InvalidSourceName / DuplicateSourceName
        A source name is empty, not a string, or repeated.
    InvalidSourcePriority
        A priority is not an integer.
    InvalidSourceType
        The ``type`` is not known to the stock or custom factories.

    Examples
    --------
    >>> resolver = build_resolver("theme", {"sources": [
    ...     {"name": "defaults", "type": "mapping", "priority": 100, "values": {"color": "blue"}},
    ...     {"name": "request", "type": "context"},
    ... ]})
    >>> resolver.get("color"), resolver.get("color", {"color": "red"})
    ('blue', 'red')
    """

    registry = _factories(factories)
    resolver = Resolver(name)
    for source, priority in _build_entries(body, registry):
        resolver.add_source(source, priority)
    return resolver


def _build_entries(body: Mapping[str, Any], registry: Mapping[str, SourceFactory]) -> list[tuple[Source, int]]:
    specs = body.get("sources") if isinstance(body, Mapping) else None
    if not isinstance(specs, list):
        raise MissingSourceConfiguration.for_key("sources")

    seen: set[str] = set()
    entries: list[tuple[Source, int]] = []
    for spec in specs:
        if not isinstance(spec, Mapping):
            raise MissingSourceConfiguration.for_key("name")
        name = _validated_name(spec)
        if name in seen:
            raise DuplicateSourceName.for_name(name)
        seen.add(name)
        entries.append((_build_source(name, spec, registry), _validated_priority(spec)))
    return entries


def _build_source(name: str, spec: Mapping[str, Any], registry: Mapping[str, SourceFactory]) -> Source:
    if "type" not in spec:
        raise MissingSourceConfiguration.for_key("type")
    source_type = spec["type"]
    factory = registry.get(source_type) if isinstance(source_type, str) else None
    if factory is None:
        raise InvalidSourceType.for_type(source_type, sorted(registry))
    return factory(name, spec)


def _validated_name(spec: Mapping[str, Any]) -> str:
    if "name" not in spec:
        raise MissingSourceConfiguration.for_key("name")
    name = spec["name"]
    if not isinstance(name, str) or not name.strip():
        raise InvalidSourceName.for_name(name)
    return name


def _validated_priority(spec: Mapping[str, Any]) -> int:
    priority = spec.get("priority", 0)
    if isinstance(priority, bool) or not isinstance(priority, int):
        raise InvalidSourcePriority.for_value(priority)
    return priority


def _mapping_factory(name: str, spec: Mapping[str, Any]) -> Source:
    values = spec.get("values")
    if not isinstance(values, Mapping):
        raise MissingSourceConfiguration.for_key("values")
    return MappingSource(name, values)


def _context_factory(name: str, spec: Mapping[str, Any]) -> Source:
    return context_source(name)


def _null_factory(name: str, spec: Mapping[str, Any]) -> Source:
    return NullSource(name)


def _chained_factory_for(registry: Mapping[str, SourceFactory]) -> SourceFactory:
    def _chained_factory(name: str, spec: Mapping[str, Any]) -> Source:
        entries = order_sources(_build_entries(spec, registry))
        return ChainedSource(name, [source for source, _ in entries])

    return _chained_factory


SOURCE_FACTORIES: Mapping[str, SourceFactory] = {
    "mapping": _mapping_factory,
    "array": _mapping_factory,
    "context": _context_factory,
    "null": _null_factory,
}
"""Stock source builders keyed by definition ``type``; ``chained`` is added per build."""


def _factories(custom: Optional[Mapping[str, SourceFactory]]) -> Mapping[str, SourceFactory]:
    registry: MutableMapping[str, SourceFactory] = dict(SOURCE_FACTORIES)
    registry.update(custom or {})
    registry.setdefault("chained", _chained_factory_for(registry))
    return registry
