"""Application-layer cascade policy.

Purpose
-------
Turn an ordered collection of sources into a single :class:`Result` for one
key. The module is free of I/O and registry state so it can be reused by the
stateful :class:`lib_cascade.resolver.Resolver` and by composite sources alike.

Contents
    - ``order_sources``: stable priority sort of ``(source, priority)`` pairs.
    - ``run_cascade``: the first-hit-wins scan with attempt bookkeeping.
    - ``apply_transformers``: ordered post-processing of a found value.

System Role
-----------
Lower priorities are consulted first; equal priorities keep insertion order.
Exceptions raised by sources or transformers propagate to the caller
untouched: the scan recovers from misses, not from faults.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence

from ..domain.result import Result
from .ports import Source, Transformer


def order_sources(entries: Iterable[tuple[Source, int]]) -> list[tuple[Source, int]]:
    """Return *entries* sorted ascending by priority, preserving insertion order on ties.

    Examples
    --------
    >>> from types import SimpleNamespace
    >>> a, b, c = (SimpleNamespace(name=n) for n in "abc")
    >>> [s.name for s, _ in order_sources([(a, 10), (b, 1), (c, 10)])]
    ['b', 'a', 'c']
    """

    return sorted(entries, key=lambda entry: entry[1])


def run_cascade(
    sources: Iterable[Source],
    transformers: Sequence[Transformer],
    key: str,
    context: Mapping[str, Any],
) -> Result:
    """Query *sources* in order and return the first non-``None`` value.

    Why
    ----
    Centralising the scan keeps the hit rule (presence, not truthiness) and
    the attempted-source bookkeeping identical everywhere.

    What
    ----
    Sources whose ``supports`` returns ``False`` are skipped and not recorded.
    Every other source is recorded before its ``get`` runs. The first hit is
    passed through *transformers* and returned with the source metadata;
    later sources are never queried.

    Examples
    --------
    >>> from lib_cascade.adapters.sources.default import MappingSource
    >>> result = run_cascade([MappingSource("b", {"k": "b"}), MappingSource("a", {"k": "a"})], [], "k", {})
    >>> result.value, result.source_name, result.attempted_sources
    ('b', 'b', ('b',))
    >>> run_cascade([], [], "k", {}).found
    False
    """

    attempted: list[str] = []
    for source in sources:
        if not source.supports(key, context):
            continue
        attempted.append(source.name)
        value = source.get(key, context)
        if value is None:
            continue
        value = apply_transformers(value, source, transformers)
        return Result.resolved(value, source, attempted, source.metadata())
    return Result.not_found(attempted)


def apply_transformers(value: Any, source: Source, transformers: Sequence[Transformer]) -> Any:
    """Feed *value* through *transformers* in registration order."""

    for transformer in transformers:
        value = transformer.transform(value, source)
    return value
