"""Lifecycle events emitted by the :class:`~lib_cascade.core.Cascade` manager.

Events are plain frozen dataclasses so listeners (logging, metrics) can pattern
match on type without importing manager internals. They are dispatched strictly
after a resolution returns, never while it runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass(frozen=True)
class CascadeEvent:
    """Common base for manager events."""


@dataclass(frozen=True)
class SourceQueried(CascadeEvent):
    """One attempted source, emitted once per attempt in attempt order."""

    source_name: str
    key: str
    context: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ValueResolved(CascadeEvent):
    """A hit, emitted once per successful resolution."""

    key: str
    value: Any
    source_name: str
    duration_ms: float
    context: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ResolutionFailed(CascadeEvent):
    """A total miss, emitted once when no source produced a value."""

    key: str
    attempted_sources: tuple[str, ...]
    context: Mapping[str, Any] = field(default_factory=dict)
