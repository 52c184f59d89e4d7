"""Immutable outcome of a single cascade resolution.

Purpose
-------
Carry the resolved value together with the diagnostics a caller needs to
explain it: which source answered, which sources were tried, and the metadata
the winning source reported.

Contents
--------
* :class:`Result` – frozen value object with the :meth:`Result.resolved` and
  :meth:`Result.not_found` factories.

System Role
-----------
Created fresh by :meth:`lib_cascade.resolver.Resolver.resolve` on
every call and handed to the manager, conductors, and event listeners. Nothing
mutates a result after construction.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Iterable, Mapping

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..application.ports import Source


@dataclass(frozen=True, slots=True)
class Result:
    """Value-or-miss record produced by a resolution attempt.

    Why
    ----
    Callers and observers need more than the value: debugging a cascade means
    knowing the path taken through it.

    What
    ----
    ``found`` is the only reliable hit indicator; falsy values such as ``0`` or
    ``""`` are legitimate hits. A miss always carries ``value=None``,
    ``source=None`` and empty metadata.

    Examples
    --------
    >>> miss = Result.not_found(["env", "defaults"])
    >>> miss.found, miss.value, miss.attempted_sources
    (False, None, ('env', 'defaults'))
    >>> dict(miss.metadata)
    {}
    """

    value: Any
    found: bool
    source: Source | None
    attempted_sources: tuple[str, ...]
    metadata: Mapping[str, Any]

    def __post_init__(self) -> None:
        """Reject misses that carry data, then freeze the attempted list and metadata."""

        if not self.found and (self.value is not None or self.source is not None or self.metadata):
            raise ValueError("A result that was not found cannot carry a value, source, or metadata")
        object.__setattr__(self, "attempted_sources", tuple(self.attempted_sources))
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    @classmethod
    def resolved(
        cls,
        value: Any,
        source: Source,
        attempted: Iterable[str],
        metadata: Mapping[str, Any] | None = None,
    ) -> Result:
        """Return a successful result for *value* supplied by *source*."""

        return cls(
            value=value,
            found=True,
            source=source,
            attempted_sources=tuple(attempted),
            metadata=metadata or {},
        )

    @classmethod
    def not_found(cls, attempted: Iterable[str]) -> Result:
        """Return a miss that remembers which sources were *attempted*."""

        return cls(value=None, found=False, source=None, attempted_sources=tuple(attempted), metadata={})

    @property
    def source_name(self) -> str | None:
        """Name of the winning source, ``None`` on a miss."""

        return self.source.name if self.source is not None else None
