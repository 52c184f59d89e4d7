"""Library-wide tunables as an immutable value object.

Purpose
-------
Centralise the defaults shared by the caching decorator, the cached
repository, and the source conductor so applications can override them in one
place (directly or through ``LIB_CASCADE_*`` environment variables, see
:func:`lib_cascade.core.load_settings`).

Contents
--------
* :class:`CascadeSettings` – frozen dataclass with the defaults.
* :data:`DEFAULT_SETTINGS` – canonical instance used when callers pass nothing.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping

from .errors import CascadeError


@dataclass(frozen=True, slots=True)
class CascadeSettings:
    """Defaults applied when callers do not specify a value explicitly.

    Attributes
    ----------
    cache_ttl:
        Seconds a :class:`~lib_cascade.adapters.sources.cached.CacheSource`
        keeps a resolved value.
    cache_prefix:
        Prefix of generated value cache keys.
    repository_cache_prefix:
        Prefix used by :class:`~lib_cascade.adapters.repositories.cached.CachedRepository`.
    fallback_step:
        Priority gap inserted by ``SourceConductor.fallback_to``.
    anonymous_prefix:
        Prefix of names given to conductors that were never named.

    Examples
    --------
    >>> CascadeSettings.from_mapping({"cache": {"ttl": 60}}).cache_ttl
    60
    >>> CascadeSettings().fallback_step
    10
    """

    cache_ttl: int = 300
    cache_prefix: str = "cascade:"
    repository_cache_prefix: str = "cascade:resolvers:"
    fallback_step: int = 10
    anonymous_prefix: str = "anonymous-"

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> CascadeSettings:
        """Build settings from a nested payload such as the environment adapter returns.

        Nested sections are flattened with ``_`` so ``{"cache": {"ttl": 5}}``
        sets ``cache_ttl``. Unknown keys are ignored; values of the wrong type
        raise :class:`CascadeError`.
        """

        flat = _flatten(payload)
        known = {item.name: item for item in fields(cls)}
        values: dict[str, Any] = {}
        for name, value in flat.items():
            if name not in known:
                continue
            expected = int if known[name].type in ("int", int) else str
            if expected is int and (isinstance(value, bool) or not isinstance(value, int)):
                raise CascadeError(f"Setting '{name}' must be an integer, got {type(value).__name__}")
            values[name] = value if expected is int else str(value)
        return cls(**values)


def _flatten(payload: Mapping[str, Any], prefix: str = "") -> dict[str, Any]:
    flat: dict[str, Any] = {}
    for key, value in payload.items():
        name = f"{prefix}_{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            flat.update(_flatten(value, name))
        else:
            flat[name.lower()] = value
    return flat


DEFAULT_SETTINGS = CascadeSettings()
"""Canonical settings instance used when no explicit settings are supplied."""
