"""Read library settings overrides from the process environment.

Variables named ``LIB_CASCADE_<SECTION>__<FIELD>`` become nested entries of
the payload handed to
:meth:`lib_cascade.domain.settings.CascadeSettings.from_mapping`; for example
``LIB_CASCADE_CACHE__TTL=60`` yields ``{"cache": {"ttl": 60}}``. Values that
look like booleans, ``null``/``none``, integers, or floats are converted.
"""

from __future__ import annotations

import os
from typing import Mapping, Optional

from ...observability import log_debug

ENV_SLUG = "lib-cascade"

_BOOLEANS = {"true": True, "false": False}
_NULLS = frozenset({"null", "none"})


def default_env_prefix(slug: str = ENV_SLUG) -> str:
    """Return *slug* as an upper-case, underscore separated prefix.

    Examples
    --------
    >>> default_env_prefix()
    'LIB_CASCADE'
    """

    return slug.upper().replace("-", "_")


class DefaultEnvLoader:
    """Collect prefixed variables from *environ* (``os.environ`` by default)."""

    def __init__(self, *, environ: Optional[Mapping[str, str]] = None) -> None:
        self._environ = os.environ if environ is None else environ

    def load(self, prefix: str) -> dict[str, object]:
        """Return the nested, lower-cased payload for variables under *prefix*.

        Examples
        --------
        >>> env = {'LIB_CASCADE_CACHE__TTL': '60', 'LIB_CASCADE_CACHE__PREFIX': 'app:', 'HOME': '/root'}
        >>> DefaultEnvLoader(environ=env).load('LIB_CASCADE')
        {'cache': {'ttl': 60, 'prefix': 'app:'}}
        """

        marker = prefix.rstrip("_") + "_" if prefix else ""
        payload: dict[str, object] = {}
        for name, raw in self._environ.items():
            if not name.startswith(marker) or name == marker:
                continue
            assign_nested(payload, name[len(marker) :], _coerce(raw))
        log_debug("settings_env_loaded", prefix=prefix, sections=sorted(payload))
        return payload


def assign_nested(target: dict[str, object], key: str, value: object) -> None:
    """Store *value* under the ``__`` separated, lower-cased path *key*.

    Raises
    ------
    ValueError
        When a path segment already holds a scalar.

    Examples
    --------
    >>> data: dict[str, object] = {}
    >>> assign_nested(data, 'CACHE__TTL', 5)
    >>> data
    {'cache': {'ttl': 5}}
    """

    *parents, leaf = key.lower().split("__")
    node = target
    for segment in parents:
        child = node.setdefault(segment, {})
        if not isinstance(child, dict):
            raise ValueError(f"Cannot nest '{key}' below scalar setting '{segment}'")
        node = child
    node[leaf] = value


def _coerce(raw: str) -> object:
    """Convert *raw* into a bool, ``None``, int, or float when it looks like one.

    Examples
    --------
    >>> _coerce('true'), _coerce('10'), _coerce('-2'), _coerce('3.5'), _coerce('cascade:')
    (True, 10, -2, 3.5, 'cascade:')
    """

    lowered = raw.lower()
    if lowered in _BOOLEANS:
        return _BOOLEANS[lowered]
    if lowered in _NULLS:
        return None
    if (raw[1:] if raw.startswith("-") else raw).isdigit():
        return int(raw)
    try:
        return float(raw)
    except ValueError:
        return raw
