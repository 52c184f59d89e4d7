"""Structured logging for resolutions, caches, and definition loading.

Purpose
    Every diagnostic the library emits goes through one logger, carries the
    same ``context`` payload, and stays silent until the host application
    configures handlers.

Contents
    - ``TRACE_ID``: correlation identifier for the current request or task.
    - ``get_logger``: the ``lib_cascade`` logger.
    - ``bind_trace_id``: set or reset ``TRACE_ID``.
    - ``log_debug`` / ``log_info`` / ``log_error``: level-specific emitters.
    - ``make_event``: ``resolver``/``key`` payload builder.

System Integration
    Sources, repositories, and the :class:`~lib_cascade.core.Cascade` manager
    log here; the domain layer never does. Records expose their fields as
    ``record.context`` for formatters and log shippers.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any, Final, Mapping

TRACE_ID: ContextVar[str | None] = ContextVar("lib_cascade_trace_id", default=None)
"""Identifier copied into every record's ``context`` while bound.

Why
    One incoming request may trigger many resolutions; a shared id lets log
    processors group them without passing ids through sources.
"""

_LOGGER: Final[logging.Logger] = logging.getLogger("lib_cascade")
_LOGGER.addHandler(logging.NullHandler())


def get_logger() -> logging.Logger:
    """Return the ``lib_cascade`` logger.

    A ``NullHandler`` is installed at import time; attach real handlers here
    or on the root logger to see output.
    """

    return _LOGGER


def bind_trace_id(trace_id: str | None) -> None:
    """Make *trace_id* the correlation id for subsequent log records.

    Passing ``None`` removes the binding. The value lives in a context
    variable, so threads and asyncio tasks keep separate ids.

    Examples
    --------
    >>> bind_trace_id('req-42')
    >>> TRACE_ID.get()
    'req-42'
    >>> bind_trace_id(None)
    >>> TRACE_ID.get() is None
    True
    """

    TRACE_ID.set(trace_id)


def log_debug(message: str, **fields: Any) -> None:
    _log(logging.DEBUG, message, fields)


def log_info(message: str, **fields: Any) -> None:
    _log(logging.INFO, message, fields)


def log_error(message: str, **fields: Any) -> None:
    """Log at error level; used for best-effort operations that failed."""

    _log(logging.ERROR, message, fields)


def make_event(
    resolver: str | None,
    key: str | None,
    extra: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Return ``{"resolver": ..., "key": ...}`` updated with *extra*.

    Resolution-related records always carry both keys, even when one of them
    does not apply (``None``), so queries over the logs stay uniform.

    Examples
    --------
    >>> make_event('settings', 'theme', {'found': True})
    {'resolver': 'settings', 'key': 'theme', 'found': True}
    >>> make_event(None, None)
    {'resolver': None, 'key': None}
    """

    event: dict[str, Any] = {"resolver": resolver, "key": key}
    if extra:
        event.update(extra)
    return event


def _log(level: int, message: str, fields: Mapping[str, Any]) -> None:
    if not _LOGGER.isEnabledFor(level):
        return
    context: dict[str, Any] = {"trace_id": TRACE_ID.get(), **fields}
    _LOGGER.log(level, message, extra={"context": context})
