"""Composition root for ``lib_cascade``.

Purpose
-------
Provide the single entry point that owns named resolvers, dispatches
resolution lifecycle events, and hands out the fluent conductors. Everything a
consumer needs is reachable from a :class:`Cascade` instance.

Contents
--------
* :class:`Cascade` – resolver registry, event dispatch, and timing.
* :func:`load_settings` – build :class:`CascadeSettings` from ``LIB_CASCADE_*``
  environment variables.

System Role
-----------
Conductors and application code call :meth:`Cascade.resolve_using`, which
times the resolver call and emits ``SourceQueried`` / ``ValueResolved`` /
``ResolutionFailed`` strictly after the resolver returns. Registry and
listener lists are plain instance state with a single-writer assumption.
"""

from __future__ import annotations

import time
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence, TypeVar

from .adapters.env.default import DefaultEnvLoader, default_env_prefix
from .adapters.transformers import TransformerLike
from .application.ports import ResolverRepository, Source
from .conductors import ResolutionConductor, SourceConductor, SourceLike
from .definitions import SourceFactory, build_resolver, definition_body, is_active
from .domain.errors import NoResolversRegistered, ResolverNotFoundWithSuggestions
from .domain.events import ResolutionFailed, SourceQueried, ValueResolved
from .domain.result import Result
from .domain.settings import DEFAULT_SETTINGS, CascadeSettings
from .observability import log_debug, log_info, make_event
from .resolver import Resolver, resolve_default

E = TypeVar("E")
Listener = Callable[[E], Any]


def load_settings(environ: Optional[Mapping[str, str]] = None) -> CascadeSettings:
    """Return settings with ``LIB_CASCADE_*`` overrides applied.

    Examples
    --------
    >>> load_settings({"LIB_CASCADE_CACHE__TTL": "60", "LIB_CASCADE_FALLBACK__STEP": "5"}).cache_ttl
    60
    >>> load_settings({}) == CascadeSettings()
    True
    """

    payload = DefaultEnvLoader(environ=environ).load(default_env_prefix())
    return CascadeSettings.from_mapping(payload)


class Cascade:
    """Registry of named resolvers and the facade over them.

    Why
    ----
    Applications define resolvers once (in code, through conductors, or from
    persisted definitions) and resolve by name everywhere else, with one place
    to observe every resolution.

    Parameters
    ----------
    settings:
        Defaults for cache TTLs, prefixes, and fallback priorities. Defaults to
        :data:`~lib_cascade.domain.settings.DEFAULT_SETTINGS`.

    Examples
    --------
    >>> cascade = Cascade()
    >>> _ = cascade.define_resolver("theme").from_mapping("defaults", {"color": "blue"})
    >>> seen = []
    >>> _ = cascade.on_resolved(lambda event: seen.append((event.key, event.source_name)))
    >>> cascade.using("theme").get("color")
    'blue'
    >>> seen
    [('color', 'defaults')]
    """

    def __init__(self, settings: Optional[CascadeSettings] = None) -> None:
        self._settings = settings or DEFAULT_SETTINGS
        self._resolvers: dict[str, Resolver] = {}
        self._source_queried_listeners: list[Listener[SourceQueried]] = []
        self._resolved_listeners: list[Listener[ValueResolved]] = []
        self._failed_listeners: list[Listener[ResolutionFailed]] = []

    @property
    def settings(self) -> CascadeSettings:
        return self._settings

    def from_source(self, source: SourceLike, priority: int = 0) -> SourceConductor:
        """Start a fluent source chain with *source* at *priority*."""

        return SourceConductor(self).add_source(source, priority)

    def using(self, name: str) -> ResolutionConductor:
        """Return a resolution conductor bound to the resolver *name*.

        Raises
        ------
        ResolverNotFound
            As :class:`ResolverNotFoundWithSuggestions` when other resolvers
            exist, :class:`NoResolversRegistered` otherwise.
        """

        self.get_resolver(name)
        return ResolutionConductor(self, name)

    def define_resolver(self, name: str) -> Resolver:
        """Create (or replace) an empty resolver named *name* and return it."""

        resolver = Resolver(name)
        self._resolvers[name] = resolver
        return resolver

    def register_source_chain(
        self,
        name: str,
        sources: Iterable[tuple[Source, int]],
        transformers: Sequence[TransformerLike] = (),
    ) -> Resolver:
        """Register ``(source, priority)`` pairs and *transformers* as resolver *name*.

        An existing resolver with the same name is replaced, not merged.
        """

        resolver = Resolver(name)
        for source, priority in sources:
            resolver.add_source(source, priority)
        for transformer in transformers:
            resolver.transform(transformer)
        self._resolvers[name] = resolver
        return resolver

    def register_resolver(self, resolver: Resolver) -> Resolver:
        """Register an already built *resolver* under its own name."""

        self._resolvers[resolver.name] = resolver
        return resolver

    def has_resolver(self, name: str) -> bool:
        return name in self._resolvers

    def resolver_names(self) -> list[str]:
        return list(self._resolvers)

    def get_resolver(self, name: str) -> Resolver:
        """Return the resolver registered as *name* or raise ``ResolverNotFound``."""

        try:
            return self._resolvers[name]
        except KeyError:
            if self._resolvers:
                raise ResolverNotFoundWithSuggestions.for_name(name, self._resolvers) from None
            raise NoResolversRegistered.for_name(name) from None

    def load_from_repository(
        self,
        repository: ResolverRepository,
        names: Optional[Iterable[str]] = None,
        *,
        factories: Optional[Mapping[str, SourceFactory]] = None,
    ) -> list[str]:
        """Build and register resolvers from persisted definitions.

        Parameters
        ----------
        repository:
            Definition store consulted through ``all()`` or ``get_many()``.
        names:
            Restrict loading to these resolver names; ``None`` loads everything.
        factories:
            Additional source builders keyed by definition ``type``.

        Returns
        -------
        list[str]
            Names of the resolvers that were registered. Inactive records are
            skipped.
        """

        records = repository.all() if names is None else repository.get_many(list(names))
        registered: list[str] = []
        for name, record in records.items():
            if not is_active(record):
                log_debug("resolver_skipped", **make_event(name, None, {"reason": "inactive"}))
                continue
            self.register_resolver(build_resolver(name, definition_body(record), factories))
            registered.append(name)
        log_info("resolvers_loaded", **make_event(None, None, {"count": len(registered)}))
        return registered

    def resolve_using(
        self,
        resolver_name: str,
        key: str,
        context: Optional[Mapping[str, Any]] = None,
    ) -> Result:
        """Resolve *key* with the named resolver, then emit lifecycle events."""

        resolver = self.get_resolver(resolver_name)
        context = dict(context or {})

        started = time.perf_counter()
        result = resolver.resolve(key, context)
        duration_ms = (time.perf_counter() - started) * 1000

        log_debug(
            "resolution_completed",
            **make_event(
                resolver_name,
                key,
                {
                    "found": result.found,
                    "source": result.source_name,
                    "attempted": list(result.attempted_sources),
                    "duration_ms": duration_ms,
                },
            ),
        )
        self._emit_source_queried(key, context, result)
        if result.found:
            self._emit_resolved(key, result, duration_ms, context)
        else:
            self._emit_failed(key, result, context)
        return result

    def get_using(
        self,
        resolver_name: str,
        key: str,
        context: Optional[Mapping[str, Any]] = None,
        default: Any = None,
    ) -> Any:
        """Return the resolved value or *default* (invoked when callable).

        Lookups go through :meth:`resolve_using`, so resolution listeners are
        notified exactly as for ``resolve_using``. Calling
        :meth:`Resolver.get` on a registered resolver skips them.
        """

        result = self.resolve_using(resolver_name, key, context)
        if result.found:
            return result.value
        return resolve_default(default)

    def get_many_using(
        self,
        resolver_name: str,
        keys: Iterable[str],
        context: Optional[Mapping[str, Any]] = None,
    ) -> dict[str, Result]:
        """Resolve every key in *keys*; misses appear as ``Result.not_found``."""

        return {key: self.resolve_using(resolver_name, key, context) for key in keys}

    def on_source_queried(self, listener: Listener[SourceQueried]) -> Cascade:
        self._source_queried_listeners.append(listener)
        return self

    def on_resolved(self, listener: Listener[ValueResolved]) -> Cascade:
        self._resolved_listeners.append(listener)
        return self

    def on_failed(self, listener: Listener[ResolutionFailed]) -> Cascade:
        self._failed_listeners.append(listener)
        return self

    def _emit_source_queried(self, key: str, context: Mapping[str, Any], result: Result) -> None:
        for source_name in result.attempted_sources:
            event = SourceQueried(source_name=source_name, key=key, context=context)
            for listener in self._source_queried_listeners:
                listener(event)

    def _emit_resolved(self, key: str, result: Result, duration_ms: float, context: Mapping[str, Any]) -> None:
        event = ValueResolved(
            key=key,
            value=result.value,
            source_name=result.source_name or "unknown",
            duration_ms=duration_ms,
            context=context,
        )
        for listener in self._resolved_listeners:
            listener(event)

    def _emit_failed(self, key: str, result: Result, context: Mapping[str, Any]) -> None:
        event = ResolutionFailed(key=key, attempted_sources=result.attempted_sources, context=context)
        for listener in self._failed_listeners:
            listener(event)

    def __repr__(self) -> str:
        return f"Cascade(resolvers={self.resolver_names()!r})"
