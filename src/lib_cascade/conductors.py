"""Fluent builders over the :class:`~lib_cascade.core.Cascade` manager.

Purpose
-------
Offer two ergonomic entry points: :class:`SourceConductor` accumulates a source
chain and registers it as a resolver; :class:`ResolutionConductor` binds
context and transformers for repeated lookups against a named resolver.

Contents
--------
* :class:`SourceConductor` – mutable builder (``cascade.from_source(...)``).
* :class:`ResolutionConductor` – immutable binder (``cascade.using(...)``).
* :func:`normalize_source` – turns strings and mappings into sources.
* :func:`normalize_context` – turns mappings and domain objects into context.

System Role
-----------
Conductors never resolve on their own; every lookup goes through
:meth:`Cascade.resolve_using` so events and timing stay centralised.
"""

from __future__ import annotations

import uuid
from types import MappingProxyType
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Optional, Union

from .adapters.sources.cached import CacheSource, KeyGenerator
from .adapters.sources.default import MappingSource, context_source, mapping_source_name
from .adapters.transformers import TransformerLike, as_transformer
from .application.cascade import apply_transformers
from .application.ports import Cache, Source, Transformer
from .domain.errors import InvalidSource, InvalidSourcePriority, ResolutionFailedForKey
from .domain.result import Result
from .resolver import resolve_default

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .core import Cascade

SourceLike = Union[Source, str, Mapping[str, Any]]


class SourceConductor:
    """Accumulate sources and transformers, then resolve through the manager.

    Why
    ----
    Ad-hoc chains ("request context, then tenant defaults, then globals")
    should not require naming and registering a resolver up front.

    What
    ----
    ``named`` registers the chain under an explicit name. Without it, the first
    lookup registers the chain under a unique anonymous name and every later
    lookup reuses that registration.

    Examples
    --------
    >>> from lib_cascade import Cascade
    >>> chain = Cascade().from_source("request").fallback_to({"locale": "en"})
    >>> chain.get("locale", {"locale": "de"}), chain.get("locale")
    ('de', 'en')
    """

    def __init__(self, manager: Cascade) -> None:
        self._manager = manager
        self._sources: list[tuple[Source, int]] = []
        self._transformers: list[Transformer] = []
        self._resolver_name: Optional[str] = None

    @property
    def resolver_name(self) -> Optional[str]:
        return self._resolver_name

    def add_source(self, source: SourceLike, priority: int = 0) -> SourceConductor:
        if isinstance(priority, bool) or not isinstance(priority, int):
            raise InvalidSourcePriority.for_value(priority)
        self._sources.append((normalize_source(source), priority))
        return self._refresh()

    def fallback_to(self, source: SourceLike, priority: Optional[int] = None) -> SourceConductor:
        """Add *source* after every existing one.

        Without an explicit *priority* the source lands ``fallback_step`` (10 by
        default) above the highest priority so far.
        """

        if priority is None:
            highest = max((entry[1] for entry in self._sources), default=0)
            priority = highest + self._manager.settings.fallback_step
        return self.add_source(source, priority)

    def cache(
        self,
        cache: Cache,
        ttl: Optional[int] = None,
        key_generator: Optional[KeyGenerator] = None,
    ) -> SourceConductor:
        """Wrap the most recently added source in a :class:`CacheSource`.

        Does nothing when no source has been added yet.
        """

        if not self._sources:
            return self
        source, priority = self._sources[-1]
        settings = self._manager.settings
        cached = CacheSource(
            source,
            cache,
            ttl=settings.cache_ttl if ttl is None else ttl,
            key_generator=key_generator,
            prefix=settings.cache_prefix,
        )
        self._sources[-1] = (cached, priority)
        return self._refresh()

    def transform(self, transformer: TransformerLike) -> SourceConductor:
        self._transformers.append(as_transformer(transformer))
        return self._refresh()

    def named(self, name: str) -> SourceConductor:
        """Register the accumulated chain as resolver *name*.

        Sources and transformers added afterwards update the registration.
        """

        self._resolver_name = name
        return self._refresh()

    def get(self, key: str, context: Optional[Mapping[str, Any]] = None, default: Any = None) -> Any:
        return self._manager.get_using(self._ensure_registered(), key, context, default)

    def resolve(self, key: str, context: Optional[Mapping[str, Any]] = None) -> Result:
        return self._manager.resolve_using(self._ensure_registered(), key, context)

    def get_or_fail(self, key: str, context: Optional[Mapping[str, Any]] = None) -> Any:
        result = self.resolve(key, context)
        if not result.found:
            raise ResolutionFailedForKey.with_attempted_sources(key, result.attempted_sources)
        return result.value

    def get_many(self, keys: Iterable[str], context: Optional[Mapping[str, Any]] = None) -> dict[str, Result]:
        return self._manager.get_many_using(self._ensure_registered(), keys, context)

    def _refresh(self) -> SourceConductor:
        if self._resolver_name is not None:
            self._manager.register_source_chain(self._resolver_name, self._sources, self._transformers)
        return self

    def _ensure_registered(self) -> str:
        if self._resolver_name is None:
            name = f"{self._manager.settings.anonymous_prefix}{uuid.uuid4().hex}"
            self.named(name)
            return name
        return self._resolver_name


@dataclass(frozen=True)
class ResolutionConductor:
    """Immutable view of a named resolver with bound context and transformers.

    Every configuring call returns a new conductor, so partially configured
    conductors can be shared and specialised freely.

    Examples
    --------
    >>> from lib_cascade import Cascade
    >>> cascade = Cascade()
    >>> _ = cascade.define_resolver("greeting").from_callback("ctx", lambda key, ctx: ctx.get("name"))
    >>> base = cascade.using("greeting")
    >>> shout = base.for_context({"name": "ada"}).transform(lambda value, source: value.upper())
    >>> shout.get("anything"), base.get("anything", default="nobody")
    ('ADA', 'nobody')
    """

    manager: Cascade
    resolver_name: str
    context: Mapping[str, Any] = field(default_factory=dict, hash=False)
    transformers: tuple[Transformer, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "context", MappingProxyType(dict(self.context)))

    def for_context(self, context: Any) -> ResolutionConductor:
        """Return a conductor whose context is merged with *context*."""

        return replace(self, context={**self.context, **normalize_context(context)})

    def transform(self, transformer: TransformerLike) -> ResolutionConductor:
        """Return a conductor with *transformer* appended."""

        return replace(self, transformers=(*self.transformers, as_transformer(transformer)))

    def get(self, key: str, default: Any = None) -> Any:
        result = self.resolve(key)
        if result.found:
            return self._apply(result)
        return resolve_default(default)

    def resolve(self, key: str) -> Result:
        return self.manager.resolve_using(self.resolver_name, key, self.context)

    def get_or_fail(self, key: str) -> Any:
        result = self.resolve(key)
        if not result.found:
            raise ResolutionFailedForKey.with_attempted_sources(key, result.attempted_sources)
        return self._apply(result)

    def get_many(self, keys: Iterable[str]) -> dict[str, Result]:
        return self.manager.get_many_using(self.resolver_name, keys, self.context)

    def _apply(self, result: Result) -> Any:
        if result.source is None:
            return result.value
        return apply_transformers(result.value, result.source, self.transformers)


def normalize_source(source: SourceLike) -> Source:
    """Return *source* as a :class:`Source`.

    * ``str`` – a source named after the string that echoes ``context[key]``.
    * mapping – a :class:`MappingSource` named from a hash of its content.
    * :class:`Source` – returned unchanged.

    Examples
    --------
    >>> normalize_source("request").get("locale", {"locale": "fr"})
    'fr'
    >>> normalize_source({"a": 1}).name == normalize_source({"a": 1}).name
    True
    """

    if isinstance(source, str):
        return context_source(source)
    if isinstance(source, Mapping):
        return MappingSource(mapping_source_name(source), source)
    if isinstance(source, Source):
        return source
    raise InvalidSource.for_value(source)


def normalize_context(context: Any) -> dict[str, Any]:
    """Return resolution context extracted from *context*.

    Mappings are copied. Other objects contribute ``<classname>_id`` from a
    ``get_key()`` method and/or the mapping returned by ``to_cascade_context()``.

    Examples
    --------
    >>> class Team:
    ...     def get_key(self):
    ...         return 7
    >>> normalize_context(Team())
    {'team_id': 7}
    """

    if context is None:
        return {}
    if isinstance(context, Mapping):
        return dict(context)

    extracted: dict[str, Any] = {}
    get_key = getattr(context, "get_key", None)
    if callable(get_key):
        extracted[f"{type(context).__name__.lower()}_id"] = get_key()
    to_context = getattr(context, "to_cascade_context", None)
    if callable(to_context):
        custom = to_context()
        if isinstance(custom, Mapping):
            extracted.update(custom)
    return extracted
