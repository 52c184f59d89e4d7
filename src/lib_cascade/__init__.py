"""Public package surface for cascade resolution.

Applications normally need only :class:`Cascade` plus the stock sources and
repositories re-exported here; the layered submodules stay importable for
callers that implement their own adapters against
:mod:`lib_cascade.application.ports`.
"""

from __future__ import annotations

from .adapters.cache.memory import MemoryCache
from .adapters.repositories.cached import CachedRepository
from .adapters.repositories.chained import ChainedRepository
from .adapters.repositories.database import DatabaseRepository
from .adapters.repositories.file import FileRepository, JsonRepository, YamlRepository
from .adapters.repositories.memory import MappingRepository
from .adapters.sources.cached import CacheSource
from .adapters.sources.default import CallbackSource, ChainedSource, MappingSource, NullSource
from .adapters.transformers import CallbackTransformer
from .application.ports import Cache, ResolverRepository, Source, Transformer
from .conductors import ResolutionConductor, SourceConductor
from .core import Cascade, load_settings
from .definitions import ResolverDefinition, build_resolver
from .domain.errors import (
    CascadeError,
    DefinitionFileMustContainMapping,
    DefinitionFileNotFound,
    DefinitionFileNotReadable,
    DuplicateSourceName,
    EmptyChainedRepository,
    InvalidDefinitionFile,
    InvalidDefinitionType,
    InvalidJsonDefinition,
    InvalidParsedDefinition,
    InvalidSource,
    InvalidSourceName,
    InvalidSourcePriority,
    InvalidSourceType,
    MissingSourceConfiguration,
    NoResolversRegistered,
    RepositoryError,
    ResolutionFailedForKey,
    ResolverNotFound,
    ResolverNotFoundWithSuggestions,
    SourceError,
    YamlPackageRequired,
)
from .domain.events import CascadeEvent, ResolutionFailed, SourceQueried, ValueResolved
from .domain.result import Result
from .domain.settings import DEFAULT_SETTINGS, CascadeSettings
from .observability import bind_trace_id, get_logger
from .resolver import Resolver

__all__ = [
    "Cascade",
    "CascadeSettings",
    "DEFAULT_SETTINGS",
    "load_settings",
    "Resolver",
    "Result",
    "SourceConductor",
    "ResolutionConductor",
    "Source",
    "Transformer",
    "Cache",
    "ResolverRepository",
    "MappingSource",
    "CallbackSource",
    "NullSource",
    "ChainedSource",
    "CacheSource",
    "CallbackTransformer",
    "MemoryCache",
    "MappingRepository",
    "ChainedRepository",
    "CachedRepository",
    "FileRepository",
    "JsonRepository",
    "YamlRepository",
    "DatabaseRepository",
    "ResolverDefinition",
    "build_resolver",
    "CascadeEvent",
    "SourceQueried",
    "ValueResolved",
    "ResolutionFailed",
    "CascadeError",
    "ResolverNotFound",
    "ResolverNotFoundWithSuggestions",
    "NoResolversRegistered",
    "ResolutionFailedForKey",
    "SourceError",
    "InvalidSource",
    "InvalidSourceName",
    "InvalidSourcePriority",
    "InvalidSourceType",
    "DuplicateSourceName",
    "MissingSourceConfiguration",
    "EmptyChainedRepository",
    "RepositoryError",
    "DefinitionFileNotFound",
    "DefinitionFileNotReadable",
    "InvalidDefinitionFile",
    "DefinitionFileMustContainMapping",
    "YamlPackageRequired",
    "InvalidDefinitionType",
    "InvalidJsonDefinition",
    "InvalidParsedDefinition",
    "bind_trace_id",
    "get_logger",
]
