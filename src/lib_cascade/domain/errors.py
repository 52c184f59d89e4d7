"""Domain-level exception hierarchy.

Purpose
-------
Expose the stable error taxonomy shared by sources, repositories, the
``Cascade`` manager, and consuming applications. The hierarchy lives in the
domain layer so outer layers may depend on it without creating cycles.

Contents
--------
* :class:`CascadeError` – umbrella base class for every library failure.
* :class:`ResolverNotFound` – requested resolver name is not registered, with
  the :class:`ResolverNotFoundWithSuggestions` and
  :class:`NoResolversRegistered` refinements.
* :class:`ResolutionFailedForKey` – ``get_or_fail`` found no value.
* :class:`SourceError` – malformed source specifications.
* :class:`EmptyChainedRepository` – chained repository without members.
* :class:`RepositoryError` – definition loading and parsing failures.

System Role
-----------
Errors are never retried inside the library. Callers catch
:class:`CascadeError` to handle all library failures uniformly; faults raised by
user supplied sources are not wrapped and propagate unchanged.
"""

from __future__ import annotations

from typing import Iterable, Sequence


class CascadeError(Exception):
    """Base type for all exceptions emitted by ``lib_cascade``.

    Why
    ----
    Provide a single catch-all type for consumers that do not need fine-grained
    handling.
    """


class ResolverNotFound(CascadeError):
    """Raised when a resolver name is absent from a registry or repository.

    Attributes
    ----------
    name:
        The requested resolver name.
    """

    def __init__(self, message: str, *, name: str) -> None:
        super().__init__(message)
        self.name = name

    @classmethod
    def for_name(cls, name: str) -> ResolverNotFound:
        """Return the canonical error for a missing resolver *name*.

        Examples
        --------
        >>> str(ResolverNotFound.for_name("prices"))
        "Resolver 'prices' not found. Ensure the resolver is registered."
        """

        return cls(f"Resolver '{name}' not found. Ensure the resolver is registered.", name=name)


class ResolverNotFoundWithSuggestions(ResolverNotFound):
    """Missing resolver while other resolvers are registered.

    Why
    ----
    Typos are the common cause; listing the registered names shortens the
    debugging loop.
    """

    def __init__(self, message: str, *, name: str, available: Sequence[str]) -> None:
        super().__init__(message, name=name)
        self.available = tuple(available)

    @classmethod
    def for_name(cls, name: str, available: Iterable[str] = ()) -> ResolverNotFoundWithSuggestions:  # type: ignore[override]
        """Return the error listing *available* resolver names.

        Examples
        --------
        >>> str(ResolverNotFoundWithSuggestions.for_name("prise", ["price", "stock"]))
        "Resolver 'prise' not found. Available resolvers: price, stock"
        """

        names = tuple(available)
        if not names:
            message = f"Resolver '{name}' not found. No resolvers are currently registered."
        else:
            message = f"Resolver '{name}' not found. Available resolvers: {', '.join(names)}"
        return cls(message, name=name, available=names)


class NoResolversRegistered(ResolverNotFound):
    """Missing resolver while the registry is empty."""

    @classmethod
    def for_name(cls, name: str) -> NoResolversRegistered:
        return cls(
            "No resolvers are registered. Register at least one resolver before attempting resolution.",
            name=name,
        )


class ResolutionFailedForKey(CascadeError):
    """Raised by ``get_or_fail`` when no source produced a value.

    Attributes
    ----------
    key:
        The key that could not be resolved.
    attempted_sources:
        Names of the sources queried, in attempt order.
    """

    def __init__(self, message: str, *, key: str, attempted_sources: Sequence[str]) -> None:
        super().__init__(message)
        self.key = key
        self.attempted_sources = tuple(attempted_sources)

    @classmethod
    def with_attempted_sources(cls, key: str, attempted_sources: Sequence[str]) -> ResolutionFailedForKey:
        """Return the error describing every attempted source.

        Examples
        --------
        >>> str(ResolutionFailedForKey.with_attempted_sources("missing", ["s1", "s2"]))
        "Failed to resolve 'missing'. Attempted sources: s1, s2"
        """

        sources = ", ".join(attempted_sources)
        return cls(
            f"Failed to resolve '{key}'. Attempted sources: {sources}",
            key=key,
            attempted_sources=attempted_sources,
        )


class SourceError(CascadeError):
    """Base type for malformed source specifications.

    Why
    ----
    These are validation failures raised while building resolvers or sources
    from external definitions, never during resolution itself.
    """


class InvalidSource(SourceError):
    """A value could not be interpreted as a source."""

    @classmethod
    def for_value(cls, value: object) -> InvalidSource:
        return cls(f"Cannot build a source from value of type {type(value).__name__}.")


class InvalidSourceName(SourceError):
    """Source names must be non-empty strings."""

    @classmethod
    def for_name(cls, name: object) -> InvalidSourceName:
        return cls(f"Invalid source name '{name}'. Source names must be non-empty strings.")


class InvalidSourcePriority(SourceError):
    """Source priorities must be integers."""

    @classmethod
    def for_value(cls, priority: object) -> InvalidSourcePriority:
        """Describe the offending priority by its type name.

        Examples
        --------
        >>> str(InvalidSourcePriority.for_value("high"))
        'Invalid source priority. Expected integer, got str.'
        """

        return cls(f"Invalid source priority. Expected integer, got {type(priority).__name__}.")


class InvalidSourceType(SourceError):
    """A definition names a source type nobody knows how to build."""

    @classmethod
    def for_type(cls, source_type: object, valid_types: Iterable[str]) -> InvalidSourceType:
        valid = ", ".join(valid_types)
        return cls(f"Invalid source type '{source_type}'. Valid types are: {valid}")


class DuplicateSourceName(SourceError):
    @classmethod
    def for_name(cls, name: str) -> DuplicateSourceName:
        return cls(f"Source with name '{name}' is already registered.")


class MissingSourceConfiguration(SourceError):
    """A required definition field is absent or has the wrong shape."""

    @classmethod
    def for_key(cls, key: str) -> MissingSourceConfiguration:
        return cls(f"Source configuration is missing required key: '{key}'")


class EmptyChainedRepository(CascadeError):
    """Raised when a chained repository is constructed without members."""

    @classmethod
    def create(cls) -> EmptyChainedRepository:
        return cls("ChainedRepository requires at least one repository")


class RepositoryError(CascadeError):
    """Base type for failures while loading resolver definitions.

    Why
    ----
    Parsing belongs to the definition-loading collaborators; the resolution
    core only surfaces these errors unmodified.
    """


class DefinitionFileNotFound(RepositoryError):
    @classmethod
    def at_path(cls, path: str) -> DefinitionFileNotFound:
        return cls(f"Definition file not found: {path}")


class DefinitionFileNotReadable(RepositoryError):
    @classmethod
    def at_path(cls, path: str) -> DefinitionFileNotReadable:
        return cls(f"Definition file not readable: {path}")


class InvalidDefinitionFile(RepositoryError):
    """A definition file exists but cannot be parsed."""

    @classmethod
    def at_path(cls, path: str, file_format: str, error: str) -> InvalidDefinitionFile:
        """Return the parse error naming the file format.

        Examples
        --------
        >>> str(InvalidDefinitionFile.at_path("/etc/r.json", "JSON", "Expecting value"))
        'Invalid JSON in file /etc/r.json: Expecting value'
        """

        return cls(f"Invalid {file_format} in file {path}: {error}")


class DefinitionFileMustContainMapping(RepositoryError):
    @classmethod
    def at_path(cls, path: str) -> DefinitionFileMustContainMapping:
        return cls(f"Definition file must contain a mapping: {path}")


class YamlPackageRequired(RepositoryError):
    @classmethod
    def create(cls) -> YamlPackageRequired:
        return cls("YAML definitions require PyYAML. Install it with: pip install 'lib_cascade[yaml]'")


class InvalidDefinitionType(RepositoryError):
    @classmethod
    def for_resolver(cls, name: str) -> InvalidDefinitionType:
        return cls(f"Invalid definition for resolver '{name}': expected JSON string or mapping")


class InvalidJsonDefinition(RepositoryError):
    @classmethod
    def for_resolver(cls, name: str, error: str) -> InvalidJsonDefinition:
        return cls(f"Invalid JSON definition for resolver '{name}': {error}")


class InvalidParsedDefinition(RepositoryError):
    @classmethod
    def for_resolver(cls, name: str) -> InvalidParsedDefinition:
        return cls(f"Invalid definition for resolver '{name}': expected object/mapping")
