"""Structured resolver-definition file loaders.

Purpose
-------
Convert on-disk definition files into Python mappings that file repositories
understand. Loaders are small wrappers around ``json``/``yaml.safe_load``/
``tomllib`` so error handling and observability live in one place.

Contents
--------
* :class:`BaseFileLoader` – shared helpers for reading files and validating
  mapping outputs.
* :class:`JSONFileLoader` – JSON definitions.
* :class:`YAMLFileLoader` – YAML definitions (only when PyYAML is installed).
* :class:`TOMLFileLoader` – TOML definitions.
* :data:`FILE_LOADERS` – mapping of file suffixes to loader instances.

System Role
-----------
Invoked by :class:`lib_cascade.adapters.repositories.file.FileRepository`.
Every failure is raised as a :class:`~lib_cascade.domain.errors.RepositoryError`
subclass so callers can tell missing, unreadable, and malformed files apart.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Mapping

try:  # Python >= 3.11
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for <3.11
    import tomli as tomllib  # type: ignore[no-redef]

from ...domain.errors import (
    DefinitionFileMustContainMapping,
    DefinitionFileNotFound,
    DefinitionFileNotReadable,
    InvalidDefinitionFile,
    YamlPackageRequired,
)
from ...observability import log_debug, log_error

try:
    import yaml  # type: ignore[import-untyped]
except ModuleNotFoundError:  # pragma: no cover - optional dependency
    yaml = None  # type: ignore[assignment]


class BaseFileLoader:
    """Common utilities shared by the structured file loaders."""

    format_name = "file"

    def _read(self, path: str) -> bytes:
        """Read *path* as bytes after checking existence and permissions.

        Why
        ----
        Centralise file checks and logging so all loaders behave consistently.

        Raises
        ------
        DefinitionFileNotFound
            When *path* is not a regular file.
        DefinitionFileNotReadable
            When the process lacks read permission or the read fails.

        Examples
        --------
        >>> from tempfile import NamedTemporaryFile
        >>> tmp = NamedTemporaryFile(delete=False)
        >>> _ = tmp.write(b'{"a": {}}')
        >>> tmp.close()
        >>> BaseFileLoader()._read(tmp.name)[:4]
        b'{"a"'
        >>> Path(tmp.name).unlink()
        """

        file_path = Path(path)
        if not file_path.is_file():
            raise DefinitionFileNotFound.at_path(path)
        if not os.access(file_path, os.R_OK):
            raise DefinitionFileNotReadable.at_path(path)
        try:
            payload = file_path.read_bytes()
        except OSError as exc:
            raise DefinitionFileNotReadable.at_path(path) from exc
        log_debug("definition_file_read", path=path, size=len(payload))
        return payload

    @staticmethod
    def _ensure_mapping(data: object, *, path: str) -> Mapping[str, object]:
        """Ensure *data* behaves like a mapping.

        Examples
        --------
        >>> BaseFileLoader._ensure_mapping({"prices": {}}, path="demo")
        {'prices': {}}
        >>> BaseFileLoader._ensure_mapping([1], path="demo")
        Traceback (most recent call last):
        ...
        lib_cascade.domain.errors.DefinitionFileMustContainMapping: Definition file must contain a mapping: demo
        """

        if not isinstance(data, Mapping):
            raise DefinitionFileMustContainMapping.at_path(path)
        return data

    def _invalid(self, path: str, exc: Exception) -> InvalidDefinitionFile:
        log_error("definition_file_invalid", path=path, format=self.format_name, error=str(exc))
        return InvalidDefinitionFile.at_path(path, self.format_name, str(exc))


class JSONFileLoader(BaseFileLoader):
    """Load JSON definition documents."""

    format_name = "JSON"

    def load(self, path: str) -> Mapping[str, object]:
        """Return the mapping stored in the JSON file at *path*.

        Examples
        --------
        >>> from tempfile import NamedTemporaryFile
        >>> tmp = NamedTemporaryFile('w', delete=False, encoding='utf-8', suffix='.json')
        >>> _ = tmp.write('{"prices": {"sources": []}}')
        >>> tmp.close()
        >>> JSONFileLoader().load(tmp.name)["prices"]
        {'sources': []}
        >>> Path(tmp.name).unlink()
        """

        try:
            data = json.loads(self._read(path))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise self._invalid(path, exc) from exc
        result = self._ensure_mapping(data, path=path)
        log_debug("definition_file_loaded", path=path, format="json", resolvers=len(result))
        return result


class YAMLFileLoader(BaseFileLoader):
    """Load YAML definition documents when PyYAML is available."""

    format_name = "YAML"

    def load(self, path: str) -> Mapping[str, object]:
        """Return the mapping stored in the YAML file at *path*.

        Raises
        ------
        YamlPackageRequired
            When PyYAML is not installed.
        """

        if yaml is None:
            raise YamlPackageRequired.create()
        try:
            data = yaml.safe_load(self._read(path))
        except yaml.YAMLError as exc:
            raise self._invalid(path, exc) from exc
        if data is None:
            data = {}
        result = self._ensure_mapping(data, path=path)
        log_debug("definition_file_loaded", path=path, format="yaml", resolvers=len(result))
        return result


class TOMLFileLoader(BaseFileLoader):
    """Load TOML definition documents using the standard library parser."""

    format_name = "TOML"

    def load(self, path: str) -> Mapping[str, object]:
        try:
            data = tomllib.loads(self._read(path).decode("utf-8"))
        except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
            raise self._invalid(path, exc) from exc
        result = self._ensure_mapping(data, path=path)
        log_debug("definition_file_loaded", path=path, format="toml", resolvers=len(result))
        return result


FILE_LOADERS: dict[str, BaseFileLoader] = {
    ".json": JSONFileLoader(),
    ".yaml": YAMLFileLoader(),
    ".yml": YAMLFileLoader(),
    ".toml": TOMLFileLoader(),
}
"""Structured loaders keyed by lower-case file suffix."""
