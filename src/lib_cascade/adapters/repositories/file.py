"""File-backed definition repositories.

Purpose
-------
Load resolver definitions from JSON, YAML, or TOML documents whose top level
maps resolver names to definitions. Several files may be given; later files
override earlier ones name by name.

Contents
--------
* :class:`FileRepository` – picks a loader per file suffix.
* :class:`JsonRepository` / :class:`YamlRepository` – single-format variants
  that reject other suffixes.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional, Sequence, Union

from ...application.ports import DefinitionLoader
from ...domain.errors import InvalidDefinitionFile
from ...observability import log_info
from ..file_loaders.structured import FILE_LOADERS, JSONFileLoader, YAMLFileLoader
from .memory import MappingRepository

PathLike = Union[str, Path]


class FileRepository(MappingRepository):
    """Load every definition from *paths* at construction time.

    Parameters
    ----------
    paths:
        One path or a sequence of paths. Relative paths are joined to
        *base_path* when given.
    base_path:
        Directory used to resolve relative paths.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> _ = (Path(tmp.name) / "base.json").write_text('{"prices": {"v": 1}, "stock": {"v": 1}}')
    >>> _ = (Path(tmp.name) / "local.toml").write_text('[prices]\\nv = 2\\n')
    >>> repo = FileRepository(["base.json", "local.toml"], base_path=tmp.name)
    >>> repo.get("prices"), repo.get("stock")
    ({'v': 2}, {'v': 1})
    >>> tmp.cleanup()
    """

    loaders: Mapping[str, DefinitionLoader] = FILE_LOADERS

    def __init__(self, paths: Union[PathLike, Sequence[PathLike]], base_path: Optional[PathLike] = None) -> None:
        self._base_path = Path(base_path) if base_path is not None else None
        super().__init__(self._load_all(_as_list(paths)))

    def _load_all(self, paths: list[PathLike]) -> dict[str, Mapping[str, Any]]:
        resolvers: dict[str, Mapping[str, Any]] = {}
        for path in paths:
            full_path = self._resolve_path(path)
            loader = self._loader_for(full_path)
            data = loader.load(str(full_path))
            resolvers.update(data)  # type: ignore[arg-type]
        log_info("definitions_loaded", resolvers=len(resolvers), files=len(paths))
        return resolvers

    def _loader_for(self, path: Path) -> DefinitionLoader:
        suffix = path.suffix.lower()
        loader = self.loaders.get(suffix)
        if loader is None:
            supported = ", ".join(sorted(self.loaders))
            raise InvalidDefinitionFile(f"Unsupported definition file type '{suffix}' for {path}; expected one of: {supported}")
        return loader

    def _resolve_path(self, path: PathLike) -> Path:
        candidate = Path(path)
        if self._base_path is None or candidate.is_absolute():
            return candidate
        return self._base_path / candidate


class JsonRepository(FileRepository):
    """Definitions stored in JSON files only."""

    loaders = {".json": JSONFileLoader()}


class YamlRepository(FileRepository):
    """Definitions stored in YAML files only.

    Raises :class:`~lib_cascade.domain.errors.YamlPackageRequired` on load when
    PyYAML is not installed.
    """

    loaders = {".yaml": YAMLFileLoader(), ".yml": YAMLFileLoader()}


def _as_list(paths: Union[PathLike, Sequence[PathLike]]) -> list[PathLike]:
    if isinstance(paths, (str, Path)):
        return [paths]
    return list(paths)
