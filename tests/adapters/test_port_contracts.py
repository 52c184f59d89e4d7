"""Adapter contract tests for the application-layer ports.

Purpose
-------
Verify the stock adapters continue to satisfy the protocols defined in
``src/lib_cascade/application/ports.py`` so dependency inversion stays
enforceable through automated tests.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from lib_cascade.adapters.cache.memory import MemoryCache
from lib_cascade.adapters.file_loaders.structured import FILE_LOADERS
from lib_cascade.adapters.repositories.cached import CachedRepository
from lib_cascade.adapters.repositories.chained import ChainedRepository
from lib_cascade.adapters.repositories.database import DatabaseRepository
from lib_cascade.adapters.repositories.file import FileRepository
from lib_cascade.adapters.repositories.memory import MappingRepository
from lib_cascade.adapters.sources.cached import CacheSource
from lib_cascade.adapters.sources.default import CallbackSource, ChainedSource, MappingSource, NullSource
from lib_cascade.adapters.transformers import CallbackTransformer
from lib_cascade.application import ports


@pytest.mark.parametrize(
    "source",
    [
        MappingSource("mapping", {"k": 1}),
        CallbackSource("callback", lambda key, ctx: None),
        NullSource("null"),
        ChainedSource("chained", [NullSource("inner")]),
        CacheSource(NullSource("inner"), MemoryCache()),
    ],
    ids=lambda source: source.name,
)
def test_sources_fulfil_source_protocol(source: ports.Source) -> None:
    assert isinstance(source, ports.Source)
    metadata = source.metadata()
    assert metadata["name"] == source.name
    assert "type" in metadata


def test_callback_transformer_fulfils_transformer_protocol() -> None:
    assert isinstance(CallbackTransformer(lambda value, source: value), ports.Transformer)


def test_memory_cache_fulfils_cache_protocol() -> None:
    assert isinstance(MemoryCache(), ports.Cache)


def test_repositories_fulfil_repository_protocol(tmp_path: Path) -> None:
    definitions = tmp_path / "resolvers.json"
    definitions.write_text('{"prices": {"sources": []}}')
    memory = MappingRepository({"prices": {"sources": []}})
    conn = sqlite3.connect(":memory:")
    conn.execute("CREATE TABLE resolvers (name TEXT, definition TEXT)")
    repositories = [
        memory,
        ChainedRepository([memory]),
        CachedRepository(memory, MemoryCache()),
        FileRepository(definitions),
        DatabaseRepository(conn),
    ]
    for repository in repositories:
        assert isinstance(repository, ports.ResolverRepository)
    conn.close()


def test_file_loaders_expose_load() -> None:
    for loader in FILE_LOADERS.values():
        assert callable(getattr(loader, "load", None))
