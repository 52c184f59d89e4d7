"""End-to-end: definitions on disk, layered repositories, cached values, events."""

from __future__ import annotations

import json
import sqlite3
from pathlib import Path
from typing import Any

import pytest

from lib_cascade import (
    CachedRepository,
    CallbackSource,
    Cascade,
    CascadeSettings,
    ChainedRepository,
    DatabaseRepository,
    FileRepository,
    MemoryCache,
    ResolutionFailedForKey,
    ValueResolved,
    load_settings,
)

DEFINITIONS = {
    "pricing": {
        "name": "pricing",
        "description": "VAT and currency per request, tenant, and global defaults",
        "definition": {
            "sources": [
                {"name": "request", "type": "context", "priority": 0},
                {
                    "name": "tenant",
                    "type": "chained",
                    "priority": 10,
                    "sources": [{"name": "tenant-eu", "type": "mapping", "values": {"vat": 21}}],
                },
                {"name": "global", "type": "mapping", "priority": 100, "values": {"vat": 20, "currency": "EUR"}},
            ]
        },
        "is_active": True,
    },
    "retired": {"definition": {"sources": []}, "is_active": False},
}


def write_definitions(tmp_path: Path) -> Path:
    path = tmp_path / "resolvers.json"
    path.write_text(json.dumps(DEFINITIONS), encoding="utf-8")
    return path


def test_resolvers_loaded_from_files_resolve_in_priority_order(tmp_path: Path) -> None:
    cascade = Cascade(load_settings({"LIB_CASCADE_FALLBACK__STEP": "50"}))
    repository = CachedRepository(FileRepository(write_definitions(tmp_path)), MemoryCache())
    assert cascade.load_from_repository(repository) == ["pricing"]

    resolved: list[ValueResolved] = []
    cascade.on_resolved(resolved.append)

    pricing = cascade.using("pricing")
    assert pricing.get("vat") == 21
    assert pricing.for_context({"vat": 0}).get("vat") == 0
    assert pricing.get("currency") == "EUR"
    assert [event.source_name for event in resolved] == ["tenant", "request", "global"]

    with pytest.raises(ResolutionFailedForKey) as excinfo:
        pricing.get_or_fail("discount")
    assert excinfo.value.attempted_sources == ("request", "tenant", "global")


def test_database_definitions_override_file_definitions(tmp_path: Path) -> None:
    conn = sqlite3.connect(":memory:")
    conn.execute("CREATE TABLE resolvers (name TEXT, definition TEXT)")
    override = {"sources": [{"name": "db-global", "type": "mapping", "values": {"vat": 7}}]}
    conn.execute("INSERT INTO resolvers VALUES (?, ?)", ("pricing", json.dumps(override)))

    repository = ChainedRepository([DatabaseRepository(conn), FileRepository(write_definitions(tmp_path))])
    cascade = Cascade()
    cascade.load_from_repository(repository, ["pricing"])
    assert cascade.using("pricing").get("vat") == 7
    conn.close()


def test_ad_hoc_chain_with_cached_backend() -> None:
    lookups: list[Any] = []

    def backend(key: str, context: Any) -> Any:
        lookups.append((key, context.get("user_id")))
        return {"theme": "dark"}.get(key)

    cascade = Cascade(CascadeSettings(cache_ttl=60))
    chain = cascade.from_source("request").fallback_to(CallbackSource("backend", backend)).cache(MemoryCache())
    chain.fallback_to({"theme": "light", "density": "compact"})

    assert chain.get("theme", {"user_id": 1}) == "dark"
    assert chain.get("theme", {"user_id": 1}) == "dark"
    assert chain.get("theme", {"user_id": 1, "theme": "contrast"}) == "contrast"
    assert chain.get("density", {"user_id": 1}) == "compact"
    assert lookups == [("theme", 1), ("density", 1)]
