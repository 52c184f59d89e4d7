"""Fluent conductors: source normalisation, fallbacks, caching, context binding."""

from __future__ import annotations

from typing import Any, Mapping

import pytest

from lib_cascade import Cascade, CascadeSettings
from lib_cascade.adapters.cache.memory import MemoryCache
from lib_cascade.adapters.sources.cached import CacheSource
from lib_cascade.adapters.sources.default import CallbackSource, MappingSource, NullSource
from lib_cascade.conductors import ResolutionConductor, normalize_context, normalize_source
from lib_cascade.domain.errors import InvalidSource, InvalidSourcePriority, ResolutionFailedForKey
from lib_cascade.domain.events import ValueResolved


class Team:
    def __init__(self, key: int) -> None:
        self.key = key

    def get_key(self) -> int:
        return self.key


class Tenant:
    def get_key(self) -> str:
        return "acme"

    def to_cascade_context(self) -> Mapping[str, Any]:
        return {"region": "eu"}


def test_normalize_source_variants() -> None:
    source = MappingSource("m", {})
    assert normalize_source(source) is source
    assert normalize_source("request").get("k", {"k": 1}) == 1
    mapping = normalize_source({"k": 1})
    assert isinstance(mapping, MappingSource)
    assert mapping.name.startswith("mapping-")
    with pytest.raises(InvalidSource):
        normalize_source(42)  # type: ignore[arg-type]


def test_normalize_context_variants() -> None:
    assert normalize_context(None) == {}
    assert normalize_context({"a": 1}) == {"a": 1}
    assert normalize_context(Team(3)) == {"team_id": 3}
    assert normalize_context(Tenant()) == {"tenant_id": "acme", "region": "eu"}
    assert normalize_context(object()) == {}


def test_fallback_priorities_step_above_highest() -> None:
    cascade = Cascade()
    chain = cascade.from_source(NullSource("first"), 3).fallback_to({"k": "fallback"}).named("chain")
    priorities = [priority for _, priority in chain._sources]
    assert priorities == [3, 13]
    assert chain.get("k") == "fallback"


def test_fallback_on_empty_conductor_starts_at_step() -> None:
    chain = Cascade(CascadeSettings(fallback_step=4)).from_source("ctx")
    chain._sources.clear()
    chain.fallback_to({"k": 1})
    assert chain._sources[0][1] == 4


def test_explicit_fallback_priority() -> None:
    chain = Cascade().from_source({"k": "a"}, 5).fallback_to({"k": "b"}, priority=1)
    assert chain.get("k") == "b"


def test_rejected_priority_leaves_chain_usable() -> None:
    cascade = Cascade()
    chain = cascade.from_source({"k": "ok"}).named("r")
    with pytest.raises(InvalidSourcePriority):
        chain.add_source({"k": "other"}, "high")  # type: ignore[arg-type]
    with pytest.raises(InvalidSourcePriority):
        chain.fallback_to({"k": "other"}, True)
    chain.add_source({"j": "fine"}, 5)
    assert cascade.get_using("r", "k") == "ok"
    assert cascade.get_using("r", "j") == "fine"


def test_invalid_first_priority_fails_before_lookup() -> None:
    with pytest.raises(InvalidSourcePriority):
        Cascade().from_source({"k": "ok"}, "high")  # type: ignore[arg-type]


def test_anonymous_registration_happens_once() -> None:
    cascade = Cascade()
    chain = cascade.from_source({"k": 1})
    assert chain.resolver_name is None
    chain.get("k")
    name = chain.resolver_name
    assert name is not None and name.startswith("anonymous-")
    chain.get("k")
    assert cascade.resolver_names() == [name]


def test_named_conductor_is_resolvable_through_using() -> None:
    cascade = Cascade()
    cascade.from_source("request").fallback_to({"locale": "en"}).named("locale")
    assert cascade.using("locale").get("locale") == "en"
    assert cascade.using("locale").for_context({"locale": "de"}).get("locale") == "de"


def test_changes_after_naming_update_the_registration() -> None:
    cascade = Cascade()
    chain = cascade.from_source(NullSource("n")).named("late")
    assert cascade.get_using("late", "k") is None
    chain.fallback_to({"k": "added"}).transform(lambda value, source: value.upper())
    assert cascade.get_using("late", "k") == "ADDED"


def test_cache_wraps_most_recent_source() -> None:
    calls: list[str] = []

    def expensive(key: str, ctx: Mapping[str, Any]) -> Any:
        calls.append(key)
        return "computed"

    cache = MemoryCache()
    chain = Cascade(CascadeSettings(cache_ttl=30, cache_prefix="test:")).from_source(CallbackSource("db", expensive))
    chain.cache(cache)
    cached, _ = chain._sources[-1]
    assert isinstance(cached, CacheSource)
    assert cached.ttl == 30
    assert chain.get("k") == "computed"
    assert chain.get("k") == "computed"
    assert calls == ["k"]
    assert chain.resolve("k").source_name == "db-cached"


def test_cache_on_empty_conductor_is_noop() -> None:
    chain = Cascade().from_source("ctx")
    chain._sources.clear()
    assert chain.cache(MemoryCache()) is chain
    assert chain._sources == []


def test_source_conductor_get_or_fail_and_get_many() -> None:
    chain = Cascade().from_source(NullSource("s1")).fallback_to(NullSource("s2"))
    with pytest.raises(ResolutionFailedForKey) as excinfo:
        chain.get_or_fail("missing")
    assert excinfo.value.attempted_sources == ("s1", "s2")
    assert chain.get("missing", default="d") == "d"
    assert set(chain.get_many(["a", "b"])) == {"a", "b"}


def test_source_conductor_transformers() -> None:
    chain = (
        Cascade()
        .from_source({"k": "value"})
        .transform(lambda value, source: value.upper())
        .transform(lambda value, source: value.replace("A", "@"))
    )
    assert chain.get("k") == "V@LUE"


@pytest.fixture()
def cascade() -> Cascade:
    manager = Cascade()
    manager.define_resolver("greeting").from_callback("ctx", lambda key, ctx: ctx.get("name")).from_mapping(
        "defaults", {"name": "world"}, priority=10
    )
    return manager


def test_resolution_conductor_is_immutable(cascade: Cascade) -> None:
    base = cascade.using("greeting")
    bound = base.for_context({"name": "ada"})
    shouting = bound.transform(lambda value, source: value.upper())
    assert base.get("name") == "world"
    assert bound.get("name") == "ada"
    assert shouting.get("name") == "ADA"
    assert base.context == {}
    assert base.transformers == ()
    with pytest.raises(TypeError):
        bound.context["name"] = "eve"  # type: ignore[index]
    assert bound.get("name") == "ada"
    assert hash(bound) == hash(base.for_context({"name": "ada"}))


def test_resolution_conductor_copies_caller_context(cascade: Cascade) -> None:
    context = {"name": "ada"}
    conductor = ResolutionConductor(cascade, "greeting", context=context)
    context["name"] = "eve"
    assert conductor.get("name") == "ada"


def test_resolution_conductor_merges_context(cascade: Cascade) -> None:
    conductor = cascade.using("greeting").for_context({"name": "ada", "x": 1}).for_context(Team(2))
    assert conductor.context == {"name": "ada", "x": 1, "team_id": 2}


def test_resolution_conductor_transformers_skip_defaults(cascade: Cascade) -> None:
    conductor = cascade.using("greeting").transform(lambda value, source: f"{value}!")
    assert conductor.get("name") == "world!"
    assert conductor.get("missing", default="plain") == "plain"
    assert conductor.get("missing", default=lambda: "lazy") == "lazy"


def test_resolution_conductor_get_or_fail(cascade: Cascade) -> None:
    conductor = cascade.using("greeting").transform(lambda value, source: value.title())
    assert conductor.get_or_fail("name") == "World"
    with pytest.raises(ResolutionFailedForKey) as excinfo:
        conductor.get_or_fail("missing")
    assert excinfo.value.attempted_sources == ("ctx", "defaults")


def test_resolution_conductor_resolve_and_get_many_use_bound_context(cascade: Cascade) -> None:
    conductor = cascade.using("greeting").for_context({"name": "ada"})
    assert conductor.resolve("name").source_name == "ctx"
    results = conductor.get_many(["name", "missing"])
    assert results["name"].value == "ada"
    assert results["missing"].found is False


def test_resolution_conductor_events_carry_context(cascade: Cascade) -> None:
    events: list[ValueResolved] = []
    cascade.on_resolved(events.append)
    cascade.using("greeting").for_context(Team(9)).get("name")
    assert events[0].context == {"team_id": 9}
