"""Result value object: shape of hits and misses and read-only guarantees."""

from __future__ import annotations

import dataclasses

import pytest

from lib_cascade.adapters.sources.default import MappingSource
from lib_cascade.domain.result import Result


def test_not_found_shape() -> None:
    result = Result.not_found(["s1", "s2"])
    assert result.found is False
    assert result.value is None
    assert result.source is None
    assert result.source_name is None
    assert result.attempted_sources == ("s1", "s2")
    assert dict(result.metadata) == {}


def test_resolved_keeps_source_and_metadata() -> None:
    source = MappingSource("defaults", {"k": 0})
    result = Result.resolved(0, source, ["defaults"], {"type": "mapping"})
    assert result.found is True
    assert result.value == 0
    assert result.source is source
    assert result.source_name == "defaults"
    assert result.metadata["type"] == "mapping"


def test_result_is_immutable() -> None:
    result = Result.not_found(["a"])
    with pytest.raises(dataclasses.FrozenInstanceError):
        result.value = 1  # type: ignore[misc]
    with pytest.raises(TypeError):
        result.metadata["x"] = 1  # type: ignore[index]


def test_attempted_list_is_copied() -> None:
    attempted = ["a"]
    result = Result.not_found(attempted)
    attempted.append("b")
    assert result.attempted_sources == ("a",)


@pytest.mark.parametrize(
    "value, source, metadata",
    [
        (1, None, {}),
        (None, MappingSource("defaults", {}), {}),
        (None, None, {"type": "mapping"}),
    ],
)
def test_miss_cannot_carry_data(value: object, source: MappingSource | None, metadata: dict[str, str]) -> None:
    with pytest.raises(ValueError):
        Result(value=value, found=False, source=source, attempted_sources=(), metadata=metadata)
