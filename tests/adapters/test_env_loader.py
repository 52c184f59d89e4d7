"""Environment loader adapter tests clarifying namespace coercion.

The scenarios cover prefix naming, nested assignment, and randomised inputs to
prove settings overrides keep following the documented environment rules.
"""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from lib_cascade.adapters.env.default import DefaultEnvLoader, assign_nested, default_env_prefix


def test_default_env_prefix() -> None:
    """Slug values should become upper snake-case prefixes."""

    assert default_env_prefix() == "LIB_CASCADE"
    assert default_env_prefix("my-app") == "MY_APP"


def test_env_loader_nested() -> None:
    """Coerce environment variables into nested dictionaries while ignoring out-of-scope keys."""

    environ = {
        "LIB_CASCADE_CACHE__TTL": "120",
        "LIB_CASCADE_CACHE__PREFIX": "shop:",
        "LIB_CASCADE_FALLBACK__STEP": "5",
        "OTHER": "ignored",
    }
    data = DefaultEnvLoader(environ=environ).load("LIB_CASCADE")
    assert data == {"cache": {"ttl": 120, "prefix": "shop:"}, "fallback": {"step": 5}}


def test_assign_nested_overwrites_scalar_raises() -> None:
    """Protect existing scalar values from being replaced by new nested assignments."""

    container: dict[str, object] = {"cache": "value"}
    with pytest.raises(ValueError):
        assign_nested(container, "CACHE__TTL", 1)


SCALAR_VALUES = st.sampled_from(["0", "1", "-3", "true", "false", "3.5", "none", "cascade:"])
NAMESPACE_KEYS = st.sampled_from(["CACHE__TTL", "CACHE__PREFIX", "FALLBACK__STEP"])


@given(st.dictionaries(NAMESPACE_KEYS, SCALAR_VALUES, max_size=3))
def test_env_loader_handles_random_namespace(entries) -> None:
    """Randomised namespace inputs should map to consistent nested/coerced payloads."""

    prefix = "DEMO"
    environ = {f"{prefix}_" + key: value for key, value in entries.items()}
    environ["IGNORED"] = "1"
    payload = DefaultEnvLoader(environ=environ).load(prefix)

    def _expect(value: str) -> object:
        lowered = value.lower()
        if lowered in {"true", "false"}:
            return lowered == "true"
        if lowered in {"none", "null"}:
            return None
        if lowered.lstrip("-").isdigit():
            return int(lowered)
        try:
            return float(value)
        except ValueError:
            return value

    for key, original in entries.items():
        parts = key.lower().split("__")
        node = payload
        for part in parts[:-1]:
            node = node[part]
        assert node[parts[-1]] == _expect(original)
    assert "ignored" not in payload
