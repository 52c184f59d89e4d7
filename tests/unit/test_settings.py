from __future__ import annotations

import pytest

from lib_cascade import CascadeSettings, load_settings
from lib_cascade.domain.errors import CascadeError
from lib_cascade.domain.settings import DEFAULT_SETTINGS


def test_defaults() -> None:
    assert DEFAULT_SETTINGS.cache_ttl == 300
    assert DEFAULT_SETTINGS.cache_prefix == "cascade:"
    assert DEFAULT_SETTINGS.repository_cache_prefix == "cascade:resolvers:"
    assert DEFAULT_SETTINGS.fallback_step == 10
    assert DEFAULT_SETTINGS.anonymous_prefix == "anonymous-"


def test_from_mapping_flattens_sections_and_ignores_unknown_keys() -> None:
    settings = CascadeSettings.from_mapping(
        {"cache": {"ttl": 60, "prefix": "app:"}, "repository": {"cache": {"prefix": "defs:"}}, "unknown": 1}
    )
    assert settings.cache_ttl == 60
    assert settings.cache_prefix == "app:"
    assert settings.repository_cache_prefix == "defs:"


def test_from_mapping_rejects_non_integer_ttl() -> None:
    with pytest.raises(CascadeError):
        CascadeSettings.from_mapping({"cache": {"ttl": "soon"}})


def test_from_mapping_rejects_boolean_step() -> None:
    with pytest.raises(CascadeError):
        CascadeSettings.from_mapping({"fallback": {"step": True}})


def test_load_settings_reads_prefixed_environment() -> None:
    environ = {
        "LIB_CASCADE_CACHE__TTL": "45",
        "LIB_CASCADE_ANONYMOUS__PREFIX": "adhoc-",
        "CACHE__TTL": "1",
    }
    settings = load_settings(environ)
    assert settings.cache_ttl == 45
    assert settings.anonymous_prefix == "adhoc-"
    assert settings.fallback_step == 10
