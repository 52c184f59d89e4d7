from __future__ import annotations

import pytest

from lib_cascade.adapters.sources.default import NullSource
from lib_cascade.adapters.transformers import CallbackTransformer, as_transformer


class Suffix:
    def transform(self, value: object, source: object) -> object:
        return f"{value}!"


def test_transformer_instances_pass_through() -> None:
    transformer = Suffix()
    assert as_transformer(transformer) is transformer


def test_callables_are_wrapped() -> None:
    wrapped = as_transformer(lambda value, source: (value, source.name))
    assert isinstance(wrapped, CallbackTransformer)
    assert wrapped.transform(1, NullSource("n")) == (1, "n")


def test_non_callables_are_rejected() -> None:
    with pytest.raises(TypeError):
        as_transformer(42)  # type: ignore[arg-type]
