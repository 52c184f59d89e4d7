"""Transformer adapters.

Callers mostly register plain callables ``(value, source) -> value``;
:func:`as_transformer` wraps them so the resolver only ever deals with the
:class:`~lib_cascade.application.ports.Transformer` port.
"""

from __future__ import annotations

from typing import Any, Callable, Union

from ..application.ports import Source, Transformer

TransformerLike = Union[Transformer, Callable[[Any, Source], Any]]


class CallbackTransformer:
    """Adapt a ``callback(value, source)`` to the transformer port.

    Examples
    --------
    >>> from lib_cascade.adapters.sources.default import NullSource
    >>> CallbackTransformer(lambda value, source: value * 2).transform(21, NullSource("n"))
    42
    """

    def __init__(self, callback: Callable[[Any, Source], Any]) -> None:
        self._callback = callback

    def transform(self, value: Any, source: Source) -> Any:
        return self._callback(value, source)

    def __repr__(self) -> str:
        return f"CallbackTransformer({self._callback!r})"


def as_transformer(candidate: TransformerLike) -> Transformer:
    """Return *candidate* as a :class:`Transformer`, wrapping bare callables.

    Raises
    ------
    TypeError
        When *candidate* is neither a transformer nor callable.
    """

    if isinstance(candidate, Transformer):
        return candidate
    if callable(candidate):
        return CallbackTransformer(candidate)
    raise TypeError(f"Expected a transformer or callable, got {type(candidate).__name__}")
