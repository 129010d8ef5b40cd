"""
Built-in projections (``Its``) and reducers (``As``).

Both are closed enumerations; any callable may be passed instead to project a
:class:`TokenContext` / :class:`SpanContext` or to reduce a list of projected
values.
"""

from __future__ import annotations

from collections import Counter
from enum import Enum
from typing import Any, Callable, Dict, List, Sequence, Union

from .errors import InvalidArgumentError
from .models import SpanContext, TokenContext


class Its(Enum):
    VALUE = "value"
    NORMAL = "normal"
    LEMMA = "lemma"
    POS = "pos"
    TYPE = "type"
    SPAN = "span"
    PRECEDING_SPACES = "preceding_spaces"
    UNIQUE_ID = "unique_id"
    ENTITY_ID = "entity_id"
    SENTENCE_ID = "sentence_id"
    IS_EXPANSION = "is_expansion"


class As(Enum):
    ARRAY = "array"
    TEXT = "text"
    SET = "set"
    UNIQUE = "unique"
    FREQ_TABLE = "freq_table"
    BOW = "bow"


Projector = Union[Its, Callable[[Any], Any]]
Reducer = Union[As, Callable[[List[Any]], Any]]

_TOKEN_PROJECTIONS: Dict[Its, Callable[[TokenContext], Any]] = {
    Its.VALUE: lambda t: t.value,
    Its.NORMAL: lambda t: t.normal,
    Its.LEMMA: lambda t: t.lemma,
    Its.POS: lambda t: t.pos,
    Its.SPAN: lambda t: (t.index, t.index),
    Its.PRECEDING_SPACES: lambda t: t.preceding_spaces,
    Its.UNIQUE_ID: lambda t: t.hash,
    Its.ENTITY_ID: lambda t: t.entity_id,
    Its.SENTENCE_ID: lambda t: t.sentence_id,
    Its.IS_EXPANSION: lambda t: t.is_expansion,
}

_SPAN_PROJECTIONS: Dict[Its, Callable[[SpanContext], Any]] = {
    Its.VALUE: lambda s: s.value,
    Its.NORMAL: lambda s: s.normal,
    Its.TYPE: lambda s: s.type,
    Its.SPAN: lambda s: (s.start, s.end),
}


def _project(
    table: Dict[Its, Callable[[Any], Any]], projector: Projector, context: Any, level: str
) -> Any:
    if isinstance(projector, Its):
        selector = table.get(projector)
        if selector is None:
            raise InvalidArgumentError(
                f"Projection '{projector.value}' is not available for {level}."
            )
        return selector(context)
    if callable(projector):
        return projector(context)
    raise InvalidArgumentError(
        f"Expected an Its member or a callable projector, found {type(projector).__name__}."
    )


def project_token(projector: Projector, context: TokenContext) -> Any:
    return _project(_TOKEN_PROJECTIONS, projector, context, "tokens")


def project_span(projector: Projector, context: SpanContext) -> Any:
    return _project(_SPAN_PROJECTIONS, projector, context, "spans")


def join_tokens(values: Sequence[Any], spaces: Sequence[int]) -> str:
    """Join token values, restoring each token's preceding whitespace."""
    parts: List[str] = []
    for position, (value, count) in enumerate(zip(values, spaces)):
        if position:
            parts.append(" " * count)
        parts.append(str(value))
    return "".join(parts)


def reduce_values(
    reducer: Reducer, values: List[Any], spaces: Sequence[int] | None = None
) -> Any:
    """
    Reduce projected values into a single result.

    ``spaces`` carries the preceding whitespace of each token so that
    ``As.TEXT`` reproduces the original spacing; spans are joined by a single
    space when it is omitted.
    """
    if isinstance(reducer, As):
        if reducer is As.ARRAY:
            return list(values)
        if reducer is As.TEXT:
            if spaces is None:
                return " ".join(str(value) for value in values)
            return join_tokens(values, spaces)
        if reducer is As.SET:
            return set(values)
        if reducer is As.UNIQUE:
            return list(dict.fromkeys(values))
        if reducer is As.FREQ_TABLE:
            return [[value, count] for value, count in Counter(values).most_common()]
        if reducer is As.BOW:
            return dict(Counter(values))
    if callable(reducer):
        return reducer(values)
    raise InvalidArgumentError(
        f"Expected an As member or a callable reducer, found {type(reducer).__name__}."
    )
