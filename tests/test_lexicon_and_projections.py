import pytest

from docview.errors import InvalidArgumentError
from docview.lexicon import InMemoryLexicon
from docview.models import SpanContext
from docview.projections import As, Its, join_tokens, project_span, reduce_values


def test_lexicon_separates_base_vocabulary_from_interned_words():
    lexicon = InMemoryLexicon(["apple", "pear"])

    assert lexicon.lookup("apple") == 1
    assert lexicon.intern("apple") == 1
    fig = lexicon.intern("fig")
    assert fig == 3
    assert lexicon.intern("fig") == fig
    assert lexicon.value(fig) == "fig"
    assert lexicon.lookup("fig") is None
    assert lexicon.is_lexeme("pear")
    assert not lexicon.is_lexeme("fig")
    assert lexicon.is_oov("fig")
    assert not lexicon.is_oov("PEAR")
    assert len(lexicon) == 3


def test_lexicon_reserves_hash_zero():
    lexicon = InMemoryLexicon(["a"])
    with pytest.raises(KeyError):
        lexicon.value(0)
    with pytest.raises(KeyError):
        lexicon.value(5)


def test_join_tokens_ignores_leading_spacing():
    assert join_tokens(["a", "b", "c"], [4, 0, 2]) == "ab  c"
    assert join_tokens([], []) == ""


@pytest.mark.parametrize(
    "reducer, expected",
    [
        (As.ARRAY, ["x", "y", "x"]),
        (As.TEXT, "x y x"),
        (As.SET, {"x", "y"}),
        (As.UNIQUE, ["x", "y"]),
        (As.FREQ_TABLE, [["x", 2], ["y", 1]]),
        (As.BOW, {"x": 2, "y": 1}),
    ],
)
def test_reduce_values(reducer, expected):
    assert reduce_values(reducer, ["x", "y", "x"]) == expected


def test_reduce_values_rejects_unknown_reducer():
    with pytest.raises(InvalidArgumentError):
        reduce_values("text", ["x"])  # type: ignore[arg-type]


def test_project_span_rejects_token_only_projections():
    span = SpanContext(index=0, start=1, end=2, type="ORG", value="Acme Inc", normal="acme inc")
    assert project_span(Its.SPAN, span) == (1, 2)
    assert project_span(lambda s: s.type.lower(), span) == "org"
    for member in (Its.POS, Its.PRECEDING_SPACES, Its.UNIQUE_ID):
        with pytest.raises(InvalidArgumentError):
            project_span(member, span)
    with pytest.raises(InvalidArgumentError):
        project_span(3, span)  # type: ignore[arg-type]
