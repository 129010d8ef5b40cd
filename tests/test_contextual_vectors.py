import json
import math

import pytest

from docview.builder import build_document
from docview.config import ContextualVectorsConfig, PipeConfig
from docview.contextual import ContextualVectorExtractor, nearest_neighbour, rerank
from docview.errors import (
    ErrorKind,
    InvalidArgumentError,
    MissingPipelineStageError,
    VectorsNotLoadedError,
)
from tests.utils import make_sample_document, make_table, sample_table


def _extract(doc, **kwargs):
    return json.loads(doc.contextual_vectors(**kwargs))


def test_document_words_only():
    doc = build_document(["the", "cat", "sat"], word_vectors=sample_table())
    snapshot = _extract(
        doc,
        lemma=False,
        specific_word_vectors=[],
        similar_word_vectors=False,
        word_vectors_limit=0,
    )

    assert snapshot["size"] == 3
    assert set(snapshot["vectors"]) == {"the", "cat", "sat"}
    assert snapshot["words"] == ["the", "cat", "sat"]
    assert snapshot["dimensions"] == 2
    assert snapshot["l2NormIndex"] == 2
    assert snapshot["wordIndex"] == 3
    assert snapshot["precision"] == 4
    assert snapshot["unkVector"] == [0.0, 0.0, 0.0, -1.0]


def test_lemmas_and_unknown_words_are_ranked_last():
    doc = make_sample_document(word_vectors=sample_table())
    snapshot = _extract(doc)

    assert snapshot["words"] == [
        "the", "cat", "sat", "sit", "met", "meet",
        ".", "mary", "john", "in", "paris",
    ]
    assert snapshot["size"] == 11
    vectors = snapshot["vectors"]
    assert vectors["mary"][:3] == [0.0, 0.0, 0.0]
    # Rank slots are rewritten to the new contiguous order.
    assert [vectors[w][3] for w in snapshot["words"]] == list(range(11))


def test_specific_words_are_trimmed_and_blank_entries_skipped():
    doc = build_document(["cat"], word_vectors=sample_table())
    snapshot = _extract(
        doc, lemma=False, specific_word_vectors=["  mat ", "", "   ", "dog"]
    )

    assert snapshot["words"] == ["cat", "dog", "mat"]


def test_similar_words_add_nearest_neighbour():
    doc = build_document(["cat"], word_vectors=sample_table())
    snapshot = _extract(doc, lemma=False, similar_word_vectors=True)

    assert snapshot["words"] == ["cat", "dog"]
    assert snapshot["vectors"]["dog"][:2] == [5.5, 5.0]
    assert snapshot["vectors"]["dog"][3] == 1


def test_similar_words_for_unknown_word_uses_zero_vector():
    doc = build_document(["zebra"], word_vectors=sample_table())
    snapshot = _extract(doc, lemma=False, similar_word_vectors=True)

    assert snapshot["words"] == ["the", "zebra"]
    assert snapshot["vectors"]["zebra"][2] == 0.0


def test_nearest_neighbour_ties_go_to_first_in_corpus_order():
    table = make_table({"a": [0.0, 0.0], "b": [1.0, 0.0], "c": [0.0, 1.0]})
    assert nearest_neighbour("a", table.vectors["a"], table) == "b"

    reordered = make_table({"a": [0.0, 0.0], "c": [0.0, 1.0], "b": [1.0, 0.0]})
    assert nearest_neighbour("a", reordered.vectors["a"], reordered) == "c"


def test_nearest_neighbour_skips_self_and_handles_single_word_corpus():
    table = make_table({"only": [1.0, 2.0]})
    assert nearest_neighbour("only", table.vectors["only"], table) is None
    assert nearest_neighbour("other", [1.0, 2.0], table) == "only"


def test_limit_pads_with_corpus_words_in_native_order():
    doc = build_document(["sat"], word_vectors=sample_table())
    snapshot = _extract(doc, lemma=False, word_vectors_limit=3)

    assert snapshot["size"] == 3
    assert snapshot["words"] == ["the", "cat", "sat"]


def test_limit_below_vocabulary_size_adds_nothing():
    doc = build_document(["the", "cat", "sat"], word_vectors=sample_table())
    snapshot = _extract(doc, lemma=False, word_vectors_limit=2)

    assert snapshot["size"] == 3


def test_largest_limit_pads_until_reached():
    table = sample_table()
    doc = build_document(["zebra"], word_vectors=table)
    snapshot = _extract(doc, lemma=False, word_vectors_limit=table.size - 1)

    assert snapshot["size"] == table.size - 1
    assert snapshot["words"][-1] == "zebra"
    assert snapshot["words"][:-1] == ["the", "cat", "sat", "dog", "sit", "mat"]


def test_words_follow_original_rank_with_unranked_last():
    table = sample_table()
    doc = make_sample_document(word_vectors=table)
    snapshot = _extract(doc, similar_word_vectors=True, word_vectors_limit=7)

    original = [table.vectors[w][table.word_index] if w in table else -1 for w in snapshot["words"]]
    ranked = [rank for rank in original if rank >= 0]
    assert ranked == sorted(ranked)
    first_unranked = next(i for i, rank in enumerate(original) if rank < 0)
    assert all(rank < 0 for rank in original[first_unranked:])


def test_corpus_table_is_not_mutated():
    table = sample_table()
    before = {word: tuple(vector) for word, vector in table.vectors.items()}
    doc = make_sample_document(word_vectors=table)
    _extract(doc, similar_word_vectors=True, word_vectors_limit=5)

    assert dict(table.vectors) == before
    assert table.unk_vector == (0.0, 0.0, 0.0, -1.0)


def test_vectors_not_loaded_is_checked_first():
    doc = make_sample_document(pipe=PipeConfig(pos=False))
    with pytest.raises(VectorsNotLoadedError) as excinfo:
        doc.contextual_vectors(specific_word_vectors="cat", word_vectors_limit=-3)
    assert excinfo.value.kind is ErrorKind.VECTORS_NOT_LOADED


@pytest.mark.parametrize("limit", [8, 100, -1, True, 1.5, "2"])
def test_invalid_limit(limit):
    doc = make_sample_document(word_vectors=sample_table())
    with pytest.raises(InvalidArgumentError) as excinfo:
        doc.contextual_vectors(word_vectors_limit=limit)
    assert excinfo.value.kind is ErrorKind.INVALID_ARGUMENT


@pytest.mark.parametrize("words", ["cat", ["cat", 3], None, {"cat"}])
def test_invalid_specific_words(words):
    doc = make_sample_document(word_vectors=sample_table())
    with pytest.raises(InvalidArgumentError):
        doc.contextual_vectors(specific_word_vectors=words)


def test_lemma_requires_pos_stage():
    doc = make_sample_document(word_vectors=sample_table(), pipe=PipeConfig(pos=False))
    with pytest.raises(MissingPipelineStageError) as excinfo:
        doc.contextual_vectors()
    assert excinfo.value.kind is ErrorKind.MISSING_PIPELINE_STAGE

    snapshot = _extract(doc, lemma=False)
    assert "sit" not in snapshot["vectors"]


def test_unknown_option_is_rejected():
    doc = make_sample_document(word_vectors=sample_table())
    with pytest.raises(InvalidArgumentError):
        doc.contextual_vectors(similar=True)


def test_extractor_returns_dataclass_snapshot():
    table = sample_table()
    doc = build_document(["cat", "the"], word_vectors=table)
    result = ContextualVectorExtractor(doc, table).extract(
        ContextualVectorsConfig(lemma=False)
    )

    assert result.words == ["the", "cat"]
    assert result.size == 2
    assert result.vectors["cat"][table.word_index] == 1
    assert result.vectors["cat"][table.l2_norm_index] == pytest.approx(math.sqrt(50))
    assert json.loads(result.to_json()) == result.to_dict()


def test_rerank_is_stable_for_unranked_words():
    vocabulary = {"x": [0.0, -1.0], "a": [0.0, 5.0], "y": [0.0, -1.0], "b": [0.0, 2.0]}
    assert rerank(vocabulary, 1) == ["b", "a", "x", "y"]
    assert [vocabulary[w][1] for w in ("b", "a", "x", "y")] == [0, 1, 2, 3]
