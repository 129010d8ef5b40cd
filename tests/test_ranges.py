import pytest

from docview.errors import MalformedPayloadError
from docview.hierarchy import HierarchyResolver
from docview.models import RangeEntry
from docview.ranges import RangeIndex


def _entities() -> RangeIndex:
    return RangeIndex([[0, 1, "A"], [3, 5, "B"], [6, 6, "C"], [9, 10, "D"]], 12, "Entity")


def test_parent_of_finds_containing_range_or_none():
    index = _entities()

    assert index.parent_of(0) == 0
    assert index.parent_of(1) == 0
    assert index.parent_of(2) is None
    assert index.parent_of(4) == 1
    assert index.parent_of(6) == 2
    assert index.parent_of(8) is None
    assert index.parent_of(11) is None


def test_contained_within_excludes_partial_overlaps():
    index = _entities()

    assert index.contained_within(1, 6) == [1, 2]
    assert index.contained_within(0, 4) == [0]
    assert index.contained_within(0, 11) == [0, 1, 2, 3]
    assert index.contained_within(7, 8) == []
    assert index.contained_within(4, 9) == [2]


def test_contained_within_matches_brute_force():
    index = _entities()
    for lo in range(12):
        for hi in range(lo, 12):
            expected = [
                pos
                for pos, entry in enumerate(index)
                if entry.start >= lo and entry.end <= hi
            ]
            assert index.contained_within(lo, hi) == expected


@pytest.mark.parametrize(
    "entries",
    [
        [[0, 2], [2, 3]],  # overlapping
        [[3, 4], [0, 1]],  # unsorted
        [[0, 5]],  # past the last token
        [[2, 1]],  # start after end
        [[-1, 0]],
    ],
)
def test_range_index_rejects_invalid_entries(entries):
    with pytest.raises(MalformedPayloadError):
        RangeIndex(entries, 5, "Entity")


def test_range_index_accepts_range_entries_and_checks_partition():
    sentences = RangeIndex([RangeEntry(0, 2), RangeEntry(3, 4)], 5, "Sentence")
    assert sentences.covers_all(5)
    assert not sentences.covers_all(6)
    assert not RangeIndex([[0, 1], [3, 4]], 5, "Sentence").covers_all(5)
    assert sentences[1].type is None


def test_hierarchy_resolver_links_tokens_entities_and_sentences():
    sentences = RangeIndex([[0, 4], [5, 11]], 12, "Sentence")
    custom = RangeIndex([[4, 6]], 12, "Custom entity")
    resolver = HierarchyResolver(_entities(), custom, sentences)

    assert resolver.entity_of_token(4) == 1
    assert resolver.entity_of_token(2) is None
    assert resolver.custom_entity_of_token(5) == 0
    assert resolver.custom_entity_of_token(0) is None
    assert resolver.sentence_of_token(7) == 1
    assert resolver.sentence_of_entity(3) == 1
    assert resolver.sentence_of_custom_entity(0) == 0
    # Entity [3, 5] straddles both sentences so neither contains it.
    assert resolver.entities_in_sentence(0) == [0]
    assert resolver.entities_in_sentence(1) == [2, 3]
    assert resolver.custom_entities_in_sentence(0) == []
    assert resolver.custom_entities_in_sentence(1) == []
