from __future__ import annotations

import math
from typing import Dict, List

from docview.builder import build_document
from docview.config import DocViewConfig, PipeConfig
from docview.document import Document
from docview.lexicon import InMemoryLexicon
from docview.models import AnnotatedToken
from docview.vectors import WordVectorTable

SAMPLE_TEXT = "The cat sat. Mary met John in Paris."


def sample_tokens() -> List[AnnotatedToken]:
    return [
        AnnotatedToken("The", spaces=0, pos="DET", lemma="the"),
        AnnotatedToken("cat", spaces=1, pos="NOUN", lemma="cat"),
        AnnotatedToken("sat", spaces=1, pos="VERB", lemma="sit"),
        AnnotatedToken(".", spaces=0, pos="PUNCT"),
        AnnotatedToken("Mary", spaces=1, pos="PROPN"),
        AnnotatedToken("met", spaces=1, pos="VERB", lemma="meet"),
        AnnotatedToken("John", spaces=1, pos="PROPN"),
        AnnotatedToken("in", spaces=1, pos="ADP"),
        AnnotatedToken("Paris", spaces=1, pos="PROPN"),
        AnnotatedToken(".", spaces=0, pos="PUNCT"),
    ]


def make_sample_document(
    word_vectors: WordVectorTable | None = None,
    pipe: PipeConfig | None = None,
    config: DocViewConfig | None = None,
) -> Document:
    """Two sentences, three entities and two custom entities."""
    return build_document(
        sample_tokens(),
        sentences=[[0, 3], [4, 9]],
        entities=[[4, 4, "PERSON"], [6, 6, "PERSON"], [8, 8, "GPE"]],
        custom_entities=[[1, 2, "ACTION"], [7, 8, "PLACE"]],
        lexicon=InMemoryLexicon(["the", "cat", "sat", "in", "."]),
        pipe=pipe,
        word_vectors=word_vectors,
        config=config,
    )


def make_table(entries: Dict[str, List[float]], precision: int = 4) -> WordVectorTable:
    """Build a vector table whose ranks follow the insertion order of ``entries``."""
    dimensions = len(next(iter(entries.values())))
    vectors = {
        word: [*values, math.sqrt(sum(v * v for v in values)), float(rank)]
        for rank, (word, values) in enumerate(entries.items())
    }
    return WordVectorTable.create(
        precision=precision,
        l2_norm_index=dimensions,
        word_index=dimensions + 1,
        dimensions=dimensions,
        unk_vector=[0.0] * dimensions + [0.0, -1.0],
        words=list(entries),
        vectors=vectors,
    )


def sample_table() -> WordVectorTable:
    return make_table(
        {
            "the": [1.0, 1.0],
            "cat": [5.0, 5.0],
            "sat": [9.0, 1.0],
            "dog": [5.5, 5.0],
            "sit": [9.0, 1.5],
            "mat": [20.0, 20.0],
            "met": [30.0, 2.0],
            "meet": [30.0, 3.0],
        }
    )
