"""
Document-scoped extraction of word vectors.

The extractor copies the vectors of every word a document uses (and
optionally their lemmas, caller-specified words, nearest neighbours and
frequent filler words) out of the shared corpus table, then re-ranks the
copies by corpus frequency so the subset can be used as a self-contained
vector table. The corpus table itself is never modified.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Sequence

from .config import ContextualVectorsConfig
from .errors import (
    InvalidArgumentError,
    MissingPipelineStageError,
    VectorsNotLoadedError,
)
from .projections import Its
from .vectors import WordVectorTable

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from .document import Document

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ContextualVectors:
    """Serializable word vector subset scoped to one document."""

    precision: int
    l2_norm_index: int
    word_index: int
    dimensions: int
    unk_vector: List[float]
    size: int
    words: List[str]
    vectors: Dict[str, List[float]]

    def to_dict(self) -> dict[str, Any]:
        return {
            "precision": self.precision,
            "l2NormIndex": self.l2_norm_index,
            "wordIndex": self.word_index,
            "dimensions": self.dimensions,
            "unkVector": list(self.unk_vector),
            "size": self.size,
            "words": list(self.words),
            "vectors": {word: list(vector) for word, vector in self.vectors.items()},
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


def nearest_neighbour(
    word: str, vector: Sequence[float], table: WordVectorTable
) -> str | None:
    """
    Return the corpus word closest to ``vector`` by Manhattan distance.

    Only the first ``table.dimensions`` slots are compared. ``word`` itself is
    skipped and ties go to the candidate met first in ``table.words`` order.
    The running sum stops as soon as it reaches the best distance so far.
    """
    dimensions = table.dimensions
    best_word: str | None = None
    best_distance = math.inf
    for candidate in table.words:
        if candidate == word:
            continue
        other = table.vectors[candidate]
        distance = 0.0
        for k in range(dimensions):
            distance += abs(vector[k] - other[k])
            if distance >= best_distance:
                break
        if distance < best_distance:
            best_distance = distance
            best_word = candidate
    return best_word


class ContextualVectorExtractor:
    """Builds :class:`ContextualVectors` for a document from its model's table."""

    def __init__(self, document: "Document", table: WordVectorTable | None) -> None:
        self._document = document
        self._table = table

    def _validate(self, config: ContextualVectorsConfig) -> WordVectorTable:
        table = self._table
        if table is None:
            raise VectorsNotLoadedError(
                "Word vectors are not loaded; attach them to the model's addons."
            )
        specific = config.specific_word_vectors
        if not isinstance(specific, (list, tuple)) or not all(
            isinstance(word, str) for word in specific
        ):
            raise InvalidArgumentError(
                "specific_word_vectors must be a list of strings, "
                f"found {type(specific).__name__}."
            )
        limit = config.word_vectors_limit
        if (
            not isinstance(limit, int)
            or isinstance(limit, bool)
            or limit < 0
            or limit >= table.size
        ):
            raise InvalidArgumentError(
                f"word_vectors_limit must be an integer in [0, {table.size - 1}], "
                f"found {limit!r}."
            )
        if config.lemma and not self._document.pipe_config()["pos"]:
            raise MissingPipelineStageError(
                "Lemma vectors need the 'pos' pipeline stage."
            )
        return table

    def extract(self, config: ContextualVectorsConfig | None = None) -> ContextualVectors:
        cfg = config or ContextualVectorsConfig()
        table = self._validate(cfg)

        vocabulary: Dict[str, List[float]] = {}

        def add(word: str) -> None:
            # Unknown words get a copy of the all-zero vector whose l2 norm is 0.
            vocabulary[word] = list(table.vectors.get(word, table.unk_vector))

        tokens = self._document.tokens()
        for value in tokens.out(Its.VALUE):
            add(value.lower())
        if cfg.lemma:
            for lemma in tokens.out(Its.LEMMA):
                add(lemma.lower())
        for entry in cfg.specific_word_vectors:
            word = entry.strip()
            if word:
                add(word)
        seeded = len(vocabulary)

        if cfg.similar_word_vectors:
            neighbours = [
                nearest_neighbour(word, vector, table)
                for word, vector in list(vocabulary.items())
            ]
            for neighbour in neighbours:
                if neighbour is not None and neighbour not in vocabulary:
                    vocabulary[neighbour] = list(table.vectors[neighbour])
        neighbour_count = len(vocabulary) - seeded

        size_before_padding = len(vocabulary)
        if cfg.word_vectors_limit > size_before_padding:
            for word in table.words:
                if len(vocabulary) >= cfg.word_vectors_limit:
                    break
                if word not in vocabulary:
                    vocabulary[word] = list(table.vectors[word])
            if len(vocabulary) < cfg.word_vectors_limit:
                logger.warning(
                    "Corpus exhausted after padding to %d of %d requested words.",
                    len(vocabulary),
                    cfg.word_vectors_limit,
                )

        words = rerank(vocabulary, table.word_index)
        logger.info(
            "Extracted %d contextual vectors (%d seeded, %d neighbours, %d padding).",
            len(words),
            seeded,
            neighbour_count,
            len(words) - size_before_padding,
        )
        return ContextualVectors(
            precision=table.precision,
            l2_norm_index=table.l2_norm_index,
            word_index=table.word_index,
            dimensions=table.dimensions,
            unk_vector=list(table.unk_vector),
            size=len(words),
            words=words,
            vectors={word: vocabulary[word] for word in words},
        )


def rerank(vocabulary: Dict[str, List[float]], word_index: int) -> List[str]:
    """
    Order words by their original corpus rank and overwrite the rank slot.

    Negative ranks (unknown words) sort last; ties keep insertion order.
    """

    def original_rank(word: str) -> float:
        rank = vocabulary[word][word_index]
        return math.inf if rank < 0 else rank

    words = sorted(vocabulary, key=original_rank)
    for new_rank, word in enumerate(words):
        vocabulary[word][word_index] = new_rank
    return words
