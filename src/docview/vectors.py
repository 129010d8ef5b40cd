from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Sequence, Tuple

import numpy as np

from .errors import InvalidArgumentError

logger = logging.getLogger(__name__)

Vector = Tuple[float, ...]

_REQUIRED_KEYS = (
    "precision",
    "l2NormIndex",
    "wordIndex",
    "dimensions",
    "unkVector",
    "vectors",
)


@dataclass(frozen=True, slots=True)
class WordVectorTable:
    """
    Read-only corpus word vectors shared by every document of a model.

    Each vector holds ``dimensions`` values followed by two reserved slots at
    ``l2_norm_index`` (the vector's magnitude) and ``word_index`` (the word's
    frequency rank). ``words`` lists the vocabulary in corpus-native order,
    which is also the traversal order used for nearest-neighbour search.
    """

    precision: int
    l2_norm_index: int
    word_index: int
    dimensions: int
    unk_vector: Vector
    words: Tuple[str, ...]
    vectors: Mapping[str, Vector]

    @property
    def size(self) -> int:
        return len(self.words)

    def get(self, word: str) -> Vector | None:
        return self.vectors.get(word)

    def __contains__(self, word: object) -> bool:
        return word in self.vectors

    @classmethod
    def create(
        cls,
        *,
        precision: int,
        l2_norm_index: int,
        word_index: int,
        dimensions: int,
        unk_vector: Sequence[float],
        words: Iterable[str],
        vectors: Mapping[str, Sequence[float]],
    ) -> "WordVectorTable":
        """Validate and freeze raw vector data."""
        words = tuple(words)
        width = max(dimensions, l2_norm_index + 1, word_index + 1)
        if dimensions <= 0:
            raise InvalidArgumentError("Word vectors need at least one dimension.")
        if l2_norm_index < dimensions or word_index < dimensions:
            raise InvalidArgumentError(
                "Reserved l2-norm and word-index slots must follow the vector dimensions."
            )
        frozen: dict[str, Vector] = {}
        for word in words:
            if word not in vectors:
                raise InvalidArgumentError(f"Word '{word}' has no vector.")
            vector = tuple(float(v) for v in vectors[word])
            if len(vector) < width:
                raise InvalidArgumentError(
                    f"Vector for '{word}' has {len(vector)} slots, expected {width}."
                )
            frozen[word] = vector
        unk = tuple(float(v) for v in unk_vector)
        if len(unk) < width:
            raise InvalidArgumentError(f"Unknown vector must have {width} slots.")
        # Unknown words have no magnitude and must rank after every corpus word.
        if unk[l2_norm_index] != 0 or unk[word_index] >= 0:
            raise InvalidArgumentError(
                "Unknown vector needs a zero l2 norm and a negative rank."
            )
        return cls(
            precision=precision,
            l2_norm_index=l2_norm_index,
            word_index=word_index,
            dimensions=dimensions,
            unk_vector=unk,
            words=words,
            vectors=MappingProxyType(frozen),
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WordVectorTable":
        """Build a table from the camelCase JSON layout used on disk."""
        missing = sorted(set(_REQUIRED_KEYS) - set(data))
        if missing:
            raise InvalidArgumentError(
                f"Word vector data is missing: {', '.join(missing)}."
            )
        vectors = data["vectors"]
        words = data.get("words") or list(vectors)
        return cls.create(
            precision=int(data["precision"]),
            l2_norm_index=int(data["l2NormIndex"]),
            word_index=int(data["wordIndex"]),
            dimensions=int(data["dimensions"]),
            unk_vector=data["unkVector"],
            words=words,
            vectors=vectors,
        )

    @classmethod
    def from_embeddings(
        cls, words: Sequence[str], matrix: Any, precision: int = 6
    ) -> "WordVectorTable":
        """
        Build a table from raw embeddings listed in frequency order.

        Parameters
        ----------
        words:
            Vocabulary, most frequent first; position becomes the rank slot.
        matrix:
            Array-like of shape ``(len(words), dimensions)``.
        precision:
            Decimal places kept for values and norms.
        """
        array = np.asarray(matrix, dtype=float)
        if array.ndim != 2 or array.shape[0] != len(words):
            raise InvalidArgumentError(
                "Embedding matrix must be 2-D with one row per word."
            )
        dimensions = int(array.shape[1])
        norms = np.linalg.norm(array, axis=1)
        rounded = np.round(array, precision)
        vectors = {
            word: [*rounded[row].tolist(), round(float(norms[row]), precision), row]
            for row, word in enumerate(words)
        }
        return cls.create(
            precision=precision,
            l2_norm_index=dimensions,
            word_index=dimensions + 1,
            dimensions=dimensions,
            unk_vector=[0.0] * dimensions + [0.0, -1.0],
            words=words,
            vectors=vectors,
        )


def load_word_vectors(path: str | Path) -> WordVectorTable:
    """Load a word vector table from a JSON file."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    table = WordVectorTable.from_dict(data)
    logger.info(
        "Loaded %d word vectors (%d dimensions) from %s",
        table.size,
        table.dimensions,
        path,
    )
    return table
