"""
Fixed-width packed token records.

Every token is stored as four non-negative integers::

    (hash, spacing, pos_lemma, entity_sentence)

``spacing``
    low 16 bits hold the count of preceding whitespace, bit 16 flags a token
    that is part of a multi-word expansion (e.g. the ``n't`` of ``can't``).
``pos_lemma``
    low 5 bits hold the Universal POS id (0 means "not tagged"), the next 27
    bits hold the lexicon hash of the lemma (0 means "same as the normal form").
``entity_sentence``
    high 12 bits hold the entity id (``0xFFF`` means "no entity"), low 20 bits
    hold the sentence id.

Values that do not fit their field raise :class:`CapacityExceededError`.
"""

from __future__ import annotations

from typing import Any, Sequence, Tuple

from .config import PipeConfig
from .errors import CapacityExceededError, MalformedPayloadError
from .lexicon import Lexicon
from .models import TokenContext, TokenRecord
from .projections import Projector, project_token

HASH_BITS = 32
SPACES_BITS = 16
SPACES_MASK = (1 << SPACES_BITS) - 1
EXPANSION_FLAG = 1 << SPACES_BITS
POS_BITS = 5
POS_MASK = (1 << POS_BITS) - 1
LEMMA_BITS = 27
ENTITY_BITS = 12
SENTENCE_BITS = 20
SENTENCE_MASK = (1 << SENTENCE_BITS) - 1
ENTITY_NONE = (1 << ENTITY_BITS) - 1

# Entity ids 0..4094 are usable, 4095 is the "no entity" sentinel.
MAX_ENTITIES = ENTITY_NONE
MAX_SENTENCES = 1 << SENTENCE_BITS

UPOS_TAGS: Tuple[str, ...] = (
    "",
    "ADJ",
    "ADP",
    "ADV",
    "AUX",
    "CCONJ",
    "DET",
    "INTJ",
    "NOUN",
    "NUM",
    "PART",
    "PRON",
    "PROPN",
    "PUNCT",
    "SCONJ",
    "SYM",
    "VERB",
    "X",
)
POS_IDS = {tag: idx for idx, tag in enumerate(UPOS_TAGS) if tag}


def _check_capacity(name: str, value: int, bits: int) -> None:
    if value < 0 or value >= (1 << bits):
        raise CapacityExceededError(
            f"{name} {value} does not fit in {bits} bits (max {(1 << bits) - 1})."
        )


def pos_id(tag: str | None) -> int:
    """Translate a POS tag into its packed id; None maps to 0."""
    if tag is None:
        return 0
    try:
        return POS_IDS[tag.upper()]
    except KeyError as exc:
        raise MalformedPayloadError(f"Unknown POS tag '{tag}'.") from exc


def pack_token(
    hash_: int,
    *,
    spaces: int = 0,
    expansion: bool = False,
    pos: int = 0,
    lemma_hash: int = 0,
    entity_id: int | None = None,
    sentence_id: int = 0,
) -> TokenRecord:
    """Pack logical token fields into a fixed-width record."""
    if hash_ == 0:
        raise MalformedPayloadError("Lexeme hash 0 is reserved.")
    _check_capacity("Lexeme hash", hash_, HASH_BITS)
    _check_capacity("Preceding spaces", spaces, SPACES_BITS)
    _check_capacity("POS id", pos, POS_BITS)
    _check_capacity("Lemma hash", lemma_hash, LEMMA_BITS)
    _check_capacity("Sentence id", sentence_id, SENTENCE_BITS)
    if entity_id is None:
        entity = ENTITY_NONE
    else:
        if entity_id < 0 or entity_id >= MAX_ENTITIES:
            raise CapacityExceededError(
                f"Entity id {entity_id} exceeds the limit of {MAX_ENTITIES} "
                "entities per document."
            )
        entity = entity_id
    spacing = spaces | (EXPANSION_FLAG if expansion else 0)
    pos_lemma = (lemma_hash << POS_BITS) | pos
    entity_sentence = (entity << SENTENCE_BITS) | sentence_id
    return (hash_, spacing, pos_lemma, entity_sentence)


def unpack_entity_sentence(value: int) -> tuple[int | None, int]:
    entity = value >> SENTENCE_BITS
    return (None if entity == ENTITY_NONE else entity), value & SENTENCE_MASK


def unpack_token(record: TokenRecord) -> dict[str, Any]:
    """Inverse of :func:`pack_token`; keys match its keyword arguments."""
    hash_, spacing, pos_lemma, entity_sentence = record
    entity_id, sentence_id = unpack_entity_sentence(entity_sentence)
    return {
        "hash_": hash_,
        "spaces": spacing & SPACES_MASK,
        "expansion": bool(spacing & EXPANSION_FLAG),
        "pos": pos_lemma & POS_MASK,
        "lemma_hash": pos_lemma >> POS_BITS,
        "entity_id": entity_id,
        "sentence_id": sentence_id,
    }


def _validate_records(records: Sequence[Any]) -> Tuple[TokenRecord, ...]:
    validated = []
    for idx, record in enumerate(records):
        if len(record) != 4 or not all(
            isinstance(part, int) and not isinstance(part, bool) and part >= 0
            for part in record
        ):
            raise MalformedPayloadError(
                f"Token record {idx} must be four non-negative integers, got {record!r}."
            )
        if record[3] >> (ENTITY_BITS + SENTENCE_BITS):
            raise CapacityExceededError(
                f"Token record {idx} entity/sentence field overflows 32 bits."
            )
        validated.append(tuple(record))
    return tuple(validated)  # type: ignore[return-value]


class TokenStore:
    """Decodes packed token records into logical fields on demand."""

    def __init__(
        self, records: Sequence[Any], lexicon: Lexicon, pipe: PipeConfig
    ) -> None:
        self._records = _validate_records(records)
        self._lexicon = lexicon
        self._pipe = pipe
        self._check_fields()

    def _check_fields(self) -> None:
        """Reject hashes the lexicon cannot resolve and unknown POS ids."""
        for idx, (hash_, _, pos_lemma, _) in enumerate(self._records):
            if hash_ == 0:
                raise MalformedPayloadError(f"Token {idx} uses the reserved hash 0.")
            self._resolve(idx, "lexeme", hash_)
            lemma_hash = pos_lemma >> POS_BITS
            if lemma_hash:
                self._resolve(idx, "lemma", lemma_hash)
            tag_id = pos_lemma & POS_MASK
            if tag_id >= len(UPOS_TAGS):
                raise MalformedPayloadError(f"Token {idx} carries unknown POS id {tag_id}.")

    def _resolve(self, idx: int, field: str, hash_: int) -> None:
        try:
            self._lexicon.value(hash_)
        except KeyError as exc:
            raise MalformedPayloadError(
                f"Token {idx} has {field} hash {hash_} unknown to the lexicon."
            ) from exc

    def __len__(self) -> int:
        return len(self._records)

    def record(self, index: int) -> TokenRecord:
        return self._records[index]

    def hash_of(self, index: int) -> int:
        return self._records[index][0]

    def value(self, index: int) -> str:
        return self._lexicon.value(self._records[index][0])

    def normal(self, index: int) -> str:
        return self.value(index).lower()

    def preceding_spaces(self, index: int) -> int:
        return self._records[index][1] & SPACES_MASK

    def is_expansion(self, index: int) -> bool:
        return bool(self._records[index][1] & EXPANSION_FLAG)

    def entity_id(self, index: int) -> int | None:
        return unpack_entity_sentence(self._records[index][3])[0]

    def sentence_id(self, index: int) -> int:
        return unpack_entity_sentence(self._records[index][3])[1]

    def pos(self, index: int) -> str | None:
        if not self._pipe.pos:
            return None
        return UPOS_TAGS[self._records[index][2] & POS_MASK] or None

    def lemma(self, index: int) -> str | None:
        # Lemmas are resolved by the pipeline from the POS tag.
        if not self._pipe.pos:
            return None
        lemma_hash = self._records[index][2] >> POS_BITS
        if lemma_hash == 0:
            return self.normal(index)
        return self._lexicon.value(lemma_hash)

    def context(self, index: int) -> TokenContext:
        hash_, _, _, packed = self._records[index]
        entity_id, sentence_id = unpack_entity_sentence(packed)
        value = self._lexicon.value(hash_)
        return TokenContext(
            index=index,
            value=value,
            normal=value.lower(),
            hash=hash_,
            preceding_spaces=self.preceding_spaces(index),
            is_expansion=self.is_expansion(index),
            pos=self.pos(index),
            lemma=self.lemma(index),
            entity_id=entity_id,
            sentence_id=sentence_id,
        )

    def out(self, index: int, projector: Projector) -> Any:
        """Apply a built-in or caller-supplied projection to token ``index``."""
        return project_token(projector, self.context(index))
