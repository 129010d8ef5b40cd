from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Tuple

from .config import PipeConfig

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from .lexicon import Lexicon
    from .vectors import WordVectorTable

TokenRecord = Tuple[int, int, int, int]


@dataclass(frozen=True, slots=True)
class RangeEntry:
    """Inclusive token-index span of an entity, custom entity or sentence."""

    start: int
    end: int
    type: str | None = None

    @property
    def span(self) -> tuple[int, int]:
        return (self.start, self.end)

    def contains(self, token_index: int) -> bool:
        return self.start <= token_index <= self.end


@dataclass(frozen=True, slots=True)
class Marking:
    """A markup request over an inclusive token range."""

    start: int
    end: int
    begin_marker: str
    end_marker: str


@dataclass(frozen=True, slots=True)
class TokenContext:
    """Resolved fields of a single token, handed to projection functions."""

    index: int
    value: str
    normal: str
    hash: int
    preceding_spaces: int
    is_expansion: bool
    pos: str | None
    lemma: str | None
    entity_id: int | None
    sentence_id: int


@dataclass(frozen=True, slots=True)
class SpanContext:
    """Resolved fields of an entity or sentence span."""

    index: int
    start: int
    end: int
    type: str | None
    value: str
    normal: str


@dataclass(slots=True)
class AnnotatedToken:
    """Plain, unpacked token as produced by an upstream pipeline."""

    value: str
    spaces: int = 0
    pos: str | None = None
    lemma: str | None = None
    expansion: bool = False


@dataclass(frozen=True, slots=True)
class AnalysisPayload:
    """Frozen output of the analysis pipeline for one document."""

    tokens: Tuple[TokenRecord, ...]
    lexicon: "Lexicon"
    entities: Tuple[RangeEntry, ...] = ()
    custom_entities: Tuple[RangeEntry, ...] = ()
    sentences: Tuple[RangeEntry, ...] = ()
    pipe: PipeConfig = field(default_factory=PipeConfig)


@dataclass(frozen=True, slots=True)
class Addons:
    """Model-level resources shared by every document built from that model."""

    word_vectors: "WordVectorTable | None" = None
