"""
Helpers that pack plainly annotated tokens into an :class:`AnalysisPayload`.

They stand in for the upstream pipeline when a document's analysis already
exists as JSON (see :func:`payload_from_dict` for the layout) or is written
by hand in tests.
"""

from __future__ import annotations

import json
import logging
from dataclasses import fields
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Sequence, Union

from .config import DocViewConfig, PipeConfig, pipe_config_from_dict
from .document import Document
from .errors import MalformedPayloadError
from .lexicon import InMemoryLexicon, Lexicon
from .models import Addons, AnalysisPayload, AnnotatedToken, RangeEntry
from .packing import pack_token, pos_id
from .ranges import RangeIndex, coerce_range
from .vectors import WordVectorTable

logger = logging.getLogger(__name__)

TokenInput = Union[AnnotatedToken, str, Mapping[str, Any]]


def _annotated(token: TokenInput, position: int) -> AnnotatedToken:
    if isinstance(token, AnnotatedToken):
        return token
    if isinstance(token, str):
        return AnnotatedToken(value=token, spaces=0 if position == 0 else 1)
    if isinstance(token, Mapping):
        allowed = {f.name for f in fields(AnnotatedToken)}
        if "value" not in token:
            raise MalformedPayloadError(f"Token {position} has no 'value'.")
        return AnnotatedToken(**{k: token[k] for k in token if k in allowed})
    raise MalformedPayloadError(
        f"Token {position} must be a string, mapping or AnnotatedToken."
    )


def build_payload(
    tokens: Sequence[TokenInput],
    *,
    sentences: Iterable[Any] | None = None,
    entities: Iterable[Any] = (),
    custom_entities: Iterable[Any] = (),
    lexicon: Lexicon | None = None,
    pipe: PipeConfig | None = None,
) -> AnalysisPayload:
    """Pack annotated tokens and their ranges into a frozen payload."""
    lexicon = lexicon if lexicon is not None else InMemoryLexicon()
    pipe = pipe or PipeConfig()
    annotated = [_annotated(token, idx) for idx, token in enumerate(tokens)]
    num_tokens = len(annotated)

    if sentences is None:
        sentence_entries: List[RangeEntry] = (
            [RangeEntry(0, num_tokens - 1)] if num_tokens else []
        )
    else:
        sentence_entries = [coerce_range(entry) for entry in sentences]
    entity_entries = [coerce_range(entry) for entry in entities]
    custom_entries = [coerce_range(entry) for entry in custom_entities]

    sentence_index = RangeIndex(sentence_entries, num_tokens, "Sentence")
    entity_index = RangeIndex(entity_entries, num_tokens, "Entity")

    records = []
    for idx, token in enumerate(annotated):
        lemma_hash = 0
        if pipe.pos and token.lemma and token.lemma.lower() != token.value.lower():
            lemma_hash = lexicon.intern(token.lemma)
        sentence_id = sentence_index.parent_of(idx)
        if sentence_id is None:
            raise MalformedPayloadError(f"Token {idx} does not belong to any sentence.")
        records.append(
            pack_token(
                lexicon.intern(token.value),
                spaces=token.spaces,
                expansion=token.expansion,
                pos=pos_id(token.pos) if pipe.pos else 0,
                lemma_hash=lemma_hash,
                entity_id=entity_index.parent_of(idx),
                sentence_id=sentence_id,
            )
        )

    logger.debug(
        "Packed %d tokens into %d sentences and %d entities",
        num_tokens,
        len(sentence_entries),
        len(entity_entries),
    )
    return AnalysisPayload(
        tokens=tuple(records),
        lexicon=lexicon,
        entities=tuple(entity_entries),
        custom_entities=tuple(custom_entries),
        sentences=tuple(sentence_entries),
        pipe=pipe,
    )


def build_document(
    tokens: Sequence[TokenInput],
    *,
    sentences: Iterable[Any] | None = None,
    entities: Iterable[Any] = (),
    custom_entities: Iterable[Any] = (),
    lexicon: Lexicon | None = None,
    pipe: PipeConfig | None = None,
    word_vectors: WordVectorTable | None = None,
    config: DocViewConfig | None = None,
) -> Document:
    """Convenience wrapper: build a payload and open it as a Document."""
    payload = build_payload(
        tokens,
        sentences=sentences,
        entities=entities,
        custom_entities=custom_entities,
        lexicon=lexicon,
        pipe=pipe or (config.pipe if config else None),
    )
    return Document(payload, Addons(word_vectors=word_vectors), config)


def payload_from_dict(
    data: Mapping[str, Any], lexicon: Lexicon | None = None
) -> AnalysisPayload:
    """
    Build a payload from its JSON layout::

        {
          "tokens": ["The", {"value": "cat", "spaces": 1, "pos": "NOUN"}, ...],
          "sentences": [[0, 2]],
          "entities": [[1, 1, "ANIMAL"]],
          "customEntities": [],
          "pipe": {"pos": true, ...}
        }
    """
    if "tokens" not in data or not isinstance(data["tokens"], list):
        raise MalformedPayloadError("Payload must contain a 'tokens' list.")
    pipe_data = data.get("pipe")
    return build_payload(
        data["tokens"],
        sentences=data.get("sentences"),
        entities=data.get("entities") or (),
        custom_entities=data.get("customEntities") or (),
        lexicon=lexicon,
        pipe=pipe_config_from_dict(pipe_data if isinstance(pipe_data, Mapping) else None),
    )


def load_payload(path: str | Path, lexicon: Lexicon | None = None) -> AnalysisPayload:
    """Read a JSON payload file."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise MalformedPayloadError(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(data, Mapping):
        raise MalformedPayloadError(f"{path} must contain a JSON object.")
    return payload_from_dict(data, lexicon)
