from __future__ import annotations

import logging
from dataclasses import fields, replace
from typing import TYPE_CHECKING, Any, Sequence, Tuple

from .config import ContextualVectorsConfig, DocViewConfig
from .contextual import ContextualVectorExtractor
from .display import print_tokens
from .errors import CapacityExceededError, InvalidArgumentError, MalformedPayloadError
from .hierarchy import HierarchyResolver
from .items import EntityItem, Item, SentenceItem, TokenItem
from .markup import MarkupLedger
from .models import Addons, AnalysisPayload, Marking, SpanContext
from .packing import MAX_ENTITIES, MAX_SENTENCES, TokenStore
from .projections import As, Its, Projector, Reducer, join_tokens, project_span, reduce_values
from .ranges import RangeIndex
from .views import DenseView, Level

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from rich.console import Console

    from .vectors import WordVectorTable

logger = logging.getLogger(__name__)


class Document:
    """
    Read-only view layer over one analyzed document.

    The token records and the entity, custom entity and sentence ranges are
    frozen at construction; only the markup ledger grows afterwards.
    """

    def __init__(
        self,
        payload: AnalysisPayload,
        addons: Addons | None = None,
        config: DocViewConfig | None = None,
    ) -> None:
        self._config = config or DocViewConfig()
        # A stage counts only when the payload recorded it and the config enables it.
        self._pipe = payload.pipe.restrict(self._config.pipe)
        self._lexicon = payload.lexicon
        self._store = TokenStore(payload.tokens, payload.lexicon, self._pipe)
        num_tokens = len(self._store)

        if len(payload.entities) > MAX_ENTITIES:
            raise CapacityExceededError(
                f"{len(payload.entities)} entities exceed the limit of {MAX_ENTITIES}."
            )
        if len(payload.sentences) > MAX_SENTENCES:
            raise CapacityExceededError(
                f"{len(payload.sentences)} sentences exceed the limit of {MAX_SENTENCES}."
            )

        entities = RangeIndex(payload.entities, num_tokens, "Entity")
        custom_entities = RangeIndex(payload.custom_entities, num_tokens, "Custom entity")
        sentences = RangeIndex(payload.sentences, num_tokens, "Sentence")
        if not sentences.covers_all(num_tokens):
            raise MalformedPayloadError(
                "Sentences must cover every token exactly once."
            )
        _check_token_parents(self._store, entities, sentences)
        self._resolver = HierarchyResolver(entities, custom_entities, sentences)
        self._markings = MarkupLedger()
        self._word_vectors = addons.word_vectors if addons else None
        logger.debug(
            "Document ready: %d tokens, %d entities, %d custom entities, %d sentences",
            num_tokens,
            len(entities),
            len(custom_entities),
            len(sentences),
        )

    # Collections -----------------------------------------------------------

    @property
    def num_tokens(self) -> int:
        return len(self._store)

    @property
    def word_vectors(self) -> "WordVectorTable | None":
        return self._word_vectors

    def tokens(self) -> DenseView:
        return DenseView(self, Level.TOKEN, 0, self.num_tokens - 1)

    def entities(self) -> DenseView:
        return DenseView(self, Level.ENTITY, 0, len(self._resolver.entities) - 1)

    def custom_entities(self) -> DenseView:
        return DenseView(
            self, Level.CUSTOM_ENTITY, 0, len(self._resolver.custom_entities) - 1
        )

    def sentences(self) -> DenseView:
        return DenseView(self, Level.SENTENCE, 0, len(self._resolver.sentences) - 1)

    # Lexicon ---------------------------------------------------------------

    def is_lexeme(self, word: str) -> bool:
        return self._lexicon.is_lexeme(word)

    def is_oov(self, word: str) -> bool:
        return self._lexicon.is_oov(word)

    # Output ----------------------------------------------------------------

    def out(self, projector: Projector = Its.VALUE) -> Any:
        """Project every token and join the results into the document text."""
        return self._out(Level.TOKEN, range(self.num_tokens), projector, As.TEXT)

    def print_tokens(self, console: "Console | None" = None) -> None:
        print_tokens(self, console)

    def pipe_config(self) -> dict[str, Any]:
        """Return an independent copy of the pipeline stage flags."""
        return self._pipe.to_dict()

    def markings(self) -> Tuple[Marking, ...]:
        return self._markings.entries()

    def contextual_vectors(
        self, config: ContextualVectorsConfig | None = None, **overrides: Any
    ) -> str:
        """
        Extract the document's contextual word vectors as a JSON string.

        ``overrides`` replace individual fields of ``config`` (or of the
        document's configured defaults), e.g. ``lemma=False``.
        """
        base = config or self._config.contextual_vectors
        allowed = {f.name for f in fields(ContextualVectorsConfig)}
        unknown = sorted(set(overrides) - allowed)
        if unknown:
            raise InvalidArgumentError(
                f"Unknown contextual vector option(s): {', '.join(unknown)}."
            )
        cfg = replace(base, **overrides) if overrides else base
        extractor = ContextualVectorExtractor(self, self._word_vectors)
        return extractor.extract(cfg).to_json()

    # Internals used by views and items -------------------------------------

    def _range_index(self, level: Level) -> RangeIndex:
        if level is Level.ENTITY:
            return self._resolver.entities
        if level is Level.CUSTOM_ENTITY:
            return self._resolver.custom_entities
        if level is Level.SENTENCE:
            return self._resolver.sentences
        raise InvalidArgumentError("Tokens are not stored as ranges.")

    def _item(self, level: Level, index: int) -> Item:
        if level is Level.TOKEN:
            return TokenItem(self, index)
        if level is Level.SENTENCE:
            return SentenceItem(self, index)
        return EntityItem(self, level, index)

    def _span_context(self, level: Level, index: int) -> SpanContext:
        entry = self._range_index(level)[index]
        members = range(entry.start, entry.end + 1)
        text = join_tokens(
            [self._store.value(i) for i in members],
            [self._store.preceding_spaces(i) for i in members],
        )
        return SpanContext(
            index=index,
            start=entry.start,
            end=entry.end,
            type=entry.type,
            value=text,
            normal=text.lower(),
        )

    def _project(self, level: Level, index: int, projector: Projector) -> Any:
        if level is Level.TOKEN:
            return self._store.out(index, projector)
        return project_span(projector, self._span_context(level, index))

    def _out(
        self,
        level: Level,
        indices: Sequence[int],
        mapper: Projector,
        reducer: Reducer,
    ) -> Any:
        values = [self._project(level, index, mapper) for index in indices]
        spaces = None
        if level is Level.TOKEN and reducer is As.TEXT:
            spaces = [self._store.preceding_spaces(index) for index in indices]
        return reduce_values(reducer, values, spaces)

    def _mark(
        self, start: int, end: int, begin_marker: str | None, end_marker: str | None
    ) -> None:
        settings = self._config.markup
        self._markings.append(
            start,
            end,
            settings.begin_marker if begin_marker is None else begin_marker,
            settings.end_marker if end_marker is None else end_marker,
        )


def _check_token_parents(
    store: TokenStore, entities: RangeIndex, sentences: RangeIndex
) -> None:
    """Packed entity and sentence ids must agree with the range indices."""
    for index in range(len(store)):
        if store.sentence_id(index) != sentences.parent_of(index):
            raise MalformedPayloadError(
                f"Token {index} is packed with sentence {store.sentence_id(index)} "
                f"but lies in sentence {sentences.parent_of(index)}."
            )
        if store.entity_id(index) != entities.parent_of(index):
            raise MalformedPayloadError(
                f"Token {index} is packed with entity {store.entity_id(index)} "
                f"but lies in entity {entities.parent_of(index)}."
            )
