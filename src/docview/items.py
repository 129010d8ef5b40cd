from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .projections import Its, Projector
from .views import DenseView, Level, SparseView

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from .document import Document


class Item:
    """Handle on one token, entity, custom entity or sentence of a document."""

    __slots__ = ("_document", "_index", "level")

    def __init__(self, document: "Document", level: Level, index: int) -> None:
        self._document = document
        self._index = index
        self.level = level

    def index(self) -> int:
        """Index of this item within its level of the document."""
        return self._index

    def parent_document(self) -> "Document":
        return self._document

    def out(self, projector: Projector = Its.VALUE) -> Any:
        return self._document._project(self.level, self._index, projector)

    def markup(self, begin_marker: str | None = None, end_marker: str | None = None) -> None:
        start, end = self.span()
        self._document._mark(start, end, begin_marker, end_marker)

    def span(self) -> tuple[int, int]:
        entry = self._document._range_index(self.level)[self._index]
        return (entry.start, entry.end)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Item):
            return NotImplemented
        return (
            self._document is other._document
            and self.level is other.level
            and self._index == other._index
        )

    def __hash__(self) -> int:
        return hash((id(self._document), self.level, self._index))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(index={self._index})"


class TokenItem(Item):
    __slots__ = ()

    def __init__(self, document: "Document", index: int) -> None:
        super().__init__(document, Level.TOKEN, index)

    def span(self) -> tuple[int, int]:
        return (self._index, self._index)

    def parent_entity(self) -> "EntityItem | None":
        parent = self._document._resolver.entity_of_token(self._index)
        return None if parent is None else EntityItem(self._document, Level.ENTITY, parent)

    def parent_custom_entity(self) -> "EntityItem | None":
        parent = self._document._resolver.custom_entity_of_token(self._index)
        if parent is None:
            return None
        return EntityItem(self._document, Level.CUSTOM_ENTITY, parent)

    def parent_sentence(self) -> "SentenceItem | None":
        parent = self._document._resolver.sentence_of_token(self._index)
        return None if parent is None else SentenceItem(self._document, parent)


class EntityItem(Item):
    """An entity or a custom entity; ``level`` tells which."""

    __slots__ = ()

    def parent_sentence(self) -> "SentenceItem | None":
        resolver = self._document._resolver
        if self.level is Level.CUSTOM_ENTITY:
            parent = resolver.sentence_of_custom_entity(self._index)
        else:
            parent = resolver.sentence_of_entity(self._index)
        return None if parent is None else SentenceItem(self._document, parent)

    def tokens(self) -> DenseView:
        start, end = self.span()
        return DenseView(self._document, Level.TOKEN, start, end)


class SentenceItem(Item):
    __slots__ = ()

    def __init__(self, document: "Document", index: int) -> None:
        super().__init__(document, Level.SENTENCE, index)

    def tokens(self) -> DenseView:
        start, end = self.span()
        return DenseView(self._document, Level.TOKEN, start, end)

    def entities(self) -> SparseView:
        """Entities lying entirely within this sentence."""
        contained = self._document._resolver.entities_in_sentence(self._index)
        return SparseView(self._document, Level.ENTITY, contained)

    def custom_entities(self) -> SparseView:
        contained = self._document._resolver.custom_entities_in_sentence(self._index)
        return SparseView(self._document, Level.CUSTOM_ENTITY, contained)
