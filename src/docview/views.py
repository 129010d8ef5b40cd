"""
Uniform collection views over tokens, entities, custom entities and sentences.

A :class:`DenseView` covers a contiguous ``[start, end]`` index range and a
:class:`SparseView` an explicit ordered list of indices; both borrow the
owning :class:`~docview.document.Document` and never copy its data.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Iterable, Iterator, List, Sequence

from .errors import InvalidArgumentError
from .projections import As, Its, Projector, Reducer

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from .document import Document
    from .items import Item


class Level(Enum):
    TOKEN = "token"
    ENTITY = "entity"
    CUSTOM_ENTITY = "custom_entity"
    SENTENCE = "sentence"


class View(ABC):
    """Shared contract of every collection and selection."""

    def __init__(self, document: "Document", level: Level) -> None:
        self._document = document
        self.level = level

    @abstractmethod
    def indices(self) -> Sequence[int]:
        """Return the member indices, in order, within the owning level."""
        raise NotImplementedError

    def __len__(self) -> int:
        return len(self.indices())

    def __iter__(self) -> Iterator["Item"]:
        make_item = self._document._item
        for index in self.indices():
            yield make_item(self.level, index)

    def length(self) -> int:
        return len(self)

    def each(self, visitor: Callable[["Item"], Any]) -> None:
        """Call ``visitor`` on every member in order."""
        for item in self:
            visitor(item)

    def map(self, transform: Callable[["Item"], Any]) -> List[Any]:
        return [transform(item) for item in self]

    def filter(self, predicate: Callable[["Item"], Any]) -> "SparseView":
        """Return a selection of the members for which ``predicate`` is truthy."""
        make_item = self._document._item
        selected = [
            index for index in self.indices() if predicate(make_item(self.level, index))
        ]
        return SparseView(self._document, self.level, selected)

    def item_at(self, k: int) -> "Item | None":
        """Return the ``k``-th member (negative counts from the end) or None."""
        if not isinstance(k, int) or isinstance(k, bool):
            raise InvalidArgumentError(f"Item position must be an integer, found {k!r}.")
        indices = self.indices()
        if not -len(indices) <= k < len(indices):
            return None
        return self._document._item(self.level, indices[k])

    def out(self, mapper: Projector = Its.VALUE, reducer: Reducer = As.ARRAY) -> Any:
        """Project every member with ``mapper`` and combine them with ``reducer``."""
        return self._document._out(self.level, self.indices(), mapper, reducer)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(level={self.level.value}, length={len(self)})"


class DenseView(View):
    """View over the contiguous index range ``[start, end]``; empty when end < start."""

    def __init__(self, document: "Document", level: Level, start: int, end: int) -> None:
        super().__init__(document, level)
        self.start = start
        self.end = end

    def indices(self) -> range:
        return range(self.start, self.end + 1)


class SparseView(View):
    """View over an explicit ordered list of indices, as produced by ``filter``."""

    def __init__(self, document: "Document", level: Level, indices: Iterable[int]) -> None:
        super().__init__(document, level)
        self._indices = tuple(indices)

    def indices(self) -> tuple[int, ...]:
        return self._indices
