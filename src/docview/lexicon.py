from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List


class Lexicon(ABC):
    """Abstract lexeme cache that maps surface forms to integer hashes.

    Hash ``0`` is reserved and never assigned to a lexeme.
    """

    @abstractmethod
    def lookup(self, word: str) -> int | None:
        """Return the hash of ``word`` when it is a known lexeme."""
        raise NotImplementedError

    @abstractmethod
    def value(self, hash_: int) -> str:
        """Return the surface form stored under ``hash_``."""
        raise NotImplementedError

    @abstractmethod
    def intern(self, word: str) -> int:
        """Return the hash of ``word``, registering it as out-of-vocabulary if new."""
        raise NotImplementedError

    @abstractmethod
    def is_oov(self, word: str) -> bool:
        """Return True when the normalized ``word`` is absent from the base vocabulary."""
        raise NotImplementedError

    def is_lexeme(self, word: str) -> bool:
        return self.lookup(word) is not None


class InMemoryLexicon(Lexicon):
    """
    Dictionary-backed lexicon with a fixed base vocabulary and a growing
    extension for words first seen while building documents.
    """

    def __init__(self, words: Iterable[str] = ()) -> None:
        self._values: List[str] = [""]
        self._hashes: Dict[str, int] = {}
        for word in words:
            self._add(word)
        self._base_size = len(self._values)

    def _add(self, word: str) -> int:
        existing = self._hashes.get(word)
        if existing is not None:
            return existing
        self._values.append(word)
        self._hashes[word] = len(self._values) - 1
        return self._hashes[word]

    def lookup(self, word: str) -> int | None:
        hash_ = self._hashes.get(word)
        if hash_ is None or hash_ >= self._base_size:
            return None
        return hash_

    def value(self, hash_: int) -> str:
        if hash_ <= 0 or hash_ >= len(self._values):
            raise KeyError(f"Unknown lexeme hash {hash_}.")
        return self._values[hash_]

    def intern(self, word: str) -> int:
        return self._add(word)

    def is_oov(self, word: str) -> bool:
        return self.lookup(word.lower()) is None

    def __len__(self) -> int:
        return len(self._values) - 1
