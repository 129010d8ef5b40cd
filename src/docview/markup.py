from __future__ import annotations

from typing import Iterator, List, Tuple

from .models import Marking


class MarkupLedger:
    """
    Append-only record of markup requests over token ranges.

    Entries are kept exactly as requested and in call order; rendering them
    into text is left to the consumer. Not synchronized: callers sharing a
    document across threads must serialize ``append`` calls.
    """

    def __init__(self) -> None:
        self._entries: List[Marking] = []

    def append(self, start: int, end: int, begin_marker: str, end_marker: str) -> None:
        self._entries.append(Marking(start, end, begin_marker, end_marker))

    def entries(self) -> Tuple[Marking, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Marking]:
        return iter(self.entries())
