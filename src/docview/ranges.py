from __future__ import annotations

from bisect import bisect_left, bisect_right
from typing import Any, Iterable, Iterator, List, Tuple

from .errors import MalformedPayloadError
from .models import RangeEntry


def coerce_range(entry: Any) -> RangeEntry:
    """Accept a RangeEntry or a ``[start, end, type?]`` sequence."""
    if isinstance(entry, RangeEntry):
        return entry
    try:
        parts = list(entry)
    except TypeError as exc:
        raise MalformedPayloadError(f"Range entry {entry!r} is not a sequence.") from exc
    if len(parts) not in (2, 3):
        raise MalformedPayloadError(
            f"Range entry {entry!r} must be [start, end] or [start, end, type]."
        )
    start, end = parts[0], parts[1]
    if not all(isinstance(v, int) and not isinstance(v, bool) for v in (start, end)):
        raise MalformedPayloadError(f"Range entry {entry!r} must use integer bounds.")
    return RangeEntry(start, end, parts[2] if len(parts) == 3 else None)


class RangeIndex:
    """Sorted, non-overlapping inclusive token ranges with containment queries."""

    def __init__(self, entries: Iterable[Any], num_tokens: int, name: str) -> None:
        self.name = name
        self._entries: Tuple[RangeEntry, ...] = tuple(coerce_range(e) for e in entries)
        self._validate(num_tokens)
        self._starts = [entry.start for entry in self._entries]

    def _validate(self, num_tokens: int) -> None:
        previous_end = -1
        for idx, entry in enumerate(self._entries):
            if not 0 <= entry.start <= entry.end <= num_tokens - 1:
                raise MalformedPayloadError(
                    f"{self.name} range {idx} [{entry.start}, {entry.end}] lies "
                    f"outside tokens [0, {num_tokens - 1}]."
                )
            if entry.start <= previous_end:
                raise MalformedPayloadError(
                    f"{self.name} range {idx} [{entry.start}, {entry.end}] is out of "
                    "order or overlaps its predecessor."
                )
            previous_end = entry.end

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> RangeEntry:
        return self._entries[index]

    def __iter__(self) -> Iterator[RangeEntry]:
        return iter(self._entries)

    def parent_of(self, token_index: int) -> int | None:
        """Return the index of the range containing ``token_index``, if any."""
        pos = bisect_right(self._starts, token_index) - 1
        if pos < 0:
            return None
        if self._entries[pos].end >= token_index:
            return pos
        return None

    def contained_within(self, lo: int, hi: int) -> List[int]:
        """Return indices of ranges lying fully inside ``[lo, hi]``, ascending."""
        contained: List[int] = []
        for pos in range(bisect_left(self._starts, lo), len(self._entries)):
            entry = self._entries[pos]
            if entry.start > hi:
                break
            if entry.end <= hi:
                contained.append(pos)
        return contained

    def covers_all(self, num_tokens: int) -> bool:
        """True when the ranges partition ``[0, num_tokens - 1]`` without gaps."""
        expected = 0
        for entry in self._entries:
            if entry.start != expected:
                return False
            expected = entry.end + 1
        return expected == num_tokens
