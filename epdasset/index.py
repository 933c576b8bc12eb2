"""Sparse character to glyph-index mapping.

The glyph array only holds the characters that were requested, so the
renderer needs a way from a code point to a position in that array. The
mapping is compiled into the fewest ranges of consecutive code points; the
emitted firmware turns each range into one comparison.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Optional, Sequence

from epdasset.errors import EmptyAlphabetError


class IndexRange(NamedTuple):
    start: int
    length: int
    base_index: int

    @property
    def end(self) -> int:
        return self.start + self.length


@dataclass(frozen=True)
class CharToIndex:
    ranges: tuple[IndexRange, ...]

    def __len__(self) -> int:
        return len(self.ranges)

    @property
    def glyph_count(self) -> int:
        return sum(r.length for r in self.ranges)

    def lookup(self, code_point: int) -> Optional[int]:
        for r in self.ranges:
            if r.start <= code_point < r.end:
                return r.base_index + (code_point - r.start)
        return None


def compile_index(chars: Sequence[int]) -> CharToIndex:
    """Compile sorted, unique code points into maximal consecutive ranges."""
    if not chars:
        raise EmptyAlphabetError()

    ranges = []
    run_start = chars[0]
    run_length = 1
    for i in range(1, len(chars)):
        c = chars[i]
        if c <= chars[i - 1]:
            raise ValueError(f"characters must be sorted and unique, got {c} after {chars[i - 1]}")
        if c == run_start + run_length:
            run_length += 1
        else:
            ranges.append(IndexRange(run_start, run_length, i - run_length))
            run_start = c
            run_length = 1
    ranges.append(IndexRange(run_start, run_length, len(chars) - run_length))
    return CharToIndex(ranges=tuple(ranges))
