"""Half-open integer intervals used for generations and parent indices."""

from __future__ import annotations

from dataclasses import dataclass

from jj_analyze.tree import Leaf

U32_MAX = 2**32 - 1
U64_MAX = 2**64 - 1

# Windows at least this wide are walked as if unbounded.
LARGE_RANGE_WIDTH = 10_000


@dataclass(frozen=True)
class Interval:
    """``[start, end)``; empty when ``end <= start``."""

    start: int
    end: int

    @property
    def width(self) -> int:
        return max(self.end - self.start, 0)

    def is_large(self) -> bool:
        return self.width >= LARGE_RANGE_WIDTH

    def leaf(self, full: Interval) -> Leaf:
        return Leaf(format_range(self, full) or "")


GENERATION_RANGE_FULL = Interval(0, U64_MAX)
PARENTS_RANGE_FULL = Interval(0, U32_MAX)


def format_range(interval: Interval, full: Interval) -> str | None:
    """Short form of *interval*, or ``None`` when it spans *full*."""
    if interval == full:
        return None
    if interval.start == interval.end:
        return "empty range"
    if interval.start == interval.end - 1:
        return str(interval.start)
    if interval.end == full.end:
        return f"{interval.start}.."
    return f"{interval.start}..{interval.end}"
