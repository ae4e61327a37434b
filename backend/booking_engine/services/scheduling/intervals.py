"""
Half-open interval arithmetic on [start, end) datetime ranges.

Every component uses these helpers so that boundary semantics stay the
same everywhere: an appointment ending at 10:00 and one starting at 10:00
do not overlap, and an empty interval overlaps nothing.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable


@dataclass(frozen=True, order=True)
class Interval:
    start: datetime
    end: datetime

    @property
    def is_empty(self) -> bool:
        return self.start >= self.end

    def overlaps(self, other: "Interval") -> bool:
        return overlaps(self.start, self.end, other.start, other.end)

    def contains(self, other: "Interval") -> bool:
        return contains(self.start, self.end, other.start, other.end)


def overlaps(a_start, a_end, b_start, b_end) -> bool:
    """True iff [a_start, a_end) and [b_start, b_end) share an instant."""
    if a_start >= a_end or b_start >= b_end:
        return False
    return a_start < b_end and b_start < a_end


def contains(outer_start, outer_end, inner_start, inner_end) -> bool:
    """True iff the non-empty inner interval lies within the outer one."""
    if inner_start >= inner_end:
        return False
    return outer_start <= inner_start and inner_end <= outer_end


def merge_intervals(intervals: Iterable[Interval]) -> list[Interval]:
    """Union of overlapping or adjacent intervals, sorted by start."""
    ordered = sorted(i for i in intervals if not i.is_empty)
    if not ordered:
        return []

    merged = [ordered[0]]
    for current in ordered[1:]:
        last = merged[-1]
        if current.start <= last.end:
            if current.end > last.end:
                merged[-1] = Interval(last.start, current.end)
        else:
            merged.append(current)
    return merged


def subtract_intervals(window: Interval, blocks: Iterable[Interval]) -> list[Interval]:
    """
    Remove blocks from a window.

    Blocks are merged first, so overlapping breaks behave as their union.
    Returns 0..n disjoint sub-windows in ascending order.
    """
    if window.is_empty:
        return []

    result = []
    cursor = window.start
    for block in merge_intervals(blocks):
        if block.end <= cursor:
            continue
        if block.start >= window.end:
            break
        if block.start > cursor:
            result.append(Interval(cursor, block.start))
        cursor = max(cursor, block.end)
        if cursor >= window.end:
            break

    if cursor < window.end:
        result.append(Interval(cursor, window.end))
    return result
