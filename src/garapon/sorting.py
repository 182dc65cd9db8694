"""Ordering of drawn numbers for the final "winning numbers" screen."""

from __future__ import annotations
from typing import Iterable, List, Sequence

SORT_MIN = 0
SORT_MAX = 100  # no variant numbers its balls above 100


def sort_main(values: Iterable[int], low: int = SORT_MIN, high: int = SORT_MAX) -> List[int]:
    """Counting sort of `values`, which must all lie in [low, high].

    Stable and O(n + high - low). Raises ValueError for anything outside
    the domain instead of clamping it.
    """
    values = list(values)
    for v in values:
        if not low <= v <= high:
            raise ValueError(f"{v} is outside the sortable range {low}..{high}")

    count = [0] * (high - low + 1)
    for v in values:
        count[v - low] += 1
    for i in range(1, len(count)):
        count[i] += count[i - 1]

    out = [0] * len(values)
    for v in reversed(values):
        count[v - low] -= 1
        out[count[v - low]] = v
    return out


def order_bonus(values: Sequence[int]) -> List[int]:
    """One bonus as-is, two as (min, max), more in draw order."""
    if len(values) == 2:
        return [min(values), max(values)]
    return list(values)
