import math
from typing import Iterable, Optional


def _percentile(values: Iterable[float], fraction: float) -> Optional[float]:
    """
    Nearest-rank percentile over a copy of `values` sorted ascending.

    Index is floor(n * fraction), clamped to the last element, so p95 of 15
    samples is the 15th-smallest value. Returns None for an empty input.
    """
    ordered = sorted(values)
    if not ordered:
        return None
    index = min(len(ordered) - 1, max(0, int(math.floor(len(ordered) * fraction))))
    return ordered[index]


def _mean(values: Iterable[float]) -> Optional[float]:
    items = list(values)
    if not items:
        return None
    return sum(items) / len(items)


def _share_below(values: Iterable[float], threshold: float) -> Optional[float]:
    """Fraction of values strictly under `threshold`; None when there are no values."""
    items = list(values)
    if not items:
        return None
    return sum(1 for value in items if value < threshold) / len(items)
