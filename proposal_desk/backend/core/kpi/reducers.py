"""Generic reducers shared by the KPI aggregator and the wizard budget."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TypeVar

T = TypeVar("T")
N = TypeVar("N", int, float)


def sum_by(items: Iterable[T], extract: Callable[[T], N], start: N = 0) -> N:
    """Sum one numeric field over ``items``.

    Args:
        items: Records to reduce
        extract: Returns the number contributed by one record
        start: Value for an empty iterable
    """
    total = start
    for item in items:
        total += extract(item)
    return total


def mean_by(items: list[T], extract: Callable[[T], float]) -> float:
    """Arithmetic mean of one field; 0 for an empty list instead of NaN."""
    if not items:
        return 0.0
    return sum_by(items, extract, 0.0) / len(items)
