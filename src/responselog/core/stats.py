"""Aggregate statistics over scored items.

Everything here works on any object exposing an integer ``score``, so the
same functions rank log records by latency and summary rows by total time.

Ordering rule for equal scores: sorting is stable, so items with the same
score keep their input order in both ``top`` and ``bottom``.
"""
from typing import List, Protocol, Sequence, TypeVar


class Scored(Protocol):
    """Anything that contributes an integer score to statistics"""

    @property
    def score(self) -> int:
        ...


T = TypeVar("T", bound=Scored)


def total(items: Sequence[Scored]) -> int:
    """Sum of scores, 0 for no items."""
    return sum(item.score for item in items)


def average(items: Sequence[Scored]) -> float:
    """Arithmetic mean of scores.

    Returns exactly 0.0 when there are no items.
    """
    if not items:
        return 0.0
    return total(items) / len(items)


def _check_count(count: int) -> None:
    if count < 0:
        raise ValueError(f"count must be >= 0, got {count}")


def top(items: Sequence[T], count: int) -> List[T]:
    """Return the ``count`` highest scoring items, largest last.

    A count of 0, or one at least as large as ``items``, means no
    truncation: every item is returned in its original order.

    Args:
        items: Items to rank
        count: Number of items to keep

    Returns:
        Selected items in ascending score order

    Raises:
        ValueError: If count is negative
    """
    _check_count(count)
    if count == 0 or count >= len(items):
        return list(items)
    ranked = sorted(items, key=lambda item: item.score)
    return ranked[len(ranked) - count:]


def bottom(items: Sequence[T], count: int) -> List[T]:
    """Return the ``count`` lowest scoring items, smallest last.

    Same truncation rule as :func:`top`.

    Args:
        items: Items to rank
        count: Number of items to keep

    Returns:
        Selected items in descending score order

    Raises:
        ValueError: If count is negative
    """
    _check_count(count)
    if count == 0 or count >= len(items):
        return list(items)
    ranked = sorted(items, key=lambda item: item.score, reverse=True)
    return ranked[len(ranked) - count:]
