"""Utility functions for calculating statistics."""

import statistics
from collections.abc import Hashable, Iterable, Sequence
from typing import TypeVar

T = TypeVar("T", bound=Hashable)


def calculate_statistics(data: Sequence[float]) -> dict[str, float | None]:
    """
    Calculate basic statistics for a dataset.

    Args:
        data: Sequence of numeric values

    Returns:
        Dictionary with mean, median, min, max, std_deviation (all None for empty data)
    """
    if not data:
        return {
            "mean": None,
            "median": None,
            "min": None,
            "max": None,
            "std_deviation": None,
        }

    std_dev = statistics.stdev(data) if len(data) > 1 else 0.0
    return {
        "mean": round(statistics.mean(data), 2),
        "median": round(statistics.median(data), 2),
        "min": round(min(data), 2),
        "max": round(max(data), 2),
        "std_deviation": round(std_dev, 2),
    }


def mean_or_zero(data: Sequence[float]) -> float:
    """Arithmetic mean, or 0.0 for empty data."""
    if not data:
        return 0.0
    return statistics.fmean(data)


def frequency_counts(values: Iterable[T]) -> dict[T, int]:
    """Count occurrences, keyed in order of first occurrence."""
    counts: dict[T, int] = {}
    for value in values:
        counts[value] = counts.get(value, 0) + 1
    return counts


def mode_first_seen(values: Iterable[T]) -> T | None:
    """
    Most frequent value. Ties go to the value encountered first.

    Returns None for empty input.
    """
    best: T | None = None
    best_count = 0
    for value, count in frequency_counts(values).items():
        if count > best_count:
            best, best_count = value, count
    return best


def percentage_of(count: int, total: int) -> float:
    """count / total as a percentage rounded to 2 places; 0.0 when total is 0."""
    if total == 0:
        return 0.0
    return round(count / total * 100, 2)
