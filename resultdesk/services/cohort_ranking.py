"""Cohort ranking by SGPA."""

from collections.abc import Sequence

from resultdesk.schemas.student import RankedStudent, StudentAggregate


def rank_cohort(cohort: Sequence[StudentAggregate]) -> list[RankedStudent]:
    """
    Rank students by SGPA, highest first.

    Ranks are ordinal: equal SGPAs get consecutive ranks in submission order
    (9.0, 9.0, 8.0 -> 1, 2, 3). The returned list follows the input order,
    not the ranking order.

    Args:
        cohort: Student aggregates in submission order

    Returns:
        One RankedStudent per aggregate, in the same order as the input
    """
    # sorted() is stable, so ties keep their submission order
    order = sorted(range(len(cohort)), key=lambda i: -cohort[i].sgpa)
    ranks = [0] * len(cohort)
    for position, index in enumerate(order):
        ranks[index] = position + 1

    return [RankedStudent(aggregate=aggregate, rank=rank) for aggregate, rank in zip(cohort, ranks)]


def top_performers(ranked: Sequence[RankedStudent], limit: int = 5) -> list[RankedStudent]:
    """Return the best `limit` students, best first."""
    return sorted(ranked, key=lambda r: r.rank)[:limit]
