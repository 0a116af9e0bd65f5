"""Cohort-wide statistics for a set of processed results."""

import logging
from collections.abc import Sequence

from resultdesk.config import settings
from resultdesk.schemas.cohort import CohortStatistics, SgpaStatistics, SubjectPerformance, TopPerformer
from resultdesk.schemas.student import StudentAggregate
from resultdesk.services.cohort_ranking import rank_cohort, top_performers
from resultdesk.utils.grade_utils import is_passing_grade, subject_performance_level
from resultdesk.utils.statistics_utils import calculate_statistics, frequency_counts, mean_or_zero, percentage_of

logger = logging.getLogger(__name__)

# (label, lower bound inclusive, upper bound exclusive)
SGPA_BANDS: list[tuple[str, float, float]] = [
    ("<5", float("-inf"), 5.0),
    ("5-6", 5.0, 6.0),
    ("6-7", 6.0, 7.0),
    ("7-8", 7.0, 8.0),
    ("8-9", 8.0, 9.0),
    (">=9", 9.0, float("inf")),
]


def _sgpa_distribution(sgpas: Sequence[float]) -> dict[str, int]:
    return {label: sum(1 for s in sgpas if low <= s < high) for label, low, high in SGPA_BANDS}


def _subject_marks(cohort: Sequence[StudentAggregate]) -> dict[str, list[int]]:
    """Marks per subject name, only for students who took the subject."""
    marks: dict[str, list[int]] = {}
    for aggregate in cohort:
        for subject in aggregate.subjects:
            marks.setdefault(subject.name, []).append(subject.marks_obtained)
    return marks


def _subject_performance(cohort: Sequence[StudentAggregate]) -> list[SubjectPerformance]:
    grades: dict[str, list[str]] = {}
    passed: dict[str, int] = {}
    for aggregate in cohort:
        for subject in aggregate.subjects:
            grades.setdefault(subject.name, []).append(subject.grade.value)
            passed[subject.name] = passed.get(subject.name, 0) + int(is_passing_grade(subject.grade))

    performance = []
    for name, subject_marks in _subject_marks(cohort).items():
        average = round(mean_or_zero(subject_marks), 2)
        performance.append(
            SubjectPerformance(
                name=name,
                students=len(subject_marks),
                average=average,
                grade_distribution=frequency_counts(grades[name]),
                pass_rate=percentage_of(passed[name], len(subject_marks)),
                performance_level=subject_performance_level(average),
            )
        )
    return sorted(performance, key=lambda p: p.average, reverse=True)


def summarize_cohort(
    cohort: Sequence[StudentAggregate],
    *,
    pass_threshold: float | None = None,
    top_limit: int | None = None,
) -> CohortStatistics:
    """
    Calculate class statistics for a cohort.

    An empty cohort yields zero averages, a zero pass percentage and empty
    mappings rather than an error.

    Args:
        cohort: Student aggregates in submission order
        pass_threshold: Minimum SGPA counted as a pass (defaults to settings.pass_threshold)
        top_limit: Number of top performers to include (defaults to settings.top_performers_limit)

    Returns:
        CohortStatistics snapshot
    """
    if pass_threshold is None:
        pass_threshold = settings.pass_threshold
    if top_limit is None:
        top_limit = settings.top_performers_limit

    total_students = len(cohort)
    sgpas = [a.sgpa for a in cohort]
    percentages = [a.percentage for a in cohort]

    grade_histogram = frequency_counts(a.overall_grade.value for a in cohort)
    passed = sum(1 for s in sgpas if s >= pass_threshold)

    # subject_averages keeps first-seen subject order; subject_performance is sorted
    subject_marks = _subject_marks(cohort)

    top = [
        TopPerformer(
            name=r.aggregate.student_info.name,
            roll_number=r.aggregate.student_info.roll_number,
            sgpa=r.aggregate.sgpa,
            percentage=r.aggregate.percentage,
            overall_grade=r.aggregate.overall_grade,
            rank=r.rank,
        )
        for r in top_performers(rank_cohort(cohort), top_limit)
    ]

    logger.debug(f"Summarized cohort of {total_students} students")

    return CohortStatistics(
        total_students=total_students,
        average_sgpa=round(mean_or_zero(sgpas), 2),
        average_percentage=round(mean_or_zero(percentages), 2),
        pass_percentage=percentage_of(passed, total_students),
        grade_histogram=grade_histogram,
        grade_percentages={g: percentage_of(c, total_students) for g, c in grade_histogram.items()},
        subject_averages={name: round(mean_or_zero(m), 2) for name, m in subject_marks.items()},
        sgpa_distribution=_sgpa_distribution(sgpas),
        sgpa_statistics=SgpaStatistics(**calculate_statistics(sgpas)),
        subject_performance=_subject_performance(cohort),
        top_performers=top,
    )
