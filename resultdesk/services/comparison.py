"""Side-by-side comparison of students in a cohort."""

from collections.abc import Sequence
from decimal import Decimal

from resultdesk.schemas.cohort import ComparativeRow, ComparativeTable
from resultdesk.schemas.student import StudentAggregate
from resultdesk.utils.grade_utils import round_half_up
from resultdesk.utils.statistics_utils import mode_first_seen


def _column_label(aggregate: StudentAggregate, index: int) -> str:
    return aggregate.student_info.name.strip() or f"Student {index + 1}"


def _rounded_mean(values: Sequence[float | int], places: int = 0) -> float:
    """Mean rounded half-up; 0.0 for no values."""
    if not values:
        return 0.0
    total = sum((Decimal(str(v)) for v in values), Decimal(0))
    return round_half_up(total / len(values), places)


def _subject_rows(cohort: Sequence[StudentAggregate]) -> list[ComparativeRow]:
    # Union of subject names in first-seen order
    names: list[str] = []
    for aggregate in cohort:
        for subject in aggregate.subjects:
            if subject.name not in names:
                names.append(subject.name)

    rows = []
    for name in names:
        values: list[float | int | str | None] = []
        present: list[int] = []
        for aggregate in cohort:
            subject = next((s for s in aggregate.subjects if s.name == name), None)
            if subject is None:
                values.append(None)
                continue
            percentage = int(round_half_up(subject.percentage))
            values.append(percentage)
            present.append(percentage)
        rows.append(ComparativeRow(label=name, values=values, class_average=int(_rounded_mean(present))))
    return rows


def _metric_rows(cohort: Sequence[StudentAggregate]) -> list[ComparativeRow]:
    sgpas = [a.sgpa for a in cohort]
    percentages = [a.percentage for a in cohort]
    grades = [a.overall_grade.value for a in cohort]
    return [
        ComparativeRow(label="SGPA", values=list(sgpas), class_average=_rounded_mean(sgpas, 2)),
        ComparativeRow(
            label="Percentage",
            values=list(percentages),
            class_average=int(_rounded_mean(percentages)),
        ),
        ComparativeRow(label="Overall Grade", values=list(grades), class_average=mode_first_seen(grades)),
    ]


def build_comparison(cohort: Sequence[StudentAggregate]) -> ComparativeTable:
    """
    Build the student comparison table.

    Subject rows hold each student's subject percentage, or None when the
    student did not take the subject; None cells are left out of the class
    average. Metric rows cover SGPA, percentage and overall grade, where the
    class "average" grade is the most frequent one (ties go to the grade seen
    first).

    Args:
        cohort: Student aggregates in submission order

    Returns:
        ComparativeTable with one column per student
    """
    return ComparativeTable(
        students=[_column_label(a, i) for i, a in enumerate(cohort)],
        subject_rows=_subject_rows(cohort),
        metric_rows=_metric_rows(cohort),
    )
