"""Service for turning raw subject scores into computed student results."""

import logging
from collections.abc import Iterable, Mapping, Sequence
from decimal import Decimal

from resultdesk.config import settings
from resultdesk.exceptions import ConfigurationError, DegenerateCohortError, ResultProcessingError
from resultdesk.models import GradingScheme
from resultdesk.schemas.student import StudentAggregate, StudentEntry, StudentInfo
from resultdesk.schemas.subject import ComputedSubjectResult, RawSubjectScore, SubjectDefinition
from resultdesk.utils.grade_utils import grade_for, overall_grade_for, round_half_up, top_grade

logger = logging.getLogger(__name__)


def compute_subject_result(
    raw: RawSubjectScore,
    definition: SubjectDefinition,
    scheme: GradingScheme,
    *,
    mark_floor: int | None = None,
    internal_fraction: float | None = None,
) -> ComputedSubjectResult:
    """
    Compute marks obtained, internal/external split, grade and grade points for one subject.

    External-only subjects keep their external marks as-is and always get the
    scheme's top band. Every other subject is clamped to
    [mark_floor, total_marks] and re-split by internal_fraction.

    Args:
        raw: The raw subject score
        definition: Catalog entry for the subject
        scheme: Grading scheme to apply
        mark_floor: Lowest reportable marks (defaults to settings.mark_floor)
        internal_fraction: Internal share of the marks (defaults to settings.internal_fraction)

    Returns:
        The computed subject result
    """
    if mark_floor is None:
        mark_floor = settings.mark_floor
    if internal_fraction is None:
        internal_fraction = settings.internal_fraction
    if not 0 <= internal_fraction <= 1:
        raise ConfigurationError(f"internal_fraction must be between 0 and 1, got {internal_fraction}")

    if definition.external_only:
        grade, grade_points = top_grade(scheme)
        return ComputedSubjectResult(
            **definition.model_dump(),
            internal_marks=0,
            external_marks=raw.external_marks,
            marks_obtained=raw.external_marks,
            grade=grade,
            grade_points=grade_points,
        )

    total = raw.internal_marks + raw.external_marks
    marks_obtained = max(mark_floor, min(total, definition.total_marks))
    internal_marks = int(round_half_up(marks_obtained * Decimal(str(internal_fraction))))
    grade, grade_points = grade_for(marks_obtained, scheme)

    return ComputedSubjectResult(
        **definition.model_dump(),
        internal_marks=internal_marks,
        external_marks=marks_obtained - internal_marks,
        marks_obtained=marks_obtained,
        grade=grade,
        grade_points=grade_points,
    )


def aggregate_student(
    student_info: StudentInfo,
    subject_results: Sequence[ComputedSubjectResult],
    scheme: GradingScheme,
) -> StudentAggregate:
    """
    Aggregate computed subject results into totals, SGPA, percentage and overall grade.

    Raises:
        DegenerateCohortError: If total credits or total marks is zero
    """
    total_marks_obtained = sum(s.marks_obtained for s in subject_results)
    total_marks = sum(s.total_marks for s in subject_results)
    total_credits = sum(s.credits for s in subject_results)
    total_grade_points = sum(s.grade_points * s.credits for s in subject_results)

    if total_credits == 0:
        raise DegenerateCohortError(f"Student {student_info.roll_number} has zero total credits")
    if total_marks == 0:
        raise DegenerateCohortError(f"Student {student_info.roll_number} has zero total marks")

    sgpa = round_half_up(Decimal(total_grade_points) / total_credits, 2)
    percentage = int(round_half_up(Decimal(total_marks_obtained * 100) / total_marks))

    return StudentAggregate(
        student_info=student_info,
        scheme=scheme,
        subjects=list(subject_results),
        total_marks_obtained=total_marks_obtained,
        total_marks=total_marks,
        total_credits=total_credits,
        total_grade_points=total_grade_points,
        sgpa=sgpa,
        percentage=percentage,
        overall_grade=overall_grade_for(sgpa, scheme),
    )


def build_catalog(definitions: Iterable[SubjectDefinition]) -> dict[str, SubjectDefinition]:
    """Index subject definitions by course code."""
    catalog: dict[str, SubjectDefinition] = {}
    for definition in definitions:
        if definition.course_code in catalog:
            raise ConfigurationError(f"Duplicate course code in catalog: {definition.course_code}")
        catalog[definition.course_code] = definition
    return catalog


def process_student(
    student_info: StudentInfo,
    raw_scores: Sequence[RawSubjectScore],
    catalog: Mapping[str, SubjectDefinition],
    scheme: GradingScheme | None = None,
    *,
    mark_floor: int | None = None,
) -> StudentAggregate:
    """
    Compute every subject of one student and aggregate them.

    Raises:
        ConfigurationError: If a raw score references a course code missing from the catalog
        DegenerateCohortError: If the subjects add up to zero credits or zero marks
    """
    scheme = scheme or settings.grading_scheme
    subject_results = []
    for raw in raw_scores:
        definition = catalog.get(raw.course_code)
        if definition is None:
            raise ConfigurationError(
                f"Course code {raw.course_code} for student {student_info.roll_number} is not in the subject catalog"
            )
        subject_results.append(compute_subject_result(raw, definition, scheme, mark_floor=mark_floor))

    return aggregate_student(student_info, subject_results, scheme)


def process_cohort(
    entries: Sequence[StudentEntry],
    catalog: Mapping[str, SubjectDefinition],
    scheme: GradingScheme | None = None,
) -> tuple[list[StudentAggregate], list[tuple[StudentInfo, ResultProcessingError]]]:
    """
    Process a cohort, skipping students whose result cannot be computed.

    Returns:
        Tuple of (aggregates, errors) where errors pairs each rejected student with the reason
    """
    aggregates: list[StudentAggregate] = []
    errors: list[tuple[StudentInfo, ResultProcessingError]] = []
    for entry in entries:
        try:
            aggregates.append(process_student(entry.student_info, entry.scores, catalog, scheme))
        except ResultProcessingError as e:
            logger.warning(f"Skipping result for {entry.student_info.roll_number}: {e}")
            errors.append((entry.student_info, e))

    logger.info(f"Processed cohort: {len(aggregates)} results computed, {len(errors)} rejected")
    return aggregates, errors
