"""Utility functions for grade lookup and rounding."""

from decimal import ROUND_HALF_UP, Decimal

from resultdesk.exceptions import ConfigurationError
from resultdesk.models import Grade, GradingScheme, PerformanceLevel

# (minimum marks, grade, grade points), highest band first
GRADE_BANDS: dict[GradingScheme, list[tuple[float, Grade, int]]] = {
    GradingScheme.PERCENTAGE_LETTER: [
        (90, Grade.A_PLUS, 10),
        (80, Grade.A, 9),
        (70, Grade.B_PLUS, 8),
        (60, Grade.B, 7),
        (50, Grade.C_PLUS, 6),
        (40, Grade.C, 5),
    ],
    GradingScheme.GRADE_LETTER: [
        (90, Grade.S, 10),
        (80, Grade.A, 9),
        (70, Grade.B, 8),
        (60, Grade.C, 7),
        (50, Grade.D, 6),
        (40, Grade.E, 5),
    ],
}

FAIL_BAND: tuple[Grade, int] = (Grade.F, 0)

# SGPA boundaries for the overall grade, mapped onto the same ladders
SGPA_THRESHOLDS: list[float] = [9.0, 8.0, 7.0, 6.0, 5.0, 4.0]

PERFORMANCE_LEVELS: list[tuple[float, PerformanceLevel]] = [
    (90, PerformanceLevel.EXCELLENT),
    (75, PerformanceLevel.VERY_GOOD),
    (60, PerformanceLevel.GOOD),
    (45, PerformanceLevel.SATISFACTORY),
]

SUBJECT_PERFORMANCE_LEVELS: list[tuple[float, PerformanceLevel]] = [
    (80, PerformanceLevel.EXCELLENT),
    (70, PerformanceLevel.VERY_GOOD),
    (60, PerformanceLevel.GOOD),
    (50, PerformanceLevel.SATISFACTORY),
]


def round_half_up(value: float | Decimal, places: int = 0) -> float:
    """
    Round a value half away from zero.

    Python's round() uses banker's rounding, which would turn 82.5% into 82.
    Results are rounded the way mark-sheets print them instead.

    Pass ratios as a Decimal built from the integer operands: a float quotient
    such as 57 / 200 * 100 is already 28.499999999999996 before rounding.
    """
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    exponent = Decimal(1).scaleb(-places)
    return float(value.quantize(exponent, rounding=ROUND_HALF_UP))


def _bands_for(scheme: GradingScheme) -> list[tuple[float, Grade, int]]:
    try:
        return GRADE_BANDS[scheme]
    except KeyError as exc:
        raise ConfigurationError(f"Unsupported grading scheme: {scheme}") from exc


def grade_for(marks: float, scheme: GradingScheme) -> tuple[Grade, int]:
    """
    Look up the grade and grade points for a mark.

    Bands are checked from the top and the first one whose minimum is met wins,
    so a mark sitting exactly on a boundary gets the higher grade. Anything
    below the lowest band, including negative input, is a fail.

    Args:
        marks: Marks obtained (out of 100)
        scheme: Grading scheme to use

    Returns:
        Tuple of (grade, grade_points)
    """
    for minimum, grade, points in _bands_for(scheme):
        if marks >= minimum:
            return grade, points
    return FAIL_BAND


def overall_grade_for(sgpa: float, scheme: GradingScheme) -> Grade:
    """Map an SGPA onto the scheme's letter ladder (9.0 and above is the top band)."""
    for threshold, (_, grade, _) in zip(SGPA_THRESHOLDS, _bands_for(scheme)):
        if sgpa >= threshold:
            return grade
    return FAIL_BAND[0]


def top_grade(scheme: GradingScheme) -> tuple[Grade, int]:
    """Return the highest (grade, grade_points) band of a scheme."""
    _, grade, points = _bands_for(scheme)[0]
    return grade, points


def is_passing_grade(grade: Grade) -> bool:
    return grade != Grade.F


def performance_level(percentage: float) -> PerformanceLevel:
    """Performance level of one student's subject percentage."""
    for minimum, level in PERFORMANCE_LEVELS:
        if percentage >= minimum:
            return level
    return PerformanceLevel.NEEDS_IMPROVEMENT


def subject_performance_level(average: float) -> PerformanceLevel:
    """Performance level of a class-wide subject average."""
    for minimum, level in SUBJECT_PERFORMANCE_LEVELS:
        if average >= minimum:
            return level
    return PerformanceLevel.NEEDS_IMPROVEMENT
