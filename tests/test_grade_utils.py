from decimal import Decimal

import pytest

from resultdesk.exceptions import ConfigurationError, ResultProcessingError
from resultdesk.models import Grade, GradingScheme, PerformanceLevel
from resultdesk.utils.grade_utils import (
    grade_for,
    is_passing_grade,
    overall_grade_for,
    performance_level,
    round_half_up,
    subject_performance_level,
    top_grade,
)


@pytest.mark.parametrize("scheme", list(GradingScheme))
def test_grade_points_never_decrease_with_marks(scheme):
    points = [grade_for(marks, scheme)[1] for marks in range(-5, 106)]
    assert points == sorted(points)


def test_boundary_belongs_to_upper_band():
    assert grade_for(90, GradingScheme.PERCENTAGE_LETTER) == (Grade.A_PLUS, 10)
    assert grade_for(89, GradingScheme.PERCENTAGE_LETTER) == (Grade.A, 9)
    assert grade_for(89.99, GradingScheme.PERCENTAGE_LETTER) == (Grade.A, 9)


@pytest.mark.parametrize(
    "marks, expected",
    [
        (100, (Grade.S, 10)),
        (80, (Grade.A, 9)),
        (79, (Grade.B, 8)),
        (60, (Grade.C, 7)),
        (50, (Grade.D, 6)),
        (40, (Grade.E, 5)),
        (39, (Grade.F, 0)),
        (-3, (Grade.F, 0)),
    ],
)
def test_grade_letter_scheme(marks, expected):
    assert grade_for(marks, GradingScheme.GRADE_LETTER) == expected


def test_unknown_scheme_is_rejected():
    with pytest.raises(ConfigurationError):
        grade_for(75, "X")
    with pytest.raises(ResultProcessingError):
        top_grade("X")


def test_overall_grade_from_sgpa():
    assert overall_grade_for(9.0, GradingScheme.GRADE_LETTER) == Grade.S
    assert overall_grade_for(8.0, GradingScheme.GRADE_LETTER) == Grade.A
    assert overall_grade_for(7.99, GradingScheme.GRADE_LETTER) == Grade.B
    assert overall_grade_for(3.99, GradingScheme.GRADE_LETTER) == Grade.F
    assert overall_grade_for(9.5, GradingScheme.PERCENTAGE_LETTER) == Grade.A_PLUS
    assert overall_grade_for(4.0, GradingScheme.PERCENTAGE_LETTER) == Grade.C


def test_top_grade():
    assert top_grade(GradingScheme.GRADE_LETTER) == (Grade.S, 10)
    assert top_grade(GradingScheme.PERCENTAGE_LETTER) == (Grade.A_PLUS, 10)


def test_only_f_fails():
    assert not is_passing_grade(Grade.F)
    assert all(is_passing_grade(g) for g in Grade if g != Grade.F)


def test_round_half_up():
    assert round_half_up(82.5) == 83
    assert round_half_up(81.5) == 82
    assert round_half_up(8.805, 2) == 8.81
    assert round_half_up(185 / 21, 2) == 8.81
    assert round_half_up(Decimal(5700) / 200) == 29
    assert round_half_up(Decimal(45200) / 800) == 57


def test_performance_levels():
    assert performance_level(90) == PerformanceLevel.EXCELLENT
    assert performance_level(89) == PerformanceLevel.VERY_GOOD
    assert performance_level(60) == PerformanceLevel.GOOD
    assert performance_level(45) == PerformanceLevel.SATISFACTORY
    assert performance_level(44) == PerformanceLevel.NEEDS_IMPROVEMENT
    assert subject_performance_level(80) == PerformanceLevel.EXCELLENT
    assert subject_performance_level(79.99) == PerformanceLevel.VERY_GOOD
    assert subject_performance_level(49.5) == PerformanceLevel.NEEDS_IMPROVEMENT
