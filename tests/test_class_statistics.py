import pytest

from resultdesk.models import PerformanceLevel
from resultdesk.services.class_statistics import summarize_cohort


def test_subject_average_only_counts_students_taking_it(three_students):
    statistics = summarize_cohort(three_students)

    assert statistics.subject_averages == {"Maths": 80.0, "Subject X": 70.0}
    subject_x = next(p for p in statistics.subject_performance if p.name == "Subject X")
    assert subject_x.students == 2
    assert subject_x.average == 70.0
    assert subject_x.pass_rate == 100.0
    assert subject_x.grade_distribution == {"A": 1, "C": 1}
    assert subject_x.performance_level == PerformanceLevel.VERY_GOOD


def test_cohort_summary(three_students):
    statistics = summarize_cohort(three_students, top_limit=2)

    assert [a.sgpa for a in three_students] == [9.0, 7.5, 10.0]
    assert statistics.total_students == 3
    assert statistics.average_sgpa == 8.83
    assert statistics.average_percentage == 78.33
    assert statistics.pass_percentage == 100.0
    assert statistics.grade_histogram == {"S": 2, "B": 1}
    assert list(statistics.grade_histogram) == ["S", "B"]
    assert statistics.grade_percentages == {"S": 66.67, "B": 33.33}
    assert statistics.sgpa_distribution == {"<5": 0, "5-6": 0, "6-7": 0, "7-8": 1, "8-9": 0, ">=9": 2}
    assert statistics.sgpa_statistics.median == 9.0
    assert statistics.sgpa_statistics.min == 7.5
    assert statistics.sgpa_statistics.max == 10.0
    assert [(t.roll_number, t.rank) for t in statistics.top_performers] == [("R003", 1), ("R001", 2)]
    assert [p.name for p in statistics.subject_performance] == ["Maths", "Subject X"]


def test_pass_threshold(three_students):
    statistics = summarize_cohort(three_students, pass_threshold=8.0)

    assert statistics.pass_percentage == pytest.approx(66.67)


def test_empty_cohort_is_all_zero():
    statistics = summarize_cohort([])

    assert statistics.total_students == 0
    assert statistics.average_sgpa == 0.0
    assert statistics.average_percentage == 0.0
    assert statistics.pass_percentage == 0.0
    assert statistics.grade_histogram == {}
    assert statistics.grade_percentages == {}
    assert statistics.subject_averages == {}
    assert statistics.subject_performance == []
    assert statistics.top_performers == []
    assert statistics.sgpa_statistics.mean is None
    assert set(statistics.sgpa_distribution.values()) == {0}
