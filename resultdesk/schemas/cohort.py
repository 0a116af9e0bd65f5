from pydantic import BaseModel

from resultdesk.models import Grade, PerformanceLevel


class SgpaStatistics(BaseModel):
    """Spread of SGPA across the cohort."""

    mean: float | None = None
    median: float | None = None
    min: float | None = None
    max: float | None = None
    std_deviation: float | None = None


class SubjectPerformance(BaseModel):
    """Class-wide performance in one subject."""

    name: str
    students: int
    average: float
    grade_distribution: dict[str, int]  # {"A": 3, "B": 2, ...}
    pass_rate: float  # Percentage of non-F grades
    performance_level: PerformanceLevel


class TopPerformer(BaseModel):
    name: str
    roll_number: str
    sgpa: float
    percentage: int
    overall_grade: Grade
    rank: int


class CohortStatistics(BaseModel):
    """Cohort-wide snapshot, derived on demand from the stored results."""

    total_students: int
    average_sgpa: float
    average_percentage: float
    pass_percentage: float
    grade_histogram: dict[str, int]  # First-occurrence order, not grade order
    grade_percentages: dict[str, float]
    subject_averages: dict[str, float]  # Mean marks_obtained of students taking the subject
    sgpa_distribution: dict[str, int]  # "<5", "5-6", ..., ">=9"
    sgpa_statistics: SgpaStatistics
    subject_performance: list[SubjectPerformance]  # Sorted by average, best first
    top_performers: list[TopPerformer]


class ComparativeRow(BaseModel):
    """One row of the comparison table. None marks a subject the student did not take."""

    label: str
    values: list[float | int | str | None]
    class_average: float | int | str | None = None


class ComparativeTable(BaseModel):
    """Side-by-side comparison of students, one column per student."""

    students: list[str]
    subject_rows: list[ComparativeRow]
    metric_rows: list[ComparativeRow]
