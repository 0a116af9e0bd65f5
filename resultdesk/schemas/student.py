from pydantic import BaseModel, Field

from resultdesk.models import Grade, GradingScheme, PerformanceLevel
from resultdesk.schemas.subject import ComputedSubjectResult, RawSubjectScore


class StudentInfo(BaseModel):
    """Descriptive details printed on a mark-sheet."""

    name: str = Field(..., min_length=1, max_length=255)
    roll_number: str = Field(..., min_length=1, max_length=50)
    registration_number: str | None = None
    class_name: str | None = Field(None, alias="class")
    academic_year: str | None = None
    examination: str | None = None

    class Config:
        frozen = True
        populate_by_name = True


class StudentEntry(BaseModel):
    """Raw input for one student: details plus subject scores."""

    student_info: StudentInfo
    scores: list[RawSubjectScore]


class StudentAggregate(BaseModel):
    """One student's full computed result. Ranks live on RankedStudent."""

    student_info: StudentInfo
    scheme: GradingScheme
    subjects: list[ComputedSubjectResult]
    total_marks_obtained: int
    total_marks: int
    total_credits: int
    total_grade_points: int
    sgpa: float
    percentage: int
    overall_grade: Grade

    class Config:
        frozen = True


class RankedStudent(BaseModel):
    """A student aggregate with its position in the cohort."""

    aggregate: StudentAggregate
    rank: int = Field(..., ge=1)

    class Config:
        frozen = True


class SubjectAnalysis(BaseModel):
    """Per-subject line of a student's performance analysis."""

    name: str
    percentage: int
    performance_level: PerformanceLevel


class StudentPerformance(BaseModel):
    """Strengths and weaknesses of one student."""

    roll_number: str
    subjects: list[SubjectAnalysis]
    strengths: list[SubjectAnalysis]
    improvements: list[SubjectAnalysis]
