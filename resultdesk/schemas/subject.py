from decimal import Decimal

from pydantic import BaseModel, Field

from resultdesk.models import Grade, SubjectType


class SubjectDefinition(BaseModel):
    """Catalog entry for a subject in a curriculum."""

    name: str = Field(..., min_length=1, max_length=255)
    course_code: str = Field(..., min_length=1, max_length=50)
    credits: int = Field(..., gt=0)
    subject_type: SubjectType = Field(SubjectType.THEORY, description="Subject type: Theory or Lab")
    total_marks: int = Field(100, gt=0)
    external_only: bool = Field(
        False, description="Evaluated only externally (e.g. internship evaluation); always awarded the top band"
    )

    class Config:
        frozen = True


class RawSubjectScore(BaseModel):
    """One student's marks in one subject, as extracted from the mark-sheet."""

    course_code: str = Field(..., min_length=1, max_length=50)
    internal_marks: int = Field(0, ge=0)
    external_marks: int = Field(0, ge=0)

    class Config:
        frozen = True


class ComputedSubjectResult(BaseModel):
    """Subject result with derived marks, grade and grade points."""

    name: str
    course_code: str
    credits: int
    subject_type: SubjectType
    total_marks: int
    external_only: bool = False
    internal_marks: int
    external_marks: int
    marks_obtained: int
    grade: Grade
    grade_points: int = Field(..., ge=0, le=10)

    class Config:
        frozen = True

    @property
    def percentage(self) -> Decimal:
        return Decimal(self.marks_obtained * 100) / self.total_marks
