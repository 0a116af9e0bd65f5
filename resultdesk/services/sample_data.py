"""Sample mark-sheet data standing in for real PDF extraction.

Scores are generated from a random.Random seeded with the roll number, so the
same roll number always yields the same mark-sheet.
"""

import random
import re
from decimal import Decimal

from resultdesk.config import settings
from resultdesk.models import SubjectType
from resultdesk.schemas.student import StudentEntry, StudentInfo
from resultdesk.schemas.subject import RawSubjectScore, SubjectDefinition
from resultdesk.utils.grade_utils import round_half_up

CLASS_NAME = "B.Tech IV Year I Semester"
ACADEMIC_YEAR = "2024-2025"
EXAMINATION = "Regular & Supplementary Examinations"

BTECH_SUBJECTS: list[SubjectDefinition] = [
    SubjectDefinition(name="Full Stack Development", course_code="20A05703a", credits=3),
    SubjectDefinition(name="Cryptography & Network Security", course_code="20A05702b", credits=3),
    SubjectDefinition(name="Health Safety & Environmental Management", course_code="20A01705", credits=3),
    SubjectDefinition(name="Evaluation of Industry Internship", course_code="20A05707", credits=3, external_only=True),
    SubjectDefinition(name="Electronic Sensors", course_code="20A04704", credits=3),
    SubjectDefinition(
        name="SOC-V Mobile Application Development", course_code="20A05706", credits=2, subject_type=SubjectType.LAB
    ),
    SubjectDefinition(name="Entrepreneurship and Incubation", course_code="20A52701a", credits=3),
    SubjectDefinition(name="Cloud Computing", course_code="20A05701s", credits=3),
]

# (name, roll number); registration number equals the roll number
SAMPLE_STUDENTS: list[tuple[str, str]] = [
    ("MUDIGALLU RAGHAVENDRA", "219F1A05A7"),
    ("M PAVANKALYAN", "219F1A05A4"),
    ("G TAUFIQ UMAR", "219F1A0585"),
    ("KOGILA VINAY", "219F1A0597"),
    ("KAYALA MANJUNATH", "229F5A0502"),
    ("RAJESH KUMAR T", "219F1A05B1"),
    ("PRIYA SHARMA K", "219F1A05B2"),
    ("AMIT R", "219F1A05B3"),
    ("SUNITA REDDY J", "219F1A05B4"),
    ("VIKRAM M", "219F1A05B5"),
]

# Marks variance by course code; tougher subjects skew lower
SUBJECT_VARIANCE: dict[str, tuple[int, int]] = {
    "20A05702b": (-10, 5),
    "20A05703a": (-8, 8),
}
LAB_VARIANCE = (5, 15)
DEFAULT_VARIANCE = (-5, 10)
INTERNSHIP_MARKS = (90, 99)


def student_info_for(name: str, roll_number: str) -> StudentInfo:
    return StudentInfo(
        name=name,
        roll_number=roll_number,
        registration_number=roll_number,
        class_name=CLASS_NAME,
        academic_year=ACADEMIC_YEAR,
        examination=EXAMINATION,
    )


def roll_seed(roll_number: str) -> int:
    """Seed derived from the last two digits of the roll number (0-9)."""
    digits = re.sub(r"\D", "", roll_number)
    if digits:
        return int(digits[-2:]) % 10
    return sum(ord(c) for c in roll_number) % 10


class SampleDataSource:
    """Generates raw mark-sheet rows for the sample roster or any roll number."""

    def __init__(
        self,
        subjects: list[SubjectDefinition] | None = None,
        students: list[tuple[str, str]] | None = None,
        mark_floor: int | None = None,
    ):
        self.subjects = list(subjects if subjects is not None else BTECH_SUBJECTS)
        roster = students if students is not None else SAMPLE_STUDENTS
        self.students = [student_info_for(name, roll) for name, roll in roster]
        self.mark_floor = settings.sample_mark_floor if mark_floor is None else mark_floor

    @property
    def catalog(self) -> list[SubjectDefinition]:
        return list(self.subjects)

    def find_student(self, roll_number: str) -> StudentInfo | None:
        roll_number = roll_number.upper()
        return next((s for s in self.students if s.roll_number.upper() == roll_number), None)

    def _subject_score(self, subject: SubjectDefinition, base_marks: int, rng: random.Random) -> RawSubjectScore:
        if subject.external_only:
            return RawSubjectScore(
                course_code=subject.course_code, internal_marks=0, external_marks=rng.randint(*INTERNSHIP_MARKS)
            )

        if subject.subject_type == SubjectType.LAB:
            variance = rng.randint(*LAB_VARIANCE)
        else:
            variance = rng.randint(*SUBJECT_VARIANCE.get(subject.course_code, DEFAULT_VARIANCE))

        marks = min(subject.total_marks, max(self.mark_floor, base_marks + variance))
        internal = int(round_half_up(marks * Decimal(str(settings.internal_fraction))))
        return RawSubjectScore(course_code=subject.course_code, internal_marks=internal, external_marks=marks - internal)

    def generate_scores(self, roll_number: str) -> list[RawSubjectScore]:
        """Generate one raw score per catalog subject for a roll number."""
        base_marks = 65 + (roll_seed(roll_number) * 3) % 20
        rng = random.Random(roll_number.upper())
        return [self._subject_score(subject, base_marks, rng) for subject in self.subjects]

    def entry_for(self, student_info: StudentInfo) -> StudentEntry:
        return StudentEntry(student_info=student_info, scores=self.generate_scores(student_info.roll_number))

    def sample_cohort(self) -> list[StudentEntry]:
        """Raw inputs for the whole sample roster, in roster order."""
        return [self.entry_for(student) for student in self.students]


def sample_file_name(student_info: StudentInfo) -> str:
    """Mark-sheet file name as issued by the university portal."""
    clean_name = re.sub(r"\s+", "_", student_info.name.strip())
    return f"JNTUA_Result_{student_info.roll_number}_{clean_name}.pdf"


sample_data_source = SampleDataSource()
