import enum


class GradingScheme(enum.Enum):
    """Letter ladders used to turn marks into grades.

    PERCENTAGE_LETTER is the A+/A/B+/B/C+/C/F ladder ("Scheme A"),
    GRADE_LETTER is the S/A/B/C/D/E/F ladder ("Scheme S").
    """

    PERCENTAGE_LETTER = "A"
    GRADE_LETTER = "S"


class SubjectType(enum.Enum):
    THEORY = "Theory"
    LAB = "Lab"


class Grade(enum.Enum):
    A_PLUS = "A+"
    S = "S"
    A = "A"
    B_PLUS = "B+"
    B = "B"
    C_PLUS = "C+"
    C = "C"
    D = "D"
    E = "E"
    F = "F"


class ExportType(enum.Enum):
    INDIVIDUAL = "individual"
    COMBINED = "combined"
    SUMMARY = "summary"


class PerformanceLevel(enum.Enum):
    EXCELLENT = "Excellent"
    VERY_GOOD = "Very Good"
    GOOD = "Good"
    SATISFACTORY = "Satisfactory"
    NEEDS_IMPROVEMENT = "Needs Improvement"
