"""Per-student performance analysis."""

from resultdesk.schemas.student import StudentAggregate, StudentPerformance, SubjectAnalysis
from resultdesk.utils.grade_utils import performance_level, round_half_up

HIGHLIGHT_COUNT = 2


def analyze_student(aggregate: StudentAggregate, highlight: int = HIGHLIGHT_COUNT) -> StudentPerformance:
    """
    Rate each subject and pick out the strongest and weakest ones.

    Strengths are the top `highlight` subjects by percentage, improvements the
    bottom `highlight` (best first in both lists). With fewer subjects than
    `highlight` the two lists overlap.
    """
    subjects = []
    for subject in aggregate.subjects:
        percentage = int(round_half_up(subject.percentage))
        subjects.append(
            SubjectAnalysis(name=subject.name, percentage=percentage, performance_level=performance_level(percentage))
        )

    ordered = sorted(subjects, key=lambda s: s.percentage, reverse=True)
    count = min(highlight, len(ordered))
    return StudentPerformance(
        roll_number=aggregate.student_info.roll_number,
        subjects=subjects,
        strengths=ordered[:count],
        improvements=ordered[len(ordered) - count :],
    )
