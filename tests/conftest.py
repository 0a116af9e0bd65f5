import re

import pytest
from fastapi.testclient import TestClient

from resultdesk.dependencies.store import get_result_store
from resultdesk.main import app
from resultdesk.models import GradingScheme
from resultdesk.schemas.student import StudentInfo
from resultdesk.schemas.subject import RawSubjectScore, SubjectDefinition
from resultdesk.services.result_processing import aggregate_student, compute_subject_result
from resultdesk.services.result_store import MemoryStorageBackend, ResultStore


def course_code_for(subject: str) -> str:
    return re.sub(r"\W+", "_", subject.upper())


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def make_student():
    """Build a StudentAggregate from {subject name: marks}."""

    def _make(name, roll_number, marks, credits=3, scheme=GradingScheme.GRADE_LETTER):
        results = []
        for subject, subject_marks in marks.items():
            code = course_code_for(subject)
            definition = SubjectDefinition(name=subject, course_code=code, credits=credits)
            raw = RawSubjectScore(course_code=code, internal_marks=0, external_marks=subject_marks)
            results.append(compute_subject_result(raw, definition, scheme))
        return aggregate_student(StudentInfo(name=name, roll_number=roll_number), results, scheme)

    return _make


@pytest.fixture
def three_students(make_student):
    """Three students where only the first two take Subject X."""
    return [
        make_student("Asha", "R001", {"Maths": 80, "Subject X": 80}),
        make_student("Bala", "R002", {"Maths": 70, "Subject X": 60}),
        make_student("Chitra", "R003", {"Maths": 90}),
    ]


@pytest.fixture
def store():
    return ResultStore(MemoryStorageBackend())


@pytest.fixture
def client(store):
    app.dependency_overrides[get_result_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()
