from __future__ import annotations

from datetime import date

import pytest

from edumanage.academics.model import NewAttendance, NewClass, NewEvent, NewTestResult
from edumanage.academics.service import AttendanceService, ClassService, EventService, GradingService
from edumanage.core.enums import AttendanceStatus, ResultStatus, Role
from edumanage.core.exceptions import ValidationError
from edumanage.storage.memory import InMemoryStorage
from edumanage.users.model import NewStudent, NewUser
from edumanage.users.service import UserService


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


def test_attendance_rejects_second_mark_for_same_day(storage):
    service = AttendanceService(storage)
    service.record(NewAttendance(1, 1, date(2024, 1, 10), AttendanceStatus.PRESENT))

    with pytest.raises(ValidationError, match="already recorded"):
        service.record(NewAttendance(1, 1, date(2024, 1, 10), AttendanceStatus.LATE))

    service.record(NewAttendance(1, 1, date(2024, 1, 11), AttendanceStatus.LATE))
    service.record(NewAttendance(2, 1, date(2024, 1, 10), AttendanceStatus.ABSENT))
    assert len(service.lookup(class_id=1)) == 3


def test_attendance_mark_and_lookup(storage):
    service = AttendanceService(storage)
    record = service.record(NewAttendance(1, 1, date(2024, 1, 10), AttendanceStatus.ABSENT))

    assert service.mark(record.id, "present").status is AttendanceStatus.PRESENT
    assert service.mark(404, "present") is None
    with pytest.raises(ValidationError):
        service.mark(record.id, "excused")

    assert len(service.lookup(student_id=1)) == 1
    assert len(service.lookup(day="2024-01-10")) == 1
    with pytest.raises(ValidationError, match="Missing query parameters"):
        service.lookup()


def test_grading_validates_scores_and_grades(storage):
    grading = GradingService(storage)
    result = grading.record(NewTestResult("Quiz", 1, 1, date(2024, 1, 5), 0))

    assert result.status is ResultStatus.PENDING
    assert result.max_score == 100

    graded = grading.grade(result.id, "88")
    assert (graded.score, graded.status) == (88.0, ResultStatus.GRADED)

    with pytest.raises(ValidationError):
        grading.record(NewTestResult("Quiz", 1, 1, date(2024, 1, 5), -1))
    with pytest.raises(ValidationError):
        grading.record(NewTestResult("Quiz", 1, 1, date(2024, 1, 5), 5, 0))
    with pytest.raises(ValidationError):
        grading.grade(result.id, -3)


def test_classes_and_events(storage):
    classes = ClassService(storage)
    classes.create(NewClass("Math", "8th", 2))
    classes.create(NewClass("Science", "10th", 3))
    events = EventService(storage)
    events.create(NewEvent("Science Fair", date(2024, 2, 1)))

    assert [c.name for c in classes.lookup(teacher_id=3)] == ["Science"]
    assert len(classes.lookup()) == 2
    assert [e.title for e in events.list_events()] == ["Science Fair"]
    with pytest.raises(ValidationError):
        events.create(NewEvent("", date(2024, 2, 1)))


def test_student_profiles_only_for_student_accounts(storage):
    users = UserService(storage, storage)
    teacher = storage.create_user(NewUser("t", "h", "T", "t@example.com", Role.TEACHER))
    student = storage.create_user(NewUser("s", "h", "S", "s@example.com", Role.STUDENT, "8th"))

    with pytest.raises(ValidationError):
        users.add_student_profile(NewStudent(teacher.id))
    with pytest.raises(ValidationError, match="not found"):
        users.add_student_profile(NewStudent(999))

    profile = users.add_student_profile(NewStudent(student.id, "Parent"))
    assert users.get_student(profile.id) == profile
    with pytest.raises(ValidationError, match="already has"):
        users.add_student_profile(NewStudent(student.id))

    assert [u.username for u in users.list_users("teacher")] == ["t"]
    with pytest.raises(ValidationError):
        users.list_users("janitor")
