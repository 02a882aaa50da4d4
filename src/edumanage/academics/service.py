from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import parse_iso_date
from ..common.validators import coerce_enum, require_at_least, require_non_empty
from ..core.enums import AttendanceStatus, ResultStatus
from ..core.exceptions import ValidationError
from .model import Attendance, Event, NewAttendance, NewClass, NewEvent, NewTestResult, SchoolClass, TestResult
from .repository import AttendanceRepository, ClassRepository, EventRepository, TestResultRepository

logger = logging.getLogger(__name__)


class ClassService:
    def __init__(self, classes: ClassRepository):
        self._classes = classes

    def create(self, draft: NewClass) -> SchoolClass:
        require_non_empty(draft.name, "name")
        require_non_empty(draft.grade, "grade")
        return self._classes.create_class(draft)

    def lookup(self, *, teacher_id: Optional[int] = None) -> Sequence[SchoolClass]:
        if teacher_id is not None:
            return self._classes.list_classes_by_teacher(teacher_id)
        return self._classes.list_classes()


class AttendanceService:
    """Use case: record and correct attendance marks.

    Any status may be changed to any other. A student has at most one mark
    per class per day.
    """

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def record(self, draft: NewAttendance) -> Attendance:
        coerce_enum(AttendanceStatus, draft.status, "status")
        for existing in self._attendance.list_attendance_by_class(draft.class_id):
            if existing.student_id == draft.student_id and existing.date == parse_iso_date(draft.date):
                raise ValidationError("Attendance already recorded for this student, class and date")
        record = self._attendance.create_attendance(draft)
        logger.debug("Attendance %s: student=%s class=%s %s", record.id, record.student_id, record.class_id, record.status.value)
        return record

    def mark(self, attendance_id: int, status: AttendanceStatus | str) -> Optional[Attendance]:
        return self._attendance.update_attendance(attendance_id, coerce_enum(AttendanceStatus, status, "status"))

    def lookup(
        self,
        *,
        class_id: Optional[int] = None,
        student_id: Optional[int] = None,
        day: Optional[date | str] = None,
    ) -> Sequence[Attendance]:
        if class_id is not None:
            return self._attendance.list_attendance_by_class(class_id)
        if student_id is not None:
            return self._attendance.list_attendance_by_student(student_id)
        if day is not None:
            return self._attendance.list_attendance_by_date(day)
        raise ValidationError("Missing query parameters")


class GradingService:
    """Use case: record test results and grade them."""

    def __init__(self, results: TestResultRepository):
        self._results = results

    def record(self, draft: NewTestResult) -> TestResult:
        require_non_empty(draft.name, "name")
        require_at_least(draft.score, "score", 0)
        require_at_least(draft.max_score, "maxScore", 1)
        return self._results.create_test_result(draft)

    def grade(
        self,
        result_id: int,
        score: float,
        status: ResultStatus | str = ResultStatus.GRADED,
    ) -> Optional[TestResult]:
        score = require_at_least(score, "score", 0)
        return self._results.update_test_result(result_id, score, coerce_enum(ResultStatus, status, "status"))

    def lookup(self, *, class_id: Optional[int] = None, student_id: Optional[int] = None) -> Sequence[TestResult]:
        if class_id is not None:
            return self._results.list_test_results_by_class(class_id)
        if student_id is not None:
            return self._results.list_test_results_by_student(student_id)
        raise ValidationError("Missing query parameters")


class EventService:
    def __init__(self, events: EventRepository):
        self._events = events

    def create(self, draft: NewEvent) -> Event:
        require_non_empty(draft.title, "title")
        return self._events.create_event(draft)

    def list_events(self) -> Sequence[Event]:
        return self._events.list_events()
