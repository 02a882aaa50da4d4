from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus, ResultStatus
from .model import Attendance, Event, NewAttendance, NewClass, NewEvent, NewTestResult, SchoolClass, TestResult


class ClassRepository(Protocol):
    def get_class(self, class_id: int) -> Optional[SchoolClass]:
        raise NotImplementedError

    def create_class(self, draft: NewClass) -> SchoolClass:
        raise NotImplementedError

    def list_classes(self) -> Sequence[SchoolClass]:
        raise NotImplementedError

    def list_classes_by_teacher(self, teacher_id: int) -> Sequence[SchoolClass]:
        raise NotImplementedError


class AttendanceRepository(Protocol):
    def get_attendance(self, attendance_id: int) -> Optional[Attendance]:
        raise NotImplementedError

    def create_attendance(self, draft: NewAttendance) -> Attendance:
        raise NotImplementedError

    def list_attendance(self) -> Sequence[Attendance]:
        raise NotImplementedError

    def list_attendance_by_class(self, class_id: int) -> Sequence[Attendance]:
        raise NotImplementedError

    def list_attendance_by_student(self, student_id: int) -> Sequence[Attendance]:
        raise NotImplementedError

    def list_attendance_by_date(self, day: date | str) -> Sequence[Attendance]:
        raise NotImplementedError

    def update_attendance(self, attendance_id: int, status: AttendanceStatus | str) -> Optional[Attendance]:
        """Any status may follow any other; returns None for an unknown id."""

        raise NotImplementedError


class TestResultRepository(Protocol):
    def get_test_result(self, result_id: int) -> Optional[TestResult]:
        raise NotImplementedError

    def create_test_result(self, draft: NewTestResult) -> TestResult:
        raise NotImplementedError

    def list_test_results(self) -> Sequence[TestResult]:
        raise NotImplementedError

    def list_test_results_by_class(self, class_id: int) -> Sequence[TestResult]:
        raise NotImplementedError

    def list_test_results_by_student(self, student_id: int) -> Sequence[TestResult]:
        raise NotImplementedError

    def update_test_result(self, result_id: int, score: float, status: ResultStatus | str) -> Optional[TestResult]:
        raise NotImplementedError


class EventRepository(Protocol):
    def get_event(self, event_id: int) -> Optional[Event]:
        raise NotImplementedError

    def create_event(self, draft: NewEvent) -> Event:
        raise NotImplementedError

    def list_events(self) -> Sequence[Event]:
        raise NotImplementedError
