from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.constants import DEFAULT_MAX_SCORE
from ..core.enums import AttendanceStatus, ResultStatus


@dataclass(frozen=True)
class SchoolClass:
    id: int
    name: str
    grade: str
    teacher_id: int
    schedule: Optional[str] = None


@dataclass(frozen=True)
class NewClass:
    name: str
    grade: str
    teacher_id: int
    schedule: Optional[str] = None


@dataclass(frozen=True)
class Attendance:
    """One attendance mark for a student in a class on a day."""

    id: int
    student_id: int
    class_id: int
    date: date
    status: AttendanceStatus


@dataclass(frozen=True)
class NewAttendance:
    student_id: int
    class_id: int
    date: date
    status: AttendanceStatus


@dataclass(frozen=True)
class TestResult:
    __test__ = False

    id: int
    name: str
    student_id: int
    class_id: int
    date: date
    score: float
    max_score: float = DEFAULT_MAX_SCORE
    status: ResultStatus = ResultStatus.PENDING


@dataclass(frozen=True)
class NewTestResult:
    __test__ = False

    name: str
    student_id: int
    class_id: int
    date: date
    score: float
    max_score: float = DEFAULT_MAX_SCORE
    status: ResultStatus = ResultStatus.PENDING


@dataclass(frozen=True)
class Event:
    id: int
    title: str
    date: date
    description: Optional[str] = None
    time: Optional[str] = None
    target_grades: Optional[str] = None


@dataclass(frozen=True)
class NewEvent:
    title: str
    date: date
    description: Optional[str] = None
    time: Optional[str] = None
    target_grades: Optional[str] = None
