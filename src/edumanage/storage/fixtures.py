"""Sample data for a fresh store.

The same dataset is written through the Storage Port, so it works for any
backend. Seeding is skipped when the store already has users.
"""
from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Optional, TYPE_CHECKING

from ..academics.model import NewAttendance, NewClass, NewEvent, NewTestResult
from ..common.datetime_utils import today as utc_today
from ..core.enums import AttendanceStatus, InstallmentStatus, PaymentStatus, ResultStatus, Role
from ..finance.model import NewInstallment, NewTeacherPayment
from ..publications.model import NewPublicationNote, NewStudentNote
from ..users.model import NewStudent, NewUser

if TYPE_CHECKING:
    from .port import StoragePort

logger = logging.getLogger(__name__)


def seed_sample_data(storage: "StoragePort", *, password_hash: str, today: Optional[date] = None) -> bool:
    """Write the demo dataset. Returns False when the store was not empty."""
    if storage.count_users() > 0:
        logger.info("Store %s already has users; skipping sample data", storage.name)
        return False

    day = today or utc_today()
    yesterday = day - timedelta(days=1)
    last_week = day - timedelta(days=7)
    next_week = day + timedelta(days=7)
    in_two_weeks = day + timedelta(days=14)
    last_month = day - timedelta(days=30)
    next_month = day + timedelta(days=30)

    logger.info("Seeding sample data into %s store", storage.name)

    storage.create_user(
        NewUser("admin", password_hash, "Administrator", "admin@vyawahare.edu", Role.ADMIN)
    )
    teacher = storage.create_user(
        NewUser("teacher1", password_hash, "Rahul Vyawahare", "rahul@vyawahare.edu", Role.TEACHER)
    )

    class8 = storage.create_class(
        NewClass("Math Class 8th", "8th", teacher.id, "Monday, Wednesday, Friday 9:00 AM - 10:30 AM")
    )
    class10 = storage.create_class(
        NewClass("Science Class 10th", "10th", teacher.id, "Tuesday, Thursday 10:30 AM - 12:00 PM")
    )

    raj_user = storage.create_user(
        NewUser("student1", password_hash, "Raj Patel", "raj@example.com", Role.STUDENT, "8th")
    )
    raj = storage.create_student(
        NewStudent(raj_user.id, "Suresh Patel", "9876543210", "123 Main Street, Pune", date(2010, 5, 15))
    )
    priya_user = storage.create_user(
        NewUser("student2", password_hash, "Priya Sharma", "priya@example.com", Role.STUDENT, "10th")
    )
    priya = storage.create_student(
        NewStudent(priya_user.id, "Anita Sharma", "9876543211", "456 Park Avenue, Pune", date(2008, 7, 20))
    )

    storage.create_attendance(NewAttendance(raj.id, class8.id, yesterday, AttendanceStatus.PRESENT))
    storage.create_attendance(NewAttendance(raj.id, class8.id, last_week, AttendanceStatus.ABSENT))
    storage.create_attendance(NewAttendance(priya.id, class10.id, yesterday, AttendanceStatus.PRESENT))

    storage.create_test_result(
        NewTestResult("Midterm Math Exam", raj.id, class8.id, last_week, 85, 100, ResultStatus.GRADED)
    )
    storage.create_test_result(
        NewTestResult("Science Quiz", priya.id, class10.id, yesterday, 75, 100, ResultStatus.GRADED)
    )

    storage.create_installment(NewInstallment(raj.id, 5000, last_month, last_month, InstallmentStatus.PAID))
    storage.create_installment(NewInstallment(raj.id, 5000, day))
    storage.create_installment(NewInstallment(raj.id, 5000, next_month))
    storage.create_installment(NewInstallment(priya.id, 6000, last_month, status=InstallmentStatus.OVERDUE))
    storage.create_installment(NewInstallment(priya.id, 6000, next_month))

    storage.create_event(
        NewEvent("Parent-Teacher Meeting", next_week, "Annual meeting to discuss student progress",
                 "10:00 AM - 2:00 PM", "All")
    )
    storage.create_event(
        NewEvent("Science Fair", in_two_weeks, "Annual science exhibition for students",
                 "9:00 AM - 4:00 PM", "8th, 9th, 10th")
    )

    previous_month = last_month.strftime("%Y-%m")
    storage.create_teacher_payment(
        NewTeacherPayment(teacher.id, 25000, previous_month, "Monthly salary", last_month, PaymentStatus.PAID)
    )
    storage.create_teacher_payment(NewTeacherPayment(teacher.id, 25000, day.strftime("%Y-%m"), "Monthly salary"))

    maths = storage.create_publication_note(
        NewPublicationNote("Mathematics for 10th Standard", "Mathematics", "10th", 50, 35, 10,
                           description="Comprehensive math workbook covering algebra, geometry, and trigonometry")
    )
    storage.create_publication_note(
        NewPublicationNote("Science Fundamentals Grade 8", "Science", "8th", 40, 8, 10,
                           description="Covers basic physics, chemistry and biology concepts")
    )
    storage.create_publication_note(
        NewPublicationNote("English Grammar & Composition", "English", "9th", 60, 12, 15,
                           description="Grammar rules, essay writing and literary analysis")
    )
    storage.create_publication_note(
        NewPublicationNote("History of Modern India", "History", "11th", 30, 2, 5,
                           description="Comprehensive coverage of Indian independence movement")
    )
    storage.create_student_note(NewStudentNote(priya.id, maths.id, last_week))

    logger.info("Sample data ready in %s store", storage.name)
    return True
