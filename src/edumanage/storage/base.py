from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from ..academics.model import Attendance, Event, NewAttendance, NewClass, NewEvent, NewTestResult, SchoolClass, TestResult
from ..common.datetime_utils import now_utc
from ..core.enums import AttendanceStatus, InstallmentStatus, NoteCondition, PaymentStatus, ResultStatus, Role
from ..finance.model import Installment, NewInstallment, NewTeacherPayment, TeacherPayment
from ..publications.model import NewPublicationNote, NewStudentNote, PublicationNote, StudentNote
from ..users.model import NewStudent, NewUser, Student, User
from . import mapper as m
from .port import StoragePort


class TableStorage(StoragePort, ABC):
    """Storage Port written once on top of a handful of table primitives.

    Adapters supply the primitives; the entity operations, defaults and
    partial-update rules live here so every backend behaves the same.
    Criteria and changes are ``{attr: value}`` mappings in domain terms and
    are normalized through the entity's mapper by the adapter.
    """

    @abstractmethod
    def _insert(self, mapper: m.EntityMapper, draft: Any, **extra: Any) -> Any:
        """Allocate an id, store the draft (plus ``extra`` attributes) and return the entity."""
        raise NotImplementedError

    @abstractmethod
    def _get(self, mapper: m.EntityMapper, entity_id: int) -> Optional[Any]:
        raise NotImplementedError

    @abstractmethod
    def _list(self, mapper: m.EntityMapper, **criteria: Any) -> List[Any]:
        """Entities whose attributes equal ``criteria``, ordered by id."""
        raise NotImplementedError

    @abstractmethod
    def _update(self, mapper: m.EntityMapper, entity_id: int, **changes: Any) -> Optional[Any]:
        raise NotImplementedError

    @abstractmethod
    def _count(self, mapper: m.EntityMapper) -> int:
        raise NotImplementedError

    @abstractmethod
    def _take_copy(self, note_id: int) -> None:
        """Atomically decrement a publication note's available stock, never below zero."""
        raise NotImplementedError

    def _first(self, mapper: m.EntityMapper, **criteria: Any) -> Optional[Any]:
        found = self._list(mapper, **criteria)
        return found[0] if found else None

    # -- users -----------------------------------------------------------

    def get_user(self, user_id: int) -> Optional[User]:
        return self._get(m.USERS, user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self._first(m.USERS, username=username)

    def create_user(self, draft: NewUser) -> User:
        return self._insert(m.USERS, draft, join_date=now_utc())

    def list_users(self) -> Sequence[User]:
        return self._list(m.USERS)

    def list_users_by_role(self, role: Role | str) -> Sequence[User]:
        return self._list(m.USERS, role=role)

    def count_users(self) -> int:
        return self._count(m.USERS)

    # -- students --------------------------------------------------------

    def get_student(self, student_id: int) -> Optional[Student]:
        return self._get(m.STUDENTS, student_id)

    def get_student_by_user_id(self, user_id: int) -> Optional[Student]:
        return self._first(m.STUDENTS, user_id=user_id)

    def create_student(self, draft: NewStudent) -> Student:
        return self._insert(m.STUDENTS, draft)

    def list_students(self) -> Sequence[Student]:
        return self._list(m.STUDENTS)

    # -- classes ---------------------------------------------------------

    def get_class(self, class_id: int) -> Optional[SchoolClass]:
        return self._get(m.CLASSES, class_id)

    def create_class(self, draft: NewClass) -> SchoolClass:
        return self._insert(m.CLASSES, draft)

    def list_classes(self) -> Sequence[SchoolClass]:
        return self._list(m.CLASSES)

    def list_classes_by_teacher(self, teacher_id: int) -> Sequence[SchoolClass]:
        return self._list(m.CLASSES, teacher_id=teacher_id)

    # -- attendance ------------------------------------------------------

    def get_attendance(self, attendance_id: int) -> Optional[Attendance]:
        return self._get(m.ATTENDANCE, attendance_id)

    def create_attendance(self, draft: NewAttendance) -> Attendance:
        return self._insert(m.ATTENDANCE, draft)

    def list_attendance(self) -> Sequence[Attendance]:
        return self._list(m.ATTENDANCE)

    def list_attendance_by_class(self, class_id: int) -> Sequence[Attendance]:
        return self._list(m.ATTENDANCE, class_id=class_id)

    def list_attendance_by_student(self, student_id: int) -> Sequence[Attendance]:
        return self._list(m.ATTENDANCE, student_id=student_id)

    def list_attendance_by_date(self, day: date | str) -> Sequence[Attendance]:
        return self._list(m.ATTENDANCE, date=day)

    def update_attendance(self, attendance_id: int, status: AttendanceStatus | str) -> Optional[Attendance]:
        return self._update(m.ATTENDANCE, attendance_id, status=status)

    # -- test results ----------------------------------------------------

    def get_test_result(self, result_id: int) -> Optional[TestResult]:
        return self._get(m.TEST_RESULTS, result_id)

    def create_test_result(self, draft: NewTestResult) -> TestResult:
        return self._insert(m.TEST_RESULTS, draft)

    def list_test_results(self) -> Sequence[TestResult]:
        return self._list(m.TEST_RESULTS)

    def list_test_results_by_class(self, class_id: int) -> Sequence[TestResult]:
        return self._list(m.TEST_RESULTS, class_id=class_id)

    def list_test_results_by_student(self, student_id: int) -> Sequence[TestResult]:
        return self._list(m.TEST_RESULTS, student_id=student_id)

    def update_test_result(self, result_id: int, score: float, status: ResultStatus | str) -> Optional[TestResult]:
        return self._update(m.TEST_RESULTS, result_id, score=score, status=status)

    # -- installments ----------------------------------------------------

    def get_installment(self, installment_id: int) -> Optional[Installment]:
        return self._get(m.INSTALLMENTS, installment_id)

    def create_installment(self, draft: NewInstallment) -> Installment:
        return self._insert(m.INSTALLMENTS, draft)

    def list_installments(self) -> Sequence[Installment]:
        return self._list(m.INSTALLMENTS)

    def list_installments_by_student(self, student_id: int) -> Sequence[Installment]:
        return self._list(m.INSTALLMENTS, student_id=student_id)

    def list_installments_by_status(self, status: InstallmentStatus | str) -> Sequence[Installment]:
        return self._list(m.INSTALLMENTS, status=status)

    def update_installment(
        self,
        installment_id: int,
        status: InstallmentStatus | str,
        payment_date: date | str | None = None,
    ) -> Optional[Installment]:
        changes: Dict[str, Any] = {"status": status}
        if payment_date is not None:
            changes["payment_date"] = payment_date
        return self._update(m.INSTALLMENTS, installment_id, **changes)

    # -- events ----------------------------------------------------------

    def get_event(self, event_id: int) -> Optional[Event]:
        return self._get(m.EVENTS, event_id)

    def create_event(self, draft: NewEvent) -> Event:
        return self._insert(m.EVENTS, draft)

    def list_events(self) -> Sequence[Event]:
        return self._list(m.EVENTS)

    # -- teacher payments ------------------------------------------------

    def get_teacher_payment(self, payment_id: int) -> Optional[TeacherPayment]:
        return self._get(m.TEACHER_PAYMENTS, payment_id)

    def create_teacher_payment(self, draft: NewTeacherPayment) -> TeacherPayment:
        return self._insert(m.TEACHER_PAYMENTS, draft)

    def list_teacher_payments(self) -> Sequence[TeacherPayment]:
        return self._list(m.TEACHER_PAYMENTS)

    def list_teacher_payments_by_teacher(self, teacher_id: int) -> Sequence[TeacherPayment]:
        return self._list(m.TEACHER_PAYMENTS, teacher_id=teacher_id)

    def list_teacher_payments_by_month(self, month: str) -> Sequence[TeacherPayment]:
        return self._list(m.TEACHER_PAYMENTS, month=month)

    def list_teacher_payments_by_status(self, status: PaymentStatus | str) -> Sequence[TeacherPayment]:
        return self._list(m.TEACHER_PAYMENTS, status=status)

    def update_teacher_payment(
        self,
        payment_id: int,
        status: PaymentStatus | str,
        payment_date: date | str | None = None,
    ) -> Optional[TeacherPayment]:
        changes: Dict[str, Any] = {"status": status}
        if payment_date is not None:
            changes["payment_date"] = payment_date
        return self._update(m.TEACHER_PAYMENTS, payment_id, **changes)

    # -- publication notes -----------------------------------------------

    def get_publication_note(self, note_id: int) -> Optional[PublicationNote]:
        return self._get(m.PUBLICATION_NOTES, note_id)

    def create_publication_note(self, draft: NewPublicationNote) -> PublicationNote:
        extra = {} if draft.last_restocked else {"last_restocked": now_utc()}
        return self._insert(m.PUBLICATION_NOTES, draft, **extra)

    def list_publication_notes(self) -> Sequence[PublicationNote]:
        return self._list(m.PUBLICATION_NOTES)

    def list_publication_notes_by_subject(self, subject: str) -> Sequence[PublicationNote]:
        return self._list(m.PUBLICATION_NOTES, subject=subject)

    def list_publication_notes_by_grade(self, grade: str) -> Sequence[PublicationNote]:
        return self._list(m.PUBLICATION_NOTES, grade=grade)

    def list_low_stock_publication_notes(self) -> Sequence[PublicationNote]:
        return [note for note in self._list(m.PUBLICATION_NOTES) if note.is_low_stock]

    def update_publication_note_stock(
        self,
        note_id: int,
        total_stock: int,
        available_stock: int,
    ) -> Optional[PublicationNote]:
        return self._update(
            m.PUBLICATION_NOTES,
            note_id,
            total_stock=total_stock,
            available_stock=available_stock,
            last_restocked=now_utc(),
        )

    # -- student notes ---------------------------------------------------

    def get_student_note(self, student_note_id: int) -> Optional[StudentNote]:
        return self._get(m.STUDENT_NOTES, student_note_id)

    def create_student_note(self, draft: NewStudentNote) -> StudentNote:
        lending = self._insert(m.STUDENT_NOTES, draft)
        if not lending.is_returned:
            self._take_copy(lending.note_id)
        return lending

    def list_student_notes(self) -> Sequence[StudentNote]:
        return self._list(m.STUDENT_NOTES)

    def list_student_notes_by_student(self, student_id: int) -> Sequence[StudentNote]:
        return self._list(m.STUDENT_NOTES, student_id=student_id)

    def list_student_notes_by_note(self, note_id: int) -> Sequence[StudentNote]:
        return self._list(m.STUDENT_NOTES, note_id=note_id)

    def update_student_note_status(
        self,
        student_note_id: int,
        is_returned: bool,
        return_date: date | str | None = None,
        condition: NoteCondition | str | None = None,
    ) -> Optional[StudentNote]:
        changes: Dict[str, Any] = {"is_returned": is_returned}
        if return_date is not None:
            changes["return_date"] = return_date
        if condition is not None:
            changes["condition"] = condition
        return self._update(m.STUDENT_NOTES, student_note_id, **changes)
