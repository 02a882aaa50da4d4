from __future__ import annotations

from typing import Protocol

from ..academics.repository import AttendanceRepository, ClassRepository, EventRepository, TestResultRepository
from ..finance.repository import InstallmentRepository, TeacherPaymentRepository
from ..publications.repository import PublicationNoteRepository, StudentNoteRepository
from ..users.repository import StudentRepository, UserRepository


class StoragePort(
    UserRepository,
    StudentRepository,
    ClassRepository,
    AttendanceRepository,
    TestResultRepository,
    EventRepository,
    InstallmentRepository,
    TeacherPaymentRepository,
    PublicationNoteRepository,
    StudentNoteRepository,
    Protocol,
):
    """Every data operation the rest of the system may perform.

    Adapters implement all of it and nothing else, so callers never need to
    know which backend is active. Unknown ids give ``None``; backend failures
    raise ``PersistenceError``; enumerated values are validated here.
    """

    name: str
