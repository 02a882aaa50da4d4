from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization in route handlers."""

    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"


class ResultStatus(str, Enum):
    PENDING = "pending"
    GRADED = "graded"


class InstallmentStatus(str, Enum):
    PENDING = "pending"
    OVERDUE = "overdue"
    PAID = "paid"


class PaymentStatus(str, Enum):
    """Teacher payments have no overdue state."""

    PENDING = "pending"
    PAID = "paid"


class NoteCondition(str, Enum):
    """Condition of a lent copy when it comes back."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class StorageBackend(str, Enum):
    MEMORY = "memory"
    RELATIONAL = "relational"
    DOCUMENT = "document"


class SessionBackend(str, Enum):
    MEMORY = "memory"
    DOCUMENT = "document"
