from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import InstallmentStatus, PaymentStatus


@dataclass(frozen=True)
class Installment:
    """One scheduled fee payment owed by a student."""

    id: int
    student_id: int
    amount: float
    due_date: date
    payment_date: Optional[date] = None
    status: InstallmentStatus = InstallmentStatus.PENDING


@dataclass(frozen=True)
class NewInstallment:
    student_id: int
    amount: float
    due_date: date
    payment_date: Optional[date] = None
    status: InstallmentStatus = InstallmentStatus.PENDING


@dataclass(frozen=True)
class TeacherPayment:
    id: int
    teacher_id: int
    amount: float
    month: str
    description: Optional[str] = None
    payment_date: Optional[date] = None
    status: PaymentStatus = PaymentStatus.PENDING


@dataclass(frozen=True)
class NewTeacherPayment:
    teacher_id: int
    amount: float
    month: str
    description: Optional[str] = None
    payment_date: Optional[date] = None
    status: PaymentStatus = PaymentStatus.PENDING
