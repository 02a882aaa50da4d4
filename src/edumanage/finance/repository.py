from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import InstallmentStatus, PaymentStatus
from .model import Installment, NewInstallment, NewTeacherPayment, TeacherPayment


class InstallmentRepository(Protocol):
    def get_installment(self, installment_id: int) -> Optional[Installment]:
        raise NotImplementedError

    def create_installment(self, draft: NewInstallment) -> Installment:
        raise NotImplementedError

    def list_installments(self) -> Sequence[Installment]:
        raise NotImplementedError

    def list_installments_by_student(self, student_id: int) -> Sequence[Installment]:
        raise NotImplementedError

    def list_installments_by_status(self, status: InstallmentStatus | str) -> Sequence[Installment]:
        raise NotImplementedError

    def update_installment(
        self,
        installment_id: int,
        status: InstallmentStatus | str,
        payment_date: date | str | None = None,
    ) -> Optional[Installment]:
        """Set the status; ``payment_date`` is only written when given."""

        raise NotImplementedError


class TeacherPaymentRepository(Protocol):
    def get_teacher_payment(self, payment_id: int) -> Optional[TeacherPayment]:
        raise NotImplementedError

    def create_teacher_payment(self, draft: NewTeacherPayment) -> TeacherPayment:
        raise NotImplementedError

    def list_teacher_payments(self) -> Sequence[TeacherPayment]:
        raise NotImplementedError

    def list_teacher_payments_by_teacher(self, teacher_id: int) -> Sequence[TeacherPayment]:
        raise NotImplementedError

    def list_teacher_payments_by_month(self, month: str) -> Sequence[TeacherPayment]:
        raise NotImplementedError

    def list_teacher_payments_by_status(self, status: PaymentStatus | str) -> Sequence[TeacherPayment]:
        raise NotImplementedError

    def update_teacher_payment(
        self,
        payment_id: int,
        status: PaymentStatus | str,
        payment_date: date | str | None = None,
    ) -> Optional[TeacherPayment]:
        raise NotImplementedError
