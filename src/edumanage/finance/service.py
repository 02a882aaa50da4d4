from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import parse_iso_date, parse_month, today
from ..common.validators import coerce_enum, require_at_least
from ..core.enums import InstallmentStatus, PaymentStatus
from ..core.exceptions import ValidationError
from .model import Installment, NewInstallment, NewTeacherPayment, TeacherPayment
from .repository import InstallmentRepository, TeacherPaymentRepository

logger = logging.getLogger(__name__)


class BillingService:
    """Use case: schedule student fee installments and track their payment.

    pending, overdue and paid may move to one another freely. Marking an
    installment paid without a date records today as the payment date.
    """

    def __init__(self, installments: InstallmentRepository):
        self._installments = installments

    def schedule(self, draft: NewInstallment) -> Installment:
        require_at_least(draft.amount, "amount", 0, inclusive=False)
        coerce_enum(InstallmentStatus, draft.status, "status")
        return self._installments.create_installment(draft)

    def mark(
        self,
        installment_id: int,
        status: InstallmentStatus | str,
        payment_date: Optional[date | str] = None,
    ) -> Optional[Installment]:
        status = coerce_enum(InstallmentStatus, status, "status")
        payment_date = parse_iso_date(payment_date)
        if status is InstallmentStatus.PAID and payment_date is None:
            payment_date = today()
        updated = self._installments.update_installment(installment_id, status, payment_date)
        if updated is not None:
            logger.info("Installment %s is now %s", installment_id, status.value)
        return updated

    def lookup(
        self,
        *,
        student_id: Optional[int] = None,
        status: Optional[InstallmentStatus | str] = None,
    ) -> Sequence[Installment]:
        if student_id is not None:
            return self._installments.list_installments_by_student(student_id)
        if status is not None:
            return self._installments.list_installments_by_status(coerce_enum(InstallmentStatus, status, "status"))
        raise ValidationError("Missing query parameters")


class PayrollService:
    """Use case: monthly teacher payments (pending -> paid)."""

    def __init__(self, payments: TeacherPaymentRepository):
        self._payments = payments

    def schedule(self, draft: NewTeacherPayment) -> TeacherPayment:
        require_at_least(draft.amount, "amount", 0, inclusive=False)
        parse_month(draft.month)
        coerce_enum(PaymentStatus, draft.status, "status")
        return self._payments.create_teacher_payment(draft)

    def mark(
        self,
        payment_id: int,
        status: PaymentStatus | str,
        payment_date: Optional[date | str] = None,
    ) -> Optional[TeacherPayment]:
        status = coerce_enum(PaymentStatus, status, "status")
        payment_date = parse_iso_date(payment_date)
        if status is PaymentStatus.PAID and payment_date is None:
            payment_date = today()
        updated = self._payments.update_teacher_payment(payment_id, status, payment_date)
        if updated is not None:
            logger.info("Teacher payment %s is now %s", payment_id, status.value)
        return updated

    def lookup(
        self,
        *,
        teacher_id: Optional[int] = None,
        month: Optional[str] = None,
        status: Optional[PaymentStatus | str] = None,
    ) -> Sequence[TeacherPayment]:
        if teacher_id is not None:
            return self._payments.list_teacher_payments_by_teacher(teacher_id)
        if month is not None:
            return self._payments.list_teacher_payments_by_month(parse_month(month))
        if status is not None:
            return self._payments.list_teacher_payments_by_status(coerce_enum(PaymentStatus, status, "status"))
        return self._payments.list_teacher_payments()
