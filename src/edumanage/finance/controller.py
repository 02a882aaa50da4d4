from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.guards import login_required, roles_required
from ..common.http import found_or_404, json_body, query_int, wire_list
from ..core.enums import Role
from ..storage.mapper import INSTALLMENTS, TEACHER_PAYMENTS


def register(app: Flask, container) -> None:
    billing = container.billing_service
    payroll = container.payroll_service

    @app.get("/api/installments")
    @login_required
    def api_installments():
        found = billing.lookup(student_id=query_int("studentId"), status=request.args.get("status") or None)
        return wire_list(INSTALLMENTS, found)

    @app.post("/api/installments")
    @roles_required(Role.ADMIN)
    def api_schedule_installment():
        created = billing.schedule(INSTALLMENTS.from_wire(json_body()))
        return jsonify(INSTALLMENTS.to_wire(created)), 201

    @app.patch("/api/installments/<int:installment_id>")
    @roles_required(Role.ADMIN)
    def api_update_installment(installment_id: int):
        body = json_body()
        updated = billing.mark(installment_id, body.get("status"), body.get("paymentDate") or None)
        return found_or_404(INSTALLMENTS, updated, "Installment not found")

    @app.get("/api/teacher-payments")
    @roles_required(Role.ADMIN, Role.TEACHER)
    def api_teacher_payments():
        found = payroll.lookup(
            teacher_id=query_int("teacherId"),
            month=request.args.get("month") or None,
            status=request.args.get("status") or None,
        )
        return wire_list(TEACHER_PAYMENTS, found)

    @app.post("/api/teacher-payments")
    @roles_required(Role.ADMIN)
    def api_schedule_teacher_payment():
        created = payroll.schedule(TEACHER_PAYMENTS.from_wire(json_body()))
        return jsonify(TEACHER_PAYMENTS.to_wire(created)), 201

    @app.patch("/api/teacher-payments/<int:payment_id>")
    @roles_required(Role.ADMIN)
    def api_update_teacher_payment(payment_id: int):
        body = json_body()
        updated = payroll.mark(payment_id, body.get("status"), body.get("paymentDate") or None)
        return found_or_404(TEACHER_PAYMENTS, updated, "Teacher payment not found")
