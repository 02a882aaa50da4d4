from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.guards import login_required, roles_required
from ..common.http import found_or_404, json_body, query_int, wire_list
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..storage.mapper import ATTENDANCE, CLASSES, EVENTS, TEST_RESULTS

STAFF = (Role.ADMIN, Role.TEACHER)


def register(app: Flask, container) -> None:
    classes = container.class_service
    attendance = container.attendance_service
    grading = container.grading_service
    events = container.event_service

    # classes

    @app.get("/api/classes")
    @login_required
    def api_classes():
        return wire_list(CLASSES, classes.lookup())

    @app.get("/api/classes/teacher/<int:teacher_id>")
    @login_required
    def api_classes_by_teacher(teacher_id: int):
        return wire_list(CLASSES, classes.lookup(teacher_id=teacher_id))

    @app.post("/api/classes")
    @roles_required(Role.ADMIN)
    def api_create_class():
        created = classes.create(CLASSES.from_wire(json_body()))
        return jsonify(CLASSES.to_wire(created)), 201

    # attendance

    @app.get("/api/attendance")
    @login_required
    def api_attendance():
        records = attendance.lookup(
            class_id=query_int("classId"),
            student_id=query_int("studentId"),
            day=request.args.get("date") or None,
        )
        return wire_list(ATTENDANCE, records)

    @app.post("/api/attendance")
    @roles_required(*STAFF)
    def api_record_attendance():
        record = attendance.record(ATTENDANCE.from_wire(json_body()))
        return jsonify(ATTENDANCE.to_wire(record)), 201

    @app.patch("/api/attendance/<int:attendance_id>")
    @roles_required(*STAFF)
    def api_update_attendance(attendance_id: int):
        body = json_body()
        updated = attendance.mark(attendance_id, body.get("status"))
        return found_or_404(ATTENDANCE, updated, "Attendance record not found")

    # test results

    @app.get("/api/test-results")
    @login_required
    def api_test_results():
        results = grading.lookup(class_id=query_int("classId"), student_id=query_int("studentId"))
        return wire_list(TEST_RESULTS, results)

    @app.post("/api/test-results")
    @roles_required(*STAFF)
    def api_record_test_result():
        result = grading.record(TEST_RESULTS.from_wire(json_body()))
        return jsonify(TEST_RESULTS.to_wire(result)), 201

    @app.patch("/api/test-results/<int:result_id>")
    @roles_required(*STAFF)
    def api_grade_test_result(result_id: int):
        body = json_body()
        if body.get("score") is None:
            raise ValidationError("score is required")
        updated = grading.grade(result_id, body["score"], body.get("status") or "graded")
        return found_or_404(TEST_RESULTS, updated, "Test result not found")

    # events

    @app.get("/api/events")
    @login_required
    def api_events():
        return wire_list(EVENTS, events.list_events())

    @app.post("/api/events")
    @roles_required(Role.ADMIN)
    def api_create_event():
        created = events.create(EVENTS.from_wire(json_body()))
        return jsonify(EVENTS.to_wire(created)), 201
