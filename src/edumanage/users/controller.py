from __future__ import annotations

from flask import Flask, jsonify

from ..auth.guards import login_required, roles_required
from ..common.http import found_or_404, json_body, wire_list
from ..core.enums import Role
from ..storage.mapper import STUDENTS, USERS


def register(app: Flask, container) -> None:
    users = container.user_service

    @app.get("/api/users")
    @roles_required(Role.ADMIN)
    def api_users():
        return wire_list(USERS, users.list_users())

    @app.get("/api/users/<role>")
    @roles_required(Role.ADMIN, Role.TEACHER)
    def api_users_by_role(role: str):
        return wire_list(USERS, users.list_users(role))

    @app.get("/api/students")
    @login_required
    def api_students():
        return wire_list(STUDENTS, users.list_students())

    @app.get("/api/students/<int:student_id>")
    @login_required
    def api_student(student_id: int):
        return found_or_404(STUDENTS, users.get_student(student_id), "Student not found")

    @app.post("/api/students")
    @roles_required(Role.ADMIN)
    def api_create_student():
        student = users.add_student_profile(STUDENTS.from_wire(json_body()))
        return jsonify(STUDENTS.to_wire(student)), 201
