from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.guards import login_required, roles_required
from ..common.http import found_or_404, json_body, query_flag, query_int, wire_list
from ..common.validators import coerce_bool
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..storage.mapper import PUBLICATION_NOTES, STUDENT_NOTES

STAFF = (Role.ADMIN, Role.TEACHER)


def register(app: Flask, container) -> None:
    lending = container.lending_service

    @app.get("/api/publication-notes")
    @login_required
    def api_publication_notes():
        notes = lending.lookup_notes(
            subject=request.args.get("subject") or None,
            grade=request.args.get("grade") or None,
            low_stock=query_flag("lowStock"),
        )
        return wire_list(PUBLICATION_NOTES, notes)

    @app.post("/api/publication-notes")
    @roles_required(Role.ADMIN)
    def api_add_publication_note():
        note = lending.add_note(PUBLICATION_NOTES.from_wire(json_body()))
        return jsonify(PUBLICATION_NOTES.to_wire(note)), 201

    @app.patch("/api/publication-notes/<int:note_id>/stock")
    @roles_required(Role.ADMIN)
    def api_restock_publication_note(note_id: int):
        body = json_body()
        if body.get("totalStock") is None or body.get("availableStock") is None:
            raise ValidationError("totalStock and availableStock are required")
        note = lending.restock(note_id, body["totalStock"], body["availableStock"])
        return found_or_404(PUBLICATION_NOTES, note, "Publication note not found")

    @app.get("/api/student-notes")
    @login_required
    def api_student_notes():
        found = lending.lookup_lendings(student_id=query_int("studentId"), note_id=query_int("noteId"))
        return wire_list(STUDENT_NOTES, found)

    @app.post("/api/student-notes")
    @roles_required(*STAFF)
    def api_issue_student_note():
        issued = lending.issue(STUDENT_NOTES.from_wire(json_body()))
        return jsonify(STUDENT_NOTES.to_wire(issued)), 201

    @app.patch("/api/student-notes/<int:student_note_id>")
    @roles_required(*STAFF)
    def api_update_student_note(student_note_id: int):
        body = json_body()
        updated = lending.set_returned(
            student_note_id,
            coerce_bool(body.get("isReturned", True), "isReturned"),
            return_date=body.get("returnDate") or None,
            condition=body.get("condition") or None,
        )
        return found_or_404(STUDENT_NOTES, updated, "Student note not found")
