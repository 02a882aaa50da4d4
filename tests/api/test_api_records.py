from __future__ import annotations

import pytest

from edumanage.config import AppConfig
from edumanage.container import build_container
from edumanage.core.exceptions import PersistenceError
from edumanage.main import create_app
from edumanage.storage.fixtures import seed_sample_data
from edumanage.storage.memory import InMemoryStorage


@pytest.fixture
def container():
    config = AppConfig(secret_key="test-secret", testing=True, log_level="WARNING")
    storage = InMemoryStorage()
    container = build_container(config, storage=storage)
    seed_sample_data(storage, password_hash=container.credentials.hash_password("admin123"))
    return container


@pytest.fixture
def client(container):
    return create_app(container=container).test_client()


def _login(client, username):
    resp = client.post("/api/login", json={"username": username, "password": "admin123"})
    assert resp.status_code == 200


def test_attendance_query_needs_a_parameter(client):
    _login(client, "teacher1")

    resp = client.get("/api/attendance")

    assert resp.status_code == 400
    assert resp.get_json() == {"message": "Missing query parameters"}


def test_attendance_record_update_and_list(client, container):
    _login(client, "teacher1")
    student = container.storage.list_students()[0]
    klass = container.storage.list_classes()[0]

    created = client.post(
        "/api/attendance",
        json={"studentId": student.id, "classId": klass.id, "date": "2024-06-03", "status": "late"},
    )
    assert created.status_code == 201
    record = created.get_json()
    assert record["status"] == "late"

    duplicate = client.post(
        "/api/attendance",
        json={"studentId": student.id, "classId": klass.id, "date": "2024-06-03", "status": "present"},
    )
    assert duplicate.status_code == 400

    patched = client.patch(f"/api/attendance/{record['id']}", json={"status": "present"})
    assert patched.get_json()["status"] == "present"

    listed = client.get("/api/attendance", query_string={"date": "2024-06-03"}).get_json()
    assert [r["id"] for r in listed] == [record["id"]]


def test_unknown_attendance_is_404(client):
    _login(client, "admin")

    resp = client.patch("/api/attendance/999", json={"status": "present"})

    assert resp.status_code == 404


def test_students_cannot_record_attendance(client):
    _login(client, "student1")

    resp = client.post("/api/attendance", json={"studentId": 1, "classId": 1, "date": "2024-06-03", "status": "present"})

    assert resp.status_code == 403


def test_missing_required_field_is_400(client):
    _login(client, "admin")

    resp = client.post("/api/installments", json={"studentId": 1, "amount": 100})

    assert resp.status_code == 400
    assert resp.get_json() == {"message": "dueDate is required"}


def test_issue_and_return_publication_note(client, container):
    _login(client, "admin")
    note = container.storage.list_publication_notes()[1]
    student = container.storage.list_students()[0]

    issued = client.post("/api/student-notes", json={"studentId": student.id, "noteId": note.id})
    assert issued.status_code == 201
    assert container.storage.get_publication_note(note.id).available_stock == note.available_stock - 1

    returned = client.patch(
        f"/api/student-notes/{issued.get_json()['id']}",
        json={"isReturned": True, "returnDate": "2024-06-10", "condition": "fair"},
    )
    body = returned.get_json()
    assert body["isReturned"] is True
    assert body["returnDate"] == "2024-06-10"
    assert body["condition"] == "fair"

    low = client.get("/api/publication-notes", query_string={"lowStock": "true"}).get_json()
    assert note.id in [n["id"] for n in low]


def test_installment_mark_paid(client, container):
    _login(client, "admin")
    pending = container.storage.list_installments_by_status("pending")[0]

    resp = client.patch(f"/api/installments/{pending.id}", json={"status": "paid", "paymentDate": "2024-06-01"})

    assert resp.status_code == 200
    assert resp.get_json()["paymentDate"] == "2024-06-01"


def test_storage_failure_is_500_with_backend_message(client, container, monkeypatch):
    _login(client, "admin")

    def broken():
        raise PersistenceError("relation \"events\" does not exist", operation="GET events")

    monkeypatch.setattr(container.storage, "list_events", broken)

    resp = client.get("/api/events")

    assert resp.status_code == 500
    assert resp.get_json() == {"message": 'relation "events" does not exist'}


@pytest.mark.parametrize("flag, expected", [("false", False), (False, False), ("true", True)])
def test_student_note_return_flag_is_parsed(client, container, flag, expected):
    _login(client, "admin")
    note = container.storage.list_publication_notes()[0]
    issued = client.post("/api/student-notes", json={"studentId": 1, "noteId": note.id}).get_json()

    resp = client.patch(f"/api/student-notes/{issued['id']}", json={"isReturned": flag})

    assert resp.status_code == 200
    assert resp.get_json()["isReturned"] is expected


def test_student_note_return_flag_rejects_garbage(client, container):
    _login(client, "admin")
    note = container.storage.list_publication_notes()[0]
    issued = client.post("/api/student-notes", json={"studentId": 1, "noteId": note.id}).get_json()

    resp = client.patch(f"/api/student-notes/{issued['id']}", json={"isReturned": "maybe"})

    assert resp.status_code == 400
