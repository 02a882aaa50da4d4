from __future__ import annotations

from datetime import date

import httpx
import pytest

from edumanage.core.constants import STOCK_CAS_ATTEMPTS
from edumanage.core.exceptions import PersistenceError
from edumanage.publications.model import NewPublicationNote, NewStudentNote
from edumanage.storage.postgrest import PostgrestClient, RestConfig
from edumanage.storage.relational import RelationalStorage
from edumanage.users.model import NewUser


def test_requests_carry_api_key_and_representation_preference(relational_storage, fake_postgrest):
    relational_storage.create_user(NewUser("admin", "hash", "Admin", "admin@example.com", "admin"))

    request = fake_postgrest.requests[-1]
    assert request.url.path == "/rest/v1/users"
    assert request.headers["apikey"] == "anon-key"
    assert request.headers["Authorization"] == "Bearer anon-key"
    assert request.headers["Prefer"] == "return=representation"


def test_filters_are_sent_as_eq_operators(relational_storage, fake_postgrest):
    relational_storage.list_attendance_by_date(date(2024, 1, 10))

    params = fake_postgrest.requests[-1].url.params
    assert params["date"] == "eq.2024-01-10"
    assert params["order"] == "id.asc"


def test_backend_rejection_becomes_persistence_error_with_message(relational_storage, fake_postgrest):
    fake_postgrest.error = (409, 'duplicate key value violates unique constraint "users_username_key"')

    with pytest.raises(PersistenceError) as excinfo:
        relational_storage.create_user(NewUser("admin", "hash", "Admin", "admin@example.com", "admin"))

    assert "users_username_key" in excinfo.value.message
    assert excinfo.value.operation == "POST users"


def test_unreachable_backend_becomes_persistence_error():
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = PostgrestClient(RestConfig(url="https://example.supabase.co", api_key="k"), transport=httpx.MockTransport(refuse))
    storage = RelationalStorage(client)

    with pytest.raises(PersistenceError, match="connection refused"):
        storage.get_user(1)


def test_empty_result_is_absent_not_error(relational_storage):
    assert relational_storage.get_class(1) is None
    assert relational_storage.list_events() == []


def test_count_uses_exact_count_header(relational_storage):
    for name in ("a", "b", "c"):
        relational_storage.create_user(NewUser(name, "hash", name, f"{name}@example.com", "student"))

    assert relational_storage.count_users() == 3


def test_stock_decrement_retries_when_stock_changed_concurrently(relational_storage, fake_postgrest):
    note = relational_storage.create_publication_note(NewPublicationNote("Algebra", "Mathematics", "8th", 10, 5))

    def someone_else_takes_a_copy(table):
        for row in fake_postgrest.tables[table]:
            if row["id"] == note.id:
                row["available_stock"] -= 1

    fake_postgrest.before_patch = someone_else_takes_a_copy
    relational_storage.create_student_note(NewStudentNote(1, note.id))

    assert relational_storage.get_publication_note(note.id).available_stock == 3


def test_stock_decrement_gives_up_after_bounded_attempts(relational_storage, fake_postgrest):
    note = relational_storage.create_publication_note(NewPublicationNote("Algebra", "Mathematics", "8th", 100, 50))
    attempts = []

    def always_interfere(table):
        attempts.append(table)
        for row in fake_postgrest.tables[table]:
            if row["id"] == note.id:
                row["available_stock"] -= 1
        fake_postgrest.before_patch = always_interfere

    fake_postgrest.before_patch = always_interfere

    with pytest.raises(PersistenceError):
        relational_storage.create_student_note(NewStudentNote(1, note.id))
    assert len(attempts) == STOCK_CAS_ATTEMPTS
