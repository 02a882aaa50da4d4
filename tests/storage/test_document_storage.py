from __future__ import annotations

import mongomock
import pytest

from edumanage.core.exceptions import PersistenceError
from edumanage.publications.model import NewPublicationNote, NewStudentNote
from edumanage.storage.document import COUNTERS, DocumentStorage
from edumanage.users.model import NewUser


def test_ids_are_integers_from_the_counters_collection(document_storage):
    first = document_storage.create_user(NewUser("a", "hash", "A", "a@example.com", "student"))
    second = document_storage.create_user(NewUser("b", "hash", "B", "b@example.com", "student"))

    assert (first.id, second.id) == (1, 2)
    assert document_storage._db[COUNTERS].find_one({"_id": "users"})["seq"] == 2
    assert document_storage._db["users"].find_one({"_id": 1})["username"] == "a"


def test_documents_use_snake_case_keys(document_storage):
    document_storage.create_user(NewUser("a", "hash", "Alice", "a@example.com", "teacher"))

    doc = document_storage._db["users"].find_one({"_id": 1})
    assert doc["full_name"] == "Alice"
    assert doc["role"] == "teacher"


def test_duplicate_username_surfaces_as_persistence_error(document_storage):
    document_storage.create_user(NewUser("a", "hash", "A", "a@example.com", "student"))

    with pytest.raises(PersistenceError):
        document_storage.create_user(NewUser("a", "hash", "A again", "a2@example.com", "student"))


def test_take_copy_never_goes_below_zero(document_storage):
    note = document_storage.create_publication_note(NewPublicationNote("Algebra", "Mathematics", "8th", 1, 1))

    document_storage.create_student_note(NewStudentNote(1, note.id))
    document_storage.create_student_note(NewStudentNote(2, note.id))

    assert document_storage.get_publication_note(note.id).available_stock == 0


def test_ids_continue_after_reopening_the_same_database():
    database = mongomock.MongoClient()["edumanage_reopen"]
    DocumentStorage(database).create_user(NewUser("a", "hash", "A", "a@example.com", "student"))

    reopened = DocumentStorage(database)
    user = reopened.create_user(NewUser("b", "hash", "B", "b@example.com", "student"))

    assert user.id == 2
    assert reopened.get_user(1).username == "a"
