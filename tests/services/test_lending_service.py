from __future__ import annotations

from datetime import date

import pytest

from edumanage.common import datetime_utils
from edumanage.core.enums import NoteCondition
from edumanage.core.exceptions import ValidationError
from edumanage.publications.model import NewPublicationNote, NewStudentNote
from edumanage.publications.service import LendingService
from edumanage.storage.memory import InMemoryStorage


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def lending(storage) -> LendingService:
    return LendingService(storage, storage)


def test_issue_takes_a_copy_and_return_does_not_restock(lending, storage):
    note = lending.add_note(NewPublicationNote("Algebra", "Mathematics", "8th", 10, 3))

    issued = lending.issue(NewStudentNote(1, note.id, date(2024, 1, 1)))
    assert storage.get_publication_note(note.id).available_stock == 2

    returned = lending.return_copy(issued.id, return_date="2024-01-10", condition="good")
    assert returned.is_returned
    assert returned.return_date == date(2024, 1, 10)
    assert returned.condition is NoteCondition.GOOD
    assert storage.get_publication_note(note.id).available_stock == 2


def test_return_without_date_uses_today(lending, monkeypatch):
    monkeypatch.setattr("edumanage.publications.service.today", lambda: date(2024, 5, 5))
    note = lending.add_note(NewPublicationNote("Algebra", "Mathematics", "8th", 10, 3))
    issued = lending.issue(NewStudentNote(1, note.id))

    assert lending.return_copy(issued.id).return_date == date(2024, 5, 5)


def test_issue_rejects_unknown_note_and_empty_stock(lending):
    with pytest.raises(ValidationError, match="not found"):
        lending.issue(NewStudentNote(1, 99))

    empty = lending.add_note(NewPublicationNote("Algebra", "Mathematics", "8th", 10, 0))
    with pytest.raises(ValidationError, match="No copies"):
        lending.issue(NewStudentNote(1, empty.id))


def test_already_returned_record_can_be_filed_without_stock(lending, storage):
    empty = lending.add_note(NewPublicationNote("Algebra", "Mathematics", "8th", 10, 0))

    record = lending.issue(NewStudentNote(1, empty.id, is_returned=True, return_date=date(2024, 1, 2)))

    assert record.is_returned
    assert storage.get_publication_note(empty.id).available_stock == 0


@pytest.mark.parametrize("total, available", [(5, 6), (-1, 0), ("x", 1)])
def test_restock_rejects_inconsistent_counts(lending, total, available):
    note = lending.add_note(NewPublicationNote("Algebra", "Mathematics", "8th", 10, 3))

    with pytest.raises(ValidationError):
        lending.restock(note.id, total, available)


def test_restock_accepts_numeric_strings(lending):
    note = lending.add_note(NewPublicationNote("Algebra", "Mathematics", "8th", 10, 3))

    restocked = lending.restock(note.id, "20", "9")

    assert (restocked.total_stock, restocked.available_stock) == (20, 9)


def test_restock_unknown_note_is_absent(lending):
    assert lending.restock(42, 10, 10) is None


def test_lookup_notes_prefers_low_stock_then_subject_then_grade(lending):
    lending.add_note(NewPublicationNote("Algebra", "Mathematics", "8th", 10, 1, 2))
    lending.add_note(NewPublicationNote("Physics", "Science", "10th", 10, 9, 2))

    assert [n.title for n in lending.lookup_notes(low_stock=True, subject="Science")] == ["Algebra"]
    assert [n.title for n in lending.lookup_notes(subject="Science")] == ["Physics"]
    assert [n.title for n in lending.lookup_notes(grade="8th")] == ["Algebra"]
    assert len(lending.lookup_notes()) == 2


def test_set_returned_false_reopens_lending(lending):
    note = lending.add_note(NewPublicationNote("Algebra", "Mathematics", "8th", 10, 3))
    issued = lending.issue(NewStudentNote(1, note.id))
    lending.return_copy(issued.id, return_date=datetime_utils.today())

    reopened = lending.set_returned(issued.id, False)

    assert not reopened.is_returned
