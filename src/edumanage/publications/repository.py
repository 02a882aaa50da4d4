from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import NoteCondition
from .model import NewPublicationNote, NewStudentNote, PublicationNote, StudentNote


class PublicationNoteRepository(Protocol):
    def get_publication_note(self, note_id: int) -> Optional[PublicationNote]:
        raise NotImplementedError

    def create_publication_note(self, draft: NewPublicationNote) -> PublicationNote:
        raise NotImplementedError

    def list_publication_notes(self) -> Sequence[PublicationNote]:
        raise NotImplementedError

    def list_publication_notes_by_subject(self, subject: str) -> Sequence[PublicationNote]:
        raise NotImplementedError

    def list_publication_notes_by_grade(self, grade: str) -> Sequence[PublicationNote]:
        raise NotImplementedError

    def list_low_stock_publication_notes(self) -> Sequence[PublicationNote]:
        """Notes whose available stock is at or below their threshold."""

        raise NotImplementedError

    def update_publication_note_stock(
        self,
        note_id: int,
        total_stock: int,
        available_stock: int,
    ) -> Optional[PublicationNote]:
        """Set both counts and refresh ``last_restocked``."""

        raise NotImplementedError


class StudentNoteRepository(Protocol):
    def get_student_note(self, student_note_id: int) -> Optional[StudentNote]:
        raise NotImplementedError

    def create_student_note(self, draft: NewStudentNote) -> StudentNote:
        """Record a lending; an unreturned copy takes one unit of available stock (never below 0)."""

        raise NotImplementedError

    def list_student_notes(self) -> Sequence[StudentNote]:
        raise NotImplementedError

    def list_student_notes_by_student(self, student_id: int) -> Sequence[StudentNote]:
        raise NotImplementedError

    def list_student_notes_by_note(self, note_id: int) -> Sequence[StudentNote]:
        raise NotImplementedError

    def update_student_note_status(
        self,
        student_note_id: int,
        is_returned: bool,
        return_date: date | str | None = None,
        condition: NoteCondition | str | None = None,
    ) -> Optional[StudentNote]:
        """Mark a lending returned or not; stock is not restored here."""

        raise NotImplementedError
