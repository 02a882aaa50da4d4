from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import parse_iso_date, today
from ..common.validators import coerce_enum, require_at_least, require_non_empty
from ..core.enums import NoteCondition
from ..core.exceptions import ValidationError
from .model import NewPublicationNote, NewStudentNote, PublicationNote, StudentNote
from .repository import PublicationNoteRepository, StudentNoteRepository

logger = logging.getLogger(__name__)


def _check_stock(total_stock: int, available_stock: int) -> tuple[int, int]:
    total = int(require_at_least(total_stock, "totalStock", 0))
    available = int(require_at_least(available_stock, "availableStock", 0))
    if available > total:
        raise ValidationError("availableStock cannot exceed totalStock")
    return total, available


class LendingService:
    """Use case: keep publication-note stock and lend copies to students.

    Issuing an unreturned copy takes one from ``available_stock``. Returning
    a copy only closes the lending record; stock changes again on restock.
    """

    def __init__(self, notes: PublicationNoteRepository, lendings: StudentNoteRepository):
        self._notes = notes
        self._lendings = lendings

    def add_note(self, draft: NewPublicationNote) -> PublicationNote:
        require_non_empty(draft.title, "title")
        _check_stock(draft.total_stock, draft.available_stock)
        require_at_least(draft.low_stock_threshold, "lowStockThreshold", 1)
        return self._notes.create_publication_note(draft)

    def restock(self, note_id: int, total_stock: int, available_stock: int) -> Optional[PublicationNote]:
        total, available = _check_stock(total_stock, available_stock)
        note = self._notes.update_publication_note_stock(note_id, total, available)
        if note is not None and note.is_low_stock:
            logger.warning("Publication note %s restocked but still low (%s left)", note.id, note.available_stock)
        return note

    def issue(self, draft: NewStudentNote) -> StudentNote:
        note = self._notes.get_publication_note(draft.note_id)
        if note is None:
            raise ValidationError(f"Publication note {draft.note_id} not found")
        if not draft.is_returned and note.available_stock <= 0:
            raise ValidationError(f"No copies of '{note.title}' available")
        lending = self._lendings.create_student_note(draft)
        logger.info("Issued publication note %s to student %s", note.id, lending.student_id)
        return lending

    def return_copy(
        self,
        student_note_id: int,
        *,
        return_date: Optional[date | str] = None,
        condition: Optional[NoteCondition | str] = None,
    ) -> Optional[StudentNote]:
        if condition is not None:
            condition = coerce_enum(NoteCondition, condition, "condition")
        return self._lendings.update_student_note_status(
            student_note_id,
            True,
            parse_iso_date(return_date) or today(),
            condition,
        )

    def set_returned(
        self,
        student_note_id: int,
        is_returned: bool,
        *,
        return_date: Optional[date | str] = None,
        condition: Optional[NoteCondition | str] = None,
    ) -> Optional[StudentNote]:
        if is_returned:
            return self.return_copy(student_note_id, return_date=return_date, condition=condition)
        return self._lendings.update_student_note_status(student_note_id, False, return_date, condition)

    def lookup_notes(
        self,
        *,
        subject: Optional[str] = None,
        grade: Optional[str] = None,
        low_stock: bool = False,
    ) -> Sequence[PublicationNote]:
        if low_stock:
            return self._notes.list_low_stock_publication_notes()
        if subject:
            return self._notes.list_publication_notes_by_subject(subject)
        if grade:
            return self._notes.list_publication_notes_by_grade(grade)
        return self._notes.list_publication_notes()

    def lookup_lendings(
        self,
        *,
        student_id: Optional[int] = None,
        note_id: Optional[int] = None,
    ) -> Sequence[StudentNote]:
        if student_id is not None:
            return self._lendings.list_student_notes_by_student(student_id)
        if note_id is not None:
            return self._lendings.list_student_notes_by_note(note_id)
        return self._lendings.list_student_notes()
