from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import today
from ..core.constants import DEFAULT_LOW_STOCK_THRESHOLD
from ..core.enums import NoteCondition


@dataclass(frozen=True)
class PublicationNote:
    """A printed study material kept in stock and lent to students."""

    id: int
    title: str
    subject: str
    grade: str
    total_stock: int = 0
    available_stock: int = 0
    low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD
    last_restocked: Optional[datetime] = None
    description: Optional[str] = None

    @property
    def is_low_stock(self) -> bool:
        return self.available_stock <= self.low_stock_threshold


@dataclass(frozen=True)
class NewPublicationNote:
    title: str
    subject: str
    grade: str
    total_stock: int = 0
    available_stock: int = 0
    low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD
    last_restocked: Optional[datetime] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class StudentNote:
    """One lending event: a copy of a publication note given to a student."""

    id: int
    student_id: int
    note_id: int
    date_issued: date
    is_returned: bool = False
    return_date: Optional[date] = None
    condition: Optional[NoteCondition] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class NewStudentNote:
    student_id: int
    note_id: int
    date_issued: date = field(default_factory=today)
    is_returned: bool = False
    return_date: Optional[date] = None
    condition: Optional[NoteCondition] = None
    notes: Optional[str] = None
