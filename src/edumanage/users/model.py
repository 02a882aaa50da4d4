from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: an account (admin, teacher or student).

    Note: ``password`` holds the stored hash, never the clear text.
    """

    id: int
    username: str
    password: str
    full_name: str
    email: str
    role: Role
    grade: Optional[str]
    join_date: Optional[datetime]


@dataclass(frozen=True)
class NewUser:
    username: str
    password: str
    full_name: str
    email: str
    role: Role = Role.STUDENT
    grade: Optional[str] = None


@dataclass(frozen=True)
class Student:
    """Profile details for a user with role=student (one per user)."""

    id: int
    user_id: int
    parent_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    date_of_birth: Optional[date] = None


@dataclass(frozen=True)
class NewStudent:
    user_id: int
    parent_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    date_of_birth: Optional[date] = None
