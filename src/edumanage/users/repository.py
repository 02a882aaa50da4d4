from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import NewStudent, NewUser, Student, User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): services depend on this interface, never on a concrete backend.
    """

    def get_user(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_user_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(self, draft: NewUser) -> User:
        raise NotImplementedError

    def list_users(self) -> Sequence[User]:
        raise NotImplementedError

    def list_users_by_role(self, role: Role | str) -> Sequence[User]:
        raise NotImplementedError

    def count_users(self) -> int:
        raise NotImplementedError


class StudentRepository(Protocol):
    def get_student(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_student_by_user_id(self, user_id: int) -> Optional[Student]:
        raise NotImplementedError

    def create_student(self, draft: NewStudent) -> Student:
        raise NotImplementedError

    def list_students(self) -> Sequence[Student]:
        raise NotImplementedError
