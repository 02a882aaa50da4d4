from __future__ import annotations

from typing import Optional, Sequence

from ..common.validators import coerce_enum
from ..core.enums import Role
from ..core.exceptions import ValidationError
from .model import NewStudent, Student, User
from .repository import StudentRepository, UserRepository


class UserService:
    """Use case: browse accounts and maintain student profiles."""

    def __init__(self, users: UserRepository, students: StudentRepository):
        self._users = users
        self._students = students

    def list_users(self, role: Optional[Role | str] = None) -> Sequence[User]:
        if role is None:
            return self._users.list_users()
        return self._users.list_users_by_role(coerce_enum(Role, role, "role"))

    def add_student_profile(self, draft: NewStudent) -> Student:
        user = self._users.get_user(draft.user_id)
        if user is None:
            raise ValidationError(f"User {draft.user_id} not found")
        if user.role is not Role.STUDENT:
            raise ValidationError("Student profiles can only be attached to student accounts")
        if self._students.get_student_by_user_id(user.id) is not None:
            raise ValidationError("This user already has a student profile")
        return self._students.create_student(draft)

    def get_student(self, student_id: int) -> Optional[Student]:
        return self._students.get_student(student_id)

    def list_students(self) -> Sequence[Student]:
        return self._students.list_students()
