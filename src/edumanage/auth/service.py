from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, MutableMapping, Optional

from ..common.datetime_utils import now_utc
from ..common.validators import coerce_enum, require_min_length, require_non_empty
from ..core.constants import DEBUG_IDENTITY_ID
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from ..users.model import NewUser, User
from ..users.repository import UserRepository
from .credentials import CredentialChecker

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user_id"
MIN_PASSWORD_LENGTH = 6


class AuthService:
    """Use cases: register, log in/out and resolve the current user from a session."""

    def __init__(
        self,
        users: UserRepository,
        credentials: CredentialChecker,
        *,
        debug_identity_enabled: bool = False,
    ):
        self._users = users
        self._credentials = credentials
        self._debug_identity_enabled = debug_identity_enabled

    def authenticate(self, username: str, password: str) -> User:
        user = self._users.get_user_by_username(username.strip()) if username else None
        if user is None:
            logger.info("Login failed: unknown user %r", username)
            raise AuthenticationError("Invalid credentials")

        if not self._credentials.verify(password, user.password):
            logger.info("Login failed: wrong password for %r", user.username)
            raise AuthenticationError("Invalid credentials")

        scheme = self._credentials.scheme_of(user.password)
        if scheme != "werkzeug":
            logger.info("User %r still uses the %s credential scheme", user.username, scheme)
        return user

    def register(self, draft: NewUser, *, created_by: Optional[User] = None) -> User:
        """Create an account. Only an administrator may create non-student accounts."""
        role = coerce_enum(Role, draft.role, "role")
        if role is not Role.STUDENT and (created_by is None or created_by.role is not Role.ADMIN):
            raise AuthorizationError("Only administrators can create teacher or admin accounts")
        username = require_non_empty(draft.username, "username")
        require_min_length(draft.password, "password", MIN_PASSWORD_LENGTH)
        require_non_empty(draft.full_name, "fullName")
        require_non_empty(draft.email, "email")

        if self._users.get_user_by_username(username) is not None:
            raise ValidationError("Username already exists")

        user = self._users.create_user(
            replace(draft, username=username, role=role, password=self._credentials.hash_password(draft.password))
        )
        logger.info("Registered user %s (%s)", user.username, user.role.value)
        return user

    def login(self, session: MutableMapping[str, Any], user: User) -> None:
        session.clear()
        # login always starts under a fresh session id
        regenerate = getattr(session, "regenerate", None)
        if regenerate is not None:
            regenerate()
        session[SESSION_USER_KEY] = user.id

    def logout(self, session: MutableMapping[str, Any]) -> None:
        session.clear()

    def current_user(self, session: MutableMapping[str, Any]) -> Optional[User]:
        raw_id = session.get(SESSION_USER_KEY)
        if raw_id is None:
            return None
        try:
            user_id = int(raw_id)
        except (TypeError, ValueError):
            logger.warning("Discarding session with malformed user id %r", raw_id)
            return None

        if user_id == DEBUG_IDENTITY_ID and self._debug_identity_enabled:
            logger.warning("Resolving debug identity %s; never enable this in production", DEBUG_IDENTITY_ID)
            return debug_user()

        return self._users.get_user(user_id)


def debug_user() -> User:
    return User(
        id=DEBUG_IDENTITY_ID,
        username="debug_admin",
        password="",
        full_name="Debug Administrator",
        email="debug@localhost",
        role=Role.ADMIN,
        grade=None,
        join_date=now_utc(),
    )
