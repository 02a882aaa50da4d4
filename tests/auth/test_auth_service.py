from __future__ import annotations

import pytest

from edumanage.auth.credentials import CredentialChecker
from edumanage.auth.service import SESSION_USER_KEY, AuthService
from edumanage.core.constants import DEBUG_IDENTITY_ID
from edumanage.core.enums import Role
from edumanage.core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from edumanage.storage.memory import InMemoryStorage
from edumanage.users.model import NewUser


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def auth(storage) -> AuthService:
    return AuthService(storage, CredentialChecker.default())


def test_register_hashes_password_and_allows_login(auth, storage):
    user = auth.register(NewUser("raj", "secret1", "Raj Patel", "raj@example.com", Role.STUDENT, "8th"))

    assert storage.get_user(user.id).password != "secret1"
    assert auth.authenticate("raj", "secret1").id == user.id


def test_register_rejects_duplicate_username(auth):
    auth.register(NewUser("raj", "secret1", "Raj", "raj@example.com"))

    with pytest.raises(ValidationError, match="Username already exists"):
        auth.register(NewUser("raj", "secret2", "Raj Again", "raj2@example.com"))


@pytest.mark.parametrize(
    "draft",
    [
        NewUser("", "secret1", "Raj", "raj@example.com"),
        NewUser("raj", "short", "Raj", "raj@example.com"),
        NewUser("raj", "secret1", "", "raj@example.com"),
    ],
)
def test_register_validates_input(auth, draft):
    with pytest.raises(ValidationError):
        auth.register(draft)


@pytest.mark.parametrize("username, password", [("raj", "wrong!!"), ("nobody", "secret1"), ("", "")])
def test_authenticate_failures_share_one_message(auth, username, password):
    auth.register(NewUser("raj", "secret1", "Raj", "raj@example.com"))

    with pytest.raises(AuthenticationError, match="Invalid credentials"):
        auth.authenticate(username, password)


def test_login_resets_session_and_current_user_resolves(auth):
    user = auth.register(NewUser("raj", "secret1", "Raj", "raj@example.com"))
    session = {"stale": True}

    auth.login(session, user)

    assert session == {SESSION_USER_KEY: user.id}
    assert auth.current_user(session) == user

    auth.logout(session)
    assert auth.current_user(session) is None


def test_current_user_ignores_unknown_or_malformed_ids(auth):
    assert auth.current_user({SESSION_USER_KEY: 42}) is None
    assert auth.current_user({SESSION_USER_KEY: "abc"}) is None


def test_debug_identity_only_when_enabled(storage):
    session = {SESSION_USER_KEY: DEBUG_IDENTITY_ID}

    assert AuthService(storage, CredentialChecker.default()).current_user(session) is None

    debug = AuthService(storage, CredentialChecker.default(), debug_identity_enabled=True).current_user(session)
    assert debug.id == DEBUG_IDENTITY_ID
    assert debug.role is Role.ADMIN


@pytest.mark.parametrize("role", [Role.ADMIN, Role.TEACHER, "admin"])
def test_anonymous_registration_cannot_pick_a_staff_role(auth, storage, role):
    with pytest.raises(AuthorizationError):
        auth.register(NewUser("mallory", "secret1", "Mallory", "m@example.com", role))

    assert storage.get_user_by_username("mallory") is None


def test_admin_can_register_staff_accounts(auth, storage):
    admin = storage.create_user(NewUser("boss", "hash", "Boss", "boss@example.com", Role.ADMIN))
    student = storage.create_user(NewUser("kid", "hash", "Kid", "kid@example.com", Role.STUDENT))

    teacher = auth.register(NewUser("t1", "secret1", "Teacher", "t@example.com", "teacher"), created_by=admin)
    assert teacher.role is Role.TEACHER

    with pytest.raises(AuthorizationError):
        auth.register(NewUser("t2", "secret1", "Teacher", "t2@example.com", Role.TEACHER), created_by=student)
