from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when there is no valid session or login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class ConfigurationError(DomainError):
    """Raised when settings cannot produce a working application."""


class PersistenceError(DomainError):
    """Raised when a storage backend is unreachable or rejects an operation.

    The backend's own message is kept in ``message`` so callers can surface it.
    """

    def __init__(self, message: str, *, operation: str | None = None):
        self.message = message
        self.operation = operation
        super().__init__(f"{operation}: {message}" if operation else message)
