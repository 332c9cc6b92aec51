from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Base exception for business rule violations.

    Each subclass maps to one error type of the JSON error envelope.
    """

    error_type = "server_error"
    status_code = 500
    default_code = "UNEXPECTED_ERROR"

    def __init__(self, message: str, *, code: Optional[str] = None, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = dict(details or {})


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    error_type = "validation_error"
    status_code = 400
    default_code = "VALIDATION_ERROR"


class AuthenticationError(DomainError):
    """Raised when the bearer token is missing or invalid."""

    error_type = "unauthorized"
    status_code = 401
    default_code = "UNAUTHORIZED"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    error_type = "forbidden"
    status_code = 403
    default_code = "FORBIDDEN"


class NotFoundError(DomainError):
    error_type = "not_found"
    status_code = 404
    default_code = "NOT_FOUND"


class ConflictError(DomainError):
    """Raised when a write precondition no longer holds."""

    error_type = "conflict"
    status_code = 409
    default_code = "CONFLICT"


class BackendError(DomainError):
    """Raised when a call to the hosted backend fails."""

    default_code = "DATABASE_ERROR"

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        db_code: Optional[str] = None,
        db_message: Optional[str] = None,
    ):
        details: dict[str, Any] = {}
        if db_code:
            details["db_code"] = db_code
        if db_message:
            details["db_message"] = db_message
        super().__init__(message, code=code, details=details)
        self.db_code = db_code
        self.db_message = db_message


class BackendNotConfiguredError(BackendError):
    status_code = 503
    default_code = "BACKEND_NOT_CONFIGURED"
