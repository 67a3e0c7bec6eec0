"""Application error taxonomy.

Learn: Every failure a client can see is an AppError subclass carrying
its own HTTP status. Route handlers and dependencies just raise; the
handlers in taskboard.api.error_handling turn them into the standard
{success: false, message, errors?} envelope.
"""

from typing import Optional


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        errors: Optional[list[str]] = None,
    ) -> None:
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class ValidationFailedError(AppError):
    """Malformed or out-of-range input (400)."""

    status_code = 400
    default_message = "Validation error"


class DuplicateEmailError(AppError):
    """An account already exists for this email (400)."""

    status_code = 400
    default_message = "User with this email already exists"


class AuthenticationError(AppError):
    """Authentication failed or missing (401)."""

    status_code = 401
    default_message = "Authentication required"


class MissingTokenError(AuthenticationError):
    default_message = "Access denied. No token provided."


class UserNotFoundError(AuthenticationError):
    default_message = "User not found or inactive."


class AccountInactiveError(AuthenticationError):
    default_message = "User not found or inactive."


class InvalidCredentialsError(AuthenticationError):
    default_message = "Invalid email or password"


class ForbiddenError(AppError):
    """Authenticated, but the role is not allowed here (403)."""

    status_code = 403
    default_message = "Access denied. Insufficient permissions."


class NotFoundError(AppError):
    """Resource absent, or owned by someone else, which looks the same (404)."""

    status_code = 404
    default_message = "Resource not found"


class StorageError(AppError):
    """Backend failure not otherwise classified (500)."""

    status_code = 500
    default_message = "Storage backend error"
