"""
Application error taxonomy.

Every error raised below the HTTP layer is an AppError carrying the status
code it maps to. The handlers registered in app.main turn them into
``{"error": message}`` responses.
"""

from typing import Optional


class AppError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code: int = 500
    default_message: str = "Server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Missing or malformed required field."""
    status_code = 400
    default_message = "Invalid request"


class AuthError(AppError):
    """Missing or invalid admin credential or token."""
    status_code = 401
    default_message = "Admin auth required"


class NotFoundError(AppError):
    """Unknown record id."""
    status_code = 404
    default_message = "Not found"


class BackendUnavailable(AppError):
    """Storage backend unreachable or not configured."""
    status_code = 500
    default_message = "Database not configured"


class InternalError(AppError):
    """Unexpected failure or server misconfiguration."""
    status_code = 500
