"""
Application error taxonomy.

Every error carries the HTTP status it maps to and a short error code used in
the response envelope (see api.errors). Authentication failures keep their
public message generic; `reason` is for logs only and never sent to clients.
"""
from __future__ import annotations


class AppError(Exception):
    status_code = 500
    error = "INTERNAL_ERROR"
    message = "An unexpected error occurred"

    def __init__(self, message: str | None = None, reason: str | None = None):
        self.message = message or self.message
        self.reason = reason
        super().__init__(self.message)


class InvalidInput(AppError):
    status_code = 400
    error = "INVALID_INPUT"
    message = "Invalid input"


class Unauthorized(AppError):
    status_code = 401
    error = "UNAUTHORIZED"
    message = "Unauthorized"


class InvalidCredentials(Unauthorized):
    message = "Invalid credentials"


class InvalidToken(Unauthorized):
    message = "Invalid token"


class InvalidRefreshToken(InvalidToken):
    message = "Invalid refresh token"


class InvalidBootstrapToken(InvalidToken):
    # the shared bootstrap secret is answered with 403, not 401
    status_code = 403
    error = "FORBIDDEN"


class Forbidden(AppError):
    status_code = 403
    error = "FORBIDDEN"
    message = "Forbidden"


class NotFound(AppError):
    status_code = 404
    error = "NOT_FOUND"
    message = "Resource not found"


class Conflict(AppError):
    status_code = 409
    error = "CONFLICT"
    message = "Conflict"


class Unavailable(AppError):
    status_code = 503
    error = "UNAVAILABLE"
    message = "Service temporarily unavailable"


class ConfigurationError(RuntimeError):
    """Raised at startup when required configuration is missing."""
