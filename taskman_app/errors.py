"""
Error taxonomy for the task manager service.

Every failure that is reported to a client is a ``TaskmanError`` carrying
the HTTP status and the client-facing message.  The application factory
registers a single handler that turns these into the standard JSON
envelope, so route handlers simply raise.

Credential and token failures intentionally collapse their causes into
one message each: a caller cannot tell an unknown username from a wrong
password, or a malformed token from an expired one.
"""

from __future__ import annotations


class TaskmanError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        if message is not None:
            self.message = message


class InvalidInputError(TaskmanError):
    """Malformed or missing request fields."""

    status_code = 400
    message = "Invalid input"


class DuplicateUsernameError(TaskmanError):
    status_code = 400
    message = "User already exists"


class InvalidCredentialsError(TaskmanError):
    status_code = 401
    message = "Invalid credentials"


class MissingTokenError(TaskmanError):
    status_code = 401
    message = "Missing token"


class InvalidOrExpiredTokenError(TaskmanError):
    status_code = 401
    message = "Invalid or expired token"


class TaskNotFoundError(TaskmanError):
    status_code = 404
    message = "Task not found"
