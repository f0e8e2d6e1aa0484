from abc import ABC


class UserError(ABC, Exception):
    """An error caused by the caller's request.

    The message is returned to API clients as is, so it must describe the
    problem without exposing stored data or internals.
    """


class NotFoundError(UserError):
    """Raised when a note or other stored record does not exist."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message)


class ValidationError(UserError):
    """Raised when user input fails validation."""
