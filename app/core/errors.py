# app/core/errors.py
from fastapi import status


class AppError(Exception):
    """
    Base class for domain errors.

    Services and repositories raise these instead of HTTPException so they
    stay usable outside a request (see scripts/manage_users.py). The HTTP
    layer maps `status_code` onto the response envelope.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal Server Error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """A required field is missing or empty."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class ParseError(AppError):
    """Malformed upstream response or malformed client input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Malformed data"


class AuthError(AppError):
    """OAuth exchange/profile failure, or a missing/invalid session."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not Found"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class StorageError(AppError):
    """
    Backing store failure.

    The message is for logs only; responses carry `default_message`.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal Server Error"
