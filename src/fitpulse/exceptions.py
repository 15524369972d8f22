"""Exceptions for fitpulse.

Each exception carries an error code and the HTTP status the web layer
renders it with. Codes are lowercase strings shared with API clients.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes returned to API and CLI callers."""

    UNAUTHORIZED = "unauthorized"
    USER_NOT_FOUND = "user_not_found"
    MISSING_DATA = "missing_data"
    INVALID_INPUT = "invalid_input"
    UNAUTHORIZED_WORKOUT = "unauthorized_workout"
    ALREADY_COMPLETED = "already_completed"
    WORKOUT_NOT_FOUND = "workout_not_found"
    SERVER_ERROR = "server_error"


class FitpulseError(Exception):
    """Base exception for fitpulse errors.

    Attributes:
        message: Human-readable error message
        details: Optional extra context for debugging
    """

    code: ErrorCode = ErrorCode.SERVER_ERROR
    status_code: int = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the API error envelope."""
        error: dict[str, Any] = {"code": self.code.value, "message": self.message}
        if self.details:
            error["details"] = self.details
        return {"success": False, "error": error}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"


class UnauthorizedError(FitpulseError):
    """No resolvable caller identity."""

    code = ErrorCode.UNAUTHORIZED
    status_code = 401


class UserNotFoundError(FitpulseError):
    """Caller identity has no profile in the store."""

    code = ErrorCode.USER_NOT_FOUND
    status_code = 404


class MissingDataError(FitpulseError):
    """A required input is absent."""

    code = ErrorCode.MISSING_DATA
    status_code = 400


class InvalidInputError(FitpulseError):
    """An input is present but malformed (e.g. a non-positive limit)."""

    code = ErrorCode.INVALID_INPUT
    status_code = 400


class UnauthorizedWorkoutError(FitpulseError):
    """The workout session does not exist or belongs to another user."""

    code = ErrorCode.UNAUTHORIZED_WORKOUT
    status_code = 403


class AlreadyCompletedError(FitpulseError):
    """A completed session cannot be completed again."""

    code = ErrorCode.ALREADY_COMPLETED
    status_code = 400


class WorkoutNotFoundError(FitpulseError):
    """The referenced workout or session is unknown."""

    code = ErrorCode.WORKOUT_NOT_FOUND
    status_code = 404


class ServerError(FitpulseError):
    """Unexpected storage or compute failure."""

    code = ErrorCode.SERVER_ERROR
    status_code = 500
