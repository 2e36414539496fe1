"""Error taxonomy shared by the gateway, the coordinator and the API."""

from __future__ import annotations


class SpendBoardError(Exception):
    """Base class for every failure surfaced to callers.

    ``message`` is always short and human-readable so views can display it
    as-is.
    """

    status_code: int = 500
    code: str = "error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message()
        super().__init__(self.message)

    @classmethod
    def default_message(cls) -> str:
        return "Something went wrong"


class ValidationError(SpendBoardError):
    """Input rejected before (or by) the gateway."""

    status_code = 400
    code = "validation_error"

    @classmethod
    def default_message(cls) -> str:
        return "Invalid input"


class ConflictError(SpendBoardError):
    """Duplicate budget for a category+month, or duplicate category name."""

    status_code = 409
    code = "conflict"

    @classmethod
    def default_message(cls) -> str:
        return "A record with this identifier already exists"


class NotFoundError(SpendBoardError):
    """Target id no longer exists."""

    status_code = 404
    code = "not_found"

    @classmethod
    def default_message(cls) -> str:
        return "Record not found"


class NetworkError(SpendBoardError):
    """The request could not complete."""

    status_code = 503
    code = "network_error"

    @classmethod
    def default_message(cls) -> str:
        return "Could not reach the server"


class ServerError(SpendBoardError):
    """5xx or any unexpected gateway failure."""

    status_code = 500
    code = "server_error"

    @classmethod
    def default_message(cls) -> str:
        return "An error occurred while accessing the database"


def error_for_status(status: int, message: str | None = None) -> SpendBoardError:
    """Map an HTTP status code onto the error taxonomy."""

    if status in (400, 422):
        return ValidationError(message)
    if status == 404:
        return NotFoundError(message)
    if status == 409:
        return ConflictError(message)
    return ServerError(message)
