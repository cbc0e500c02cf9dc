"""Error kinds raised by the service layer and translated to HTTP at the API boundary."""

from enum import Enum


class ErrorKind(str, Enum):
    """Expected failure categories of auth and product flows."""

    UNAUTHORIZED = "unauthorized"
    INVALID_ARGUMENT = "invalid_argument"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"


class ServiceError(Exception):
    """Raised by services for expected failures; `kind` selects the HTTP status."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        errors: list[str] | None = None,
    ) -> None:
        self.kind = kind
        self.message = message
        self.errors = errors
        super().__init__(message)
