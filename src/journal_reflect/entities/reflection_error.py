"""Reflection error taxonomy."""

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of error kinds exposed to clients."""

    VALIDATION = "validation"
    CONTENT_POLICY = "content_policy"
    TIMEOUT = "timeout"
    API_ERROR = "api_error"
    RATE_LIMIT = "rate_limit"
    INTERNAL_ERROR = "internal_error"


STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.CONTENT_POLICY: 400,
    ErrorKind.RATE_LIMIT: 429,
    ErrorKind.INTERNAL_ERROR: 500,
    ErrorKind.API_ERROR: 503,
    ErrorKind.TIMEOUT: 504,
}


class ReflectionError(Exception):
    """A request failure already mapped onto the error taxonomy.

    Attributes:
        kind: Error kind from the closed taxonomy
        message: Human-readable, actionable message
        retry_after: Seconds a client should wait before retrying, if any
        details: Optional debugging detail
        status_code: HTTP status for the response; defaults by kind
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        retry_after: int | None = None,
        details: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.retry_after = retry_after
        self.details = details
        self.status_code = status_code or STATUS_CODES[kind]

    def __repr__(self) -> str:
        return f"ReflectionError({self.kind.value!r}, {self.message!r})"
