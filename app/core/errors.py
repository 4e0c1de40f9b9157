from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorKind(Enum):
    """Closed set of error kinds; the value is the HTTP status code."""

    VALIDATION = ("validation", 400)
    UNAUTHORIZED = ("unauthorized", 401)
    FORBIDDEN = ("forbidden", 403)
    NOT_FOUND = ("not_found", 404)
    CONFLICT = ("conflict", 409)
    DATABASE = ("database", 500)
    GENERIC = ("generic", 500)

    def __init__(self, code: str, status_code: int) -> None:
        self.code = code
        self.status_code = status_code


@dataclass(frozen=True)
class ApiError(Exception):
    """A recognized, user-facing application error.

    `kind` fixes the status code; `status_override` exists only for the few
    storage failures that are client errors without a kind of their own
    (a foreign-key violation is a 400 tagged GENERIC).
    """

    kind: ErrorKind
    message: str
    details: str | None = None
    status_override: int | None = None

    def __str__(self) -> str:
        return self.message

    @property
    def status_code(self) -> int:
        return self.status_override or self.kind.status_code


def validation_error(message: str, details: str | None = None) -> ApiError:
    return ApiError(ErrorKind.VALIDATION, message, details)


def unauthorized(message: str = "Not authenticated") -> ApiError:
    return ApiError(ErrorKind.UNAUTHORIZED, message)


def forbidden(message: str = "Access denied") -> ApiError:
    return ApiError(ErrorKind.FORBIDDEN, message)


def not_found(resource: str = "Resource") -> ApiError:
    return ApiError(ErrorKind.NOT_FOUND, f"{resource} not found")


def conflict(message: str = "Resource already exists") -> ApiError:
    return ApiError(ErrorKind.CONFLICT, message)


def database_error(message: str, details: str | None = None) -> ApiError:
    return ApiError(ErrorKind.DATABASE, message, details)


def generic_error(message: str, status_code: int = 500, details: str | None = None) -> ApiError:
    override = None if status_code == ErrorKind.GENERIC.status_code else status_code
    return ApiError(ErrorKind.GENERIC, message, details, status_override=override)


def is_api_error(exc: Any) -> bool:
    return isinstance(exc, ApiError)


def error_info(exc: Any) -> tuple[str, int, str | None]:
    """Return (message, status_code, details) for any raised value."""

    if isinstance(exc, ApiError):
        return exc.message, exc.status_code, exc.details
    if isinstance(exc, Exception):
        return str(exc) or exc.__class__.__name__, 500, None
    return "An unexpected error occurred", 500, None


_SENSITIVE_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"/home/.*?/"), "/path/"),
    (re.compile(r"/var/.*?/"), "/path/"),
    (re.compile(r"host=.*?;"), "host=***;"),
    (re.compile(r"password.*?;"), "password=***;"),
)


def sanitize_error_message(exc: Any) -> str:
    """Mask paths and connection-string fragments in an error message."""

    message = str(getattr(exc, "message", None) or exc or "") or "An error occurred"
    for pattern, replacement in _SENSITIVE_PATTERNS:
        message = pattern.sub(replacement, message)
    return message
