"""Application-wide error type.

Every domain, service and repository operation that can fail raises
`ApplicationError`. The HTTP layer maps `ErrorKind` to a status code without
looking at the message text.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    AUTH = "auth"
    INTERNAL = "internal"
    DATABASE = "database"


class ApplicationError(Exception):
    """
    Tagged error carried through the whole service layer.

    - kind: one of ErrorKind, drives the HTTP status
    - message: human-friendly message (safe to show to clients)
    - cause: optional underlying exception (for logs only, never in payloads)
    """

    KIND_TO_STATUS = {
        ErrorKind.VALIDATION: 400,
        ErrorKind.AUTH: 401,
        ErrorKind.NOT_FOUND: 404,
        ErrorKind.INTERNAL: 500,
        ErrorKind.DATABASE: 500,
    }

    def __init__(self, kind: ErrorKind, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message} (kind: {self.kind.value}; cause: {self.cause!r})"
        return f"{self.message} (kind: {self.kind.value})"

    def __repr__(self) -> str:
        return f"ApplicationError(kind={self.kind.value!r}, message={self.message!r})"

    def to_payload(self) -> dict:
        return {"detail": self.message, "code": self.kind.value}

    def http_status(self) -> int:
        return self.KIND_TO_STATUS.get(self.kind, 500)


def validation_error(message: str) -> ApplicationError:
    return ApplicationError(ErrorKind.VALIDATION, message)


def not_found_error(message: str = "Entity not found") -> ApplicationError:
    return ApplicationError(ErrorKind.NOT_FOUND, message)


def auth_error(message: str = "Invalid token") -> ApplicationError:
    return ApplicationError(ErrorKind.AUTH, message)


def database_error(cause: Optional[BaseException] = None) -> ApplicationError:
    return ApplicationError(ErrorKind.DATABASE, "Internal database error", cause)


__all__ = [
    "ErrorKind",
    "ApplicationError",
    "validation_error",
    "not_found_error",
    "auth_error",
    "database_error",
]
