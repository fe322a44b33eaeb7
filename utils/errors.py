"""
Application error taxonomy.

Every error raised on purpose by the service layer is an AppError carrying
an ErrorKind. The HTTP layer (api.errors) maps each kind to a status code;
nothing upstream inspects exception shapes.
"""
from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    BAD_REQUEST = "BAD_REQUEST"
    VALIDATION = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_CREDENTIAL = "INVALID_CREDENTIAL"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    STORAGE = "STORAGE_ERROR"
    INTERNAL = "INTERNAL_ERROR"


class AppError(Exception):
    """
    Base application error.

    - message: safe to show to clients
    - code: machine readable code, defaults to the kind value
    - details: optional structured payload (field errors etc.)
    - reason: internal detail for logs only, never serialised
    """

    kind: ErrorKind = ErrorKind.INTERNAL
    default_message = "An unexpected error occurred"

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | None = None,
        details: Any = None,
        reason: str | None = None,
        kind: ErrorKind | None = None,
    ):
        if kind is not None:
            self.kind = kind
        self.message = message or self.default_message
        self.code = code or self.kind.value
        self.details = details
        self.reason = reason
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} kind={self.kind.value} message={self.message!r}>"


class BadRequest(AppError):
    kind = ErrorKind.BAD_REQUEST
    default_message = "Bad request"


class Unauthorized(AppError):
    kind = ErrorKind.UNAUTHORIZED
    default_message = "Unauthorized"


class InvalidCredential(AppError):
    kind = ErrorKind.INVALID_CREDENTIAL
    default_message = "Invalid credentials"


class Forbidden(AppError):
    kind = ErrorKind.FORBIDDEN
    default_message = "Forbidden"


class NotFound(AppError):
    kind = ErrorKind.NOT_FOUND
    default_message = "Resource not found"


class Conflict(AppError):
    kind = ErrorKind.CONFLICT
    default_message = "Conflict"


class StorageError(AppError):
    kind = ErrorKind.STORAGE
    default_message = "Storage failure"
