"""Application error: one exception type, classified by an HTTP-style status."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from enum import IntEnum

from crm.application.dto import FieldError

logger = logging.getLogger(__name__)


class ErrorKind(IntEnum):
    BAD_REQUEST = 400
    NOT_FOUND = 404
    CONFLICT = 409
    INTERNAL = 500


class AppError(Exception):
    """Raised by use cases. The boundary renders message + status_code."""

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.INTERNAL,
        *,
        errors: list[FieldError] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.errors = list(errors or [])

    @property
    def status_code(self) -> int:
        return int(self.kind)

    @classmethod
    def bad_request(
        cls, message: str, errors: list[FieldError] | None = None
    ) -> "AppError":
        return cls(message, ErrorKind.BAD_REQUEST, errors=errors)

    @classmethod
    def not_found(cls, message: str) -> "AppError":
        return cls(message, ErrorKind.NOT_FOUND)

    @classmethod
    def conflict(cls, message: str) -> "AppError":
        return cls(message, ErrorKind.CONFLICT)

    @classmethod
    def internal(cls, message: str) -> "AppError":
        return cls(message, ErrorKind.INTERNAL)

    def __repr__(self) -> str:
        return f"AppError({self.message!r}, {self.kind.name})"


@contextmanager
def repository_errors(message: str) -> Iterator[None]:
    """Re-raise anything the storage layer throws as an internal AppError."""
    try:
        yield
    except AppError:
        raise
    except Exception as exc:
        logger.exception("%s (%s)", message, type(exc).__name__)
        raise AppError.internal(message) from exc
