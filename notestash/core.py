"""Core types used across all modules: diagnostics and the error hierarchy."""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class Severity(StrEnum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class Diag(BaseModel):
    """A structured diagnostic message."""

    severity: Severity
    code: str
    message: str
    hint: str | None = None


class Result(BaseModel, Generic[T]):  # noqa: UP046 — Pydantic requires Generic[T] subclass
    """Result container that pairs output with diagnostics.

    Used where a bulk operation should keep going past per-item failures.
    """

    data: T | None = None
    diagnostics: list[Diag] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(d.severity == Severity.ERROR for d in self.diagnostics)

    @property
    def ok(self) -> bool:
        return not self.has_errors

    def error(self, code: str, message: str, *, hint: str | None = None) -> None:
        self.diagnostics.append(Diag(severity=Severity.ERROR, code=code, message=message, hint=hint))

    def warning(self, code: str, message: str, *, hint: str | None = None) -> None:
        self.diagnostics.append(Diag(severity=Severity.WARNING, code=code, message=message, hint=hint))

    def info(self, code: str, message: str, *, hint: str | None = None) -> None:
        self.diagnostics.append(Diag(severity=Severity.INFO, code=code, message=message, hint=hint))


class NotestashError(Exception):
    """Base exception for all notestash errors."""

    code = "NOTESTASH_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_diag(self) -> Diag:
        return Diag(severity=Severity.ERROR, code=self.code, message=self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


class NoteNotFoundError(NotestashError):
    """No object exists at the resolved key."""

    code = "NOT_FOUND"


# Stores speak in objects, the repository in notes; both are the same failure.
ObjectNotFoundError = NoteNotFoundError


class StoreIOError(NotestashError):
    """Transport or stream failure while talking to the object store."""

    code = "STORE_IO"


class NoteDecodeError(NotestashError):
    """Stored bytes do not decode to a note document."""

    code = "DECODE_ERROR"


class UnsupportedOperationError(NotestashError):
    """The operation is not backed by this storage implementation."""

    code = "UNSUPPORTED"

    def __init__(self, operation: str) -> None:
        super().__init__(f"{operation} is not supported by this notebook repository", {"operation": operation})
        self.operation = operation


class InvalidIdentifierError(NotestashError, ValueError):
    """A namespace or note id cannot be embedded in an object key."""

    code = "INVALID_ID"


class ConfigError(NotestashError, ValueError):
    """A configured value cannot be used, such as an unknown text encoding."""

    code = "CONFIG_ERROR"
