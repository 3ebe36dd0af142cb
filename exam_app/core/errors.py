"""Error types raised by the exam services."""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    INVALID = "invalid"


class ExamError(Exception):
    """Base class for failures reported back to the caller."""

    kind: ErrorKind = ErrorKind.INVALID

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_detail(self) -> dict[str, str]:
        return {"kind": self.kind.value, "message": self.message}


class ExamNotFoundError(ExamError):
    kind = ErrorKind.NOT_FOUND


class LeaderboardNotFoundError(ExamError):
    kind = ErrorKind.NOT_FOUND


class UnauthorizedError(ExamError):
    kind = ErrorKind.UNAUTHORIZED


class InvalidExamError(ExamError):
    """Raised when an exam definition cannot be published."""

    kind = ErrorKind.INVALID
