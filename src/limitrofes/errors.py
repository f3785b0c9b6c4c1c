from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    FETCH_FAILURE = "FetchFailure"
    MISSING_COLUMN = "MissingColumn"


class LoadError(RuntimeError):
    kind: ErrorKind

    def __init__(self, message: str, *, kind: ErrorKind):
        super().__init__(message)
        self.kind = kind


class FetchError(LoadError):
    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message, kind=ErrorKind.FETCH_FAILURE)
        self.status_code = status_code


class MissingColumnError(LoadError):
    def __init__(self, message: str, *, missing: list[str] | None = None):
        super().__init__(message, kind=ErrorKind.MISSING_COLUMN)
        self.missing = list(missing or [])
