"""Exceptions raised by log-history."""

from typing import Optional


class LogHistoryError(Exception):
    """Base class for log-history errors."""


class InputShapeError(LogHistoryError, ValueError):
    """Entity payload is structurally unusable (e.g. the entity list itself is missing)."""


class FetchFailure(LogHistoryError):
    """A data source could not be fetched or its response could not be parsed."""

    def __init__(self, url: str, message: str, cause: Optional[BaseException] = None):
        super().__init__(f"{url}: {message}")
        self.url = url
        self.cause = cause
