"""Project-wide custom exception types."""
from __future__ import annotations

from typing import Optional


class EmptyInputError(ValueError):
    """Raised when a comment to analyze is blank or whitespace-only."""

    def __init__(self, message: str = "Text cannot be empty") -> None:  # noqa: D401 – simple constructor
        super().__init__(message)


class NoEligibleCommentsError(ValueError):
    """Raised when a fetched payload yields no usable comment text."""


class FetchError(RuntimeError):
    """Raised when comments cannot be retrieved from a remote source."""

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code
