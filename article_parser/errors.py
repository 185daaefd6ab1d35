"""Exceptions that abort an extraction request.

Only these are fatal.  Failures of fallback strategies and recovery passes
are caught where they happen and logged; they never surface here.
"""

from __future__ import annotations


class ExtractionError(Exception):
    """Base class for fatal extraction failures."""


class InvalidUrlError(ExtractionError, ValueError):
    """The requested URL is not an absolute http(s) URL."""


class FetchError(ExtractionError):
    """The page could not be fetched after every retry (or render timed out)."""

    def __init__(self, url: str, message: str, attempts: int = 1) -> None:
        super().__init__(f"{message} ({url}, {attempts} attempt(s))")
        self.url = url
        self.attempts = attempts


class PrimaryParseError(ExtractionError):
    """The mandatory primary article parser raised."""
