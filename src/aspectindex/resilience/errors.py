"""Error types and classification for structured error handling.

Decoding failures are scoped to one target record. Classification
lets batch callers tell malformed input (permanent, never retried)
from I/O trouble reading an aspect file or a jar.
"""

from __future__ import annotations

import json
from enum import Enum

from pydantic import ValidationError

from aspectindex.constants import ERROR_TRUNCATION_CHARS


class AspectDecodeError(ValueError):
    """A target record (or one of its sub-records) has the wrong shape."""

    def __init__(self, label: str | None, reason: str) -> None:
        self.label = label
        self.reason = reason[:ERROR_TRUNCATION_CHARS]
        where = label if label is not None else "<unknown target>"
        super().__init__(f"{where}: {self.reason}")


class ArchiveScanError(AspectDecodeError):
    """A jar could not be opened or listed."""


class ErrorClass(Enum):
    MALFORMED = "malformed"  # wrong shape, invalid JSON; never retry
    IO = "io"  # unreadable file; retryable
    UNKNOWN = "unknown"  # unclassified; do NOT retry


def classify_error(error: Exception) -> ErrorClass:
    """Classify an error to determine handling strategy."""
    if isinstance(error, ArchiveScanError):
        cause = error.__cause__
        if isinstance(cause, OSError):
            return ErrorClass.IO
        return ErrorClass.MALFORMED
    if isinstance(
        error,
        (AspectDecodeError, ValidationError, json.JSONDecodeError),
    ):
        return ErrorClass.MALFORMED
    if isinstance(error, UnicodeDecodeError):
        return ErrorClass.MALFORMED
    if isinstance(error, OSError):
        return ErrorClass.IO
    return ErrorClass.UNKNOWN


def is_retryable(error: Exception) -> bool:
    """Return True if the error category supports retry."""
    return classify_error(error) is ErrorClass.IO
