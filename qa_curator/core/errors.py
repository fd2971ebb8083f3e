"""
Curation error taxonomy.

Every failure in the ingestion pipeline is recoverable at the session level:
the caller surfaces the message and the user retries, switches backend, or
edits the input. None of these are process-fatal.
"""

from __future__ import annotations


class CurationError(Exception):
    """Base class for all curation failures."""


class InputValidationError(CurationError):
    """Raised before any request is issued (short source, no model selected, ...)."""


class TransportError(CurationError):
    """Raised on a non-retryable 4xx response or after retries are exhausted."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        retryable: bool = False,
        attempts: int = 0,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.retryable = retryable
        self.attempts = attempts


class ExtractionError(CurationError):
    """Raised when the backend response holds no usable model text."""

    def __init__(self, message: str = "The model produced no usable content."):
        super().__init__(message)


class RecoveryError(CurationError):
    """Raised when every structured-recovery stage fails."""

    def __init__(self, reason: str):
        super().__init__(
            f"Invalid structured output: {reason}. The model did not follow the output instructions."
        )
        self.reason = reason
