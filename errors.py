"""Error kinds raised by the editing core."""

from __future__ import annotations


class EditingError(Exception):
    """Base class for every error raised by this library."""


class EditValidationError(EditingError, ValueError):
    """Raised when a caller hands in an edit that can never succeed."""


class EngineStateError(EditingError, RuntimeError):
    """Raised when the media engine is not loaded or already busy."""


class ProcessingError(EditingError, RuntimeError):
    """Raised when the media toolchain fails to load or exits non-zero.

    These are fatal for the current operation and are never retried here;
    the calling layer decides whether to offer a manual retry.
    """

    def __init__(self, operation: str, cause: str):
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation} failed: {cause}")
