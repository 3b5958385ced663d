"""Failure kinds of a reconciliation run."""

from __future__ import annotations


class SyncError(RuntimeError):
    """Base class for failures that abort a run and roll it back."""


class FetchError(SyncError):
    """Raised when the external entitlement listing cannot be read completely."""


class StoreError(SyncError):
    """Raised when a persisted-store operation fails."""


class DeadlineExceeded(SyncError):
    """Raised when a run exceeds its execution timeout."""

    def __init__(self, message: str, *, timeout_seconds: float) -> None:
        super().__init__(message)
        self.timeout_seconds = timeout_seconds
