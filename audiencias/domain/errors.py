"""Errors raised by the scheduling engine and the hearing stores.

Every error carries a ``message`` that is safe to hand back to API callers;
``audiencias.http_errors`` maps each class to an HTTP status.
"""

from __future__ import annotations


class SchedulingError(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationError(SchedulingError):
    """Malformed or contradictory query (bad dates, reversed range, ...)."""


class NotFoundError(SchedulingError):
    """Unknown venue or hearing."""


class ConflictError(SchedulingError):
    """A write would double-book a venue."""


class Aborted(SchedulingError):
    """The underlying data fetch was cancelled by the caller."""


class StorageError(SchedulingError):
    """Reading bookings from the store failed."""
