"""
Record-store exceptions.
"""

from __future__ import annotations


class RecordStoreError(Exception):
    """Base exception for record store failures."""

    def __init__(self, message: str, *, table: str | None = None) -> None:
        super().__init__(message)
        self.table = table


class DuplicateKeyError(RecordStoreError):
    """Raised when a create collides with a unique natural key."""


class StoreError(RecordStoreError):
    """Raised for any other failure reported by the backing store."""


class UnknownTableError(StoreError):
    """Raised when a call names a table the store does not manage."""
