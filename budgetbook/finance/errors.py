"""Mini README: Exception hierarchy shared by the ledger and its storage.

Structure:
    * LedgerError - base class callers can catch for any ledger failure.
    * ValidationError - rejected input; nothing was appended or persisted.
    * PersistenceError - the storage medium could not be read or written.
    * MalformedSnapshotError - stored payload exists but cannot be decoded.
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for ledger failures."""


class ValidationError(LedgerError, ValueError):
    """Raised when a new transaction request fails validation."""


class PersistenceError(LedgerError):
    """Raised when the ledger blob cannot be read or written."""


class MalformedSnapshotError(PersistenceError):
    """Raised when a persisted ledger blob cannot be decoded."""
