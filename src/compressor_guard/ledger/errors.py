"""Exceptions raised by ledger operations."""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for ledger failures surfaced to callers."""


class ValidationError(LedgerError, ValueError):
    """Input rejected before any state was changed."""


class InvalidStateError(LedgerError):
    """Operation not allowed in the unit's current status."""

    def __init__(self, compressor_id: str, status: str, operation: str) -> None:
        self.compressor_id = compressor_id
        self.status = status
        self.operation = operation
        super().__init__(
            f"Cannot {operation} unit {compressor_id} while it is {status}"
        )
