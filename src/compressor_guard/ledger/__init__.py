"""Runtime Ledger - run/stop state, runtime accrual, maintenance cycles."""

from .errors import InvalidStateError, LedgerError, ValidationError
from .ledger import Ledger, hours_to_minutes, new_id, session_minutes, utc_now
from .ticker import Ticker

__all__ = [
    "InvalidStateError",
    "Ledger",
    "LedgerError",
    "Ticker",
    "ValidationError",
    "hours_to_minutes",
    "new_id",
    "session_minutes",
    "utc_now",
]
