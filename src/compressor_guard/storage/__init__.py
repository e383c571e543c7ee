"""Persistence adapter - snapshot store, offline catch-up, seed data."""

from .seed import load_seed
from .snapshot_store import (
    SnapshotError,
    SnapshotStore,
    attach_write_through,
    catch_up_minutes,
    load_ledger,
    to_epoch_ms,
)

__all__ = [
    "SnapshotError",
    "SnapshotStore",
    "attach_write_through",
    "catch_up_minutes",
    "load_ledger",
    "load_seed",
    "to_epoch_ms",
]
