"""Snapshot persistence for the ledger.

The whole ledger state is stored as one JSON blob,
``{"state": {...}, "timestamp": <epoch ms>}``, under a fixed key in the
``kv_store`` table. Loading applies the offline catch-up: running units
accrue the minutes that passed since the snapshot was written.
"""

from __future__ import annotations

import logging
import math
import sqlite3
from datetime import datetime
from pathlib import Path

from pydantic import ValidationError as ModelValidationError

from ..common.config import settings
from ..common.database import get_connection, init_db
from ..common.models import LedgerState, Snapshot
from ..ledger import Ledger
from ..ledger.ledger import Clock, utc_now
from .seed import load_seed

logger = logging.getLogger(__name__)

MS_PER_MINUTE = 60_000


class SnapshotError(Exception):
    """A stored snapshot could not be parsed."""


def to_epoch_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def catch_up_minutes(saved_ms: int, now_ms: int) -> int:
    """Whole minutes elapsed since ``saved_ms``; never negative."""
    return max(0, math.floor((now_ms - saved_ms) / MS_PER_MINUTE))


class SnapshotStore:
    """SQLite-backed key-value slot holding the serialized ledger.

    Usage:
        store = SnapshotStore()
        store.save(ledger.state)
        snapshot = store.load()
    """

    def __init__(self, db_path: str | Path | None = None, key: str | None = None) -> None:
        self.db_path = str(db_path) if db_path else settings.storage.db_path
        self.key = key or settings.storage.storage_key
        init_db(self.db_path)

    def save(self, state: LedgerState, now: datetime | None = None) -> Snapshot:
        """Write the state with the current timestamp, replacing the old blob."""
        moment = now or utc_now()
        snapshot = Snapshot(state=state, timestamp=to_epoch_ms(moment))
        self.write_raw(snapshot.to_json(), moment)
        return snapshot

    def load(self) -> Snapshot | None:
        """Read the stored snapshot.

        Returns:
            The snapshot, or None when nothing is stored under the key.

        Raises:
            SnapshotError: The stored value cannot be read or is not a valid
                snapshot.
        """
        try:
            raw = self.read_raw()
        except (sqlite3.Error, UnicodeDecodeError) as e:
            raise SnapshotError(f"Unreadable snapshot under '{self.key}': {e}") from e
        if raw is None:
            return None
        try:
            return Snapshot.from_json(raw)
        except ModelValidationError as e:
            raise SnapshotError(f"Malformed snapshot under '{self.key}': {e}") from e

    def read_raw(self) -> str | None:
        conn = get_connection(self.db_path)
        try:
            row = conn.execute(
                "SELECT value FROM kv_store WHERE key = ?", (self.key,)
            ).fetchone()
        finally:
            conn.close()
        return row["value"] if row else None

    def write_raw(self, value: str, now: datetime | None = None) -> None:
        conn = get_connection(self.db_path)
        try:
            conn.execute(
                """INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
                   ON CONFLICT(key) DO UPDATE SET
                       value = excluded.value,
                       updated_at = excluded.updated_at""",
                (self.key, value, (now or utc_now()).isoformat()),
            )
            conn.commit()
        finally:
            conn.close()

    def clear(self) -> None:
        conn = get_connection(self.db_path)
        try:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (self.key,))
            conn.commit()
        finally:
            conn.close()


def load_ledger(
    store: SnapshotStore,
    clock: Clock | None = None,
    seed_path: str | Path | None = None,
    operator: str = "",
) -> Ledger:
    """Restore the ledger at process start.

    A missing or unreadable snapshot falls back to the seed dataset. A
    restored snapshot gets one catch-up ``advance_time`` covering the time
    the process was not running.
    """
    clock = clock or utc_now
    try:
        snapshot = store.load()
    except SnapshotError:
        logger.error("Failed to load saved state, using seed data", exc_info=True)
        snapshot = None

    if snapshot is None:
        return Ledger(load_seed(seed_path), clock=clock, operator=operator)

    ledger = Ledger(snapshot.state, clock=clock, operator=operator)
    now = clock()
    elapsed = catch_up_minutes(snapshot.timestamp, to_epoch_ms(now))
    if elapsed > 0:
        advanced = ledger.advance_time(elapsed, now)
        logger.info(
            "Offline catch-up: +%d min on %d running units", elapsed, len(advanced),
        )
    return ledger


def attach_write_through(ledger: Ledger, store: SnapshotStore) -> None:
    """Save the ledger synchronously after every mutation."""
    ledger.subscribe(lambda changed: store.save(changed.state, changed.clock()))
