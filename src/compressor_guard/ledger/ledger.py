"""Runtime ledger.

Owns the compressor units, their run sessions and the maintenance log, and
funnels every mutation through a named operation so the maintenance-due
flag stays consistent with the cycle counter.

Usage:
    ledger = Ledger(state)
    ledger.toggle_status("c1")        # STOPPED -> RUNNING, opens a session
    ledger.advance_time(90)           # accrue 90 minutes on running units
    ledger.record_maintenance(record) # resets the cycle, stops the unit

Runtime accrual depends only on elapsed minutes, so one catch-up of N
minutes and N one-minute ticks leave identical counters.
"""

from __future__ import annotations

import logging
import math
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Optional

from pydantic import ValidationError as ModelValidationError

from ..common.models import (
    CompressorStatus,
    CompressorUnit,
    LedgerState,
    MaintenanceRecord,
    NewMaintenanceRecord,
    RunSession,
    UnitSpec,
)
from .errors import InvalidStateError, ValidationError

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
Listener = Callable[["Ledger"], None]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_id(prefix: str = "") -> str:
    return f"{prefix}{uuid.uuid4().hex[:12]}"


def session_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes between two instants, halves rounded up."""
    minutes = (end - start).total_seconds() / 60
    return max(0, math.floor(minutes + 0.5))


def hours_to_minutes(hours: float) -> int:
    """Convert a threshold in hours to whole minutes.

    Raises:
        ValidationError: ``hours`` is NaN or infinite.
    """
    if not math.isfinite(hours):
        raise ValidationError(f"Maintenance threshold must be a finite number, got {hours} h")
    return round(hours * 60)


class Ledger:
    """Explicit owner of the ledger state.

    Unknown ids are ignored by ``toggle_status``, ``edit_unit`` and
    ``remove_unit``: the call logs a warning and returns ``None``/``False``
    without touching state.
    """

    def __init__(
        self,
        state: LedgerState | None = None,
        clock: Clock | None = None,
        operator: str = "",
    ) -> None:
        self.state = state or LedgerState()
        self.clock = clock or utc_now
        self.operator = operator
        self._listeners: list[Listener] = []

    # --- Observers ---

    def subscribe(self, listener: Listener) -> None:
        """Call ``listener(ledger)`` after every mutation."""
        self._listeners.append(listener)

    def _changed(self) -> None:
        for listener in self._listeners:
            listener(self)

    # --- Queries ---

    @property
    def units(self) -> list[CompressorUnit]:
        return self.state.compressors

    def get_unit(self, compressor_id: str) -> Optional[CompressorUnit]:
        for unit in self.state.compressors:
            if unit.id == compressor_id:
                return unit
        return None

    def open_session(self, compressor_id: str) -> Optional[RunSession]:
        """Most recent session of the unit with no end time."""
        for session in reversed(self.state.run_logs):
            if session.compressor_id == compressor_id and session.is_open:
                return session
        return None

    def recent_run_sessions(self, compressor_id: str, limit: int = 5) -> list[RunSession]:
        sessions = [s for s in self.state.run_logs if s.compressor_id == compressor_id]
        sessions.sort(key=lambda s: s.start_time, reverse=True)
        return sessions[:limit]

    def recent_maintenance(self, compressor_id: str, limit: int = 3) -> list[MaintenanceRecord]:
        # maintenance_logs is already newest-first by insertion
        records = [r for r in self.state.maintenance_logs if r.compressor_id == compressor_id]
        return records[:limit]

    # --- Runtime accrual ---

    def advance_time(self, elapsed_minutes: int, now: datetime | None = None) -> list[str]:
        """Accrue ``elapsed_minutes`` on every running unit.

        Serves both the periodic tick and the one-time offline catch-up.

        Args:
            elapsed_minutes: Non-negative whole minutes.
            now: Instant the accrual is attributed to (logging only).

        Returns:
            Ids of the units that accrued runtime.
        """
        if isinstance(elapsed_minutes, bool) or not isinstance(elapsed_minutes, int):
            raise ValidationError(f"elapsed_minutes must be an integer, got {elapsed_minutes!r}")
        if elapsed_minutes < 0:
            raise ValidationError(f"elapsed_minutes must be >= 0, got {elapsed_minutes}")

        advanced: list[str] = []
        for unit in self.state.compressors:
            if not unit.is_running:
                continue
            unit.total_run_time_minutes += elapsed_minutes
            unit.current_cycle_run_time_minutes += elapsed_minutes
            unit.refresh_due()
            advanced.append(unit.id)

        if advanced and elapsed_minutes:
            logger.debug(
                "Advanced %d running units by %d min at %s",
                len(advanced), elapsed_minutes, (now or self.clock()).isoformat(),
            )
            self._changed()
        return advanced

    # --- Run/stop ---

    def toggle_status(self, compressor_id: str) -> Optional[CompressorStatus]:
        """Flip a unit between STOPPED and RUNNING.

        Starting opens a run session. Stopping closes the unit's open
        session if there is one; the unit stops either way.

        Returns:
            The new status, or None if the unit is unknown.

        Raises:
            InvalidStateError: The unit is in MAINTENANCE or ERROR.
        """
        unit = self.get_unit(compressor_id)
        if unit is None:
            logger.warning("toggle_status: unknown unit %s ignored", compressor_id)
            return None

        if unit.status not in (CompressorStatus.STOPPED, CompressorStatus.RUNNING):
            raise InvalidStateError(compressor_id, unit.status.value, "toggle")

        now = self.clock()
        if unit.status == CompressorStatus.STOPPED:
            unit.status = CompressorStatus.RUNNING
            self.state.run_logs.append(RunSession(
                id=new_id("r"),
                compressor_id=compressor_id,
                start_time=now,
                duration_minutes=0,
                is_manual=False,
                operator=self.operator,
            ))
            logger.info("Unit %s started", unit.name)
        else:
            unit.status = CompressorStatus.STOPPED
            session = self._close_open_session(compressor_id, now)
            if session is None:
                logger.info("Unit %s stopped (no open run session)", unit.name)
            else:
                logger.info("Unit %s stopped after %d min", unit.name, session.duration_minutes)

        self._changed()
        return unit.status

    def start(self, compressor_id: str) -> Optional[CompressorStatus]:
        """Toggle only if the unit is stopped."""
        unit = self.get_unit(compressor_id)
        if unit is not None and unit.status == CompressorStatus.RUNNING:
            return unit.status
        return self.toggle_status(compressor_id)

    def stop(self, compressor_id: str) -> Optional[CompressorStatus]:
        """Toggle only if the unit is running."""
        unit = self.get_unit(compressor_id)
        if unit is not None and unit.status == CompressorStatus.STOPPED:
            return unit.status
        return self.toggle_status(compressor_id)

    def _close_open_session(self, compressor_id: str, now: datetime) -> Optional[RunSession]:
        session = self.open_session(compressor_id)
        if session is None:
            return None
        session.end_time = now
        session.duration_minutes = session_minutes(session.start_time, now)
        return session

    # --- Maintenance ---

    def record_maintenance(self, record: NewMaintenanceRecord) -> MaintenanceRecord:
        """Log a maintenance event and start a new cycle for its unit.

        The unit's cycle counter and due flag are cleared and it is forced
        to STOPPED. A run session still open at that point is closed now,
        so no session outlives the run it describes.
        """
        logged = MaintenanceRecord(id=new_id("m"), **record.model_dump())
        self.state.maintenance_logs.insert(0, logged)

        unit = self.get_unit(record.compressor_id)
        if unit is None:
            logger.warning(
                "Maintenance %s logged for unknown unit %s", logged.id, record.compressor_id,
            )
        else:
            if unit.is_running:
                self._close_open_session(unit.id, self.clock())
            unit.last_maintenance_date = record.date
            unit.current_cycle_run_time_minutes = 0
            unit.next_maintenance_due = False
            unit.status = CompressorStatus.STOPPED
            logger.info(
                "Maintenance recorded for %s on %s (%s)",
                unit.name, record.date.isoformat(), record.result.value,
            )

        self._changed()
        return logged

    # --- Equipment registry ---

    def add_unit(self, spec: UnitSpec) -> CompressorUnit:
        """Register a new stopped unit with zeroed counters.

        Raises:
            ValidationError: The maintenance threshold is not a positive
                finite number.
        """
        threshold = hours_to_minutes(spec.threshold_hours)
        if threshold <= 0:
            raise ValidationError(
                f"Maintenance threshold must be positive, got {spec.threshold_hours} h"
            )

        unit = CompressorUnit(
            id=new_id("c"),
            name=spec.name,
            model=spec.model,
            location=spec.location,
            total_run_time_minutes=0,
            current_cycle_run_time_minutes=0,
            maintenance_threshold_minutes=threshold,
            status=CompressorStatus.STOPPED,
            last_maintenance_date=None,
            next_maintenance_due=False,
            install_date=spec.install_date,
        )
        self.state.compressors.append(unit)
        logger.info("Added unit %s (%s)", unit.name, unit.id)
        self._changed()
        return unit

    def edit_unit(self, compressor_id: str, **fields: Any) -> Optional[CompressorUnit]:
        """Merge ``fields`` into a unit.

        The due flag is left as it was even when the threshold or cycle
        counter changes; call ``recompute_due`` afterwards if needed.

        Raises:
            ValidationError: ``id`` was given, or a field value is invalid.
        """
        if "id" in fields:
            raise ValidationError("Unit id cannot be changed")

        index = self._index_of(compressor_id)
        if index is None:
            logger.warning("edit_unit: unknown unit %s ignored", compressor_id)
            return None

        current = self.state.compressors[index]
        try:
            updated = CompressorUnit.model_validate({**current.model_dump(), **fields})
        except ModelValidationError as e:
            raise ValidationError(f"Invalid fields for unit {compressor_id}: {e}") from e

        self.state.compressors[index] = updated
        logger.info("Edited unit %s: %s", compressor_id, ", ".join(sorted(fields)))
        self._changed()
        return updated

    def recompute_due(self, compressor_id: str | None = None) -> list[str]:
        """Recompute the due flag for one unit, or all units.

        Returns:
            Ids of the units whose flag changed.
        """
        targets: Iterable[CompressorUnit]
        if compressor_id is None:
            targets = self.state.compressors
        else:
            unit = self.get_unit(compressor_id)
            targets = [unit] if unit else []

        changed = []
        for unit in targets:
            before = unit.next_maintenance_due
            if unit.refresh_due() != before:
                changed.append(unit.id)
        if changed:
            self._changed()
        return changed

    def remove_unit(self, compressor_id: str) -> bool:
        """Delete a unit. Its run sessions and maintenance records remain."""
        index = self._index_of(compressor_id)
        if index is None:
            logger.warning("remove_unit: unknown unit %s ignored", compressor_id)
            return False
        removed = self.state.compressors.pop(index)
        logger.info("Removed unit %s (%s)", removed.name, removed.id)
        self._changed()
        return True

    def _index_of(self, compressor_id: str) -> Optional[int]:
        for i, unit in enumerate(self.state.compressors):
            if unit.id == compressor_id:
                return i
        return None
