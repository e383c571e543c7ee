"""Read-only dashboard views over the ledger state.

Presentation layers (terminal tables, charts, exports) consume these
values; nothing here mutates the state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..common.models import CompressorStatus, CompressorUnit, LedgerState, MaintenanceRecord

UNKNOWN_UNIT_LABEL = "Unknown unit"


def format_hours(minutes: int, digits: int = 1) -> float:
    return round(minutes / 60, digits)


@dataclass
class DashboardStats:
    """Fleet-level counters shown on the overview."""

    total: int
    running: int
    maintenance_due: int
    total_runtime_hours: int

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "running": self.running,
            "maintenance_due": self.maintenance_due,
            "total_runtime_hours": self.total_runtime_hours,
        }


@dataclass
class CycleChartRow:
    """Current-cycle runtime against the service threshold, in hours."""

    name: str
    runtime_hours: float
    threshold_hours: float
    is_due: bool

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "runtime_hours": self.runtime_hours,
            "threshold_hours": self.threshold_hours,
            "is_due": self.is_due,
        }


@dataclass
class MaintenanceLogEntry:
    """A maintenance record joined with its unit's display name."""

    record: MaintenanceRecord
    unit_name: str

    def to_dict(self) -> dict:
        return {
            "id": self.record.id,
            "unit": self.unit_name,
            "date": self.record.date.isoformat(),
            "type": self.record.type,
            "description": self.record.description,
            "technician": self.record.technician,
            "result": self.record.result.value,
        }


def summarize(state: LedgerState) -> DashboardStats:
    units = state.compressors
    total_minutes = sum(u.total_run_time_minutes for u in units)
    return DashboardStats(
        total=len(units),
        running=sum(1 for u in units if u.status == CompressorStatus.RUNNING),
        maintenance_due=sum(1 for u in units if u.next_maintenance_due),
        total_runtime_hours=round(total_minutes / 60),
    )


def cycle_chart(state: LedgerState) -> list[CycleChartRow]:
    """Rows sorted by current-cycle runtime, highest first."""
    rows = [
        CycleChartRow(
            name=u.name,
            runtime_hours=format_hours(u.current_cycle_run_time_minutes),
            threshold_hours=format_hours(u.maintenance_threshold_minutes),
            is_due=u.next_maintenance_due,
        )
        for u in state.compressors
    ]
    rows.sort(key=lambda r: r.runtime_hours, reverse=True)
    return rows


def due_alerts(state: LedgerState) -> list[CompressorUnit]:
    return [u for u in state.compressors if u.next_maintenance_due]


def unit_label(state: LedgerState, compressor_id: str) -> str:
    """Display name for a unit id; removed units get a fallback label."""
    for unit in state.compressors:
        if unit.id == compressor_id:
            return unit.name
    return UNKNOWN_UNIT_LABEL


def maintenance_log_view(
    state: LedgerState,
    compressor_id: Optional[str] = None,
) -> list[MaintenanceLogEntry]:
    """Maintenance history sorted by maintenance date, newest first.

    The ledger keeps records in insertion order; back-dated entries are
    placed by their date here.
    """
    records = state.maintenance_logs
    if compressor_id:
        records = [r for r in records if r.compressor_id == compressor_id]
    ordered = sorted(records, key=lambda r: r.date, reverse=True)
    return [MaintenanceLogEntry(record=r, unit_name=unit_label(state, r.compressor_id)) for r in ordered]
