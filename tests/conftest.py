"""Shared test fixtures for Compressor Guard."""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Ensure src is importable
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from compressor_guard.common.models import (
    CompressorStatus,
    CompressorUnit,
    LedgerState,
    MaintenanceRecord,
    MaintenanceResult,
)
from compressor_guard.ledger import Ledger
from compressor_guard.storage import SnapshotStore


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, minutes: float = 0, seconds: float = 0) -> datetime:
        self.now = self.now + timedelta(minutes=minutes, seconds=seconds)
        return self.now


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 1, 15, 8, 0, 0, tzinfo=timezone.utc))


def make_unit(unit_id: str, **overrides) -> CompressorUnit:
    data = {
        "id": unit_id,
        "name": f"CP-{unit_id.upper()}",
        "model": "Ariel JGK/4",
        "location": "Station A",
        "total_run_time_minutes": 1000,
        "current_cycle_run_time_minutes": 500,
        "maintenance_threshold_minutes": 30000,
        "status": CompressorStatus.STOPPED,
    }
    data.update(overrides)
    return CompressorUnit(**data)


@pytest.fixture
def unit_factory():
    """Return a builder for CompressorUnit with sensible defaults."""
    return make_unit


@pytest.fixture
def sample_state() -> LedgerState:
    """Two running units (one near its threshold) and one stopped unit."""
    return LedgerState(
        compressors=[
            make_unit(
                "c1",
                name="CP-Alpha",
                total_run_time_minutes=28500,
                current_cycle_run_time_minutes=29500,
                status=CompressorStatus.RUNNING,
            ),
            make_unit("c2", name="CP-Beta", status=CompressorStatus.STOPPED),
            make_unit(
                "c3",
                name="CP-Gamma",
                total_run_time_minutes=59000,
                current_cycle_run_time_minutes=30100,
                status=CompressorStatus.RUNNING,
                next_maintenance_due=True,
            ),
        ],
        maintenance_logs=[
            MaintenanceRecord(
                id="m1",
                compressor_id="c1",
                date="2025-10-01",
                type="Routine service",
                description="Replaced oil and filter elements",
                technician="Zhang San",
                result=MaintenanceResult.SUCCESS,
            ),
        ],
    )


@pytest.fixture
def ledger(sample_state, clock) -> Ledger:
    return Ledger(sample_state, clock=clock, operator="tester")


@pytest.fixture
def store(tmp_path) -> SnapshotStore:
    """Snapshot store backed by a temporary SQLite database."""
    return SnapshotStore(tmp_path / "test_guard.db", key="test_key")
