"""Tests for shared common modules — models, database, config, logging."""

import logging
from datetime import date, datetime, timezone
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError as PydanticValidationError

from compressor_guard.common.config import Settings, get_anthropic_api_key, get_openai_api_key
from compressor_guard.common.database import get_connection, init_db
from compressor_guard.common.logging import setup_logging
from compressor_guard.common.models import (
    CompressorStatus,
    CompressorUnit,
    LLMProvider,
    MaintenanceRecord,
    MaintenanceResult,
    RunSession,
    UnitSpec,
    UserRole,
)


class TestCompressorUnit:
    def test_wire_aliases(self, unit_factory):
        unit = unit_factory("c1", current_cycle_run_time_minutes=10)
        data = unit.model_dump(by_alias=True)
        assert data["currentCycleRunTimeMinutes"] == 10
        assert data["maintenanceThresholdMinutes"] == 30000
        assert "current_cycle_run_time_minutes" not in data

    def test_accepts_wire_names(self):
        unit = CompressorUnit.model_validate({
            "id": "c5", "name": "CP-Epsilon",
            "totalRunTimeMinutes": 10, "currentCycleRunTimeMinutes": 5,
            "maintenanceThresholdMinutes": 600, "status": "RUNNING",
            "lastMaintenanceDate": "2025-12-01",
        })
        assert unit.status == CompressorStatus.RUNNING
        assert unit.last_maintenance_date == date(2025, 12, 1)

    @pytest.mark.parametrize("marker", ["-", "", " - "])
    def test_unset_date_markers(self, unit_factory, marker):
        unit = unit_factory("c1", last_maintenance_date=marker)
        assert unit.last_maintenance_date is None

    def test_rejects_bad_values(self, unit_factory):
        with pytest.raises(Exception):
            unit_factory("c1", total_run_time_minutes=-1)
        with pytest.raises(Exception):
            unit_factory("c1", maintenance_threshold_minutes=0)
        with pytest.raises(Exception):
            unit_factory("c1", status="IDLE")

    def test_refresh_due(self, unit_factory):
        unit = unit_factory("c1", current_cycle_run_time_minutes=30000)
        assert unit.next_maintenance_due is False
        assert unit.refresh_due() is True
        assert unit.next_maintenance_due is True


class TestOtherModels:
    def test_unit_spec_fields(self):
        spec = UnitSpec(name="x", threshold_hours="0.5", install_date="2025-05-01")
        assert spec.threshold_hours == 0.5
        assert spec.install_date == date(2025, 5, 1)

    def test_run_session_open(self):
        session = RunSession(
            id="r1", compressor_id="c1",
            start_time=datetime(2026, 1, 1, tzinfo=timezone.utc),
        )
        assert session.is_open
        assert session.duration_minutes == 0

    def test_maintenance_result_enum(self):
        record = MaintenanceRecord(
            id="m1", compressor_id="c1", date="2026-01-01",
            type="Routine service", result="ISSUE",
        )
        assert record.result == MaintenanceResult.ISSUE
        with pytest.raises(Exception):
            MaintenanceRecord(id="m2", compressor_id="c1", date="2026-01-01",
                              type="x", result="DONE")

    def test_user_role_values(self):
        assert {r.value for r in UserRole} == {"OPERATOR", "ADMIN"}


class TestSettings:
    def test_defaults(self, tmp_path):
        s = Settings.load(tmp_path / "missing.yaml")
        assert s.storage.storage_key == "compressor_guard_data_v1"
        assert s.ticker.period_seconds == 60
        assert s.ticker.minutes_per_tick == 1

    def test_yaml_overrides(self, tmp_path, monkeypatch):
        monkeypatch.delenv("COMPRESSOR_GUARD_DB_PATH", raising=False)
        path = tmp_path / "settings.yaml"
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump({
                "storage": {"db_path": "/tmp/x.db"},
                "ticker": {"period_seconds": 5},
                "advisor": {"provider": "anthropic"},
            }, f)
        s = Settings.load(path)
        assert s.storage.db_path == "/tmp/x.db"
        assert s.ticker.period_seconds == 5
        assert s.advisor.provider == LLMProvider.ANTHROPIC

    def test_unknown_provider_rejected(self, tmp_path):
        path = tmp_path / "settings.yaml"
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump({"advisor": {"provider": "gemini"}}, f)
        with pytest.raises(PydanticValidationError):
            Settings.load(path)

    def test_env_db_path(self, tmp_path, monkeypatch):
        monkeypatch.setenv("COMPRESSOR_GUARD_DB_PATH", str(tmp_path / "env.db"))
        s = Settings.load(tmp_path / "missing.yaml")
        assert s.storage.db_path == str(tmp_path / "env.db")

    def test_api_keys(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant")
        with pytest.raises(ValueError):
            get_openai_api_key()
        assert get_anthropic_api_key() == "sk-ant"


class TestDatabase:
    def test_init_db_creates_tables(self, tmp_path: Path):
        db_path = str(tmp_path / "test.db")
        init_db(db_path)
        conn = get_connection(db_path)
        try:
            cursor = conn.execute(
                "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name"
            )
            tables = [row["name"] for row in cursor.fetchall()]
            assert "kv_store" in tables
        finally:
            conn.close()

    def test_creates_parent_directory(self, tmp_path: Path):
        db_path = tmp_path / "nested" / "dir" / "guard.db"
        init_db(str(db_path))
        assert db_path.exists()


class TestLogging:
    def test_setup_logging_idempotent(self):
        logger = setup_logging(module_name="compressor_guard.test_logging")
        again = setup_logging(level=logging.DEBUG, module_name="compressor_guard.test_logging")
        assert logger is again
        assert len(again.handlers) == 1
        assert again.level == logging.DEBUG
