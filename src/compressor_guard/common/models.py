"""Shared Pydantic data models for Compressor Guard.

These models define the ledger state and its persisted snapshot. Field
names are snake_case in Python and camelCase on the wire, which keeps the
stored blob compatible with the dashboard's original storage format.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

_WIRE_CONFIG = {"alias_generator": to_camel, "populate_by_name": True}

# Stored by older snapshots for "never maintained"
UNSET_DATE_MARKERS = ("", "-")


# === Enums ===

class CompressorStatus(str, Enum):
    """Operating status of a compressor unit."""
    STOPPED = "STOPPED"
    RUNNING = "RUNNING"
    MAINTENANCE = "MAINTENANCE"
    ERROR = "ERROR"


class MaintenanceResult(str, Enum):
    """Outcome of a maintenance event."""
    SUCCESS = "SUCCESS"
    PENDING = "PENDING"
    ISSUE = "ISSUE"


class UserRole(str, Enum):
    """Display role of the current user. Not enforced."""
    OPERATOR = "OPERATOR"
    ADMIN = "ADMIN"


class LLMProvider(str, Enum):
    """Supported LLM providers."""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"


# === Equipment ===

class CompressorUnit(BaseModel):
    """A tracked compressor and its runtime counters."""
    id: str
    name: str
    model: str = ""
    location: str = ""
    total_run_time_minutes: int = Field(default=0, ge=0)
    current_cycle_run_time_minutes: int = Field(default=0, ge=0)
    maintenance_threshold_minutes: int = Field(gt=0)
    status: CompressorStatus = CompressorStatus.STOPPED
    last_maintenance_date: Optional[date] = None
    next_maintenance_due: bool = False
    install_date: Optional[date] = None

    model_config = _WIRE_CONFIG

    @field_validator("last_maintenance_date", "install_date", mode="before")
    @classmethod
    def _unset_marker_to_none(cls, value):
        if isinstance(value, str) and value.strip() in UNSET_DATE_MARKERS:
            return None
        return value

    @property
    def is_running(self) -> bool:
        return self.status == CompressorStatus.RUNNING

    def refresh_due(self) -> bool:
        """Recompute ``next_maintenance_due`` from the cycle counter."""
        self.next_maintenance_due = (
            self.current_cycle_run_time_minutes >= self.maintenance_threshold_minutes
        )
        return self.next_maintenance_due


class UnitSpec(BaseModel):
    """Input for registering a new unit.

    The threshold is entered in hours, as operators think of service
    intervals (e.g. 500 h); the ledger stores minutes.
    """
    name: str
    model: str = ""
    location: str = ""
    threshold_hours: float
    install_date: Optional[date] = None


# === Logs ===

class RunSession(BaseModel):
    """One continuous run of a unit. Open while ``end_time`` is None."""
    id: str
    compressor_id: str
    start_time: datetime
    end_time: Optional[datetime] = None
    duration_minutes: int = Field(default=0, ge=0)
    is_manual: bool = False
    operator: str = ""

    model_config = _WIRE_CONFIG

    @property
    def is_open(self) -> bool:
        return self.end_time is None


class NewMaintenanceRecord(BaseModel):
    """A maintenance event as submitted, before the ledger assigns an id."""
    compressor_id: str
    date: date
    type: str
    description: str = ""
    technician: str = ""
    result: MaintenanceResult = MaintenanceResult.SUCCESS

    model_config = _WIRE_CONFIG


class MaintenanceRecord(NewMaintenanceRecord):
    """A logged maintenance event."""
    id: str


# === Ledger state ===

class LedgerState(BaseModel):
    """Everything the ledger owns. Serialized as one snapshot."""
    compressors: list[CompressorUnit] = Field(default_factory=list)
    maintenance_logs: list[MaintenanceRecord] = Field(default_factory=list)
    run_logs: list[RunSession] = Field(default_factory=list)
    current_user_role: UserRole = UserRole.ADMIN

    model_config = _WIRE_CONFIG

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, text: str | bytes) -> LedgerState:
        return cls.model_validate_json(text)


class Snapshot(BaseModel):
    """Persisted blob: ledger state plus save time in epoch milliseconds."""
    state: LedgerState
    timestamp: int

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, text: str | bytes) -> Snapshot:
        return cls.model_validate_json(text)
