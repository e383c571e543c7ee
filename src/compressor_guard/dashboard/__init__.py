"""Dashboard views - fleet statistics, cycle chart rows, alerts, maintenance log."""

from .views import (
    UNKNOWN_UNIT_LABEL,
    CycleChartRow,
    DashboardStats,
    MaintenanceLogEntry,
    cycle_chart,
    due_alerts,
    format_hours,
    maintenance_log_view,
    summarize,
    unit_label,
)

__all__ = [
    "UNKNOWN_UNIT_LABEL",
    "CycleChartRow",
    "DashboardStats",
    "MaintenanceLogEntry",
    "cycle_chart",
    "due_alerts",
    "format_hours",
    "maintenance_log_view",
    "summarize",
    "unit_label",
]
