"""Prompts for the compressor health advisory.

All figures in the prompt come from the ledger; the model only comments
on them.
"""

from __future__ import annotations

from ..common.models import CompressorUnit, MaintenanceRecord, RunSession

SYSTEM_PROMPT = """\
You are a senior maintenance engineer for natural gas compressor stations.
Base every statement on the figures provided. Do not invent readings,
dates or part numbers. Keep the report short and practical.
"""


def _hours(minutes: int) -> str:
    return f"{minutes / 60:.1f}"


def _format_runs(runs: list[RunSession]) -> str:
    if not runs:
        return "- none recorded"
    lines = []
    for run in runs:
        state = "open" if run.is_open else f"{run.duration_minutes} min"
        lines.append(f"- {run.start_time.date().isoformat()}: {state}")
    return "\n".join(lines)


def _format_maintenance(records: list[MaintenanceRecord]) -> str:
    if not records:
        return "- none recorded"
    return "\n".join(
        f"- {r.date.isoformat()}: {r.type} - {r.description} ({r.result.value})"
        for r in records
    )


def build_analysis_prompt(
    unit: CompressorUnit,
    recent_runs: list[RunSession],
    maintenance_history: list[MaintenanceRecord],
) -> str:
    """Build the user prompt for one unit's health analysis.

    Args:
        unit: The compressor to analyze.
        recent_runs: Most recent run sessions, newest first (already limited).
        maintenance_history: Most recent maintenance records (already limited).

    Returns:
        Formatted user prompt string.
    """
    return f"""\
Analyze the following compressor and give maintenance advice.

## Unit
- Name: {unit.name}
- Model: {unit.model}
- Total runtime: {_hours(unit.total_run_time_minutes)} h
- Runtime since last service: {_hours(unit.current_cycle_run_time_minutes)} h
- Service threshold: {_hours(unit.maintenance_threshold_minutes)} h
- Status: {unit.status.value}

## Recent runs ({len(recent_runs)})
{_format_runs(recent_runs)}

## Recent maintenance ({len(maintenance_history)})
{_format_maintenance(maintenance_history)}

## Report
1. Health grade (excellent / good / needs attention / critical)
2. Run pattern (frequent start-stop or sustained heavy load?)
3. Next maintenance step
4. Potential risks
"""
