"""CLI entry point for Compressor Guard.

Usage:
    compressor-guard status
    compressor-guard toggle c1
    compressor-guard maintain c3 --type "Major service" --technician "Li Si"
    compressor-guard add --name CP-Delta --threshold-hours 500
    compressor-guard log --unit c1 --json
    compressor-guard advise c1
    compressor-guard run
"""

from __future__ import annotations

import argparse
import json
import logging
import signal
import sys
from datetime import date

from .advisor import HealthAdvisor
from .common.config import Settings
from .common.logging import setup_logging
from .common.models import MaintenanceResult, NewMaintenanceRecord, UnitSpec
from .dashboard import cycle_chart, due_alerts, format_hours, maintenance_log_view, summarize
from .ledger import Ledger, LedgerError, Ticker, hours_to_minutes
from .storage import SnapshotStore, attach_write_through, load_ledger

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="compressor-guard",
        description="Compressor runtime and maintenance tracker",
    )
    parser.add_argument("--settings", type=str, help="Path to settings YAML")
    parser.add_argument("--db", type=str, help="SQLite database path (overrides settings)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    status = sub.add_parser("status", help="Fleet overview")
    status.add_argument("--json", action="store_true", help="Print JSON")

    for name, help_text in (
        ("toggle", "Start a stopped unit or stop a running one"),
        ("start", "Start a unit"),
        ("stop", "Stop a unit"),
        ("remove", "Delete a unit (its logs are kept)"),
        ("advise", "AI health analysis for a unit"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("unit_id", type=str)

    maintain = sub.add_parser("maintain", help="Record a maintenance event")
    maintain.add_argument("unit_id", type=str)
    maintain.add_argument("--date", type=date.fromisoformat, default=None,
                          help="Maintenance date YYYY-MM-DD (default: today)")
    maintain.add_argument("--type", dest="maintenance_type", type=str, default="Routine service")
    maintain.add_argument("--description", type=str, default="")
    maintain.add_argument("--technician", type=str, default="")
    maintain.add_argument("--result", type=str, default=MaintenanceResult.SUCCESS.value,
                          choices=[r.value for r in MaintenanceResult])

    add = sub.add_parser("add", help="Register a new unit")
    add.add_argument("--name", type=str, required=True)
    add.add_argument("--model", type=str, default="")
    add.add_argument("--location", type=str, default="")
    add.add_argument("--threshold-hours", type=float, default=500)
    add.add_argument("--install-date", type=date.fromisoformat, default=None)

    edit = sub.add_parser("edit", help="Edit a unit's fields")
    edit.add_argument("unit_id", type=str)
    edit.add_argument("--name", type=str)
    edit.add_argument("--model", type=str)
    edit.add_argument("--location", type=str)
    edit.add_argument("--threshold-hours", type=float)
    edit.add_argument("--install-date", type=date.fromisoformat)
    edit.add_argument("--recompute", action="store_true",
                      help="Recompute the maintenance-due flag after editing")

    log = sub.add_parser("log", help="Maintenance history, newest first")
    log.add_argument("--unit", type=str, help="Only this unit")
    log.add_argument("--json", action="store_true", help="Print JSON")

    run = sub.add_parser("run", help="Simulate runtime until interrupted")
    run.add_argument("--period", type=float, help="Seconds per tick (default from settings)")
    run.add_argument("--max-ticks", type=int, help="Stop after this many ticks")

    return parser


def print_status(ledger: Ledger, as_json: bool) -> None:
    stats = summarize(ledger.state)
    if as_json:
        print(json.dumps({
            "stats": stats.to_dict(),
            "chart": [row.to_dict() for row in cycle_chart(ledger.state)],
            "units": [u.model_dump(mode="json", by_alias=True) for u in ledger.units],
        }, ensure_ascii=False, indent=2))
        return

    print(f"Running {stats.running}/{stats.total} | due {stats.maintenance_due} "
          f"| total runtime {stats.total_runtime_hours} h")
    for unit in ledger.units:
        flag = " DUE" if unit.next_maintenance_due else ""
        print(f"  {unit.id:<16} {unit.name:<12} {unit.status.value:<11} "
              f"{format_hours(unit.current_cycle_run_time_minutes):>8} / "
              f"{format_hours(unit.maintenance_threshold_minutes, 0):.0f} h{flag}")
    for unit in due_alerts(ledger.state):
        logger.warning("%s needs maintenance", unit.name)


def print_log(ledger: Ledger, unit_id: str | None, as_json: bool) -> None:
    entries = maintenance_log_view(ledger.state, unit_id)
    if as_json:
        print(json.dumps([e.to_dict() for e in entries], ensure_ascii=False, indent=2))
        return
    if not entries:
        print("No maintenance records.")
    for e in entries:
        r = e.record
        print(f"  {r.date.isoformat()}  {e.unit_name:<12} {r.type:<16} "
              f"{r.technician:<10} {r.result.value}")


def run_ticker(ledger: Ledger, app_settings: Settings, period: float | None,
               max_ticks: int | None) -> None:
    ticker = Ticker(
        ledger,
        period_seconds=period or app_settings.ticker.period_seconds,
        minutes_per_tick=app_settings.ticker.minutes_per_tick,
    )
    signal.signal(signal.SIGTERM, lambda *_: ticker.stop())
    try:
        ticker.run(max_ticks=max_ticks)
    except KeyboardInterrupt:
        ticker.stop()


def execute(args: argparse.Namespace, ledger: Ledger, app_settings: Settings) -> None:
    command = args.command

    if command == "status":
        print_status(ledger, args.json)
    elif command == "toggle":
        _report(args.unit_id, ledger.toggle_status(args.unit_id))
    elif command == "start":
        _report(args.unit_id, ledger.start(args.unit_id))
    elif command == "stop":
        _report(args.unit_id, ledger.stop(args.unit_id))
    elif command == "remove":
        if not ledger.remove_unit(args.unit_id):
            print(f"Unknown unit: {args.unit_id}")
    elif command == "maintain":
        record = ledger.record_maintenance(NewMaintenanceRecord(
            compressor_id=args.unit_id,
            date=args.date or date.today(),
            type=args.maintenance_type,
            description=args.description,
            technician=args.technician,
            result=MaintenanceResult(args.result),
        ))
        print(f"Recorded maintenance {record.id}")
    elif command == "add":
        unit = ledger.add_unit(UnitSpec(
            name=args.name,
            model=args.model,
            location=args.location,
            threshold_hours=args.threshold_hours,
            install_date=args.install_date,
        ))
        print(f"Added {unit.name} as {unit.id}")
    elif command == "edit":
        fields = {
            key: value for key, value in (
                ("name", args.name),
                ("model", args.model),
                ("location", args.location),
                ("install_date", args.install_date),
            ) if value is not None
        }
        if args.threshold_hours is not None:
            fields["maintenance_threshold_minutes"] = hours_to_minutes(args.threshold_hours)
        if ledger.edit_unit(args.unit_id, **fields) is None:
            print(f"Unknown unit: {args.unit_id}")
        elif args.recompute:
            ledger.recompute_due(args.unit_id)
    elif command == "log":
        print_log(ledger, args.unit, args.json)
    elif command == "advise":
        print(HealthAdvisor(app_settings=app_settings).analyze_unit(ledger, args.unit_id))
    elif command == "run":
        run_ticker(ledger, app_settings, args.period, args.max_ticks)


def _report(unit_id: str, status) -> None:
    if status is None:
        print(f"Unknown unit: {unit_id}")
    else:
        print(f"{unit_id}: {status.value}")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    app_settings = Settings.load(args.settings)
    if args.db:
        app_settings.storage.db_path = args.db

    store = SnapshotStore(app_settings.storage.db_path, app_settings.storage.storage_key)
    ledger = load_ledger(
        store,
        seed_path=app_settings.seed_path,
        operator=app_settings.operator_name,
    )
    # Persist the catch-up (or seed) before applying the command
    store.save(ledger.state, ledger.clock())
    attach_write_through(ledger, store)

    try:
        execute(args, ledger, app_settings)
    except LedgerError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
