"""Command-line interface for the staff scheduler."""

from __future__ import annotations

import argparse
import json

from staff_scheduler.config import SchedulerConfig, load_config
from staff_scheduler.domain.db import get_session, init_database, reset_database
from staff_scheduler.engine.generator import generate_schedule
from staff_scheduler.io.export_csv import export_roster_csv
from staff_scheduler.io.import_csv import import_coverage_rules_csv, import_staff_csv, import_time_off_csv
from staff_scheduler.logging_config import setup_logging
from staff_scheduler.services.months import create_month, publish_month
from staff_scheduler.validator import validate_month


def _load(args: argparse.Namespace) -> SchedulerConfig:
    cfg = load_config(args.config)
    setup_logging(cfg.log_level, cfg.log_file)
    return cfg


def _db_url(args: argparse.Namespace, cfg: SchedulerConfig) -> str:
    return args.db or cfg.database_url


def _cmd_init_db(args: argparse.Namespace) -> None:
    """Initialize the database."""
    cfg = _load(args)
    db_url = _db_url(args, cfg)
    if args.reset:
        reset_database(db_url)
        print(f"[OK] Database reset: {db_url}")
        return
    init_database(db_url)
    print(f"[OK] Database initialized: {db_url}")


def _cmd_import_csv(args: argparse.Namespace) -> None:
    """Import CSV data into database."""
    cfg = _load(args)
    session = get_session(_db_url(args, cfg))

    try:
        if args.staff:
            count = import_staff_csv(session, args.staff, args.org)
            print(f"[OK] Imported {count} staff")

        if args.coverage:
            count = import_coverage_rules_csv(session, args.coverage, args.org)
            print(f"[OK] Imported {count} coverage rules")

        if args.time_off:
            count = import_time_off_csv(session, args.time_off)
            print(f"[OK] Imported {count} time off entries")

        session.close()
        print("[OK] CSV import complete")

    except Exception as e:
        session.rollback()
        session.close()
        print(f"[ERROR] Import failed: {e}")
        raise


def _cmd_create_month(args: argparse.Namespace) -> None:
    cfg = _load(args)
    session = get_session(_db_url(args, cfg))

    try:
        month = create_month(session, args.org, args.month)
        print(f"[OK] Schedule month {month.id}: {month.month:%Y-%m} ({month.status})")
    finally:
        session.close()


def _cmd_generate(args: argparse.Namespace) -> None:
    """Generate the roster of a schedule month."""
    cfg = _load(args)
    session = get_session(_db_url(args, cfg))

    try:
        result = generate_schedule(session, args.month_id, [args.org], args.date_from, args.date_to, cfg)

        if args.out:
            export_roster_csv(session, args.month_id, args.out)

        session.close()
        if args.json:
            print(json.dumps(result.to_dict(), indent=2))
            return

        for warning in result.warnings:
            print(f"[WARN] {warning}")
        print(
            f"[OK] Generated {result.created_shifts} shifts and "
            f"{result.created_assignments} assignments for month {args.month_id}"
        )

    except Exception as e:
        session.rollback()
        session.close()
        print(f"[ERROR] Generation failed: {e}")
        raise


def _cmd_validate(args: argparse.Namespace) -> None:
    """Validate a month against staff and organization rules."""
    cfg = _load(args)
    session = get_session(_db_url(args, cfg))

    try:
        report = validate_month(session, args.month_id, [args.org], cfg)
    finally:
        session.close()

    for issue in report.errors + report.warnings:
        where = f" staff={issue.staff_id}" if issue.staff_id is not None else ""
        when = f" date={issue.date.isoformat()}" if issue.date else ""
        print(f"[{issue.level.upper()}] {issue.message}{where}{when}")

    if report.errors:
        print(f"[ERROR] Validation failed for month {args.month_id}: {len(report.errors)} errors")
        raise SystemExit(1)
    print(f"[OK] Validation passed for month {args.month_id} ({len(report.warnings)} warnings)")


def _cmd_publish(args: argparse.Namespace) -> None:
    cfg = _load(args)
    session = get_session(_db_url(args, cfg))

    try:
        month = publish_month(session, args.month_id, [args.org])
        print(f"[OK] Published schedule month {month.id}")
    except Exception as e:
        session.rollback()
        print(f"[ERROR] Publish failed: {e}")
        raise
    finally:
        session.close()


def _cmd_export(args: argparse.Namespace) -> None:
    """Export a month's roster to CSV."""
    cfg = _load(args)
    session = get_session(_db_url(args, cfg))

    try:
        count = export_roster_csv(session, args.month_id, args.out)
        print(f"[OK] Exported {count} assignments to {args.out}")
    finally:
        session.close()


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="staff-scheduler",
        description="Monthly staff shift scheduling",
    )

    # Global options
    parser.add_argument("--db", help="Database URL (default: database_url from config)")
    parser.add_argument("--config", help="Path to config YAML or JSON (optional)")

    sub = parser.add_subparsers(dest="command", required=True)

    # init-db command
    init = sub.add_parser("init-db", help="Initialize database")
    init.add_argument("--reset", action="store_true", help="Drop and recreate all tables (deletes all data)")
    init.set_defaults(func=_cmd_init_db)

    # import-csv command
    imp = sub.add_parser("import-csv", help="Import CSV data into database")
    imp.add_argument("--org", type=int, required=True, help="Organization id")
    imp.add_argument("--staff", help="Path to staff CSV")
    imp.add_argument("--coverage", help="Path to weekly coverage rules CSV (replaces existing rules)")
    imp.add_argument("--time-off", dest="time_off", help="Path to time off CSV")
    imp.set_defaults(func=_cmd_import_csv)

    # create-month command
    cm = sub.add_parser("create-month", help="Create (or fetch) a schedule month")
    cm.add_argument("--org", type=int, required=True, help="Organization id")
    cm.add_argument("--month", required=True, help="Month as YYYY-MM")
    cm.set_defaults(func=_cmd_create_month)

    # generate command
    gen = sub.add_parser("generate", help="Regenerate the roster of a month")
    gen.add_argument("--org", type=int, required=True, help="Organization id")
    gen.add_argument("--month-id", dest="month_id", type=int, required=True, help="Schedule month id")
    gen.add_argument("--from", dest="date_from", help="First date (YYYY-MM-DD, optional)")
    gen.add_argument("--to", dest="date_to", help="Last date (YYYY-MM-DD, optional)")
    gen.add_argument("--out", help="Optional: export roster to CSV")
    gen.add_argument("--json", action="store_true", help="Print the result as JSON")
    gen.set_defaults(func=_cmd_generate)

    # validate command
    val = sub.add_parser("validate", help="Validate a month against scheduling rules")
    val.add_argument("--org", type=int, required=True, help="Organization id")
    val.add_argument("--month-id", dest="month_id", type=int, required=True, help="Schedule month id")
    val.set_defaults(func=_cmd_validate)

    # publish command
    pub = sub.add_parser("publish", help="Publish a month and its shifts")
    pub.add_argument("--org", type=int, required=True, help="Organization id")
    pub.add_argument("--month-id", dest="month_id", type=int, required=True, help="Schedule month id")
    pub.set_defaults(func=_cmd_publish)

    # export command
    exp = sub.add_parser("export", help="Export a month's roster to CSV")
    exp.add_argument("--month-id", dest="month_id", type=int, required=True, help="Schedule month id")
    exp.add_argument("--out", required=True, help="Path to roster CSV")
    exp.set_defaults(func=_cmd_export)

    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
