#!/usr/bin/env python3
"""
Renewal reminder management CLI.

Usage:
    python manage.py serve       Start the API server
    python manage.py migrate     Apply pending database migrations
    python manage.py tick        Run one reminder tick (for cron)
    python manage.py status      Show migration status and schema checks
"""

import argparse
import asyncio
import json
import subprocess
import sys
from datetime import date
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent


def cmd_serve(args: argparse.Namespace) -> None:
    """Start uvicorn in the foreground."""
    uvicorn_cmd = [
        sys.executable, "-m", "uvicorn",
        "renewals.api.main:app",
        "--host", args.host,
        "--port", str(args.port),
    ]
    if args.reload:
        uvicorn_cmd.append("--reload")
    elif args.workers > 1:
        uvicorn_cmd += ["--workers", str(args.workers)]

    print(f"Starting server on {args.host}:{args.port}...")
    try:
        subprocess.run(uvicorn_cmd, cwd=str(ROOT_DIR), check=False)
    except KeyboardInterrupt:
        print("\nServer stopped.")


def cmd_migrate(args: argparse.Namespace) -> None:
    from renewals.config import configure_logging
    from renewals.infrastructure.storage.sqlite.migrations import initialize_database

    configure_logging()
    results = asyncio.run(initialize_database(create_backup_before=not args.no_backup))

    if not results:
        print("Database is up to date.")
        return

    for result in results:
        state = "OK" if result.success else f"FAILED ({result.error})"
        print(f"  v{result.version}: {state}")
    if not all(r.success for r in results):
        sys.exit(1)


async def _run_tick(as_of: date | None) -> dict:
    from renewals.application.use_cases import ProcessRenewalRemindersUseCase
    from renewals.infrastructure.storage.sqlite import close_pool
    from renewals.infrastructure.storage.sqlite.migrations import initialize_database

    await initialize_database(create_backup_before=False)
    try:
        summary = await ProcessRenewalRemindersUseCase().execute(as_of)
    finally:
        await close_pool()
    return summary.to_dict()


def cmd_tick(args: argparse.Namespace) -> None:
    """Run one tick and print its summary as JSON."""
    from renewals.config import configure_logging

    configure_logging()
    as_of = date.fromisoformat(args.as_of) if args.as_of else None
    summary = asyncio.run(_run_tick(as_of))
    print(json.dumps(summary, indent=2))


async def _status() -> tuple[dict, list[dict]]:
    from renewals.infrastructure.storage.sqlite.migrations import (
        get_migration_status,
        verify_schema_integrity,
    )

    status = await get_migration_status()
    checks = await verify_schema_integrity() if status["exists"] else []
    return status, checks


def cmd_status(args: argparse.Namespace) -> None:
    from renewals.config import get_settings
    from renewals.infrastructure.catalog import get_product_catalog

    settings = get_settings()
    status, checks = asyncio.run(_status())

    print(f"Database:  {settings.storage.db_path}")
    if not status["exists"]:
        print("  not created. Run 'migrate' first.")
    else:
        print(f"  current version: {status['current_version']}")
        print(f"  pending:         {', '.join(status['pending_migrations']) or 'none'}")
        for check in checks:
            print(f"  {check['check']}: {check['status']}")

    catalog = get_product_catalog()
    print(f"Catalog:   {catalog.version} ({len(catalog)} product types)")
    print(
        "Scheduler: "
        + (
            f"every {settings.reminders.tick_interval_hours}h ({settings.reminders.timezone})"
            if settings.reminders.scheduler_enabled
            else "disabled (use 'tick' from cron)"
        )
    )


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Renewal reminder management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # serve
    p_serve = sub.add_parser("serve", help="Start the API server")
    p_serve.add_argument("--host", default="0.0.0.0", help="Bind host (default: 0.0.0.0)")
    p_serve.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
    p_serve.add_argument("--reload", action="store_true", help="Reload on code changes")
    p_serve.add_argument("--workers", type=int, default=1, help="Number of uvicorn workers")
    p_serve.set_defaults(func=cmd_serve)

    # migrate
    p_migrate = sub.add_parser("migrate", help="Apply pending migrations")
    p_migrate.add_argument("--no-backup", action="store_true", help="Skip the pre-migration backup")
    p_migrate.set_defaults(func=cmd_migrate)

    # tick
    p_tick = sub.add_parser("tick", help="Run one reminder tick")
    p_tick.add_argument("--as-of", help="Evaluation day, YYYY-MM-DD (default: today)")
    p_tick.set_defaults(func=cmd_tick)

    # status
    p_status = sub.add_parser("status", help="Show database and scheduler status")
    p_status.set_defaults(func=cmd_status)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
