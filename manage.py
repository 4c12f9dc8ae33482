#!/usr/bin/env python3
"""
SmartTask reminders management CLI.

Usage:
    python manage.py migrate              Apply pending database migrations
    python manage.py status               Show migration state and pending reminders
    python manage.py sweep [--limit N]    Fire due reminders once and exit
    python manage.py worker               Run the scheduler until interrupted
"""

import argparse
import asyncio
import signal
import sys
from pathlib import Path


def _setup() -> None:
    from src.config import configure_logging

    configure_logging()


async def _migrate(db_path: Path | None) -> int:
    from src.infrastructure.storage.sqlite.migrations import (
        initialize_database,
        verify_schema_integrity,
    )

    results = await initialize_database(db_path)
    if not results:
        print("Database is up to date.")
    for result in results:
        status = "ok" if result.success else f"FAILED ({result.error})"
        print(f"  v{result.version}_{result.name}: {status} [{result.execution_time_ms} ms]")

    if any(not r.success for r in results):
        return 1

    failed_checks = [c for c in await verify_schema_integrity(db_path) if c["status"] != "PASS"]
    for check in failed_checks:
        print(f"Schema check failed: {check}")
    return 1 if failed_checks else 0


async def _status(db_path: Path | None) -> int:
    from src.infrastructure.storage.sqlite import close_pool, get_reminder_store
    from src.infrastructure.storage.sqlite.migrations import get_migration_status

    status = await get_migration_status(db_path)
    print(f"Database exists:     {status['exists']}")
    print(f"Current version:     {status['current_version']}")
    print(f"Pending migrations:  {', '.join(status['pending_migrations']) or 'none'}")

    # Reminder counts come from the configured database only
    if db_path is None and status["exists"] and not status["pending_migrations"]:
        store = await get_reminder_store()
        try:
            scheduled = await store.list_scheduled()
        finally:
            await close_pool()
        print(f"Scheduled reminders: {len(scheduled)}")
        if scheduled:
            print(f"Next trigger:        {scheduled[0].trigger_at.isoformat()}")
    return 0


async def _sweep(limit: int | None) -> int:
    from src.application.use_cases import ProcessDueSweepUseCase
    from src.infrastructure.storage.sqlite import close_pool

    try:
        report = await ProcessDueSweepUseCase().execute(batch_limit=limit)
    finally:
        await close_pool()

    print(
        f"attempted={report.attempted} succeeded={report.succeeded} "
        f"failed={report.failed} skipped={report.skipped}"
    )
    return 0


async def _worker() -> int:
    from src.application.worker import ReminderWorker
    from src.infrastructure.storage.sqlite import close_pool
    from src.infrastructure.storage.sqlite.migrations import initialize_database

    await initialize_database(create_backup_before=False)

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except NotImplementedError:
            # Windows: Ctrl+C surfaces as KeyboardInterrupt instead
            pass

    worker = ReminderWorker()
    await worker.start()
    print("Worker running. Press Ctrl+C to stop.")
    try:
        await worker.run_until(stop_event)
    finally:
        await close_pool()
    print("Worker stopped.")
    return 0


def cmd_migrate(args: argparse.Namespace) -> int:
    """Apply pending migrations."""
    return asyncio.run(_migrate(args.db))


def cmd_status(args: argparse.Namespace) -> int:
    """Print migration and reminder status."""
    return asyncio.run(_status(args.db))


def cmd_sweep(args: argparse.Namespace) -> int:
    """Run one due-reminder sweep."""
    return asyncio.run(_sweep(args.limit))


def cmd_worker(args: argparse.Namespace) -> int:
    """Run the reminder worker."""
    try:
        return asyncio.run(_worker())
    except KeyboardInterrupt:
        print("\nWorker interrupted.")
        return 0


def main() -> None:
    parser = argparse.ArgumentParser(
        description="SmartTask reminders management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # migrate
    p_migrate = sub.add_parser("migrate", help="Apply pending database migrations")
    p_migrate.add_argument("--db", type=Path, default=None, help="Database file (default from settings)")
    p_migrate.set_defaults(func=cmd_migrate)

    # status
    p_status = sub.add_parser("status", help="Show migration and reminder status")
    p_status.add_argument("--db", type=Path, default=None, help="Database file (default from settings)")
    p_status.set_defaults(func=cmd_status)

    # sweep
    p_sweep = sub.add_parser("sweep", help="Fire due reminders once")
    p_sweep.add_argument("--limit", type=int, default=None, help="Batch limit (default from settings)")
    p_sweep.set_defaults(func=cmd_sweep)

    # worker
    p_worker = sub.add_parser("worker", help="Run the scheduler until interrupted")
    p_worker.set_defaults(func=cmd_worker)

    args = parser.parse_args()
    _setup()
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
