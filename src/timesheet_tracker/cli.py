"""Timesheet tracker command line interface.

Usage:
    timesheet-tracker init-db
    timesheet-tracker create-admin --name "Ada" --email ada@example.com --password secret
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Callable

from timesheet_tracker.config import Settings, get_settings
from timesheet_tracker.database import create_engine, create_session_factory, create_tables
from timesheet_tracker.errors import TimesheetTrackerError
from timesheet_tracker.security import hash_password
from timesheet_tracker.services.employee_service import EmployeeService


async def init_db(settings: Settings) -> None:
    """Create all tables for the configured database."""
    engine = create_engine(settings)
    try:
        await create_tables(engine)
    finally:
        await engine.dispose()


async def create_admin(settings: Settings, name: str, email: str, password: str) -> bool:
    """Create or promote an admin account. Returns True if newly created."""
    engine = create_engine(settings)
    try:
        await create_tables(engine)
        async with create_session_factory(engine)() as session:
            _, created = await EmployeeService(session).ensure_admin(
                name, email, hash_password(password)
            )
        return created
    finally:
        await engine.dispose()


class TrackerCli:
    """Timesheet tracker operational commands."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings
        self.parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="timesheet-tracker",
            description="Timesheet tracker operational tools",
        )
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        subparsers.add_parser("init-db", help="Create database tables")

        admin = subparsers.add_parser(
            "create-admin",
            help="Create an admin account or promote an existing one",
        )
        admin.add_argument("--name", required=True, help="Display name")
        admin.add_argument("--email", required=True, help="Login email")
        admin.add_argument("--password", required=True, help="Login password")

        return parser

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parsed = self.parser.parse_args(args)

        if not parsed.command:
            self.parser.print_help()
            return 1

        handlers: dict[str, Callable[[argparse.Namespace], int]] = {
            "init-db": self._cmd_init_db,
            "create-admin": self._cmd_create_admin,
        }
        return handlers[parsed.command](parsed)

    @property
    def _settings(self) -> Settings:
        return self.settings or get_settings()

    def _cmd_init_db(self, args: argparse.Namespace) -> int:
        asyncio.run(init_db(self._settings))
        print("Database tables created.")
        return 0

    def _cmd_create_admin(self, args: argparse.Namespace) -> int:
        try:
            created = asyncio.run(
                create_admin(self._settings, args.name, args.email, args.password)
            )
        except TimesheetTrackerError as e:
            print(f"ERROR: {e.message}", file=sys.stderr)
            return 1

        action = "created" if created else "promoted"
        print(f"Admin {args.email} {action}.")
        return 0


def main() -> int:
    """CLI entry point."""
    return TrackerCli().run()


if __name__ == "__main__":
    sys.exit(main())
