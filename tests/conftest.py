"""Pytest fixtures for timesheet tracker tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import date

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from timesheet_tracker.config import Settings
from timesheet_tracker.database import create_engine, create_session_factory, create_tables
from timesheet_tracker.models import Role, Timesheet, User
from timesheet_tracker.security import hash_password
from timesheet_tracker.services.employee_service import EmployeeService
from timesheet_tracker.services.timesheet_service import TimesheetService

# In-memory SQLite, one fresh database per test
TEST_DATABASE_URL = "sqlite+aiosqlite://"

TEST_PASSWORD = "password123"


@pytest.fixture
def settings() -> Settings:
    """Settings that never read the environment."""
    return Settings(
        database_url=TEST_DATABASE_URL,
        jwt_secret="test-secret",
        create_tables=False,
        log_level="WARNING",
    )


@pytest.fixture(scope="session")
def password_hash() -> str:
    """One bcrypt hash shared by all test accounts."""
    return hash_password(TEST_PASSWORD)


@pytest.fixture
async def engine(settings: Settings):
    """Create test database engine with all tables."""
    engine = create_engine(settings)
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(engine)


@pytest.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session


async def _account(
    session: AsyncSession,
    password_hash: str,
    name: str,
    email: str,
    role: Role = Role.EMPLOYEE,
    **profile,
) -> User:
    return await EmployeeService(session).create(
        name=name, email=email, password_hash=password_hash, role=role, **profile
    )


@pytest.fixture
async def admin(session: AsyncSession, password_hash: str) -> User:
    return await _account(session, password_hash, "Grace Admin", "grace@company.com", Role.ADMIN)


@pytest.fixture
async def alice(session: AsyncSession, password_hash: str) -> User:
    return await _account(
        session,
        password_hash,
        "Alice Smith",
        "alice@company.com",
        employee_number="E-001",
        department="Engineering",
    )


@pytest.fixture
async def bob(session: AsyncSession, password_hash: str) -> User:
    return await _account(session, password_hash, "Bob Jones", "bob@company.com")


@pytest.fixture
def make_timesheet(session: AsyncSession):
    """Factory creating a pending timesheet through the service."""

    async def _make(
        employee: User,
        work_date: date,
        planned_work: str = "Plan the sprint",
        actual_work: str = "Planned the sprint",
        remarks: str | None = None,
    ) -> Timesheet:
        return await TimesheetService(session).create(
            employee, work_date, planned_work, actual_work, remarks
        )

    return _make
