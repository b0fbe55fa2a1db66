"""Capability objects for the two access tiers.

An authenticated request is turned into exactly one capability object. Each
exposes only the operations its tier may perform, so role checks live here
rather than in individual routes.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from timesheet_tracker.errors import UnauthorizedError
from timesheet_tracker.models import Timesheet, User
from timesheet_tracker.security import hash_password
from timesheet_tracker.services.employee_service import DashboardStats, EmployeeService
from timesheet_tracker.services.export import ExportRow, to_rows
from timesheet_tracker.services.query import TimesheetQuery
from timesheet_tracker.services.timesheet_service import TimesheetService


class EmployeeCapability:
    """Self-service operations on the caller's own timesheets."""

    def __init__(self, session: AsyncSession, user: User):
        self.user = user
        self.timesheets = TimesheetService(session)

    async def list_timesheets(self, query: TimesheetQuery) -> Sequence[Timesheet]:
        return await self.timesheets.find(query.scoped_to(self.user.id))

    async def create_timesheet(
        self,
        work_date: date,
        planned_work: str,
        actual_work: str,
        remarks: str | None = None,
    ) -> Timesheet:
        return await self.timesheets.create(
            self.user, work_date, planned_work, actual_work, remarks
        )

    async def update_timesheet(
        self,
        timesheet_id: UUID,
        planned_work: str,
        actual_work: str,
        remarks: str | None = None,
    ) -> Timesheet:
        return await self.timesheets.update(
            timesheet_id, self.user.id, planned_work, actual_work, remarks
        )

    async def delete_timesheet(self, timesheet_id: UUID) -> None:
        await self.timesheets.delete(timesheet_id, self.user.id)

    async def export_rows(self, query: TimesheetQuery) -> list[ExportRow]:
        return to_rows(await self.list_timesheets(query))


class AdminCapability:
    """Review, reporting and account management across all employees."""

    def __init__(self, session: AsyncSession, user: User):
        if not user.is_admin:
            raise UnauthorizedError("Admin access required")
        self.user = user
        self.timesheets = TimesheetService(session)
        self.employees = EmployeeService(session)

    # Timesheets

    async def list_timesheets(self, query: TimesheetQuery) -> Sequence[Timesheet]:
        return await self.timesheets.find(query)

    async def get_timesheet(self, timesheet_id: UUID) -> Timesheet:
        return await self.timesheets.get(timesheet_id)

    async def review_timesheet(
        self,
        timesheet_id: UUID,
        status: str,
        admin_comments: str | None = None,
    ) -> Timesheet:
        return await self.timesheets.review(timesheet_id, self.user.id, status, admin_comments)

    async def export_rows(self, query: TimesheetQuery) -> list[ExportRow]:
        return to_rows(await self.list_timesheets(query))

    async def dashboard(self) -> DashboardStats:
        return await self.employees.dashboard()

    # Employees

    async def list_employees(self) -> Sequence[User]:
        return await self.employees.list_employees()

    async def create_employee(
        self,
        name: str,
        email: str,
        password: str,
        employee_number: str | None = None,
        department: str | None = None,
    ) -> User:
        return await self.employees.create(
            name=name,
            email=email,
            password_hash=hash_password(password),
            employee_number=employee_number,
            department=department,
        )

    async def update_employee(
        self,
        user_id: UUID,
        name: str,
        email: str,
        employee_number: str | None,
        department: str | None,
        is_active: bool,
    ) -> User:
        return await self.employees.update(
            user_id, name, email, employee_number, department, is_active
        )

    async def delete_employee(self, user_id: UUID) -> int:
        return await self.employees.delete(user_id)
