"""Employee account management for administrators."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from timesheet_tracker.errors import ConflictError, InvalidInputError, NotFoundError
from timesheet_tracker.models import Role, Timesheet, User
from timesheet_tracker.services.timesheet_service import TimesheetService

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "User already exists with this email"


@dataclass(frozen=True)
class DashboardStats:
    """Aggregate counts shown on the admin dashboard."""

    total_timesheets: int
    pending: int
    accepted: int
    rejected: int
    total_employees: int


def normalize_email(email: str) -> str:
    return email.strip().lower()


class EmployeeService:
    """Service for employee accounts and their cascade cleanup."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, user_id: UUID) -> User:
        user = await self.session.get(User, user_id)
        if user is None:
            raise NotFoundError("Employee not found")
        return user

    async def get_by_email(self, email: str) -> User | None:
        result = await self.session.execute(
            select(User).where(User.email == normalize_email(email))
        )
        return result.scalar_one_or_none()

    async def list_employees(self) -> Sequence[User]:
        """All employee-role accounts ordered by name."""
        result = await self.session.execute(
            select(User).where(User.role == Role.EMPLOYEE.value).order_by(User.name.asc())
        )
        return result.scalars().all()

    async def create(
        self,
        name: str,
        email: str,
        password_hash: str,
        employee_number: str | None = None,
        department: str | None = None,
        role: Role = Role.EMPLOYEE,
    ) -> User:
        """Create an account. Raises ConflictError if the email is taken."""
        name = (name or "").strip()
        if not name:
            raise InvalidInputError("Name is required")
        if await self.get_by_email(email) is not None:
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE)

        user = User(
            name=name,
            email=normalize_email(email),
            password_hash=password_hash,
            role=role.value,
            employee_number=employee_number,
            department=department,
            is_active=True,
        )
        self.session.add(user)
        await self._commit_unique_email()
        logger.info("Account %s created with role %s", user.id, user.role)
        return user

    async def update(
        self,
        user_id: UUID,
        name: str,
        email: str,
        employee_number: str | None,
        department: str | None,
        is_active: bool,
    ) -> User:
        """Overwrite an employee's profile fields."""
        user = await self.get(user_id)
        name = (name or "").strip()
        if not name:
            raise InvalidInputError("Name is required")

        existing = await self.get_by_email(email)
        if existing is not None and existing.id != user.id:
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE)

        user.name = name
        user.email = normalize_email(email)
        user.employee_number = employee_number
        user.department = department
        user.is_active = is_active
        await self._commit_unique_email()
        return user

    async def delete(self, user_id: UUID) -> int:
        """Delete an account and all of its timesheets in one transaction.

        Returns the number of timesheets removed with the account.
        """
        user = await self.get(user_id)
        try:
            removed = await TimesheetService(self.session).delete_for_employee(user.id)
            # Reviews by this account stay, without the reviewer link
            await self.session.execute(
                update(Timesheet)
                .where(Timesheet.reviewer_id == user.id)
                .values(reviewer_id=None)
                .execution_options(synchronize_session=False)
            )
            await self.session.delete(user)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Account %s deleted with %d timesheet(s)", user_id, removed)
        return removed

    async def ensure_admin(self, name: str, email: str, password_hash: str) -> tuple[User, bool]:
        """Create an admin account, or promote the account using ``email``.

        Returns the account and whether it was newly created. A promoted
        account is reactivated and takes the new password.
        """
        user = await self.get_by_email(email)
        if user is None:
            user = await self.create(name, email, password_hash, role=Role.ADMIN)
            return user, True

        user.role = Role.ADMIN.value
        user.password_hash = password_hash
        user.is_active = True
        await self.session.commit()
        logger.info("Account %s promoted to admin", user.id)
        return user, False

    async def count_employees(self) -> int:
        count = await self.session.scalar(
            select(func.count()).select_from(User).where(User.role == Role.EMPLOYEE.value)
        )
        return count or 0

    async def dashboard(self) -> DashboardStats:
        counts = await TimesheetService(self.session).status_counts()
        return DashboardStats(
            total_timesheets=sum(counts.values()),
            pending=counts["pending"],
            accepted=counts["accepted"],
            rejected=counts["rejected"],
            total_employees=await self.count_employees(),
        )

    async def _commit_unique_email(self) -> None:
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE)
