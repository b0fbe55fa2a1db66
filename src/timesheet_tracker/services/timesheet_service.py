"""Timesheet lifecycle service: create, edit, delete, review."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from timesheet_tracker.errors import ConflictError, InvalidInputError, NotFoundError
from timesheet_tracker.models import Timesheet, User, utcnow
from timesheet_tracker.services.query import TimesheetQuery
from timesheet_tracker.services.state_machine import TimesheetStateMachine, TimesheetStatus

logger = logging.getLogger(__name__)

DUPLICATE_DATE_MESSAGE = "Timesheet already exists for this date"


def _required_text(value: str | None, field_name: str) -> str:
    text = (value or "").strip()
    if not text:
        raise InvalidInputError(f"{field_name} is required")
    return text


def _optional_text(value: str | None) -> str:
    return (value or "").strip()


class TimesheetService:
    """Service for managing the timesheet lifecycle.

    Operations:
    - create: new pending entry, one per employee and date
    - update: owner edits work details while pending or rejected
    - delete: owner removes an entry while pending
    - review: admin sets status and comments from any status
    - delete_for_employee: cascade removal when an account is deleted

    Every mutating operation commits its own transaction, except
    delete_for_employee, which joins the caller's unit of work.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, timesheet_id: UUID, owner_id: UUID | None = None) -> Timesheet:
        """Load a timesheet with its owner and reviewer.

        Raises NotFoundError if absent, or not owned by ``owner_id`` when given.
        """
        query = (
            select(Timesheet)
            .where(Timesheet.id == timesheet_id)
            .options(selectinload(Timesheet.employee), selectinload(Timesheet.reviewer))
            .execution_options(populate_existing=True)
        )
        if owner_id is not None:
            query = query.where(Timesheet.employee_id == owner_id)

        result = await self.session.execute(query)
        timesheet = result.scalar_one_or_none()
        if timesheet is None:
            raise NotFoundError("Timesheet not found")
        return timesheet

    async def find(self, query: TimesheetQuery) -> Sequence[Timesheet]:
        """Run a filter query and return the matching timesheets."""
        result = await self.session.execute(query.build())
        return result.scalars().all()

    async def exists_for_date(self, employee_id: UUID, work_date: date) -> bool:
        count = await self.session.scalar(
            select(func.count())
            .select_from(Timesheet)
            .where(Timesheet.employee_id == employee_id, Timesheet.work_date == work_date)
        )
        return bool(count)

    async def create(
        self,
        employee: User,
        work_date: date,
        planned_work: str,
        actual_work: str,
        remarks: str | None = None,
    ) -> Timesheet:
        """Create a pending timesheet for ``employee`` on ``work_date``.

        Raises ConflictError if one already exists for that date. A unique
        constraint violation from a concurrent insert is reported the same way.
        """
        planned = _required_text(planned_work, "Planned work")
        actual = _required_text(actual_work, "Actual work")

        if await self.exists_for_date(employee.id, work_date):
            raise ConflictError(DUPLICATE_DATE_MESSAGE)

        timesheet = Timesheet(
            employee_id=employee.id,
            employee_name=employee.name,
            work_date=work_date,
            planned_work=planned,
            actual_work=actual,
            remarks=_optional_text(remarks),
            status=TimesheetStateMachine.INITIAL.value,
            admin_comments="",
        )
        self.session.add(timesheet)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise ConflictError(DUPLICATE_DATE_MESSAGE)

        logger.info(
            "Timesheet %s created by employee %s for %s",
            timesheet.id, employee.id, work_date.isoformat(),
        )
        return await self.get(timesheet.id)

    async def update(
        self,
        timesheet_id: UUID,
        requester_id: UUID,
        planned_work: str,
        actual_work: str,
        remarks: str | None = None,
    ) -> Timesheet:
        """Overwrite work details of the requester's own timesheet.

        Status is left unchanged, so a rejected entry stays rejected until an
        admin reviews it again.
        """
        timesheet = await self.get(timesheet_id, owner_id=requester_id)
        TimesheetStateMachine.validate_edit(timesheet)

        planned = _required_text(planned_work, "Planned work")
        actual = _required_text(actual_work, "Actual work")

        timesheet.planned_work = planned
        timesheet.actual_work = actual
        timesheet.remarks = _optional_text(remarks)
        await self.session.commit()

        return await self.get(timesheet.id)

    async def delete(self, timesheet_id: UUID, requester_id: UUID) -> None:
        """Delete the requester's own pending timesheet."""
        timesheet = await self.get(timesheet_id, owner_id=requester_id)
        TimesheetStateMachine.validate_delete(timesheet)

        await self.session.delete(timesheet)
        await self.session.commit()
        logger.info("Timesheet %s deleted by employee %s", timesheet_id, requester_id)

    async def review(
        self,
        timesheet_id: UUID,
        reviewer_id: UUID,
        new_status: str,
        admin_comments: str | None = None,
    ) -> Timesheet:
        """Set review outcome. Any status may be reviewed again."""
        timesheet = await self.get(timesheet_id)
        target = TimesheetStateMachine.validate_review(timesheet, new_status)
        from_status = timesheet.status

        timesheet.status = target.value
        timesheet.admin_comments = _optional_text(admin_comments)
        timesheet.reviewer_id = reviewer_id
        timesheet.reviewed_at = utcnow()
        await self.session.commit()

        logger.info(
            "Timesheet %s reviewed by %s: %s -> %s",
            timesheet_id, reviewer_id, from_status, target.value,
        )
        return await self.get(timesheet.id)

    async def delete_for_employee(self, employee_id: UUID) -> int:
        """Delete every timesheet owned by an employee without committing.

        Returns the number of deleted timesheets.
        """
        result = await self.session.execute(
            delete(Timesheet)
            .where(Timesheet.employee_id == employee_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    async def status_counts(self) -> dict[str, int]:
        """Count timesheets per status, including zero counts."""
        result = await self.session.execute(
            select(Timesheet.status, func.count()).group_by(Timesheet.status)
        )
        counts = {status.value: 0 for status in TimesheetStatus}
        for status, count in result.all():
            counts[status] = count
        return counts
