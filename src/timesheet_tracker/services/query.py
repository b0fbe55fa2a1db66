"""Timesheet query building from optional filter parameters."""

from __future__ import annotations

import calendar
from dataclasses import dataclass, replace
from datetime import date
from uuid import UUID

from sqlalchemy import Select, or_, select
from sqlalchemy.orm import selectinload

from timesheet_tracker.errors import InvalidInputError
from timesheet_tracker.models import Timesheet
from timesheet_tracker.services.state_machine import TimesheetStateMachine

# Filter value meaning "no restriction"
ALL = "all"


def parse_month(value: str) -> tuple[date, date]:
    """Turn 'YYYY-MM' into the first and last day of that month."""
    try:
        year_text, month_text = value.split("-")
        year, month = int(year_text), int(month_text)
        last_day = calendar.monthrange(year, month)[1]
        return date(year, month, 1), date(year, month, last_day)
    except ValueError:
        raise InvalidInputError(f"Invalid month '{value}'. Expected YYYY-MM")


def parse_employee_id(value: str) -> UUID:
    """Parse a required employee id. 'all' is not accepted."""
    try:
        return UUID(value)
    except ValueError:
        raise InvalidInputError(f"Invalid employee id '{value}'")


def parse_employee_filter(value: str | None) -> UUID | None:
    """Parse an employee filter; empty or 'all' means unrestricted."""
    if not value or value == ALL:
        return None
    return parse_employee_id(value)


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


@dataclass(frozen=True)
class TimesheetQuery:
    """Optional filters for listing and exporting timesheets.

    Date matching modes are mutually exclusive and resolved by precedence:
    ``month`` wins over ``on_date``, which wins over the
    ``start_date``/``end_date`` range. The range applies only when both
    bounds are present.
    """

    owner_id: UUID | None = None
    employee_id: UUID | None = None
    status: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    on_date: date | None = None
    month: str | None = None
    search: str | None = None
    ascending: bool = False

    def scoped_to(self, owner_id: UUID) -> TimesheetQuery:
        """Restrict to a single owner and drop admin-only filters."""
        return replace(self, owner_id=owner_id, employee_id=None, search=None)

    def date_bounds(self) -> tuple[date, date] | None:
        """Inclusive (low, high) date bounds, or None when unrestricted."""
        if self.month:
            return parse_month(self.month)
        if self.on_date is not None:
            return self.on_date, self.on_date
        if self.start_date is not None and self.end_date is not None:
            return self.start_date, self.end_date
        return None

    def build(self) -> Select[tuple[Timesheet]]:
        """Compile the filters into a SELECT with owner/reviewer loaded."""
        query = select(Timesheet).options(
            selectinload(Timesheet.employee),
            selectinload(Timesheet.reviewer),
        )

        if self.owner_id is not None:
            query = query.where(Timesheet.employee_id == self.owner_id)
        if self.employee_id is not None:
            query = query.where(Timesheet.employee_id == self.employee_id)

        if self.status and self.status != ALL:
            status = TimesheetStateMachine.parse_status(self.status)
            query = query.where(Timesheet.status == status.value)

        bounds = self.date_bounds()
        if bounds is not None:
            low, high = bounds
            query = query.where(Timesheet.work_date >= low, Timesheet.work_date <= high)

        if self.search:
            pattern = f"%{_escape_like(self.search)}%"
            query = query.where(
                or_(
                    Timesheet.employee_name.ilike(pattern, escape="\\"),
                    Timesheet.planned_work.ilike(pattern, escape="\\"),
                    Timesheet.actual_work.ilike(pattern, escape="\\"),
                )
            )

        if self.ascending:
            return query.order_by(Timesheet.work_date.asc(), Timesheet.created_at.asc())
        return query.order_by(Timesheet.work_date.desc(), Timesheet.created_at.desc())
