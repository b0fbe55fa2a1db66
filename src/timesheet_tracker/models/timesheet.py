"""Timesheet model: one employee's work entry for one date."""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Date, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from timesheet_tracker.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from timesheet_tracker.models.user import User


class Timesheet(Base, TimestampMixin):
    """Planned and actual work reported by an employee for a day."""

    __tablename__ = "timesheet"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("app_user.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Copied at creation so later profile renames do not rewrite history
    employee_name: Mapped[str] = mapped_column(String(200), nullable=False)
    work_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    planned_work: Mapped[str] = mapped_column(Text, nullable=False)
    actual_work: Mapped[str] = mapped_column(Text, nullable=False)
    remarks: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    admin_comments: Mapped[str] = mapped_column(Text, nullable=False, default="")
    reviewer_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("app_user.id", ondelete="SET NULL"),
        nullable=True,
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(nullable=True)

    __table_args__ = (
        UniqueConstraint("employee_id", "work_date", name="timesheet_employee_date_unique"),
        CheckConstraint(
            "status IN ('pending', 'accepted', 'rejected')",
            name="timesheet_status_check",
        ),
    )

    # Relationships
    employee: Mapped[User] = relationship(
        back_populates="timesheets",
        foreign_keys=[employee_id],
    )
    reviewer: Mapped[User | None] = relationship(foreign_keys=[reviewer_id])

    @property
    def reviewer_name(self) -> str | None:
        """Display name of the reviewing admin, if any."""
        return self.reviewer.name if self.reviewer is not None else None
