"""User accounts: employees and administrators."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import Boolean, CheckConstraint, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from timesheet_tracker.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from timesheet_tracker.models.timesheet import Timesheet


class Role(str, Enum):
    """Capability tier of an account."""

    EMPLOYEE = "employee"
    ADMIN = "admin"


class User(Base, TimestampMixin):
    """Login identity with role and employee profile."""

    __tablename__ = "app_user"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=Role.EMPLOYEE.value)
    employee_number: Mapped[str | None] = mapped_column(String(64), nullable=True)
    department: Mapped[str | None] = mapped_column(String(200), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        UniqueConstraint("email", name="app_user_email_unique"),
        CheckConstraint("role IN ('employee', 'admin')", name="app_user_role_check"),
    )

    # Relationships
    timesheets: Mapped[list[Timesheet]] = relationship(
        back_populates="employee",
        foreign_keys="Timesheet.employee_id",
        passive_deletes=True,
    )

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value
