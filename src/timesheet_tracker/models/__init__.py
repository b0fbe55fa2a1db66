"""ORM models."""

from timesheet_tracker.models.base import Base, TimestampMixin, utcnow
from timesheet_tracker.models.timesheet import Timesheet
from timesheet_tracker.models.user import Role, User

__all__ = [
    "Base",
    "Role",
    "Timesheet",
    "TimestampMixin",
    "User",
    "utcnow",
]
