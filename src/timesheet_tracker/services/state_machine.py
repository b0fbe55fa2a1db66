"""Timesheet status state machine."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from timesheet_tracker.errors import InvalidInputError, InvalidStateError

if TYPE_CHECKING:
    from timesheet_tracker.models import Timesheet


class TimesheetStatus(str, Enum):
    """Timesheet status values."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class TimesheetStateMachine:
    """Rules for who may change a timesheet in which status.

    Owner actions:
    - edit while pending or rejected
    - delete while pending

    Review transitions are unrestricted: an admin may move a timesheet from
    any status to any status, including re-reviewing an accepted entry or
    returning it to pending.
    """

    INITIAL = TimesheetStatus.PENDING

    REVIEW_TRANSITIONS: dict[str, list[str]] = {
        status.value: [target.value for target in TimesheetStatus]
        for status in TimesheetStatus
    }

    # Statuses in which the owner may edit work details
    OWNER_EDITABLE = {
        TimesheetStatus.PENDING.value,
        TimesheetStatus.REJECTED.value,
    }

    # Statuses in which the owner may delete the entry
    OWNER_DELETABLE = {
        TimesheetStatus.PENDING.value,
    }

    @classmethod
    def parse_status(cls, value: str) -> TimesheetStatus:
        """Convert a raw value to a status, raising InvalidInputError."""
        try:
            return TimesheetStatus(value)
        except ValueError:
            allowed = ", ".join(s.value for s in TimesheetStatus)
            raise InvalidInputError(f"Invalid status '{value}'. Must be one of: {allowed}")

    @classmethod
    def can_review(cls, from_status: str, to_status: str) -> bool:
        """Check if a review transition is valid."""
        return to_status in cls.REVIEW_TRANSITIONS.get(from_status, [])

    @classmethod
    def can_edit(cls, status: str) -> bool:
        return status in cls.OWNER_EDITABLE

    @classmethod
    def can_delete(cls, status: str) -> bool:
        return status in cls.OWNER_DELETABLE

    @classmethod
    def validate_review(cls, timesheet: Timesheet, to_status: str) -> TimesheetStatus:
        """Validate a review target for a timesheet and return it as a status."""
        target = cls.parse_status(to_status)
        if not cls.can_review(timesheet.status, target):
            raise InvalidStateError(
                f"Cannot review timesheet from '{timesheet.status}' to '{target.value}'",
                status=timesheet.status,
            )
        return target

    @classmethod
    def validate_edit(cls, timesheet: Timesheet) -> None:
        if not cls.can_edit(timesheet.status):
            raise InvalidStateError(
                "Only pending or rejected timesheets can be edited",
                status=timesheet.status,
            )

    @classmethod
    def validate_delete(cls, timesheet: Timesheet) -> None:
        if not cls.can_delete(timesheet.status):
            raise InvalidStateError(
                "Only pending timesheets can be deleted",
                status=timesheet.status,
            )
