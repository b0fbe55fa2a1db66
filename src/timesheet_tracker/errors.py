"""Error taxonomy shared by services and the HTTP boundary."""

from __future__ import annotations


class TimesheetTrackerError(Exception):
    """Base class for expected, client-facing failures."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class UnauthenticatedError(TimesheetTrackerError):
    """Missing, malformed or expired credential."""

    status_code = 401
    code = "UNAUTHENTICATED"


class UnauthorizedError(TimesheetTrackerError):
    """Valid credential without the required role."""

    status_code = 403
    code = "UNAUTHORIZED"


class NotFoundError(TimesheetTrackerError):
    """Record absent or not owned by the requester."""

    status_code = 404
    code = "NOT_FOUND"


class ConflictError(TimesheetTrackerError):
    """Duplicate entry, e.g. a second timesheet for the same date."""

    status_code = 400
    code = "CONFLICT"


class InvalidStateError(TimesheetTrackerError):
    """Operation not permitted in the record's current status."""

    status_code = 400
    code = "INVALID_STATE"

    def __init__(self, message: str, status: str | None = None):
        self.status = status
        super().__init__(message)


class InvalidInputError(TimesheetTrackerError):
    """Missing required field or malformed value."""

    status_code = 400
    code = "INVALID_INPUT"
