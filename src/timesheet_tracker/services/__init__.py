"""Timesheet tracker services."""

from timesheet_tracker.services.access import AdminCapability, EmployeeCapability
from timesheet_tracker.services.employee_service import DashboardStats, EmployeeService
from timesheet_tracker.services.query import TimesheetQuery
from timesheet_tracker.services.state_machine import TimesheetStateMachine, TimesheetStatus
from timesheet_tracker.services.timesheet_service import TimesheetService

__all__ = [
    "AdminCapability",
    "DashboardStats",
    "EmployeeCapability",
    "EmployeeService",
    "TimesheetQuery",
    "TimesheetService",
    "TimesheetStateMachine",
    "TimesheetStatus",
]
