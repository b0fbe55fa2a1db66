"""Admin endpoints: review, reporting and employee management."""

from dataclasses import replace
from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from timesheet_tracker.api.dependencies import AdminTier, AdminTierWithQueryToken
from timesheet_tracker.api.responses import csv_attachment, pdf_attachment
from timesheet_tracker.api.schemas import (
    AdminTimesheetResponse,
    DashboardResponse,
    DeleteEmployeeResponse,
    EmployeeCreate,
    EmployeeUpdate,
    ErrorResponse,
    ReviewRequest,
    UserResponse,
)
from timesheet_tracker.errors import InvalidInputError
from timesheet_tracker.services.access import AdminCapability
from timesheet_tracker.services.export import to_rows
from timesheet_tracker.services.query import (
    TimesheetQuery,
    parse_employee_filter,
    parse_employee_id,
)

router = APIRouter(prefix="/admin", tags=["admin"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}

EXPORT_FORMATS = ("csv", "pdf")


def list_filters(
    employee: str | None = None,
    status_filter: Annotated[str | None, Query(alias="status")] = None,
    start_date: Annotated[date | None, Query(alias="startDate")] = None,
    end_date: Annotated[date | None, Query(alias="endDate")] = None,
    search: str | None = None,
) -> TimesheetQuery:
    return TimesheetQuery(
        employee_id=parse_employee_filter(employee),
        status=status_filter,
        start_date=start_date,
        end_date=end_date,
        search=search,
    )


ListFilters = Annotated[TimesheetQuery, Depends(list_filters)]


def export_filters(
    query: ListFilters,
    on_date: Annotated[date | None, Query(alias="date")] = None,
    month: str | None = None,
) -> TimesheetQuery:
    """List filters plus the single-date and month modes."""
    return replace(query, on_date=on_date, month=month)


ExportFilters = Annotated[TimesheetQuery, Depends(export_filters)]


# ============================================================================
# Employees
# ============================================================================


@router.get("/employees", response_model=list[UserResponse], responses=ERROR_RESPONSES)
async def list_employees(tier: AdminTier):
    """List employee accounts by name."""
    return await tier.list_employees()


@router.post(
    "/employees",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
async def create_employee(tier: AdminTier, payload: EmployeeCreate):
    """Create an employee account."""
    return await tier.create_employee(
        name=payload.name,
        email=payload.email,
        password=payload.password,
        employee_number=payload.employee_number,
        department=payload.department,
    )


@router.put("/employees/{employee_id}", response_model=UserResponse, responses=ERROR_RESPONSES)
async def update_employee(tier: AdminTier, employee_id: UUID, payload: EmployeeUpdate):
    """Update an employee profile."""
    return await tier.update_employee(
        employee_id,
        payload.name,
        payload.email,
        payload.employee_number,
        payload.department,
        payload.is_active,
    )


@router.delete(
    "/employees/{employee_id}",
    response_model=DeleteEmployeeResponse,
    responses=ERROR_RESPONSES,
)
async def delete_employee(tier: AdminTier, employee_id: UUID) -> DeleteEmployeeResponse:
    """Delete an employee together with all of their timesheets."""
    removed = await tier.delete_employee(employee_id)
    return DeleteEmployeeResponse(
        message="Employee deleted successfully", timesheets_deleted=removed
    )


# ============================================================================
# Timesheets
# ============================================================================


@router.get(
    "/timesheets",
    response_model=list[AdminTimesheetResponse],
    responses=ERROR_RESPONSES,
)
async def list_timesheets(tier: AdminTier, query: ListFilters):
    """List all timesheets, newest date first."""
    return await tier.list_timesheets(query)


@router.get("/dashboard", response_model=DashboardResponse, responses=ERROR_RESPONSES)
async def dashboard(tier: AdminTier):
    """Timesheet counts per status and the number of employees."""
    return await tier.dashboard()


@router.get("/timesheets/export/csv", responses=ERROR_RESPONSES)
async def export_csv(tier: AdminTier, query: ExportFilters) -> Response:
    """Download filtered timesheets as CSV."""
    return csv_attachment(await tier.export_rows(query), "filtered_timesheets.csv")


@router.get("/timesheets/export", responses=ERROR_RESPONSES)
async def export_by_format(
    tier: AdminTier,
    employee_id: Annotated[str | None, Query(alias="employeeId")] = None,
    export_format: Annotated[str | None, Query(alias="format")] = None,
    start_date: Annotated[date | None, Query(alias="startDate")] = None,
    end_date: Annotated[date | None, Query(alias="endDate")] = None,
) -> Response:
    """Download one employee's timesheets as CSV or PDF."""
    if not employee_id or not export_format:
        raise InvalidInputError("Employee ID and format are required")
    export_format = export_format.lower()
    if export_format not in EXPORT_FORMATS:
        raise InvalidInputError("Invalid format")

    query = TimesheetQuery(
        employee_id=parse_employee_id(employee_id),
        start_date=start_date,
        end_date=end_date,
    )
    rows = await tier.export_rows(query)
    if export_format == "csv":
        return csv_attachment(rows, "filtered_timesheets.csv")
    return pdf_attachment(rows, "filtered_timesheets.pdf", title="Filtered Timesheets Report")


@router.put(
    "/timesheets/{timesheet_id}/review",
    response_model=AdminTimesheetResponse,
    responses=ERROR_RESPONSES,
)
async def review_timesheet(tier: AdminTier, timesheet_id: UUID, payload: ReviewRequest):
    """Accept or reject a timesheet. Earlier decisions may be revised."""
    return await tier.review_timesheet(timesheet_id, payload.status, payload.admin_comments)


async def _single_record_pdf(tier: AdminCapability, timesheet_id: UUID) -> Response:
    timesheet = await tier.get_timesheet(timesheet_id)
    return pdf_attachment(
        to_rows([timesheet]), f"timesheet-{timesheet_id}.pdf", title="Timesheet Details"
    )


@router.get("/timesheets/{timesheet_id}/download", responses=ERROR_RESPONSES)
async def download_timesheet(tier: AdminTier, timesheet_id: UUID) -> Response:
    """Download a single timesheet as PDF."""
    return await _single_record_pdf(tier, timesheet_id)


@router.get("/timesheets/{timesheet_id}/export/pdf", responses=ERROR_RESPONSES)
async def export_timesheet_pdf(tier: AdminTierWithQueryToken, timesheet_id: UUID) -> Response:
    """Download a single timesheet as PDF.

    Also accepts the token as a ``?token=`` query parameter so the link can be
    opened directly in a browser.
    """
    return await _single_record_pdf(tier, timesheet_id)
