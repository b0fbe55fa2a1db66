"""Employee self-service timesheet endpoints."""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from timesheet_tracker.api.dependencies import EmployeeTier
from timesheet_tracker.api.responses import csv_attachment, pdf_attachment
from timesheet_tracker.api.schemas import (
    ErrorResponse,
    MessageResponse,
    TimesheetCreate,
    TimesheetResponse,
    TimesheetUpdate,
)
from timesheet_tracker.errors import NotFoundError
from timesheet_tracker.services.query import TimesheetQuery

router = APIRouter(prefix="/timesheets", tags=["timesheets"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}


def own_filters(
    status_filter: Annotated[str | None, Query(alias="status")] = None,
    start_date: Annotated[date | None, Query(alias="startDate")] = None,
    end_date: Annotated[date | None, Query(alias="endDate")] = None,
) -> TimesheetQuery:
    return TimesheetQuery(status=status_filter, start_date=start_date, end_date=end_date)


OwnFilters = Annotated[TimesheetQuery, Depends(own_filters)]


@router.get("", response_model=list[TimesheetResponse], responses=ERROR_RESPONSES)
async def list_timesheets(tier: EmployeeTier, query: OwnFilters):
    """List the caller's timesheets, newest date first."""
    return await tier.list_timesheets(query)


@router.post(
    "",
    response_model=TimesheetResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
async def create_timesheet(tier: EmployeeTier, payload: TimesheetCreate):
    """Submit a timesheet for a date. One per date."""
    return await tier.create_timesheet(
        payload.work_date, payload.planned_work, payload.actual_work, payload.remarks
    )


@router.get("/export/csv", responses=ERROR_RESPONSES)
async def export_csv(tier: EmployeeTier, query: OwnFilters) -> Response:
    """Download the caller's timesheets as CSV."""
    return csv_attachment(await tier.export_rows(query), "timesheets.csv")


@router.get("/export/pdf", responses=ERROR_RESPONSES)
async def export_pdf(tier: EmployeeTier, query: OwnFilters) -> Response:
    """Download the caller's timesheets as PDF, newest date first."""
    rows = await tier.export_rows(query)
    return pdf_attachment(rows, "timesheets.pdf", title="Timesheet Report")


@router.get("/download-pdf", responses=ERROR_RESPONSES)
async def download_pdf(tier: EmployeeTier) -> Response:
    """Download every timesheet of the caller as PDF in date order."""
    rows = await tier.export_rows(TimesheetQuery(ascending=True))
    if not rows:
        raise NotFoundError("No timesheets found.")
    return pdf_attachment(rows, "timesheets.pdf", title=f"Timesheets for {tier.user.name}")


@router.put("/{timesheet_id}", response_model=TimesheetResponse, responses=ERROR_RESPONSES)
async def update_timesheet(tier: EmployeeTier, timesheet_id: UUID, payload: TimesheetUpdate):
    """Edit a pending or rejected timesheet."""
    return await tier.update_timesheet(
        timesheet_id, payload.planned_work, payload.actual_work, payload.remarks
    )


@router.delete("/{timesheet_id}", response_model=MessageResponse, responses=ERROR_RESPONSES)
async def delete_timesheet(tier: EmployeeTier, timesheet_id: UUID) -> MessageResponse:
    """Delete a pending timesheet."""
    await tier.delete_timesheet(timesheet_id)
    return MessageResponse(message="Timesheet deleted successfully")
