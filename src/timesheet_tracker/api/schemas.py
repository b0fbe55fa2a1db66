"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base schema: camelCase on the wire, snake_case accepted on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )


# ============================================================================
# Common
# ============================================================================


class ErrorResponse(ApiModel):
    """Schema for error responses."""

    message: str
    code: str


class MessageResponse(ApiModel):
    """Schema for plain acknowledgement responses."""

    message: str


# ============================================================================
# Users and employees
# ============================================================================


class UserResponse(ApiModel):
    """Account profile without credentials."""

    id: UUID
    name: str
    email: str
    role: str
    employee_number: str | None = None
    department: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class EmployeeSummary(ApiModel):
    """Owner identity embedded in timesheet responses."""

    id: UUID
    name: str
    email: str
    employee_number: str | None = None
    department: str | None = None


class EmployeeCreate(ApiModel):
    """Schema for creating an employee account."""

    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=6)
    employee_number: str | None = None
    department: str | None = None


class EmployeeUpdate(ApiModel):
    """Schema for updating an employee profile."""

    name: str = Field(min_length=1)
    email: EmailStr
    employee_number: str | None = None
    department: str | None = None
    is_active: bool = True


class DeleteEmployeeResponse(MessageResponse):
    """Acknowledgement of an employee deletion."""

    timesheets_deleted: int


# ============================================================================
# Auth
# ============================================================================


class LoginRequest(ApiModel):
    """Schema for email/password login."""

    email: EmailStr
    password: str = Field(min_length=1)


class LoginResponse(ApiModel):
    """Bearer token and the authenticated profile."""

    token: str
    token_type: str = "bearer"
    user: UserResponse


# ============================================================================
# Timesheets
# ============================================================================


class TimesheetCreate(ApiModel):
    """Schema for submitting a timesheet."""

    work_date: date = Field(alias="date")
    planned_work: str = Field(min_length=1)
    actual_work: str = Field(min_length=1)
    remarks: str | None = None


class TimesheetUpdate(ApiModel):
    """Schema for editing a pending or rejected timesheet."""

    planned_work: str = Field(min_length=1)
    actual_work: str = Field(min_length=1)
    remarks: str | None = None


class ReviewRequest(ApiModel):
    """Schema for an admin review decision."""

    status: str
    admin_comments: str | None = None


class TimesheetResponse(ApiModel):
    """Schema for timesheet response."""

    id: UUID
    employee_id: UUID
    employee_name: str
    work_date: date = Field(alias="date")
    planned_work: str
    actual_work: str
    remarks: str
    status: str
    admin_comments: str
    reviewer_id: UUID | None = Field(default=None, alias="reviewedBy")
    reviewer_name: str | None = None
    reviewed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class AdminTimesheetResponse(TimesheetResponse):
    """Timesheet with the owner's current profile attached."""

    employee: EmployeeSummary | None = None


class DashboardResponse(ApiModel):
    """Aggregate counts for the admin dashboard."""

    total_timesheets: int
    pending: int
    accepted: int
    rejected: int
    total_employees: int
