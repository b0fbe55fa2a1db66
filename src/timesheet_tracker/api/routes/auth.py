"""Authentication endpoints."""

import logging

from fastapi import APIRouter

from timesheet_tracker.api.dependencies import AppSettings, CurrentUser, DbSession
from timesheet_tracker.api.schemas import ErrorResponse, LoginRequest, LoginResponse, UserResponse
from timesheet_tracker.errors import UnauthenticatedError
from timesheet_tracker.security import create_access_token, verify_password
from timesheet_tracker.services.employee_service import EmployeeService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)
async def login(db: DbSession, settings: AppSettings, payload: LoginRequest) -> LoginResponse:
    """Exchange email and password for a bearer token."""
    user = await EmployeeService(db).get_by_email(payload.email)
    if user is None or not verify_password(payload.password, user.password_hash):
        logger.info("Failed login for %s", payload.email)
        raise UnauthenticatedError("Invalid credentials")
    if not user.is_active:
        raise UnauthenticatedError("Account is deactivated")

    token = create_access_token(settings, user.id, user.role, user.name)
    return LoginResponse(token=token, user=UserResponse.model_validate(user))


@router.get(
    "/me",
    response_model=UserResponse,
    responses={401: {"model": ErrorResponse}},
)
async def me(user: CurrentUser) -> UserResponse:
    """Profile of the authenticated account."""
    return UserResponse.model_validate(user)
