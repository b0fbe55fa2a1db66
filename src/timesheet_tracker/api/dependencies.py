"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from timesheet_tracker.config import Settings
from timesheet_tracker.errors import UnauthenticatedError
from timesheet_tracker.models import User
from timesheet_tracker.security import decode_access_token
from timesheet_tracker.services.access import AdminCapability, EmployeeCapability

bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    async with request.app.state.session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


# Type aliases for cleaner dependency injection
AppSettings = Annotated[Settings, Depends(get_settings)]
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
BearerCredentials = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]


async def _user_for_token(db: AsyncSession, settings: Settings, token: str | None) -> User:
    if not token:
        raise UnauthenticatedError("No token, authorization denied")

    claims = decode_access_token(settings, token)
    user = await db.get(User, claims["sub"])
    if user is None:
        raise UnauthenticatedError("Token is not valid")
    if not user.is_active:
        raise UnauthenticatedError("Account is deactivated")
    return user


async def get_current_user(
    db: DbSession,
    settings: AppSettings,
    credentials: BearerCredentials,
) -> User:
    """Authenticate from the Authorization header."""
    token = credentials.credentials if credentials else None
    return await _user_for_token(db, settings, token)


async def get_current_user_allowing_query_token(
    db: DbSession,
    settings: AppSettings,
    credentials: BearerCredentials,
    token: Annotated[str | None, Query()] = None,
) -> User:
    """Authenticate from the Authorization header or a ``?token=`` parameter.

    The query-string fallback exists for browser download links and can be
    switched off with ALLOW_QUERY_TOKEN.
    """
    header_token = credentials.credentials if credentials else None
    if header_token is None and settings.allow_query_token:
        header_token = token
    return await _user_for_token(db, settings, header_token)


CurrentUser = Annotated[User, Depends(get_current_user)]


def get_employee_capability(db: DbSession, user: CurrentUser) -> EmployeeCapability:
    return EmployeeCapability(db, user)


def get_admin_capability(db: DbSession, user: CurrentUser) -> AdminCapability:
    return AdminCapability(db, user)


def get_admin_capability_allowing_query_token(
    db: DbSession,
    user: Annotated[User, Depends(get_current_user_allowing_query_token)],
) -> AdminCapability:
    return AdminCapability(db, user)


EmployeeTier = Annotated[EmployeeCapability, Depends(get_employee_capability)]
AdminTier = Annotated[AdminCapability, Depends(get_admin_capability)]
AdminTierWithQueryToken = Annotated[
    AdminCapability, Depends(get_admin_capability_allowing_query_token)
]
