"""Service banner and database-backed health checks."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from timesheet_tracker.api.dependencies import DbSession

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: datetime
    database: str


async def database_reachable(db: AsyncSession) -> bool:
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.warning("Database check failed: %s", exc)
        return False
    return True


@router.get("/", status_code=status.HTTP_200_OK)
async def root() -> dict[str, str]:
    """Service banner."""
    return {"message": "Timesheet backend is running"}


@router.get("/health", response_model=HealthResponse)
async def health_check(db: DbSession) -> HealthResponse:
    """Report API and database health. Always 200; see ``status``."""
    healthy = await database_reachable(db)
    return HealthResponse(
        status="healthy" if healthy else "degraded",
        timestamp=datetime.now(timezone.utc),
        database="healthy" if healthy else "unhealthy",
    )


@router.get("/ready", responses={503: {"description": "Database unreachable"}})
async def readiness_check(db: DbSession) -> JSONResponse:
    """Ready only when the database answers; 503 otherwise."""
    if await database_reachable(db):
        return JSONResponse({"status": "ready"})
    return JSONResponse(
        {"status": "unavailable"},
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
    )
