"""FastAPI application factory."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.exceptions import HTTPException as StarletteHTTPException

from timesheet_tracker import __version__
from timesheet_tracker.api.routes import (
    admin_router,
    auth_router,
    health_router,
    timesheets_router,
)
from timesheet_tracker.config import Settings, get_settings
from timesheet_tracker.database import create_engine, create_session_factory, create_tables
from timesheet_tracker.errors import TimesheetTrackerError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    settings: Settings = app.state.settings
    engine = None
    # Startup
    if app.state.session_factory is None:
        engine = create_engine(settings)
        if settings.create_tables:
            await create_tables(engine)
        app.state.session_factory = create_session_factory(engine)
        logger.info("Connected to %s", engine.url.render_as_string(hide_password=True))
    yield
    # Shutdown
    if engine is not None:
        await engine.dispose()


def _error_body(message: str, code: str) -> dict[str, str]:
    return {"message": message, "code": code}


def create_app(
    settings: Settings | None = None,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    When ``session_factory`` is given the lifespan leaves the database alone,
    which lets tests drive the app against their own engine.
    """
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(
        title="Timesheet Tracker API",
        description="Daily timesheet submission and review",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.session_factory = session_factory

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(TimesheetTrackerError)
    async def domain_error_handler(
        request: Request, exc: TimesheetTrackerError
    ) -> JSONResponse:
        """Translate domain errors into their HTTP status."""
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.message, exc.code),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Keep framework errors in the same shape as domain errors."""
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(str(exc.detail), "HTTP_ERROR"),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Report malformed requests as 400 with the first problem."""
        errors = exc.errors()
        message = "Invalid request"
        if errors:
            first = errors[0]
            location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body(message, "INVALID_INPUT"),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body("An unexpected error occurred", "INTERNAL_ERROR"),
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(auth_router, prefix="/api")
    app.include_router(timesheets_router, prefix="/api")
    app.include_router(admin_router, prefix="/api")

    return app


# Default app instance for uvicorn
app = create_app()
