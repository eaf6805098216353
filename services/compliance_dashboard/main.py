"""
Compliance Dashboard Service - Main Application
===============================================

FastAPI application serving regulation data from the spreadsheet,
department progress views, the notification feed and admin triggers.

Version: 0.1.0
"""

import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from services.compliance_dashboard import __version__
from services.compliance_dashboard.analysis import MonthlyAnalysis
from services.compliance_dashboard.exceptions import DataSourceUnavailable, ValidationFailure
from services.compliance_dashboard.loader import SpreadsheetLoader
from services.compliance_dashboard.notifications import (
    EmailLog,
    NotificationDispatcher,
    NotificationFeed,
)
from services.compliance_dashboard.queries import RegulationQueryService
from services.compliance_dashboard.routes import admin, dashboard, notifications, regulations
from services.compliance_dashboard.scheduler import ComplianceScheduler
from shared.config import EmailSettings, Settings, get_settings
from shared.logging import bind_context, clear_context, get_logger, setup_logging
from shared.models.common import ErrorResponse, HealthResponse


SERVICE_NAME = "compliance-dashboard"

logger = get_logger(__name__)


def _resolve(settings: Settings, path: Path) -> Path:
    return path if path.is_absolute() else settings.project_root / path


def build_components(app: FastAPI, settings: Settings) -> None:
    """Create the shared service components and attach them to ``app.state``."""
    loader = SpreadsheetLoader(
        _resolve(settings, settings.spreadsheet.path),
        ttl_seconds=settings.spreadsheet.cache_ttl_seconds,
        sheet_name=settings.spreadsheet.sheet_name,
    )
    # A relative log path resolves against the working directory.
    email_log = EmailLog(
        settings.email.log_path,
        tail_lines=settings.email.log_tail_lines,
    )
    dispatcher = NotificationDispatcher(email_log, settings_factory=EmailSettings)
    feed = NotificationFeed(max_size=settings.notifications.feed_size)
    analysis = MonthlyAnalysis(
        loader,
        dispatcher,
        feed,
        contacts=settings.notifications.department_contacts,
        default_recipient=settings.notifications.default_recipient,
        priority=settings.notifications.priority_departments,
    )

    app.state.settings = settings
    app.state.loader = loader
    app.state.queries = RegulationQueryService(loader)
    app.state.email_log = email_log
    app.state.dispatcher = dispatcher
    app.state.feed = feed
    app.state.analysis = analysis
    app.state.scheduler = ComplianceScheduler(analysis, loader, settings.scheduler)


@asynccontextmanager
async def lifespan(app: FastAPI) -> Any:
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    logger.info(
        "compliance_dashboard_starting",
        environment=settings.environment.value,
        port=settings.port,
        transport=app.state.dispatcher.current_transport().value,
    )

    # Startup
    try:
        records = await app.state.loader.load_all()
        logger.info("spreadsheet_ready", records=len(records))
    except DataSourceUnavailable as e:
        logger.warning("spreadsheet_unavailable_at_startup", error=str(e))

    scheduler: ComplianceScheduler = app.state.scheduler
    if settings.scheduler.enabled and not settings.is_testing:
        scheduler.start()

    yield

    # Shutdown
    logger.info("compliance_dashboard_shutting_down")
    if scheduler.running:
        await scheduler.stop()


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Settings to use; the process-wide settings when omitted

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    setup_logging(
        log_level=settings.log_level.value,
        json_logs=settings.is_production,
        service_name=SERVICE_NAME,
    )

    app = FastAPI(
        title="ComplianceGuard Dashboard Service",
        description="Regulation tracking, department progress and compliance email notifications",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )
    build_components(app, settings)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins_list,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.middleware("http")(log_requests)

    # =========================================================================
    # Health Check Endpoints
    # =========================================================================

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check(request: Request) -> HealthResponse:
        """
        Service health check.

        Reports whether the spreadsheet can be read and which email
        transport is currently selected.
        """
        components: dict[str, dict[str, Any]] = {}

        loader: SpreadsheetLoader = request.app.state.loader
        try:
            records = await loader.load_all()
            components["spreadsheet"] = {
                "status": "healthy",
                "records": len(records),
                "path": str(loader.path),
            }
        except DataSourceUnavailable as e:
            components["spreadsheet"] = {"status": "unhealthy", "error": str(e)}

        components["email"] = {
            "status": "healthy",
            "transport": request.app.state.dispatcher.current_transport().value,
        }

        all_healthy = all(c.get("status") == "healthy" for c in components.values())

        return HealthResponse(
            status="healthy" if all_healthy else "degraded",
            service=SERVICE_NAME,
            version=__version__,
            components=components,
        )

    # =========================================================================
    # Include Routers
    # =========================================================================

    app.include_router(regulations.router, prefix="/api", tags=["Regulations"])
    app.include_router(dashboard.router, prefix="/api/dashboard", tags=["Dashboard"])
    app.include_router(notifications.router, prefix="/api/notifications", tags=["Notifications"])
    app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])

    # =========================================================================
    # Error Handlers
    # =========================================================================

    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ValidationFailure, validation_failure_handler)
    app.add_exception_handler(DataSourceUnavailable, data_source_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    return app


async def log_requests(request: Request, call_next: Any) -> Any:
    """Log every API request with its status and duration."""
    clear_context()
    bind_context(method=request.method, path=request.url.path)

    started = time.perf_counter()
    response = await call_next(request)
    if request.url.path.startswith("/api"):
        logger.info(
            "http_request",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
        )
    return response


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions."""
    logger.warning(
        "http_exception",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(message=str(exc.detail)).model_dump(),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("request_validation_failed", path=request.url.path, errors=exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": "요청 형식이 올바르지 않습니다."},
    )


async def validation_failure_handler(request: Request, exc: ValidationFailure) -> JSONResponse:
    logger.warning("validation_failure", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": str(exc)},
    )


async def data_source_handler(request: Request, exc: DataSourceUnavailable) -> JSONResponse:
    """The spreadsheet could not be read."""
    logger.error("data_source_unavailable", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(message="법규 데이터를 불러오는 중 오류가 발생했습니다.").model_dump(),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(message="서버 오류가 발생했습니다.").model_dump(),
    )


app = create_app()


# ============================================================================
# Run with Uvicorn
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "services.compliance_dashboard.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.value.lower(),
    )
