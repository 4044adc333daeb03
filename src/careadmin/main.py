"""
Doctor Administration Service - Application Entry Point.

This module wires together:
- FastAPI application factory with the back-office routers
- Structured logging (structlog)
- CORS, security-headers and request-ID middleware
- Global exception handlers mapping domain errors to the error envelope
- Lifespan: DB health check on startup, graceful shutdown
"""
from __future__ import annotations

import logging
import sys
import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from .api.v1 import router as v1_router
from .core.config import get_settings
from .core.exceptions import AppException
from .core.responses import ErrorDetail, ErrorResponse, ResponseMeta
from .db.session import close_db, get_db_manager


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

def configure_logging() -> None:
    """Configure structured logging via structlog."""
    settings = get_settings()
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            (
                structlog.dev.ConsoleRenderer()
                if settings.is_development
                else structlog.processors.JSONRenderer()
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Third-party libraries (SQLAlchemy, uvicorn) log through stdlib logging.
    logging.basicConfig(
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        level=log_level,
        stream=sys.stdout,
    )


# ---------------------------------------------------------------------------
# Security-headers middleware
# ---------------------------------------------------------------------------

class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject security-hardening HTTP response headers on every response."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Strict-Transport-Security"] = (
            "max-age=63072000; includeSubDomains; preload"
        )
        docs_paths = {"/docs", "/redoc", "/openapi.json"}
        if request.url.path in docs_paths and not get_settings().is_production:
            # Swagger UI loads its assets from jsdelivr.
            response.headers["Content-Security-Policy"] = (
                "default-src 'self'; "
                "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
                "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
                "img-src 'self' data: https://fastapi.tiangolo.com; "
                "frame-ancestors 'none'"
            )
        else:
            response.headers["Content-Security-Policy"] = (
                "default-src 'none'; frame-ancestors 'none'; base-uri 'none'"
            )
        return response


# ---------------------------------------------------------------------------
# Request-ID middleware
# ---------------------------------------------------------------------------

class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach a request ID to every request/response pair.

    An incoming ``X-Request-ID`` header is honoured. The ID is stored in
    ``request.state.request_id``, echoed in the response header and bound
    to the structlog context for the duration of the request.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id")
        response.headers["X-Request-ID"] = request_id
        return response


# ---------------------------------------------------------------------------
# Application lifespan
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Verify database connectivity on startup and dispose the pool on shutdown.

    Schema management is handled by Alembic (``scripts/migrate.py``), never
    by ``create_all`` at startup.
    """
    settings = get_settings()
    logger = structlog.get_logger()

    configure_logging()
    logger.info(
        "Starting application",
        app_name=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.APP_ENV,
    )

    db_health = await get_db_manager().health_check()
    logger.info("Database health check", result=db_health)
    logger.info("Application started successfully")

    yield

    logger.info("Shutting down application")
    await close_db()
    logger.info("Application shutdown complete")


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------

def create_application() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    tags_metadata = [
        {"name": "Health", "description": "Liveness, readiness and dependency status."},
        {
            "name": "Doctors",
            "description": (
                "Doctor registry: listing, search, edits, sentiment, and the "
                "suspend / unsuspend / delete lifecycle."
            ),
        },
        {"name": "Candidates", "description": "Application intake and approve / reject review."},
        {
            "name": "Blacklist",
            "description": "Credentials barred from the registry, with manual maintenance.",
        },
        {"name": "Admin - Activity Log", "description": "Read-only audit trail of admin actions."},
        {"name": "Notifications", "description": "Dashboard alerts raised by lifecycle events."},
    ]

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="""
# Doctor Administration API

Back-office REST API for the doctor registry.

| Feature | Description |
|---------|-------------|
| **Registry** | Paginated listing, search, edits and sentiment for approved doctors |
| **Review** | Approve or reject pending applications |
| **Lifecycle** | Suspensions with automatic deletion on the sixth strike |
| **Blacklist** | Snapshots of removed doctors and repeat applicants |
| **Audit** | Every mutation recorded in the admin activity log |

All endpoints are versioned under `/api/v1/`.
        """,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
        default_response_class=JSONResponse,
        lifespan=lifespan,
        openapi_tags=tags_metadata,
    )

    # Middleware: first registered = innermost wrapper.
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=settings.cors_methods_list,
        allow_headers=["*"],
    )

    _register_exception_handlers(app)
    app.include_router(v1_router)

    @app.get("/", include_in_schema=False)
    async def root() -> dict:
        payload: dict = {
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "health": "/api/v1/health",
        }
        if settings.is_development:
            payload["docs"] = "/docs"
        return payload

    return app


def _meta_for(request: Request) -> ResponseMeta:
    return ResponseMeta(request_id=getattr(request.state, "request_id", None))


def _register_exception_handlers(app: FastAPI) -> None:
    """Attach global exception handlers to the application."""
    logger = structlog.get_logger()

    @app.exception_handler(AppException)
    async def _app_exc(request: Request, exc: AppException) -> JSONResponse:
        logger.warning(
            "Application exception",
            error_code=exc.error_code,
            message=exc.message,
            path=str(request.url),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error=ErrorDetail(code=exc.error_code, message=exc.message, details=exc.details),
                meta=_meta_for(request),
            ).model_dump(mode="json"),
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_exc(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.warning("Validation error", errors=exc.errors(), path=str(request.url))
        validation_errors = [
            {
                "field": ".".join(str(loc) for loc in err["loc"]),
                "message": err["msg"],
                "type": err["type"],
            }
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=422,
            content=ErrorResponse(
                error=ErrorDetail(
                    code="VALIDATION_ERROR",
                    message="Request validation failed",
                    details={"validation_errors": validation_errors},
                ),
                meta=_meta_for(request),
            ).model_dump(mode="json"),
        )

    @app.exception_handler(Exception)
    async def _generic_exc(request: Request, exc: Exception) -> JSONResponse:
        settings = get_settings()
        logger.exception("Unhandled exception", error=str(exc), path=str(request.url))
        message = str(exc) if settings.DEBUG else "An unexpected error occurred"
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error=ErrorDetail(code="INTERNAL_ERROR", message=message),
                meta=_meta_for(request),
            ).model_dump(mode="json"),
        )


# ---------------------------------------------------------------------------
# Module-level application instance (consumed by uvicorn / gunicorn)
# ---------------------------------------------------------------------------
app = create_application()
