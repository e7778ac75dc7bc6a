"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from tracker import __version__
from tracker.api.v1.router import router as api_router
from tracker.config import settings
from tracker.core.exceptions import APIException, error_body
from tracker.database import close_db, get_session_maker, init_db
from tracker.http import close_http_client, init_http_client
from tracker.middleware.audit_logger import AuditLogMiddleware, configure_logging
from tracker.middleware.request_id import RequestIDMiddleware
from tracker.middleware.request_size import RequestSizeLimitMiddleware
from tracker.middleware.security_headers import SecurityHeadersMiddleware
from tracker.schemas.common import HealthResponse

configure_logging(settings)
logger = structlog.get_logger()

HTTP_ERROR_CODES = {
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events handler."""
    # Startup
    await init_db()
    await init_http_client()
    logger.info("application_started", version=__version__, env=settings.app_env)
    yield
    # Shutdown
    await close_http_client()
    await close_db()


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description=(
        "Bug tickets, feature requests and a code change log for the "
        "Bungee × Astro add-on, mirrored to Discord."
    ),
    version=__version__,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    openapi_url="/openapi.json" if settings.debug else None,
    lifespan=lifespan,
)


# Add middleware (last added is outermost)
app.add_middleware(RequestSizeLimitMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(AuditLogMiddleware)
app.add_middleware(RequestIDMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    expose_headers=["X-Request-ID"],
)


def _with_request_id(request: Request, content: dict[str, Any]) -> dict[str, Any]:
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        content["request_id"] = request_id
    return content


# Exception handlers
@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException) -> JSONResponse:
    """Handle custom API exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=_with_request_id(request, dict(exc.detail)),
        headers=exc.headers,
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render framework errors (unknown route, wrong method) in the common shape."""
    code = HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
    return JSONResponse(
        status_code=exc.status_code,
        content=_with_request_id(request, error_body(code, str(exc.detail))),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors as 400 responses."""
    errors = []
    missing = False
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"])
        message = error["msg"].removeprefix("Value error, ")
        missing = missing or error["type"] == "missing"
        errors.append({
            "field": field,
            "message": message,
        })

    if missing:
        message = "Missing required fields"
    elif errors:
        message = errors[0]["message"]
    else:
        message = "Request validation failed"

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_with_request_id(request, error_body("VALIDATION_ERROR", message, errors)),
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
    )

    content = error_body(
        "INTERNAL_ERROR",
        "An unexpected error occurred",
        [{"type": type(exc).__name__, "message": str(exc)}],
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_with_request_id(request, content),
    )


# Include API routers
app.include_router(api_router, prefix=settings.api_prefix)


# Health check endpoints
@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="Basic health check",
)
async def health_check() -> HealthResponse:
    """Basic health check endpoint."""
    return HealthResponse(
        status="healthy",
        version=__version__,
    )


@app.get(
    "/health/ready",
    response_model=HealthResponse,
    tags=["Health"],
    summary="Readiness probe",
)
async def readiness_check() -> HealthResponse:
    """Readiness probe - checks database connectivity."""
    db_status = "healthy"

    try:
        async with get_session_maker()() as session:
            await session.execute(text("SELECT 1"))
    except Exception as e:
        db_status = f"unhealthy: {str(e)}"

    return HealthResponse(
        status="healthy" if db_status == "healthy" else "unhealthy",
        version=__version__,
        database=db_status,
    )


@app.get(
    "/health/live",
    response_model=HealthResponse,
    tags=["Health"],
    summary="Liveness probe",
)
async def liveness_check() -> HealthResponse:
    """Liveness probe - basic check that the application is running."""
    return HealthResponse(
        status="alive",
        version=__version__,
    )


# Root endpoint
@app.get("/", include_in_schema=False)
async def root() -> dict:
    """Root endpoint with API information."""
    return {
        "name": settings.app_name,
        "version": __version__,
        "docs": "/docs" if settings.debug else None,
        "health": "/health",
    }
