"""Structured logging setup and request audit logging middleware."""

import logging
import time
from typing import Any, Optional

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from tracker.config import Settings

# Map log level string to logging constants
LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

MASK = "***MASKED***"

# Sensitive fields to mask in logs
SENSITIVE_FIELDS = {
    "password",
    "password_hash",
    "token",
    "authorization",
    "registration_secret",
    "registration_password",
    "jwt_secret",
    "api_key",
    "groq_api_key",
    "signature",
    "x-hub-signature-256",
    "x-signature-ed25519",
}

logger = structlog.get_logger()


def mask_sensitive(data: dict[str, Any]) -> dict[str, Any]:
    """Mask sensitive fields (recursively) in a mapping."""
    masked = {}
    for key, value in data.items():
        if isinstance(key, str) and key.lower() in SENSITIVE_FIELDS:
            masked[key] = MASK
        elif isinstance(value, dict):
            masked[key] = mask_sensitive(value)
        else:
            masked[key] = value
    return masked


def mask_sensitive_processor(_logger: Any, _method: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """structlog processor applying ``mask_sensitive`` to every event."""
    return mask_sensitive(event_dict)


def configure_logging(settings: Settings) -> None:
    """Configure structlog (JSON or console output, level filter)."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            mask_sensitive_processor,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if settings.log_format == "json"
            else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            LOG_LEVELS.get(settings.log_level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogMiddleware(BaseHTTPMiddleware):
    """
    Middleware for audit logging of API requests.

    Emits ``request_started`` and ``request_completed`` events with the
    request id, method, path, status and duration. Webhook deliveries and
    auth requests are tagged so they can be filtered.
    """

    # Paths to exclude from detailed logging
    EXCLUDED_PATHS = {
        "/health",
        "/health/ready",
        "/health/live",
    }

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Log request and response details."""
        if request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        request_id = getattr(request.state, "request_id", None)

        log_context = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "query_params": mask_sensitive(dict(request.query_params)),
            "client_ip": self._get_client_ip(request),
            "user_agent": request.headers.get("User-Agent", "unknown"),
        }

        if "/auth/" in request.url.path:
            log_context["event_type"] = "auth_request"
        elif "/webhooks/" in request.url.path:
            log_context["event_type"] = "webhook_delivery"

        logger.info("request_started", **log_context)

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000

        response_context = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": round(duration_ms, 2),
            "user_id": getattr(request.state, "user_id", None),
        }

        # Determine log level based on status code
        if response.status_code >= 500:
            logger.error("request_completed", **response_context)
        elif response.status_code >= 400:
            logger.warning("request_completed", **response_context)
        else:
            logger.info("request_completed", **response_context)

        return response

    def _get_client_ip(self, request: Request) -> str:
        """Get the client IP address from the request."""
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        if request.client:
            return request.client.host

        return "unknown"


def log_auth_event(
    event: str,
    user_id: Optional[str] = None,
    username: Optional[str] = None,
    success: bool = True,
    reason: Optional[str] = None,
) -> None:
    """
    Log an authentication event (register, login).

    Failed attempts only log a username prefix.
    """
    context: dict[str, Any] = {
        "event_type": "auth",
        "auth_action": event,
        "success": success,
    }

    if success:
        context["user_id"] = user_id
        context["username"] = username
        logger.info("auth_event", **context)
    else:
        if username:
            context["username_prefix"] = username[:2] + "***"
        context["reason"] = reason
        logger.warning("auth_event", **context)
