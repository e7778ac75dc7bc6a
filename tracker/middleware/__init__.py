"""Middleware components for the application."""

from tracker.middleware.audit_logger import AuditLogMiddleware
from tracker.middleware.request_id import RequestIDMiddleware
from tracker.middleware.request_size import RequestSizeLimitMiddleware
from tracker.middleware.security_headers import SecurityHeadersMiddleware

__all__ = [
    "AuditLogMiddleware",
    "RequestIDMiddleware",
    "RequestSizeLimitMiddleware",
    "SecurityHeadersMiddleware",
]
