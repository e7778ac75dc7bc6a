"""Custom exception classes for the application."""

from typing import Any, Optional

from fastapi import HTTPException, status


def error_body(
    code: str,
    message: str,
    details: Optional[list[dict[str, Any]]] = None,
) -> dict[str, Any]:
    """Build the standard error payload: ``{"error": ..., "code": ..., "details"?}``."""
    body: dict[str, Any] = {
        "error": message,
        "code": code,
    }
    if details:
        body["details"] = details
    return body


class APIException(HTTPException):
    """Base API exception with standardized error format."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: Optional[list[dict[str, Any]]] = None,
        headers: Optional[dict[str, str]] = None,
    ):
        self.code = code
        self.error_message = message
        self.details = details

        super().__init__(
            status_code=status_code,
            detail=error_body(code, message, details),
            headers=headers,
        )


class ValidationError(APIException):
    """Missing or malformed input."""

    def __init__(
        self,
        message: str = "Validation failed",
        details: Optional[list[dict[str, Any]]] = None,
        code: str = "VALIDATION_ERROR",
    ):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            code=code,
            message=message,
            details=details,
        )


class AuthenticationError(APIException):
    """Missing, invalid or expired credentials."""

    def __init__(
        self,
        message: str = "Authentication required",
        code: str = "AUTHENTICATION_ERROR",
    ):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            code=code,
            message=message,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ForbiddenError(APIException):
    """Request understood but not permitted."""

    def __init__(
        self,
        message: str = "You don't have permission to perform this action",
        code: str = "FORBIDDEN",
    ):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            code=code,
            message=message,
        )


class NotFoundError(APIException):
    """Resource not found exception."""

    def __init__(
        self,
        resource: str = "Resource",
        message: Optional[str] = None,
        code: str = "NOT_FOUND",
    ):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            code=code,
            message=message or f"{resource} not found",
        )


class ConflictError(APIException):
    """Resource conflict exception."""

    def __init__(
        self,
        message: str = "Resource conflict",
        code: str = "CONFLICT_ERROR",
        details: Optional[list[dict[str, Any]]] = None,
    ):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            code=code,
            message=message,
            details=details,
        )


class InternalError(APIException):
    """Server-side failure the client cannot fix."""

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        code: str = "INTERNAL_ERROR",
        details: Optional[list[dict[str, Any]]] = None,
    ):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            code=code,
            message=message,
            details=details,
        )


class UpstreamError(APIException):
    """A third-party API call failed."""

    def __init__(
        self,
        message: str = "Upstream service failed",
        code: str = "UPSTREAM_ERROR",
    ):
        super().__init__(
            status_code=status.HTTP_502_BAD_GATEWAY,
            code=code,
            message=message,
        )
