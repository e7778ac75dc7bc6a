"""Request body size limit middleware."""

from fastapi import status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from tracker.core.exceptions import error_body


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Reject requests whose declared body is larger than ``MAX_SIZE``."""

    MAX_SIZE = 1 * 1024 * 1024  # 1MB

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.MAX_SIZE:
            return JSONResponse(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                content=error_body(
                    "REQUEST_TOO_LARGE",
                    f"Request body too large. Maximum size is {self.MAX_SIZE // 1024}KB.",
                ),
            )
        return await call_next(request)
