"""Request ID middleware for request tracing."""

from uuid import uuid4

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

MAX_REQUEST_ID_LENGTH = 128


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Attach a request ID to each request.

    A client-supplied ``X-Request-ID`` is reused when it is reasonably short.
    The ID is bound into the structlog context so every log line of the
    request carries it, and echoed in the response header.
    """

    HEADER_NAME = "X-Request-ID"

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Add request ID to request, log context and response."""
        request_id = request.headers.get(self.HEADER_NAME, "")
        if not request_id or len(request_id) > MAX_REQUEST_ID_LENGTH:
            request_id = str(uuid4())

        request.state.request_id = request_id
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        response = await call_next(request)
        response.headers[self.HEADER_NAME] = request_id

        return response
