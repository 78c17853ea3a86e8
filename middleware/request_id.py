"""
Request ID middleware for tracking requests across the application.

Every log line written while a request is being handled carries the
same request id, and the id is echoed back in the X-Request-ID header
so a client can quote it when reporting a failed checkout.
"""

import uuid
import logging
from contextvars import ContextVar
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


_request_id: ContextVar[str] = ContextVar("request_id", default="-")


class RequestIDLogFilter(logging.Filter):
    """Copies the current request id onto each log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = _request_id.get()
        return True


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Adds a unique request ID to each request.

    1. Use the client's X-Request-ID header, or generate a UUID
    2. Store it in request.state and in a context variable for logging
    3. Return it in the X-Request-ID response header
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        request.state.request_id = request_id
        token = _request_id.set(request_id)

        try:
            response: Response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            _request_id.reset(token)


def get_request_id(request: Request) -> str:
    """
    Request ID stored by RequestIDMiddleware, or "no-request-id".
    """
    return getattr(request.state, "request_id", "no-request-id")
