"""Per-request trace id for the webhook service.

Every request gets a trace id: the caller's ``X-Trace-Id`` when it sends
one, otherwise a fresh UUIDv7. The id is echoed in the response header,
placed in Problem Details bodies, and bound into structlog's context so
each log line written while serving the request carries it.
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from uuid_extensions import uuid7

TRACE_HEADER = "X-Trace-Id"

_trace_id: ContextVar[str | None] = ContextVar("trace_id", default=None)


def get_trace_id() -> str | None:
    """Trace id of the request being served, None outside a request."""
    return _trace_id.get()


class TraceMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        trace_id = request.headers.get(TRACE_HEADER) or str(uuid7())
        request.state.trace_id = trace_id
        token = _trace_id.set(trace_id)
        structlog.contextvars.bind_contextvars(trace_id=trace_id)
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("trace_id")
            _trace_id.reset(token)
        response.headers[TRACE_HEADER] = trace_id
        return response
