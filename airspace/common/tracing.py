"""Request id propagation.

Every HTTP request gets a request id: the client's ``x-request-id`` header
when present, otherwise a generated one. The id is stored in a context
variable for the duration of the request so that log records, response
metadata and debug output for one restriction computation share it, and
it is echoed back on the response.
"""

import contextvars
from logging import getLogger
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = getLogger(__name__)

REQUEST_ID_HEADER = "x-request-id"
MAX_REQUEST_ID_LENGTH = 128

ctx_trace_id: contextvars.ContextVar[str] = contextvars.ContextVar("trace_id", default="")
ctx_request: contextvars.ContextVar[dict | None] = contextvars.ContextVar("request", default=None)
ctx_response: contextvars.ContextVar[dict | None] = contextvars.ContextVar(
    "response", default=None
)


def new_request_id() -> str:
    return uuid4().hex


def current_request_id() -> str:
    """Request id of the current context, generating one outside a request."""
    return ctx_trace_id.get() or new_request_id()


def _accepted_request_id(header_value: str | None) -> str | None:
    # The id names a debug output directory, so only plain tokens are kept
    if not header_value or len(header_value) > MAX_REQUEST_ID_LENGTH:
        return None
    if not all(ch.isalnum() or ch in "-_." for ch in header_value):
        return None
    if header_value.strip(".") == "":
        return None
    return header_value


class TraceIdMiddleware(BaseHTTPMiddleware):
    """Assigns the request id and records HTTP details in context variables."""

    async def dispatch(self, request: Request, call_next):
        header_value = request.headers.get(REQUEST_ID_HEADER)
        request_id = _accepted_request_id(header_value)
        if request_id is None:
            request_id = new_request_id()
            if header_value:
                logger.debug("Replacing unusable x-request-id header with a generated id")
        ctx_trace_id.set(request_id)

        ctx_request.set({"url": str(request.url), "method": request.method})

        response = await call_next(request)
        ctx_response.set({"status_code": response.status_code})
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
