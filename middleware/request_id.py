"""
Request ID middleware.

Every request gets an id (the client's ``X-Request-ID`` if it sent one),
which is echoed in the response headers and attached to every log record
emitted while the request is handled.

The id lives in a ContextVar, so overlapping requests each see their own.
``RequestIDFilter`` copies it onto log records; ``setup_logging`` installs
it on every handler.
"""

import uuid
import logging
from contextvars import ContextVar
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)


class RequestIDFilter(logging.Filter):
    """
    Stamps ``record.request_id`` with the id of the request being handled,
    or None outside a request.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())

        request.state.request_id = request_id
        token = request_id_var.set(request_id)

        try:
            response: Response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            request_id_var.reset(token)


def get_request_id(request: Request) -> str:
    """
    Request id stored by RequestIDMiddleware, or "no-request-id" outside it.
    """
    return getattr(request.state, "request_id", "no-request-id")
