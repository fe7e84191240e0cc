"""Starlette middleware for request tracing and error responses."""

import re
import uuid
from collections.abc import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from httperrors.config import Settings
from httperrors.responder import error_response

REQUEST_ID_HEADER = "X-Request-ID"

# Client-supplied ids end up in every error log line; anything else is replaced.
_REQUEST_ID_PATTERN = re.compile(r"[A-Za-z0-9._:-]{1,128}")


def request_id_for(request: Request) -> str:
    """The caller's X-Request-ID if it is a plain token, else a fresh UUID4."""
    supplied = request.headers.get(REQUEST_ID_HEADER, "")
    if _REQUEST_ID_PATTERN.fullmatch(supplied):
        return supplied
    return str(uuid.uuid4())


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tag each request, and every error logged while serving it, with an id.

    The id is bound into structlog's context vars and echoed back in
    X-Request-ID, on error responses too. Add it after ErrorResponseMiddleware
    so that it wraps the error boundary.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = request_id_for(request)
        with structlog.contextvars.bound_contextvars(request_id=request_id):
            response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class ErrorResponseMiddleware(BaseHTTPMiddleware):
    """Answer any exception escaping an endpoint with the JSON error envelope.

    HTTPException and request validation errors are answered earlier, by the
    handlers in httperrors.handlers.

    This is the responder boundary: each failed request reaches respond() once,
    with the exception that ended it.
    """

    def __init__(self, app: ASGIApp, settings: Settings | None = None) -> None:
        super().__init__(app)
        self.settings = settings

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            return error_response(exc, settings=self.settings)
