"""
Exception handlers for errors the framework answers on its own.

FastAPI handles request validation failures and HTTPException (raised by
endpoints, or by the router for unknown paths and methods) before they can
reach ErrorResponseMiddleware. They are classified here so they leave through
the same envelope as every other error.
"""

from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from httperrors.builder import build
from httperrors.config import Settings
from httperrors.kinds import Code, Kind, MissingField, Parameter
from httperrors.responder import error_response

HTTP_400 = 400

STATUS_KINDS: dict[int, Kind] = {
    400: Kind.INVALID_REQUEST,
    401: Kind.UNAUTHENTICATED,
    403: Kind.PERMISSION,
    404: Kind.NOT_FOUND,
    405: Kind.INVALID_REQUEST,
    409: Kind.EXIST,
    422: Kind.VALIDATION,
}


def classify_validation_error(exc: RequestValidationError) -> BaseException:
    """Classify the first validation error as a 400 on the offending field."""
    errors = exc.errors()
    if not errors:
        return build(HTTP_400, Kind.VALIDATION, Code("invalid_request"), ValueError("Invalid request"))

    first = errors[0]
    loc = first.get("loc") or ()
    field = str(loc[-1]) if loc else ""
    if first.get("type") == "missing" and field:
        cause: BaseException = MissingField(field)
    else:
        cause = ValueError(first.get("msg", "Invalid request"))

    return build(HTTP_400, Kind.VALIDATION, Code("invalid_request"), Parameter(field), cause)


def classify_http_exception(exc: StarletteHTTPException) -> BaseException:
    """Classify an HTTPException by its status.

    The message is the standard reason phrase; exc.detail may hold internal
    text and is never sent.
    """
    status_code = exc.status_code
    try:
        phrase = HTTPStatus(status_code).phrase
    except ValueError:
        phrase = "HTTP error"

    if status_code >= 500:
        kind = Kind.INTERNAL
    else:
        kind = STATUS_KINDS.get(status_code, Kind.INVALID_REQUEST)

    return build(status_code, kind, Code("_".join(phrase.lower().split())), RuntimeError(phrase))


def register_error_handlers(app: FastAPI, settings: Settings | None = None) -> None:
    """Register the framework error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
        settings: Passed through to the responder.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(_request: Request, exc: RequestValidationError) -> Response:
        """Answer request validation failures with a classified 400."""
        return error_response(classify_validation_error(exc), settings=settings)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(_request: Request, exc: StarletteHTTPException) -> Response:
        """Answer HTTPException with its own status, keeping headers such as Allow."""
        response = error_response(classify_http_exception(exc), settings=settings)
        for name, value in (exc.headers or {}).items():
            response.headers[name] = value
        return response
