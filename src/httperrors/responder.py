"""Turn an error into the HTTP response for a failed request.

respond() is called once per failed request, at the handler boundary. Classified
errors (see exceptions.Classified) are answered with their own status, kind, code,
param and message. Everything else is answered with a 500 and a fixed message;
the real error text only goes to the log.
"""

from typing import Protocol

from pydantic_core import PydanticSerializationError
from starlette.responses import Response
from structlog.stdlib import BoundLogger

from httperrors.config import Settings, get_settings
from httperrors.exceptions import Classified
from httperrors.kinds import Kind
from httperrors.logging import get_logger, level_for_status
from httperrors.schemas import ErrorDetail, ErrorResponse

logger = get_logger(__name__)

HTTP_500 = 500

# Body message for every unclassified error. The real error text is only logged.
UNANTICIPATED_MESSAGE = "Unexpected error - contact support"

ERROR_HEADERS: dict[str, str] = {
    "Content-Type": "application/json",
    "X-Content-Type-Options": "nosniff",
}


class ResponseWriter(Protocol):
    """Where respond() writes: headers first, then the status, then the body."""

    def set_header(self, name: str, value: str) -> None: ...

    def write_header(self, status_code: int) -> None: ...

    def write(self, data: bytes) -> None: ...


class RecordingResponseWriter:
    """ResponseWriter that keeps the response in memory.

    Used by framework adapters (see error_response) and in tests. Once the status
    is written the status and headers are frozen.
    """

    def __init__(self) -> None:
        self.status_code: int | None = None
        self.headers: dict[str, str] = {}
        self.body = b""

    def set_header(self, name: str, value: str) -> None:
        if self.status_code is not None:
            raise RuntimeError("headers already written")
        self.headers[name] = value

    def write_header(self, status_code: int) -> None:
        if self.status_code is not None:
            raise RuntimeError("status already written")
        self.status_code = status_code

    def write(self, data: bytes) -> None:
        if self.status_code is None:
            self.write_header(200)
        self.body += data

    def to_response(self) -> Response:
        return Response(
            content=self.body,
            status_code=self.status_code if self.status_code is not None else 200,
            headers=self.headers,
        )


def _resolve_status(status_code: int) -> int:
    """An unset (0) or out-of-range status is answered as 500."""
    if 100 <= status_code <= 599:
        return status_code
    return HTTP_500


def _encode(envelope: ErrorResponse, status_code: int, settings: Settings, logger: BoundLogger) -> str:
    try:
        return envelope.model_dump_json(indent=settings.json_indent, exclude_none=True)
    except (PydanticSerializationError, TypeError, ValueError) as exc:
        logger.error("error_encode_failed", status=status_code, error=str(exc))
        return ""


def _send(writer: ResponseWriter, body: str, status_code: int) -> None:
    for name, value in ERROR_HEADERS.items():
        writer.set_header(name, value)
    writer.write_header(status_code)
    writer.write((body + "\n").encode())


def respond(
    writer: ResponseWriter,
    err: BaseException | None,
    *,
    logger: BoundLogger = logger,
    settings: Settings | None = None,
) -> None:
    """Write err to writer as a JSON error envelope.

    Does nothing when err is None.
    """
    if err is None:
        return
    settings = settings or get_settings()

    if isinstance(err, Classified):
        status_code = _resolve_status(err.http_status())
        detail = ErrorDetail(
            kind=err.error_kind() or str(Kind.UNANTICIPATED),
            code=err.error_code(),
            param=err.error_param(),
            message=str(err),
        )
        log = getattr(logger, level_for_status(status_code))
        log(
            "http_error",
            status=status_code,
            message=detail.message,
            kind=detail.kind,
            code=detail.code,
            param=detail.param,
        )
    else:
        status_code = HTTP_500
        detail = ErrorDetail(kind=str(Kind.UNANTICIPATED), message=UNANTICIPATED_MESSAGE)
        logger.error("unknown_error", status=status_code, error=str(err))

    body = _encode(ErrorResponse(error=detail), status_code, settings, logger)
    _send(writer, body, status_code)


def error_response(
    err: BaseException,
    *,
    logger: BoundLogger = logger,
    settings: Settings | None = None,
) -> Response:
    """Render err through respond() into a Starlette response."""
    writer = RecordingResponseWriter()
    respond(writer, err, logger=logger, settings=settings)
    return writer.to_response()
