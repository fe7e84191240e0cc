"""Error classification and JSON error responses for HTTP services."""

from httperrors.builder import build
from httperrors.exceptions import Classified, ClassifiedError, ErrorBuildError
from httperrors.kinds import Code, Kind, MissingField, Parameter
from httperrors.responder import RecordingResponseWriter, ResponseWriter, error_response, respond

__all__ = [
    "Classified",
    "ClassifiedError",
    "Code",
    "ErrorBuildError",
    "Kind",
    "MissingField",
    "Parameter",
    "RecordingResponseWriter",
    "ResponseWriter",
    "build",
    "error_response",
    "respond",
]
