"""Terse construction of classified errors at the failure site.

    raise build(404, Kind.NOT_FOUND, "user_missing", LookupError("no such user"))

The type of each argument decides what it sets:

    int              status code
    Kind             kind
    Parameter        offending field (always wrap it; a plain str is a Code)
    Code or str      code
    classified error cloned (or snapshotted) and wrapped as the cause
    other exception  wrapped as the cause

Arguments may come in any order; when a type repeats, the last one wins.
"""

import os
import sys
from typing import Any

from structlog.stdlib import BoundLogger

from httperrors.exceptions import Classified, ClassifiedError, ErrorBuildError
from httperrors.kinds import Code, Kind, Parameter
from httperrors.logging import get_logger

logger = get_logger(__name__)


def _call_site() -> tuple[str, int]:
    # Frame 0 is _call_site, 1 is build, 2 is whoever called build.
    frame = sys._getframe(2)
    return frame.f_code.co_filename, frame.f_lineno


def build(*args: Any, logger: BoundLogger = logger) -> ClassifiedError | ErrorBuildError:
    """Build a ClassifiedError from its arguments.

    There must be at least one argument: build() with none can only come from a
    broken call site, so the process is aborted on the spot.

    An argument of an unsupported type, or a call without any underlying error,
    is logged with the caller's file and line and an ErrorBuildError is returned
    in place of the classified error.
    """
    if not args:
        file, line = _call_site()
        logger.critical("error_build_without_arguments", file=file, line=line)
        sys.stderr.write(f"call to httperrors.build with no arguments from {file}:{line}\n")
        sys.stderr.flush()
        os.abort()

    status_code = 0
    kind = Kind.UNANTICIPATED
    code = Code("")
    param = Parameter("")
    cause: BaseException | None = None

    for arg in args:
        # bool is an int subclass but never a status code.
        if isinstance(arg, int) and not isinstance(arg, bool):
            status_code = arg
        elif isinstance(arg, Kind):
            kind = arg
        elif isinstance(arg, Parameter):
            param = arg
        elif isinstance(arg, str):
            code = Code(arg)
        elif isinstance(arg, ClassifiedError):
            cause = arg.clone()
        elif isinstance(arg, BaseException) and isinstance(arg, Classified):
            cause = ClassifiedError.snapshot(arg)
        elif isinstance(arg, BaseException):
            cause = arg
        else:
            file, line = _call_site()
            logger.error("bad_error_build_call", file=file, line=line, args=repr(args))
            return ErrorBuildError.bad_argument(arg)

    if cause is None:
        file, line = _call_site()
        logger.error("bad_error_build_call", file=file, line=line, args=repr(args))
        return ErrorBuildError.missing_cause()

    return ClassifiedError(cause=cause, status_code=status_code, kind=kind, code=code, param=param)
