"""Classified errors raised by application code and rendered by the responder.

Call sites build a ClassifiedError (usually through build()) and raise it.
respond() at the HTTP boundary translates it into the standard error envelope:
{"error": {"kind": "...", "code": "...", "param": "...", "message": "..."}}.
Anything that does not look like a classified error becomes a generic 500.
"""

from dataclasses import dataclass, replace
from typing import Any, Protocol, runtime_checkable

from httperrors.kinds import Code, Kind, Parameter


@runtime_checkable
class Classified(Protocol):
    """Shape of an error the responder can render as-is.

    Matching is structural: any exception with these methods (and a str() that is
    safe to show to clients) is classified, without subclassing ClassifiedError.
    """

    def http_status(self) -> int: ...

    def error_kind(self) -> str: ...

    def error_code(self) -> str: ...

    def error_param(self) -> str: ...


@dataclass(eq=False)
class ClassifiedError(Exception):
    """An error with an HTTP status, a Kind, a Code and an offending Parameter.

    The message shown to clients is the message of the underlying cause, so the
    cause must never carry secrets.
    """

    cause: BaseException
    status_code: int = 0
    kind: Kind = Kind.UNANTICIPATED
    code: Code = Code("")
    param: Parameter = Parameter("")

    def __post_init__(self) -> None:
        if self.cause is None:
            raise TypeError("ClassifiedError requires an underlying cause")
        super().__init__(str(self.cause))

    def __str__(self) -> str:
        return str(self.cause)

    def http_status(self) -> int:
        return self.status_code

    def error_kind(self) -> str:
        return str(self.kind)

    def error_code(self) -> str:
        return str(self.code)

    def error_param(self) -> str:
        return str(self.param)

    def clone(self) -> "ClassifiedError":
        """Return an independent copy.

        Nested classified causes are cloned too; any other cause is shared.
        """
        cause = self.cause.clone() if isinstance(self.cause, ClassifiedError) else self.cause
        return replace(self, cause=cause)

    @classmethod
    def snapshot(cls, err: Classified) -> "ClassifiedError":
        """Freeze the fields of any classified shape into a ClassifiedError.

        err itself becomes the cause; it is never rebuilt through its own
        constructor, whose signature may not match its args.
        """
        return cls(
            cause=err,  # type: ignore[arg-type]
            status_code=err.http_status(),
            kind=Kind(err.error_kind()),
            code=Code(err.error_code()),
            param=Parameter(err.error_param()),
        )

    def __copy__(self) -> "ClassifiedError":
        return self.clone()

    def __deepcopy__(self, memo: dict[int, Any]) -> "ClassifiedError":
        return self.clone()


class ErrorBuildError(Exception):
    """What build() returns when called with arguments it cannot use.

    It takes the place of a half-filled ClassifiedError. It is not
    classified, so if it reaches the boundary the client sees the generic 500.
    """

    def __init__(self, message: str, *, arg_type: str | None = None, value: object = None) -> None:
        self.message = message
        self.arg_type = arg_type
        self.value = value
        super().__init__(message)

    @classmethod
    def bad_argument(cls, value: object) -> "ErrorBuildError":
        arg_type = type(value).__name__
        return cls(
            f"unknown type {arg_type}, value {value!r} in error call",
            arg_type=arg_type,
            value=value,
        )

    @classmethod
    def missing_cause(cls) -> "ErrorBuildError":
        return cls("no underlying error in error call")
