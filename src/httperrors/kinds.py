"""Error taxonomy: kinds, codes and parameters.

A Kind is the closed, semantic category of a failure. Code and Parameter are
open strings chosen by the call site; the empty string means "not set" and is
left out of the response body.
"""

from enum import Enum


class Kind(Enum):
    """Semantic category of an error.

    Every value renders as a stable CamelCase string. Looking up a value that is
    not a member (including the empty string or 0) gives UNANTICIPATED instead of
    raising, so str(Kind(x)) is defined for any x.
    """

    UNANTICIPATED = "Unanticipated"
    OTHER = "Other"
    INVALID = "Invalid"
    PERMISSION = "Permission"
    IO = "IO"
    EXIST = "Exist"
    NOT_FOUND = "NotFound"
    PRIVATE = "Private"
    INTERNAL = "Internal"
    BROKEN_LINK = "BrokenLink"
    DATABASE = "Database"
    VALIDATION = "Validation"
    INVALID_REQUEST = "InvalidRequest"
    UNAUTHENTICATED = "Unauthenticated"
    UNAUTHORIZED = "Unauthorized"

    @classmethod
    def _missing_(cls, value: object) -> "Kind":
        return cls.UNANTICIPATED

    def __str__(self) -> str:
        return self.value


class Code(str):
    """Machine-readable identifier of the specific error condition, e.g. "email_taken"."""

    __slots__ = ()

    def __repr__(self) -> str:
        return f"Code({str.__repr__(self)})"


class Parameter(str):
    """Name of the offending input field or argument.

    Always pass parameters wrapped in this type: a plain string handed to
    build() is taken as a Code.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return f"Parameter({str.__repr__(self)})"


class MissingField(Exception):
    """A required input field was not supplied.

    This is a leaf error for validation code. It has no kind or code of its
    own, so on its own it is answered with the generic 500; wrap it with
    build() to give it a status and kind.
    """

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(field)

    def __str__(self) -> str:
        return f"{self.field} is required"
