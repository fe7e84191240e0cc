"""Error response schemas.

All error responses use the same envelope:
{"error": {"kind": "...", "code": "...", "param": "...", "message": "..."}}.
code and param are left out when empty; kind and message are always present.
"""

from pydantic import BaseModel, field_validator


class ErrorDetail(BaseModel):
    """Inner error object: kind, optional code and param, human-readable message."""

    kind: str
    code: str | None = None
    param: str | None = None
    message: str

    @field_validator("code", "param")
    @classmethod
    def _empty_is_absent(cls, v: str | None) -> str | None:
        return v or None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned by all error responses."""

    error: ErrorDetail
