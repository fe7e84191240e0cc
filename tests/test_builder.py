import copy
import itertools
import os
import signal
import subprocess
import sys
from pathlib import Path

import pytest
import structlog
from structlog.testing import capture_logs

from httperrors import Classified, ClassifiedError, Code, ErrorBuildError, Kind, Parameter, build

SRC = Path(__file__).resolve().parents[1] / "src"


def _fields(err: ClassifiedError) -> tuple[object, ...]:
    return (err.status_code, err.kind, err.code, err.param, err.cause)


def test_build_sets_every_field() -> None:
    cause = ValueError("x")
    err = build(500, Kind.INVALID, Code("bad_email"), Parameter("email"), cause)

    assert isinstance(err, ClassifiedError)
    assert _fields(err) == (500, Kind.INVALID, "bad_email", "email", cause)
    assert str(err) == "x"


def test_argument_order_does_not_matter() -> None:
    cause = ValueError("x")
    args = (500, Kind.INVALID, Code("bad_email"), Parameter("email"), cause)
    canonical = _fields(build(*args))

    for ordering in itertools.permutations(args):
        err = build(*ordering)
        assert isinstance(err, ClassifiedError)
        assert _fields(err) == canonical


def test_last_argument_of_each_type_wins() -> None:
    first, last = ValueError("first"), ValueError("last")
    err = build(
        400, Kind.INVALID, "a", Parameter("x"), first,
        404, Kind.NOT_FOUND, Code("b"), Parameter("y"), last,
    )

    assert isinstance(err, ClassifiedError)
    assert _fields(err) == (404, Kind.NOT_FOUND, "b", "y", last)


def test_plain_string_becomes_a_code() -> None:
    err = build("user_missing", LookupError("no such user"))

    assert isinstance(err, ClassifiedError)
    assert type(err.code) is Code
    assert err.code == "user_missing"
    assert err.param == ""


def test_unset_fields_keep_their_zero_values() -> None:
    err = build(LookupError("no such user"))

    assert isinstance(err, ClassifiedError)
    assert err.status_code == 0
    assert err.kind is Kind.UNANTICIPATED
    assert err.error_kind() == "Unanticipated"
    assert err.code == ""
    assert err.param == ""


def test_classified_error_is_copied_not_aliased() -> None:
    original = build(404, Kind.NOT_FOUND, "user_missing", LookupError("no such user"))
    assert isinstance(original, ClassifiedError)

    wrapped = build(original)
    assert isinstance(wrapped, ClassifiedError)
    assert isinstance(wrapped.cause, ClassifiedError)
    assert wrapped.cause is not original
    assert _fields(wrapped.cause) == _fields(original)
    assert str(wrapped) == "no such user"

    wrapped.cause.status_code = 500
    wrapped.cause.kind = Kind.INTERNAL
    wrapped.cause.code = Code("changed")

    assert original.status_code == 404
    assert original.kind is Kind.NOT_FOUND
    assert original.code == "user_missing"


def test_nested_classified_causes_are_cloned() -> None:
    inner = ClassifiedError(cause=LookupError("gone"), status_code=404)
    outer = ClassifiedError(cause=inner, status_code=409)

    clone = copy.deepcopy(outer)
    assert isinstance(clone.cause, ClassifiedError)
    clone.cause.status_code = 500

    assert inner.status_code == 404
    assert clone.cause.cause is inner.cause


class ApiError(Exception):
    """Classified by shape only; its constructor does not match its args."""

    def __init__(self, status: int, message: str) -> None:
        self.status = status
        super().__init__(message)

    def http_status(self) -> int:
        return self.status

    def error_kind(self) -> str:
        return "Other"

    def error_code(self) -> str:
        return "teapot"

    def error_param(self) -> str:
        return "pot"


def test_other_classified_shapes_are_snapshotted() -> None:
    api_error = ApiError(418, "short and stout")
    err = build(502, api_error)

    assert isinstance(err, ClassifiedError)
    assert err.status_code == 502
    assert isinstance(err.cause, ClassifiedError)
    assert _fields(err.cause) == (418, Kind.OTHER, "teapot", "pot", api_error)
    assert str(err) == "short and stout"


def test_snapshot_is_independent_of_later_changes() -> None:
    api_error = ApiError(418, "short and stout")
    err = build(api_error)
    assert isinstance(err, ClassifiedError)
    assert isinstance(err.cause, ClassifiedError)

    api_error.status = 500
    assert err.cause.status_code == 418


def test_bad_argument_returns_build_error_and_logs_call_site() -> None:
    with capture_logs() as logs:
        err = build(404, 3.5, ValueError("x"), logger=structlog.get_logger())

    assert isinstance(err, ErrorBuildError)
    assert not isinstance(err, Classified)
    assert err.arg_type == "float"
    assert err.value == 3.5
    assert str(err) == "unknown type float, value 3.5 in error call"

    assert len(logs) == 1
    assert logs[0]["event"] == "bad_error_build_call"
    assert logs[0]["log_level"] == "error"
    assert logs[0]["file"].endswith("test_builder.py")
    assert logs[0]["line"] > 0


def test_bool_is_not_a_status_code() -> None:
    with capture_logs():
        err = build(True, ValueError("x"), logger=structlog.get_logger())

    assert isinstance(err, ErrorBuildError)
    assert err.arg_type == "bool"


def test_missing_cause_returns_build_error() -> None:
    with capture_logs() as logs:
        err = build(404, Kind.NOT_FOUND, "user_missing", logger=structlog.get_logger())

    assert isinstance(err, ErrorBuildError)
    assert str(err) == "no underlying error in error call"
    assert [entry["event"] for entry in logs] == ["bad_error_build_call"]


def test_classified_error_requires_a_cause() -> None:
    with pytest.raises(TypeError):
        ClassifiedError(cause=None)  # type: ignore[arg-type]


@pytest.mark.skipif(sys.platform == "win32", reason="SIGABRT exit status is POSIX-only")
def test_build_without_arguments_aborts_the_process() -> None:
    env = {**os.environ, "PYTHONPATH": os.pathsep.join([str(SRC), os.environ.get("PYTHONPATH", "")])}
    proc = subprocess.run(
        [sys.executable, "-c", "from httperrors import build; build()"],
        capture_output=True,
        text=True,
        env=env,
        timeout=60,
    )

    assert proc.returncode == -signal.SIGABRT
    assert "call to httperrors.build with no arguments" in proc.stderr
