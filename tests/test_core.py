"""Tests for core types: Result[T], Diag and the error hierarchy."""

from notestash.core import (
    Diag,
    InvalidIdentifierError,
    NoteDecodeError,
    NoteNotFoundError,
    NotestashError,
    ObjectNotFoundError,
    Result,
    Severity,
    StoreIOError,
    UnsupportedOperationError,
)


def test_severity_values() -> None:
    assert Severity.ERROR == "error"
    assert Severity.WARNING == "warning"
    assert Severity.INFO == "info"


def test_diag_creation() -> None:
    d = Diag(severity=Severity.ERROR, code="NOT_FOUND", message="missing")
    assert d.severity == Severity.ERROR
    assert d.code == "NOT_FOUND"
    assert d.hint is None


def test_result_empty_is_ok() -> None:
    r: Result[str] = Result()
    assert r.ok is True
    assert r.has_errors is False
    assert r.data is None
    assert r.diagnostics == []


def test_result_error_helper() -> None:
    r: Result[str] = Result(data="hello")
    r.error("FAIL", "something broke")
    assert r.ok is False
    assert r.diagnostics[0].severity == Severity.ERROR
    assert r.diagnostics[0].code == "FAIL"


def test_result_warning_is_still_ok() -> None:
    r: Result[str] = Result(data="hello")
    r.warning("WARN", "heads up", hint="do something")
    r.info("NOTE", "fyi")
    assert r.ok is True
    assert len(r.diagnostics) == 2
    assert r.diagnostics[0].hint == "do something"


def test_error_codes() -> None:
    assert NoteNotFoundError("x").code == "NOT_FOUND"
    assert StoreIOError("x").code == "STORE_IO"
    assert NoteDecodeError("x").code == "DECODE_ERROR"
    assert InvalidIdentifierError("x").code == "INVALID_ID"


def test_errors_share_base() -> None:
    for cls in (NoteNotFoundError, StoreIOError, NoteDecodeError, InvalidIdentifierError):
        assert issubclass(cls, NotestashError)
    assert ObjectNotFoundError is NoteNotFoundError
    assert issubclass(InvalidIdentifierError, ValueError)


def test_unsupported_names_operation() -> None:
    e = UnsupportedOperationError("checkpoint")
    assert e.operation == "checkpoint"
    assert e.code == "UNSUPPORTED"
    assert "checkpoint" in str(e)


def test_error_str_includes_details() -> None:
    e = StoreIOError("write failed", {"key": "a/notebook/n1/note.json"})
    assert "write failed" in str(e)
    assert "a/notebook/n1/note.json" in str(e)
    assert str(StoreIOError("plain")) == "plain"


def test_to_diag() -> None:
    d = NoteDecodeError("bad json").to_diag()
    assert d.severity == Severity.ERROR
    assert d.code == "DECODE_ERROR"
    assert d.message == "bad json"
