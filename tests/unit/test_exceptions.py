"""Tests for the HandlerException hierarchy."""

from __future__ import annotations

from fastapi_route_handler.exceptions import (
    BodyReadError,
    DecodeError,
    HandlerException,
    HandlerInternalError,
)


class TestHierarchy:
    def test_all_derive_from_base(self) -> None:
        for cls in (BodyReadError, DecodeError, HandlerInternalError):
            assert issubclass(cls, HandlerException)
            assert issubclass(cls, Exception)


class TestBodyReadError:
    def test_default_detail(self) -> None:
        exc = BodyReadError()
        assert exc.detail == "Failed to read request body"
        assert exc.cause is None

    def test_cause(self) -> None:
        cause = OSError("reset")
        exc = BodyReadError("boom", cause=cause)
        assert str(exc) == "boom"
        assert exc.cause is cause


class TestDecodeError:
    def test_detail_and_errors(self) -> None:
        errors = [{"type": "missing", "loc": ("a",), "msg": "Field required"}]
        exc = DecodeError("a: Field required", errors=errors)
        assert exc.detail == "a: Field required"
        assert exc.errors == errors
        assert exc.errors is not errors

    def test_errors_default_empty(self) -> None:
        assert DecodeError("bad").errors == []


class TestHandlerInternalError:
    def test_wraps_cause(self) -> None:
        cause = RuntimeError("boom")
        exc = HandlerInternalError("Step x failed", cause=cause)
        assert exc.detail == "Step x failed"
        assert exc.cause is cause
