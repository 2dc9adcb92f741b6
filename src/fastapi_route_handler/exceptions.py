"""HandlerException hierarchy."""

from __future__ import annotations

from typing import Any


class HandlerException(Exception):
    """Base for all handler exceptions."""


class BodyReadError(HandlerException):
    """The transport failed while the request body was being consumed."""

    def __init__(
        self,
        detail: str = "Failed to read request body",
        *,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(detail)
        self.detail = detail
        self.cause = cause


class DecodeError(HandlerException):
    """Request body is not valid JSON or does not match the requested shape.

    Returned inside a ``BodyResult`` by ``json_body()``, not raised.
    """

    def __init__(
        self, detail: str, *, errors: list[dict[str, Any]] | None = None
    ) -> None:
        super().__init__(detail)
        self.detail = detail
        self.errors = list(errors or [])


class HandlerInternalError(HandlerException):
    """Engine-level error wrapping unexpected exceptions raised by a step."""

    def __init__(self, detail: str, *, cause: Exception | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.cause = cause
