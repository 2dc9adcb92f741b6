"""Read-only request view: headers, cached body, matched route and attributes."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Generic, TypeVar

from pydantic import TypeAdapter, ValidationError
from starlette.requests import ClientDisconnect, Request

from fastapi_route_handler.exceptions import BodyReadError, DecodeError
from fastapi_route_handler.state import HandlerState

logger = logging.getLogger("fastapi_route_handler")

T = TypeVar("T")


@dataclass(frozen=True)
class BodyResult(Generic[T]):
    """Decoded request body or the reason it could not be decoded.

    Falsy when decoding failed::

        result = await h.json_body(Order)
        if not result:
            h.status(400)
            h.plain(result.error.detail)
    """

    value: T | None = None
    error: DecodeError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.ok


@lru_cache(maxsize=128)
def _adapter(shape: Any) -> TypeAdapter[Any]:
    return TypeAdapter(shape)


def _describe(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors(include_url=False):
        loc = ".".join(str(part) for part in error["loc"])
        parts.append(f"{loc}: {error['msg']}" if loc else error["msg"])
    return "; ".join(parts)


class RequestView:
    """Request side of the handler context."""

    handler_state: HandlerState

    @property
    def request(self) -> Request:
        return self.handler_state.request_data.request

    def req_header(self, name: str) -> str | None:
        """First value of header *name* (case-insensitive), or ``None``."""
        return self.request.headers.get(name)

    def req_headers(self) -> list[tuple[str, str]]:
        return self.request.headers.items()

    async def raw_body(self) -> bytes:
        """Consume the request body once; later calls return the cached bytes."""
        state = self.handler_state
        if state.cached_body is not None:
            return state.cached_body

        try:
            body = await self.request.body()
        except ClientDisconnect as exc:
            raise BodyReadError(
                "Client disconnected while sending body", cause=exc
            ) from exc

        logger.debug("Read %d byte request body", len(body))
        state.cached_body = body
        return body

    async def json_body(self, shape: Any = Any) -> BodyResult[Any]:
        """Decode the body as JSON validated against *shape*.

        Decoding happens on every call; only the raw bytes are cached.
        """
        body = await self.raw_body()
        try:
            value = _adapter(shape).validate_json(body)
        except ValidationError as exc:
            return BodyResult(
                error=DecodeError(_describe(exc), errors=exc.errors(include_url=False))
            )
        return BodyResult(value=value)

    def maybe_route(self) -> Any | None:
        return self.handler_state.request_data.route

    def maybe_root_route(self) -> Any | None:
        route = self.maybe_route()
        if route is None:
            return None
        return self.handler_state.to_master(route)

    def route_attrs(self) -> frozenset[str]:
        route = self.maybe_route()
        if route is None:
            return frozenset()
        return frozenset(self.handler_state.sub_routes.route_attrs(route))

    def root_route_attrs(self) -> frozenset[str]:
        route = self.maybe_root_route()
        if route is None:
            return frozenset()
        return frozenset(self.handler_state.master_routes.route_attrs(route))
