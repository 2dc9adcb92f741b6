"""Shared type aliases and protocols."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from starlette.requests import Request
from starlette.types import Send

if TYPE_CHECKING:
    from fastapi_route_handler.context import HandlerContext
    from fastapi_route_handler.routes import Env, RequestData

# Push-style streaming: the body callback awaits ``write`` once per chunk
Write = Callable[[bytes], Awaitable[None]]
StreamingBody = Callable[[Write], Awaitable[None]]

# Local route -> master route
RouteTranslator = Callable[[Any], Any]
RouteMatcher = Callable[[Request], Any]

StepCallback = Callable[["HandlerContext"], Awaitable[None]]
HandlerApp = Callable[["Env", "RequestData", Send], Awaitable[None]]
