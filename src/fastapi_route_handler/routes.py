"""Route capabilities, handler environment and per-request routing data.

A *route site* is one route universe. It renders route values to paths,
parses paths back into route values and maps route values to their
attribute tags. A sub site mounted inside a master site supplies a pure
``to_master`` function translating its routes into master routes.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable
from urllib.parse import urlencode

from starlette.requests import Request
from starlette.responses import PlainTextResponse
from starlette.types import ASGIApp, Message, Receive, Send

from fastapi_route_handler._types import RouteTranslator

logger = logging.getLogger("fastapi_route_handler")


@runtime_checkable
class RenderRoute(Protocol):
    """Renders a route value to a URL path."""

    def render_route(self, route: Any) -> str: ...


@runtime_checkable
class ParseRoute(Protocol):
    """Parses a URL path into a route value, or ``None`` if nothing matches."""

    def parse_route(self, path: str) -> Any | None: ...


@runtime_checkable
class RouteAttrs(Protocol):
    """Maps a route value to its attribute tags."""

    def route_attrs(self, route: Any) -> frozenset[str]: ...


@runtime_checkable
class RouteSite(RenderRoute, ParseRoute, RouteAttrs, Protocol):
    """Full capability set of one route universe."""


def show_route(site: RenderRoute, route: Any) -> str:
    return site.render_route(route)


def show_route_query(
    site: RenderRoute, route: Any, query: Sequence[tuple[str, str]]
) -> str:
    """Render *route* and append *query* pairs in the given order."""
    path = site.render_route(route)
    if not query:
        return path
    separator = "&" if "?" in path else "?"
    return f"{path}{separator}{urlencode(list(query))}"


def _identity(route: Any) -> Any:
    return route


@dataclass(frozen=True)
class Env:
    """Application-lifetime handler environment, shared read-only by requests."""

    master: Any
    sub: Any
    master_routes: RouteSite
    sub_routes: RouteSite
    to_master: RouteTranslator = _identity

    @classmethod
    def root(cls, master: Any, routes: RouteSite) -> Env:
        """Environment for a site that is not mounted inside another one."""
        return cls(master=master, sub=master, master_routes=routes, sub_routes=routes)


@dataclass(frozen=True)
class RequestData:
    """Matched route and raw request, plus the rest of the middleware chain."""

    request: Request
    route: Any | None = None
    next_app: ASGIApp | None = None


def _replay_body(body: bytes, receive: Receive) -> Receive:
    sent = False

    async def replay() -> Message:
        nonlocal sent
        if not sent:
            sent = True
            return {"type": "http.request", "body": body, "more_body": False}
        return await receive()

    return replay


async def run_next(
    request_data: RequestData, send: Send, *, body: bytes | None = None
) -> None:
    """Hand the request to the next application in the chain.

    When the body has already been consumed, pass it as *body* so the next
    application receives it again instead of an exhausted channel.
    """
    request = request_data.request
    receive = request.receive
    if body is not None:
        receive = _replay_body(body, receive)

    if request_data.next_app is None:
        logger.debug("No next application for %s; answering 404", request.url.path)
        response = PlainTextResponse("Not Found", status_code=404)
        await response(request.scope, receive, send)
        return

    await request_data.next_app(request.scope, receive, send)
