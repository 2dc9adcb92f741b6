"""HandlerMiddleware — mounts a Handler in front of an ASGI application."""

from __future__ import annotations

from typing import Any

from starlette.requests import Request
from starlette.types import ASGIApp, Receive, Scope, Send

from fastapi_route_handler._types import RouteMatcher
from fastapi_route_handler.driver import run_handler
from fastapi_route_handler.handler import Handler
from fastapi_route_handler.routes import Env, RequestData


class HandlerMiddleware:
    """Pure ASGI middleware running *handler* for every HTTP request.

    The wrapped *app* is the next application: it receives the request
    whenever the handler does not finalize a response. The current route is
    ``match(request)``, defaulting to the sub site's parser applied to the
    request path::

        app.add_middleware(HandlerMiddleware, handler=handler, env=env)
    """

    def __init__(
        self,
        app: ASGIApp,
        handler: Handler,
        env: Env,
        match: RouteMatcher | None = None,
    ) -> None:
        self.app = app
        self.env = env
        self._run = run_handler(handler)
        self._match = match or self._parse_path

    def _parse_path(self, request: Request) -> Any | None:
        return self.env.sub_routes.parse_route(request.url.path)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive)
        request_data = RequestData(
            request=request, route=self._match(request), next_app=self.app
        )
        await self._run(self.env, request_data, send)
