"""Shared pytest fixtures for fastapi-route-handler tests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import anyio
import pytest
from starlette.requests import Request
from starlette.types import Message

from fastapi_route_handler.context import HandlerContext
from fastapi_route_handler.routes import Env, RequestData
from fastapi_route_handler.state import HandlerState


class RecordingReceive:
    """ASGI receive channel that counts how often the transport is read.

    Once the body is exhausted the channel waits like a connected client;
    ``disconnect=True`` models a client that hung up before sending a body.
    """

    def __init__(self, chunks: list[bytes], *, disconnect: bool = False) -> None:
        self._chunks = list(chunks) or [b""]
        self._disconnect = disconnect
        self.calls = 0

    async def __call__(self) -> Message:
        self.calls += 1
        if self._disconnect:
            return {"type": "http.disconnect"}
        if not self._chunks:
            await anyio.sleep_forever()
        chunk = self._chunks.pop(0)
        more = bool(self._chunks)
        return {"type": "http.request", "body": chunk, "more_body": more}


class ResponseSink:
    """ASGI send channel collecting response messages."""

    def __init__(self) -> None:
        self.messages: list[Message] = []

    async def __call__(self, message: Message) -> None:
        self.messages.append(message)

    @property
    def status(self) -> int:
        return int(self.messages[0]["status"])

    @property
    def headers(self) -> list[tuple[str, str]]:
        return [
            (name.decode("latin-1"), value.decode("latin-1"))
            for name, value in self.messages[0]["headers"]
        ]

    def header(self, name: str) -> str | None:
        for key, value in self.headers:
            if key == name.lower():
                return value
        return None

    @property
    def body(self) -> bytes:
        return b"".join(
            m.get("body", b"")
            for m in self.messages
            if m["type"] == "http.response.body"
        )


# -- Route sites --


@dataclass(frozen=True)
class BlogRoute:
    name: str
    post_id: int | None = None


@dataclass(frozen=True)
class AppRoute:
    name: str
    blog: BlogRoute | None = None


class BlogSite:
    """Sub site: ``/`` and ``/posts/<id>``."""

    home = BlogRoute("home")

    @staticmethod
    def post(post_id: int) -> BlogRoute:
        return BlogRoute("post", post_id)

    def render_route(self, route: BlogRoute) -> str:
        if route.name == "post":
            return f"/posts/{route.post_id}"
        return "/"

    def parse_route(self, path: str) -> BlogRoute | None:
        if path == "/":
            return self.home
        parts = path.strip("/").split("/")
        if len(parts) == 2 and parts[0] == "posts" and parts[1].isdigit():
            return self.post(int(parts[1]))
        return None

    def route_attrs(self, route: BlogRoute) -> frozenset[str]:
        if route.name == "post":
            return frozenset({"public", "cacheable"})
        return frozenset({"public"})


class AppSite:
    """Master site mounting the blog under ``/blog``."""

    about = AppRoute("about")

    @staticmethod
    def blog(route: BlogRoute) -> AppRoute:
        return AppRoute("blog", route)

    def render_route(self, route: AppRoute) -> str:
        if route.name == "blog" and route.blog is not None:
            return "/blog" + BlogSite().render_route(route.blog).rstrip("/")
        return "/about"

    def parse_route(self, path: str) -> AppRoute | None:
        if path == "/about":
            return self.about
        if path == "/blog" or path.startswith("/blog/"):
            blog = BlogSite().parse_route(path[len("/blog") :] or "/")
            return None if blog is None else self.blog(blog)
        return None

    def route_attrs(self, route: AppRoute) -> frozenset[str]:
        if route.name == "blog":
            return frozenset({"blog"})
        return frozenset({"static"})


@pytest.fixture
def blog_site() -> BlogSite:
    return BlogSite()


@pytest.fixture
def app_site() -> AppSite:
    return AppSite()


@pytest.fixture
def root_env(blog_site: BlogSite) -> Env:
    return Env.root({"name": "blog"}, blog_site)


@pytest.fixture
def nested_env(blog_site: BlogSite, app_site: AppSite) -> Env:
    return Env(
        master={"name": "app"},
        sub={"name": "blog"},
        master_routes=app_site,
        sub_routes=blog_site,
        to_master=AppSite.blog,
    )


@pytest.fixture
def make_request() -> Any:
    """Factory for Starlette Request objects backed by a RecordingReceive."""

    def _make(
        method: str = "GET",
        path: str = "/",
        headers: list[tuple[str, str]] | dict[str, str] | None = None,
        body: bytes | list[bytes] = b"",
        disconnect: bool = False,
        query_string: str = "",
    ) -> Request:
        pairs = list(headers.items()) if isinstance(headers, dict) else headers or []
        scope: dict[str, Any] = {
            "type": "http",
            "method": method,
            "path": path,
            "query_string": query_string.encode(),
            "headers": [(k.lower().encode(), v.encode()) for k, v in pairs],
            "root_path": "",
        }
        chunks = body if isinstance(body, list) else [body]
        return Request(scope, RecordingReceive(chunks, disconnect=disconnect))

    return _make


@pytest.fixture
def make_context(make_request: Any, root_env: Env) -> Any:
    """Factory for a fresh HandlerContext over a request."""

    def _make(
        route: Any | None = None,
        env: Env | None = None,
        next_app: Any | None = None,
        **request_kwargs: Any,
    ) -> HandlerContext:
        request_data = RequestData(
            request=make_request(**request_kwargs), route=route, next_app=next_app
        )
        return HandlerContext(HandlerState.initial(env or root_env, request_data))

    return _make


@pytest.fixture
def sink() -> ResponseSink:
    return ResponseSink()
