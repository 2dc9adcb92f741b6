"""Response accumulation — headers, status and the first-wins body gate."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from typing import Any

from fastapi.encoders import jsonable_encoder
from starlette.background import BackgroundTask
from starlette.responses import FileResponse, JSONResponse, Response
from starlette.types import Receive, Scope, Send

from fastapi_route_handler._types import StreamingBody
from fastapi_route_handler.content_types import (
    CONTENT_TYPE,
    TYPE_CSS,
    TYPE_HTML,
    TYPE_JAVASCRIPT,
    TYPE_JSON,
    TYPE_PLAIN,
)
from fastapi_route_handler.state import HandlerState, RunNext

logger = logging.getLogger("fastapi_route_handler")


class PushStreamingResponse(Response):
    """Streaming response driven by a callback that pushes chunks.

    The callback receives an awaitable ``write(chunk)``; the response is
    complete when the callback returns.
    """

    def __init__(
        self,
        body: StreamingBody,
        status_code: int = 200,
        headers: dict[str, str] | None = None,
        media_type: str | None = None,
        background: BackgroundTask | None = None,
    ) -> None:
        self.body_callback = body
        self.status_code = status_code
        self.media_type = self.media_type if media_type is None else media_type
        self.background = background
        self.init_headers(headers)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await send(
            {
                "type": "http.response.start",
                "status": self.status_code,
                "headers": self.raw_headers,
            }
        )

        async def write(chunk: bytes) -> None:
            if chunk:
                await send(
                    {"type": "http.response.body", "body": chunk, "more_body": True}
                )

        await self.body_callback(write)
        await send({"type": "http.response.body", "body": b"", "more_body": False})

        if self.background is not None:
            await self.background()


def encode_json(value: Any) -> bytes:
    return JSONResponse(jsonable_encoder(value)).body


def _with_headers(response: Response, headers: list[tuple[str, str]]) -> Response:
    # Explicit headers come first and replace same-named primitive defaults
    if not headers:
        return response
    explicit = {name.lower().encode("latin-1") for name, _ in headers}
    encoded = [
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in headers
    ]
    # In place: MutableHeaders views created by the primitive share this list
    response.raw_headers[:] = encoded + [
        (name, value) for name, value in response.raw_headers if name not in explicit
    ]
    return response


class ResponseBuilder:
    """Response side of the handler context.

    Every body-setting method goes through ``HandlerState.finalize_with``:
    the first one called decides the response, later ones are ignored.
    Status and headers are captured when the response is finalized.
    """

    handler_state: HandlerState

    def header(self, name: str, value: str) -> None:
        """Add a response header. Duplicates are kept."""
        if self.handler_state.is_finalized:
            logger.debug("Header %r set after the response was finalized", name)
        self.handler_state.pending_headers.insert(0, (name, value))

    def status(self, code: int) -> None:
        if self.handler_state.is_finalized:
            logger.debug("Status %d set after the response was finalized", code)
        self.handler_state.pending_status = code

    def raw(self, body: bytes) -> None:
        self._set_response(
            "raw", lambda status: Response(content=body, status_code=status)
        )

    def file(self, path: str | os.PathLike[str]) -> None:
        self._set_response(
            "file", lambda status: FileResponse(path, status_code=status)
        )

    def stream(self, body: StreamingBody) -> None:
        self._set_response(
            "stream", lambda status: PushStreamingResponse(body, status_code=status)
        )

    def json(self, value: Any) -> None:
        self.header(CONTENT_TYPE, TYPE_JSON)
        self.raw(encode_json(value))

    def plain(self, text: str) -> None:
        self.as_content(TYPE_PLAIN, text)

    def html(self, text: str) -> None:
        self.as_content(TYPE_HTML, text)

    def css(self, text: str) -> None:
        self.as_content(TYPE_CSS, text)

    def javascript(self, text: str) -> None:
        self.as_content(TYPE_JAVASCRIPT, text)

    def as_content(self, content_type: str, content: str) -> None:
        """Set ``Content-Type`` and a UTF-8 encoded text body."""
        self.header(CONTENT_TYPE, content_type)
        self.raw(content.encode("utf-8"))

    def next(self) -> None:
        """Hand the request to the next application instead of responding."""
        if not self.handler_state.finalize_with(RunNext):
            logger.debug("next() ignored; response already finalized")

    @property
    def response(self) -> Response | RunNext | None:
        return self.handler_state.finalized

    def _set_response(self, kind: str, build: Callable[[int], Response]) -> None:
        state = self.handler_state

        def produce() -> Response:
            return _with_headers(build(state.pending_status), state.pending_headers)

        if not state.finalize_with(produce):
            logger.debug("%s() ignored; response already finalized", kind)
