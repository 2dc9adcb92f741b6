"""Lifecycle hooks observing how a handler resolves its request."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from starlette.responses import Response

from fastapi_route_handler.context import HandlerContext
from fastapi_route_handler.exceptions import HandlerException
from fastapi_route_handler.handler import HandlerStep
from fastapi_route_handler.state import Finalized


class HandlerHook:
    """Observer of one handler execution. All methods are no-op by default.

    ``on_step`` is told whether that step closed the response gate.
    ``on_resolved`` runs after the last step, before delivery, with the
    resolution: the finalized ``Response``, ``RunNext``, or ``None`` when no
    step finalized anything. A failing step skips it.
    """

    async def on_handler_start(self, h: HandlerContext) -> None:
        pass

    async def on_step(
        self,
        h: HandlerContext,
        step: HandlerStep,
        *,
        finalized: bool,
        error: HandlerException | None,
    ) -> None:
        pass

    async def on_resolved(
        self, h: HandlerContext, resolution: Finalized | None
    ) -> None:
        pass


class BeforeHandler(HandlerHook):
    """Runs *callback* before the first step, while nothing is finalized."""

    def __init__(self, callback: Callable[[HandlerContext], Awaitable[None]]) -> None:
        self._callback = callback

    async def on_handler_start(self, h: HandlerContext) -> None:
        await self._callback(h)


class AfterStep(HandlerHook):
    """Runs ``callback(h, step, finalized, error)`` after every step."""

    def __init__(
        self,
        callback: Callable[
            [HandlerContext, HandlerStep, bool, HandlerException | None],
            Awaitable[None],
        ],
    ) -> None:
        self._callback = callback

    async def on_step(
        self,
        h: HandlerContext,
        step: HandlerStep,
        *,
        finalized: bool,
        error: HandlerException | None,
    ) -> None:
        await self._callback(h, step, finalized, error)


class AfterHandler(HandlerHook):
    """Runs ``callback(h, resolution)`` once the request is resolved."""

    def __init__(
        self,
        callback: Callable[[HandlerContext, Finalized | None], Awaitable[None]],
    ) -> None:
        self._callback = callback

    async def on_resolved(
        self, h: HandlerContext, resolution: Finalized | None
    ) -> None:
        await self._callback(h, resolution)


class OnFinalized(HandlerHook):
    """Runs ``callback(h, step)`` for the step whose response won the gate.

    Steps that call ``next()`` also close the gate but do not trigger it.
    """

    def __init__(
        self, callback: Callable[[HandlerContext, HandlerStep], Awaitable[None]]
    ) -> None:
        self._callback = callback

    async def on_step(
        self,
        h: HandlerContext,
        step: HandlerStep,
        *,
        finalized: bool,
        error: HandlerException | None,
    ) -> None:
        if finalized and isinstance(h.response, Response):
            await self._callback(h, step)


class OnFallThrough(HandlerHook):
    """Runs ``callback(h)`` when the request goes on to the next application."""

    def __init__(self, callback: Callable[[HandlerContext], Awaitable[None]]) -> None:
        self._callback = callback

    async def on_resolved(
        self, h: HandlerContext, resolution: Finalized | None
    ) -> None:
        if not isinstance(resolution, Response):
            await self._callback(h)
