"""run_handler() — execution driver turning a Handler into a routed ASGI handler."""

from __future__ import annotations

import logging
import time

from starlette.responses import Response
from starlette.types import Send

from fastapi_route_handler._types import HandlerApp
from fastapi_route_handler.context import HandlerContext
from fastapi_route_handler.exceptions import HandlerException, HandlerInternalError
from fastapi_route_handler.handler import Handler, HandlerStep, ResolvedHandler
from fastapi_route_handler.routes import Env, RequestData, run_next
from fastapi_route_handler.state import HandlerState
from fastapi_route_handler.trace import HandlerTrace, TraceEntry

logger = logging.getLogger("fastapi_route_handler")


def run_handler(handler: Handler) -> HandlerApp:
    """Return ``async (env, request_data, send)`` running *handler* per request.

    Every step runs, in order. Afterwards the finalized response is sent, or
    the request goes to the next application when nothing was finalized.
    """
    resolved = handler.resolve()

    if resolved.debug:
        return _make_debug_app(resolved)
    return _make_app(resolved)


async def _run_step(
    resolved: ResolvedHandler, h: HandlerContext, step: HandlerStep
) -> bool:
    """Run *step* and notify hooks. Returns whether it closed the gate."""
    was_finalized = h.handler_state.is_finalized
    error: HandlerException | None = None
    try:
        await step.run(h)
    except HandlerException as exc:
        error = exc
        raise
    except Exception as exc:
        error = HandlerInternalError(f"Step {step.name} failed", cause=exc)
        raise error from exc
    finally:
        finalized = not was_finalized and h.handler_state.is_finalized
        for hook in resolved.hooks:
            await hook.on_step(h, step, finalized=finalized, error=error)
    return finalized


async def _resolve(resolved: ResolvedHandler, h: HandlerContext) -> None:
    for hook in resolved.hooks:
        await hook.on_resolved(h, h.handler_state.finalized)


async def _deliver(handler_state: HandlerState, send: Send) -> None:
    finalized = handler_state.finalized
    request_data = handler_state.request_data
    request = request_data.request

    if isinstance(finalized, Response):
        logger.debug(
            "%s %s answered with status %d",
            request.method,
            request.url.path,
            finalized.status_code,
        )
        await finalized(request.scope, request.receive, send)
        return

    logger.debug(
        "%s %s not answered; running next application",
        request.method,
        request.url.path,
    )
    await run_next(request_data, send, body=handler_state.cached_body)


def _make_app(resolved: ResolvedHandler) -> HandlerApp:
    async def app(env: Env, request_data: RequestData, send: Send) -> None:
        h = HandlerContext(HandlerState.initial(env, request_data))

        for hook in resolved.hooks:
            await hook.on_handler_start(h)

        for step in resolved.steps:
            await _run_step(resolved, h, step)

        await _resolve(resolved, h)
        await _deliver(h.handler_state, send)

    return app


def _make_debug_app(resolved: ResolvedHandler) -> HandlerApp:
    async def app(env: Env, request_data: RequestData, send: Send) -> None:
        h = HandlerContext(HandlerState.initial(env, request_data))
        trace = HandlerTrace()
        h.state["trace"] = trace
        handler_start = time.perf_counter()

        for hook in resolved.hooks:
            await hook.on_handler_start(h)

        try:
            for step in resolved.steps:
                step_start = time.perf_counter()
                try:
                    finalized = await _run_step(resolved, h, step)
                except HandlerException as exc:
                    trace.entries.append(
                        TraceEntry(
                            step_name=step.name,
                            duration_ms=(time.perf_counter() - step_start) * 1000,
                            outcome="FAILED",
                            reason=getattr(exc, "detail", str(exc)),
                        )
                    )
                    trace.outcome = "ERROR"
                    trace.error = exc
                    raise
                trace.entries.append(
                    TraceEntry(
                        step_name=step.name,
                        duration_ms=(time.perf_counter() - step_start) * 1000,
                        outcome="OK",
                        finalized=finalized,
                    )
                )
            responded = isinstance(h.handler_state.finalized, Response)
            trace.outcome = "RESPONDED" if responded else "NEXT"
            await _resolve(resolved, h)
        finally:
            trace.total_duration_ms = (time.perf_counter() - handler_start) * 1000

        logger.debug(
            "Handler finished in %.3fms (%s, finalized by %s)",
            trace.total_duration_ms,
            trace.outcome,
            trace.finalized_by,
        )

        await _deliver(h.handler_state, send)

    return app
