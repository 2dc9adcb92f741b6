"""FastAPI Route Handler - imperative per-request response building for ASGI routing."""

from fastapi_route_handler.content_types import (
    CONTENT_TYPE,
    TYPE_CSS,
    TYPE_HTML,
    TYPE_JAVASCRIPT,
    TYPE_JSON,
    TYPE_PLAIN,
)
from fastapi_route_handler.context import HandlerContext
from fastapi_route_handler.driver import run_handler
from fastapi_route_handler.exceptions import (
    BodyReadError,
    DecodeError,
    HandlerException,
    HandlerInternalError,
)
from fastapi_route_handler.handler import FunctionStep, Handler, HandlerStep
from fastapi_route_handler.hooks import (
    AfterHandler,
    AfterStep,
    BeforeHandler,
    HandlerHook,
    OnFallThrough,
    OnFinalized,
)
from fastapi_route_handler.middleware import HandlerMiddleware
from fastapi_route_handler.request import BodyResult
from fastapi_route_handler.response import PushStreamingResponse
from fastapi_route_handler.routes import (
    Env,
    ParseRoute,
    RenderRoute,
    RequestData,
    RouteAttrs,
    RouteSite,
    run_next,
    show_route,
    show_route_query,
)
from fastapi_route_handler.state import Finalized, HandlerState, RunNext
from fastapi_route_handler.trace import HandlerTrace, TraceEntry

__all__ = [
    "CONTENT_TYPE",
    "TYPE_CSS",
    "TYPE_HTML",
    "TYPE_JAVASCRIPT",
    "TYPE_JSON",
    "TYPE_PLAIN",
    "AfterHandler",
    "AfterStep",
    "BeforeHandler",
    "BodyReadError",
    "BodyResult",
    "DecodeError",
    "Env",
    "Finalized",
    "FunctionStep",
    "Handler",
    "HandlerContext",
    "HandlerException",
    "HandlerHook",
    "HandlerInternalError",
    "HandlerMiddleware",
    "HandlerState",
    "HandlerStep",
    "HandlerTrace",
    "OnFallThrough",
    "OnFinalized",
    "ParseRoute",
    "PushStreamingResponse",
    "RenderRoute",
    "RequestData",
    "RouteAttrs",
    "RouteSite",
    "RunNext",
    "TraceEntry",
    "run_handler",
    "run_next",
    "show_route",
    "show_route_query",
]
