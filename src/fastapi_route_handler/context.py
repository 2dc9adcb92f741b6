"""HandlerContext — what a handler step sees of the current request."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from fastapi_route_handler.request import RequestView
from fastapi_route_handler.response import ResponseBuilder
from fastapi_route_handler.routes import show_route, show_route_query
from fastapi_route_handler.state import HandlerState


class HandlerContext(RequestView, ResponseBuilder):
    """Per-request handle passed to every handler step.

    Combines the request view, the response builder and route rendering
    for both the local (sub) and enclosing (master) route universe.
    """

    def __init__(self, handler_state: HandlerState) -> None:
        self.handler_state = handler_state

    @property
    def state(self) -> dict[str, Any]:
        """Free-form values shared between the steps of this request."""
        return self.handler_state.state

    def master(self) -> Any:
        return self.handler_state.master

    def sub(self) -> Any:
        return self.handler_state.sub

    # -- Route rendering and parsing --

    def show_route_master(self) -> Callable[[Any], str]:
        site = self.handler_state.master_routes
        return lambda route: show_route(site, route)

    def show_route_sub(self) -> Callable[[Any], str]:
        site = self.handler_state.master_routes
        to_master = self.handler_state.to_master
        return lambda route: show_route(site, to_master(route))

    def show_route_query_master(
        self,
    ) -> Callable[[Any, Sequence[tuple[str, str]]], str]:
        site = self.handler_state.master_routes
        return lambda route, query: show_route_query(site, route, query)

    def show_route_query_sub(
        self,
    ) -> Callable[[Any, Sequence[tuple[str, str]]], str]:
        site = self.handler_state.master_routes
        to_master = self.handler_state.to_master
        return lambda route, query: show_route_query(site, to_master(route), query)

    def read_route_master(self) -> Callable[[str], Any | None]:
        return self.handler_state.master_routes.parse_route

    def read_route_sub(self) -> Callable[[str], Any | None]:
        """Parser for local paths, returning the equivalent master route."""
        site = self.handler_state.sub_routes
        to_master = self.handler_state.to_master

        def read(path: str) -> Any | None:
            route = site.parse_route(path)
            return None if route is None else to_master(route)

        return read
