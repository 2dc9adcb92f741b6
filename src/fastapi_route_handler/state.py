"""HandlerState — per-request state owned by one handler execution."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Union

from starlette.responses import Response

from fastapi_route_handler._types import RouteTranslator
from fastapi_route_handler.routes import Env, RequestData, RouteSite


class RunNext:
    """Finalization marker: hand the request to the next application."""

    def __repr__(self) -> str:
        return "RunNext()"


Finalized = Union[Response, RunNext]


@dataclass
class HandlerState:
    """Mutable state threaded through every step of one request.

    ``pending_headers`` keeps the most recently added header first.
    ``finalized`` is write-once: see ``finalize_with``.
    """

    master: Any
    sub: Any
    master_routes: RouteSite
    sub_routes: RouteSite
    to_master: RouteTranslator
    request_data: RequestData
    cached_body: bytes | None = None
    pending_headers: list[tuple[str, str]] = field(default_factory=list)
    pending_status: int = 200
    finalized: Finalized | None = None
    state: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def initial(cls, env: Env, request_data: RequestData) -> HandlerState:
        return cls(
            master=env.master,
            sub=env.sub,
            master_routes=env.master_routes,
            sub_routes=env.sub_routes,
            to_master=env.to_master,
            request_data=request_data,
        )

    @property
    def is_finalized(self) -> bool:
        return self.finalized is not None

    def finalize_with(self, produce: Callable[[], Finalized]) -> bool:
        """Install ``produce()`` unless a previous call already did.

        The producer only runs when the gate is still open. Returns whether
        this call finalized the state.
        """
        if self.finalized is not None:
            return False
        self.finalized = produce()
        return True
