"""HandlerStep and Handler — ordered container of steps run against one request."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from fastapi_route_handler._types import StepCallback

if TYPE_CHECKING:
    from fastapi_route_handler.context import HandlerContext
    from fastapi_route_handler.hooks import HandlerHook


class HandlerStep(ABC):
    """One imperative step of a handler."""

    @abstractmethod
    async def run(self, h: HandlerContext) -> None: ...

    @property
    def name(self) -> str:
        return type(self).__name__


class FunctionStep(HandlerStep):
    """Adapts a plain ``async def step(h)`` function."""

    def __init__(self, callback: StepCallback) -> None:
        self._callback = callback

    async def run(self, h: HandlerContext) -> None:
        await self._callback(h)

    @property
    def name(self) -> str:
        return getattr(self._callback, "__name__", type(self._callback).__name__)


Step = Union[HandlerStep, StepCallback, "Handler"]


@dataclass(frozen=True)
class ResolvedHandler:
    """Immutable, pre-computed execution plan."""

    steps: tuple[HandlerStep, ...]
    hooks: tuple[HandlerHook, ...] = ()
    debug: bool = False


class Handler:
    """Ordered container of handler steps.

    Steps run in registration order; nested handlers are flattened in place.
    """

    def __init__(self, *steps: Step, debug: bool = False) -> None:
        self._items: list[Step] = list(steps)
        self._hooks: list[HandlerHook] = []
        self._debug = debug
        self._resolved: ResolvedHandler | None = None

    def add(self, *steps: Step) -> Handler:
        self._items.extend(steps)
        self._resolved = None
        return self

    def add_hook(self, hook: HandlerHook) -> Handler:
        self._hooks.append(hook)
        self._resolved = None
        return self

    def resolve(self) -> ResolvedHandler:
        if self._resolved is not None:
            return self._resolved

        flat: list[HandlerStep] = []
        self._flatten(self._items, flat)

        self._resolved = ResolvedHandler(
            steps=tuple(flat),
            hooks=tuple(self._hooks),
            debug=self._debug,
        )
        return self._resolved

    @staticmethod
    def _flatten(items: list[Step], out: list[HandlerStep]) -> None:
        for item in items:
            if isinstance(item, Handler):
                Handler._flatten(item._items, out)
            elif isinstance(item, HandlerStep):
                out.append(item)
            elif callable(item):
                out.append(FunctionStep(item))
            else:
                raise TypeError(f"Not a handler step: {item!r}")
