"""HandlerTrace and TraceEntry — debug execution recording."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from fastapi_route_handler.exceptions import HandlerException


@dataclass(frozen=True)
class TraceEntry:
    """Single step execution record."""

    step_name: str
    duration_ms: float
    outcome: Literal["OK", "FAILED"]
    finalized: bool = False
    reason: str | None = None


@dataclass
class HandlerTrace:
    """Structured record of a single handler execution."""

    entries: list[TraceEntry] = field(default_factory=list)
    total_duration_ms: float = 0.0
    outcome: Literal["RESPONDED", "NEXT", "ERROR"] = "NEXT"
    error: HandlerException | None = None

    @property
    def finalized_by(self) -> str | None:
        """Name of the step whose finalization won, if any."""
        for entry in self.entries:
            if entry.finalized:
                return entry.step_name
        return None
