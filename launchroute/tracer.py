"""Step-by-step tracing of route resolutions.

Disabled by default; when enabled, each `execute_with_fallback` run records
the platforms it probed and how each probe ended, so a surprising route can
be explained after the fact.
"""

from __future__ import annotations

import itertools
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any


@dataclass
class TraceStep:
    step: str
    timestamp: float
    duration: float
    data: dict[str, Any] | None = None
    error: str | None = None


@dataclass
class RouteTrace:
    trace_id: str
    token_address: str
    platform: str
    start_time: float
    steps: list[TraceStep] = field(default_factory=list)
    end_time: float | None = None
    result: dict[str, Any] | None = None
    error: str | None = None

    @property
    def total_duration(self) -> float | None:
        if self.end_time is None:
            return None
        return self.end_time - self.start_time


class RouteTracer:
    """Bounded store of recent route traces.

    All methods are no-ops while the tracer is disabled, and accept the
    empty trace id returned by `start_trace` in that state.
    """

    def __init__(self, enabled: bool = False, max_traces: int = 100) -> None:
        self.enabled = enabled
        self.max_traces = max_traces
        self._traces: OrderedDict[str, RouteTrace] = OrderedDict()
        self._counter = itertools.count(1)

    def start_trace(self, token_address: str, platform: str) -> str:
        if not self.enabled:
            return ""
        trace_id = f"{token_address}-{platform}-{next(self._counter)}"
        self._traces[trace_id] = RouteTrace(
            trace_id=trace_id,
            token_address=token_address,
            platform=platform,
            start_time=time.monotonic(),
        )
        while len(self._traces) > self.max_traces:
            self._traces.popitem(last=False)
        return trace_id

    def _append(self, trace_id: str, step: TraceStep) -> None:
        trace = self._traces.get(trace_id)
        if trace is not None:
            trace.steps.append(step)

    def _duration(self, trace_id: str, now: float) -> float:
        trace = self._traces.get(trace_id)
        if trace is None:
            return 0.0
        previous = trace.steps[-1].timestamp if trace.steps else trace.start_time
        return now - previous

    def add_step(self, trace_id: str, step: str, data: dict[str, Any] | None = None) -> None:
        if not self.enabled or not trace_id:
            return
        now = time.monotonic()
        self._append(trace_id, TraceStep(step, now, self._duration(trace_id, now), data=data))

    def add_error(self, trace_id: str, step: str, error: BaseException | str) -> None:
        if not self.enabled or not trace_id:
            return
        now = time.monotonic()
        self._append(
            trace_id,
            TraceStep(step, now, self._duration(trace_id, now), error=str(error)),
        )

    def end_trace(
        self,
        trace_id: str,
        result: dict[str, Any] | None = None,
        error: BaseException | None = None,
    ) -> None:
        if not self.enabled or not trace_id:
            return
        trace = self._traces.get(trace_id)
        if trace is None:
            return
        trace.end_time = time.monotonic()
        trace.result = result
        if error is not None:
            trace.error = str(error)

    def get_trace(self, trace_id: str) -> RouteTrace | None:
        return self._traces.get(trace_id)

    def traces_for_token(self, token_address: str) -> list[RouteTrace]:
        token = token_address.lower()
        return [t for t in self._traces.values() if t.token_address.lower() == token]

    def recent(self, limit: int = 10) -> list[RouteTrace]:
        return list(self._traces.values())[-limit:]

    def clear(self) -> None:
        self._traces.clear()


__all__ = ["RouteTracer", "RouteTrace", "TraceStep"]
