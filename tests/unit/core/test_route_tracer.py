"""Tests for RouteTracer."""

from launchroute.tracer import RouteTracer


class TestDisabledTracer:
    def test_start_returns_empty_id(self) -> None:
        tracer = RouteTracer(enabled=False)
        assert tracer.start_trace("0xabc", "four") == ""

    def test_operations_are_noops(self) -> None:
        tracer = RouteTracer(enabled=False)
        tracer.add_step("", "step")
        tracer.add_error("", "step", RuntimeError("x"))
        tracer.end_trace("")
        assert tracer.recent() == []


class TestEnabledTracer:
    def test_records_steps_and_result(self) -> None:
        tracer = RouteTracer(enabled=True)
        trace_id = tracer.start_trace("0xABC", "four")
        tracer.add_step(trace_id, "try_platform:four", {"n": 1})
        tracer.add_error(trace_id, "platform_error:four", RuntimeError("reverted"))
        tracer.end_trace(trace_id, result={"platform": "unknown"})

        trace = tracer.get_trace(trace_id)
        assert trace is not None
        assert [s.step for s in trace.steps] == ["try_platform:four", "platform_error:four"]
        assert trace.steps[0].data == {"n": 1}
        assert trace.steps[1].error == "reverted"
        assert trace.result == {"platform": "unknown"}
        assert trace.total_duration is not None
        assert trace.total_duration >= 0

    def test_end_with_error(self) -> None:
        tracer = RouteTracer(enabled=True)
        trace_id = tracer.start_trace("0xabc", "flap")
        tracer.end_trace(trace_id, error=RuntimeError("all failed"))
        trace = tracer.get_trace(trace_id)
        assert trace is not None
        assert trace.error == "all failed"

    def test_unfinished_trace_has_no_duration(self) -> None:
        tracer = RouteTracer(enabled=True)
        trace = tracer.get_trace(tracer.start_trace("0xabc", "flap"))
        assert trace is not None
        assert trace.total_duration is None

    def test_bounded_history(self) -> None:
        tracer = RouteTracer(enabled=True, max_traces=2)
        ids = [tracer.start_trace("0xabc", "four") for _ in range(3)]
        assert tracer.get_trace(ids[0]) is None
        assert [t.trace_id for t in tracer.recent()] == ids[1:]

    def test_traces_for_token_is_case_insensitive(self) -> None:
        tracer = RouteTracer(enabled=True)
        tracer.start_trace("0xABC", "four")
        tracer.start_trace("0xdef", "four")
        assert len(tracer.traces_for_token("0xabc")) == 1

    def test_clear(self) -> None:
        tracer = RouteTracer(enabled=True)
        tracer.start_trace("0xabc", "four")
        tracer.clear()
        assert tracer.recent() == []
