"""Basic smoke tests for spanhive.

Quick sanity checks that the package API works end to end.
"""

import asyncio

import pytest

import spanhive
from spanhive import observe


def test_version_exposed():
    """Smoke test: version is accessible."""
    assert isinstance(spanhive.__version__, str)
    assert len(spanhive.__version__) > 0


def test_observe_without_init():
    """Smoke test: @observe works before init()."""
    @observe(name="add")
    def add(x: int, y: int) -> int:
        return x + y

    assert add(2, 3) == 5


def test_observe_nests_spans(make_provider, recorder):
    """Test that nested @observe() calls produce parent and child spans."""
    spanhive.set_tracer_provider(make_provider())

    @observe()
    def inner(value):
        return value * 2

    @observe(name="outer", attributes={"component": "calc"}, skip_args=["secret"])
    def outer(value, secret):
        return inner(value) + 1

    assert outer(4, secret="s3cr3t") == 9
    assert recorder.names() == ["inner", "outer"]
    inner_event, outer_event = recorder.events
    assert inner_event.data["trace.parent_id"] == outer_event.data["trace.span_id"]
    assert inner_event.data["app.value"] == 4
    assert inner_event.data["app.result"] == 8
    assert outer_event.data["component"] == "calc"
    assert "app.secret" not in outer_event.data
    assert outer_event.data["meta.span_type"] == "root"


def test_observe_records_errors(make_provider, recorder):
    """Test that @observe() records the error and re-raises it."""
    spanhive.set_tracer_provider(make_provider())

    @observe(name="fail", skip_result=True)
    def fail():
        raise ValueError("Test error message")

    with pytest.raises(ValueError, match="Test error message"):
        fail()
    data = recorder.events[0].data
    assert data["error"] == "ValueError"
    assert data["error_detail"] == "Test error message"


def test_observe_async(make_provider, recorder):
    """Test that @observe() works for async functions."""
    spanhive.set_tracer_provider(make_provider())

    @observe(name="fetch")
    async def fetch(key):
        await asyncio.sleep(0)
        return key.upper()

    assert asyncio.run(fetch("abc")) == "ABC"
    assert recorder.events[0].data["app.result"] == "ABC"


def test_tracer_helpers(make_provider, recorder):
    """Test the tracer's field helpers on the current span."""
    spanhive.set_tracer_provider(make_provider())
    tracer = spanhive.get_tracer()
    with tracer.span("request", fields={"route": "/orders"}):
        tracer.add_field("status", 200)
        tracer.add_trace_field("tenant", "acme")
        tracer.add_rollup_field("db.calls", 2)
    data = recorder.events[0].data
    assert data["route"] == "/orders"
    assert data["status"] == 200
    assert data["tenant"] == "acme"
    assert data["rollup.db.calls"] == 2
    assert tracer.current_span() is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
