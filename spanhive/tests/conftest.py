"""Shared fixtures: a provider whose transmitted events are recorded."""

import pytest

import spanhive
from spanhive import runtime_config
from spanhive.context import TraceContext, reset_trace_context, use_trace_context
from spanhive.tracer.provider import EventProcessor, TracerProvider


class RecordingProcessor(EventProcessor):
    def __init__(self):
        self.events = []

    def on_transmit(self, event):
        self.events.append(event)

    def by_name(self, name):
        return [e for e in self.events if e.data.get("name") == name]

    def names(self):
        return [e.data.get("name") for e in self.events]


@pytest.fixture
def recorder():
    return RecordingProcessor()


@pytest.fixture
def make_provider(recorder):
    def _make(**kwargs):
        provider = TracerProvider(**kwargs)
        provider.add_event_processor(recorder)
        return provider
    return _make


@pytest.fixture
def provider(make_provider):
    return make_provider()


@pytest.fixture
def context():
    return TraceContext()


@pytest.fixture
def tracer(provider):
    return provider.get_tracer("tests")


@pytest.fixture(autouse=True)
def reset_global_state():
    token = use_trace_context(TraceContext())
    yield
    reset_trace_context(token)
    spanhive.shutdown()
    runtime_config.reset()
