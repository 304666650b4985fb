"""Tracer components for the tracing SDK."""

from spanhive.tracer.event import Event
from spanhive.tracer.provider import EventProcessor, TracerProvider
from spanhive.tracer.rollup import RollupFields
from spanhive.tracer.span import PresendHook, SampleHook, Span
from spanhive.tracer.span_context import SpanContext
from spanhive.tracer.trace import Trace
from spanhive.tracer.tracer import Tracer

__all__ = [
    "Event",
    "EventProcessor",
    "PresendHook",
    "RollupFields",
    "SampleHook",
    "Span",
    "SpanContext",
    "Trace",
    "Tracer",
    "TracerProvider",
]
