"""W3C trace context propagation using OpenTelemetry's standard propagator."""

from __future__ import annotations

from typing import Dict, Mapping, MutableMapping, Optional

from opentelemetry.trace import get_current_span, set_span_in_context
from opentelemetry.trace import SpanContext as OTelSpanContext, TraceFlags, TraceState
from opentelemetry.trace import NonRecordingSpan
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from spanhive.tracer.span_context import SpanContext
from spanhive.utils.helpers import format_trace_id, format_span_id, parse_trace_id, parse_span_id

_propagator = TraceContextTextMapPropagator()


def format_traceparent(context: SpanContext) -> str:
    """
    Format traceparent header value (W3C Trace Context standard).

    Trace ids that are not 128-bit hex values are hashed onto one, so such
    ids do not survive a round trip unchanged.
    """
    carrier: Dict[str, str] = {}
    _propagator.inject(carrier, context=_to_otel_context(context))
    return carrier.get("traceparent", "")


def parse_traceparent(header_value: str) -> Optional[SpanContext]:
    """Parse a traceparent header into a SpanContext, or None if invalid."""
    if not header_value:
        return None
    return extract({"traceparent": header_value})


def inject(headers: MutableMapping[str, str], span) -> None:
    """
    Inject the traceparent of ``span`` into a headers mapping.

    Args:
        headers: Outgoing headers, modified in place
        span: spanhive Span, or a SpanContext
    """
    context = span.span_context if hasattr(span, "span_context") else span
    _propagator.inject(headers, context=_to_otel_context(context))


def extract(headers: Mapping[str, str]) -> Optional[SpanContext]:
    """Extract the remote parent from incoming headers (case-insensitive)."""
    carrier = {str(k).lower(): v for k, v in headers.items()}
    ctx = _propagator.extract(carrier=carrier)
    otel_context = get_current_span(context=ctx).get_span_context()
    if not otel_context.is_valid:
        return None
    trace_state = None
    if otel_context.trace_state:
        trace_state = ",".join(f"{k}={v}" for k, v in otel_context.trace_state.items()) or None
    return SpanContext(
        trace_id=format_trace_id(otel_context.trace_id),
        span_id=format_span_id(otel_context.span_id),
        trace_flags=1 if otel_context.trace_flags.sampled else 0,
        trace_state=trace_state,
        is_remote=True,
    )


def _to_otel_context(context: SpanContext):
    trace_state = TraceState()
    if context.trace_state:
        items = []
        for item in context.trace_state.split(","):
            key, sep, value = item.strip().partition("=")
            if sep and key and value:
                items.append((key, value))
        trace_state = TraceState(items)
    otel_context = OTelSpanContext(
        trace_id=parse_trace_id(context.trace_id),
        span_id=parse_span_id(context.span_id),
        is_remote=context.is_remote,
        trace_flags=TraceFlags(context.trace_flags),
        trace_state=trace_state,
    )
    return set_span_in_context(NonRecordingSpan(otel_context))
