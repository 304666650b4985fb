"""Context utilities for the tracing SDK."""

from spanhive.context.context import (
    TraceContext,
    get_trace_context,
    reset_trace_context,
    use_trace_context,
)
from spanhive.context.propagators import (
    extract,
    format_traceparent,
    inject,
    parse_traceparent,
)

__all__ = [
    "TraceContext",
    "get_trace_context",
    "use_trace_context",
    "reset_trace_context",
    "format_traceparent",
    "parse_traceparent",
    "inject",
    "extract",
]
