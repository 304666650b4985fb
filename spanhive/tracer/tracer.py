"""Tracer: starts traces and spans within a trace context."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Optional, TYPE_CHECKING

from spanhive.context.context import TraceContext, get_trace_context
from spanhive.tracer.span import Span
from spanhive.tracer.span_context import SpanContext
from spanhive.tracer.trace import Trace

if TYPE_CHECKING:
    from spanhive.tracer.provider import TracerProvider

logger = logging.getLogger(__name__)


class Tracer:
    """
    Entry point for application code.

    Every method accepts an explicit ``context``; without one the trace
    context of the running execution scope is used.
    """

    def __init__(self, provider: "TracerProvider", instrumentation_scope: str):
        self._provider = provider
        self.instrumentation_scope = instrumentation_scope

    @property
    def provider(self) -> "TracerProvider":
        return self._provider

    def start_trace(
        self,
        name: Optional[str] = None,
        *,
        context: Optional[TraceContext] = None,
        trace_id: Optional[str] = None,
        parent_context: Optional[SpanContext] = None,
        headers: Optional[Mapping[str, str]] = None,
        fields: Optional[Mapping[str, Any]] = None,
    ) -> Span:
        """
        Start a new trace and return its root span.

        Args:
            name: Value of the root span's ``name`` field
            context: Trace context to use
            trace_id: Explicit trace id
            parent_context: Remote parent to continue
            headers: Incoming headers carrying a ``traceparent`` to continue
            fields: Initial trace-wide fields

        Returns:
            The root span, already current in the context
        """
        ctx = context or get_trace_context()
        if parent_context is None and headers:
            from spanhive.context.propagators import extract

            parent_context = extract(headers)
        if ctx.current_trace is not None and not ctx.current_trace.is_complete:
            logger.debug(
                "starting trace while trace %s is still active in this context",
                ctx.current_trace.id,
            )
        trace = Trace(
            self._provider,
            ctx,
            trace_id=trace_id,
            parent_context=parent_context,
            fields=fields,
            **self._provider.span_options(),
        )
        root = trace.root_span
        if name is not None:
            root.add_field("name", name)
        return root

    def start_span(self, name: Optional[str] = None, *, context: Optional[TraceContext] = None) -> Span:
        """Start a child of the current span, or a new trace if there is none."""
        ctx = context or get_trace_context()
        current = ctx.current_span
        if current is None:
            return self.start_trace(name, context=ctx)
        span = current.create_child()
        if name is not None:
            span.add_field("name", name)
        return span

    @contextmanager
    def span(
        self,
        name: Optional[str] = None,
        *,
        context: Optional[TraceContext] = None,
        fields: Optional[Mapping[str, Any]] = None,
    ) -> Iterator[Span]:
        """
        Run a block inside a span.

        The span is sent when the block exits. Exceptions are recorded as
        ``error`` and ``error_detail`` fields and re-raised.
        """
        span = self.start_span(name, context=context)
        if fields:
            span.add(fields)
        with span:
            yield span

    def current_span(self, context: Optional[TraceContext] = None) -> Optional[Span]:
        return (context or get_trace_context()).current_span

    def add_field(self, name: str, value: Any, *, context: Optional[TraceContext] = None) -> None:
        span = self.current_span(context)
        if span is not None:
            span.add_field(name, value)

    def add_trace_field(self, name: str, value: Any, *, context: Optional[TraceContext] = None) -> None:
        span = self.current_span(context)
        if span is not None:
            span.add_trace_field(name, value)

    def add_rollup_field(self, name: str, value, *, context: Optional[TraceContext] = None) -> None:
        span = self.current_span(context)
        if span is not None:
            span.add_rollup_field(name, value)
