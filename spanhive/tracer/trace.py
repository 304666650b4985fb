"""Trace: one logical request, owner of trace-wide fields and its spans."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, TYPE_CHECKING

from spanhive.tracer.rollup import RollupFields
from spanhive.tracer.span_context import SpanContext
from spanhive.utils.helpers import generate_trace_id

if TYPE_CHECKING:
    from spanhive.context.context import TraceContext
    from spanhive.tracer.provider import TracerProvider
    from spanhive.tracer.span import Span


class Trace:
    """
    Tree of spans for one request.

    The trace keeps every unfinished span in an arena keyed by span id. Once
    the arena is empty the trace is complete and can be dropped.
    """

    def __init__(
        self,
        provider: "TracerProvider",
        context: "TraceContext",
        *,
        trace_id: Optional[str] = None,
        parent_context: Optional[SpanContext] = None,
        fields: Optional[Mapping[str, Any]] = None,
        **span_options: Any,
    ) -> None:
        """
        Start a trace and its root span.

        Args:
            provider: Provider that builds and emits events
            context: Trace context of the current request
            trace_id: Explicit trace id (opaque string)
            parent_context: Remote span context when continuing a trace; its
                span id becomes the root span's parent id
            fields: Initial trace-wide fields
            span_options: Hook and sampling options forwarded to the root span
        """
        from spanhive.tracer.span import Span

        parent_id = None
        if parent_context is not None and parent_context.is_valid():
            trace_id = trace_id or parent_context.trace_id
            parent_id = parent_context.span_id

        self.id = trace_id or generate_trace_id()
        self.fields: Dict[str, Any] = dict(fields or {})
        self.rollup_fields = RollupFields()
        self._spans: Dict[str, "Span"] = {}
        self.context = context
        context.current_trace = self

        self.root_span = Span(
            trace=self,
            provider=provider,
            context=context,
            parent_id=parent_id,
            is_root=True,
            **span_options,
        )

    def add_field(self, key: str, value: Any) -> None:
        self.fields[key] = value

    def add_rollup_field(self, key: str, value) -> None:
        self.rollup_fields.add(key, value)

    def register(self, span: "Span") -> None:
        self._spans[span.id] = span

    def unregister(self, span: "Span") -> None:
        self._spans.pop(span.id, None)

    @property
    def active_spans(self) -> Dict[str, "Span"]:
        return dict(self._spans)

    @property
    def is_complete(self) -> bool:
        return not self._spans
