"""Span: a timed unit of work and its send/skip state machine."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, TYPE_CHECKING

from spanhive.processors.sampler import SamplingDecision, should_sample
from spanhive.tracer.rollup import RollupFields
from spanhive.tracer.span_context import SpanContext
from spanhive.utils.helpers import generate_span_id

if TYPE_CHECKING:
    from spanhive.context.context import TraceContext
    from spanhive.tracer.provider import TracerProvider
    from spanhive.tracer.trace import Trace

logger = logging.getLogger(__name__)

# Receives the event fields, returns (keep, sample_rate_used).
SampleHook = Callable[[Dict[str, Any]], Tuple[bool, int]]
# Receives the final event fields just before transmission; may mutate them.
PresendHook = Callable[[Dict[str, Any]], None]


class Span:
    """
    A span of one trace, wrapping the event that will describe it.

    Every span ends exactly once: either sent (its event transmitted when
    sampling keeps it) or skipped. Completing a span completes all of its
    still-active children first, so nothing is left behind when a parent
    finishes.
    """

    def __init__(
        self,
        trace: "Trace",
        provider: "TracerProvider",
        context: "TraceContext",
        *,
        parent: Optional["Span"] = None,
        parent_id: Optional[str] = None,
        is_root: Optional[bool] = None,
        sample_hook: Optional[SampleHook] = None,
        presend_hook: Optional[PresendHook] = None,
        sample_excludes_child_spans: bool = False,
    ) -> None:
        self.id = generate_span_id()
        self.trace = trace
        self.parent = parent
        # Kept for linkage when only the parent's id is known, e.g. a remote parent.
        self.parent_id = parent_id
        self.is_root = parent_id is None if is_root is None else is_root
        self.sample_hook = sample_hook
        self.presend_hook = presend_hook
        self.sample_excludes_child_spans = sample_excludes_child_spans

        self._provider = provider
        self._context = context
        self.event = provider.new_event()
        self.rollup_fields = RollupFields()
        self._children: Dict[str, "Span"] = {}
        self._sent = False
        self._will_send_by_parent = False
        self._decision = SamplingDecision.UNDECIDED
        self._started = time.monotonic()

        trace.register(self)
        context.current_span = self

    # Fields

    def add_field(self, name: str, value: Any) -> None:
        self.event.add_field(name, value)

    def add(self, fields: Mapping[str, Any]) -> None:
        self.event.add(fields)

    def add_trace_field(self, name: str, value: Any) -> None:
        self.trace.add_field(name, value)

    def add_rollup_field(self, name: str, value) -> None:
        """Count ``value`` on this span and in the trace-wide ``rollup.<name>`` total."""
        self.trace.add_rollup_field(f"rollup.{name}", value)
        self.rollup_fields.add(name, value)

    # Tree

    def create_child(self) -> "Span":
        child = Span(
            trace=self.trace,
            provider=self._provider,
            context=self._context,
            parent=self,
            parent_id=self.id,
            sample_hook=self.sample_hook,
            presend_hook=self.presend_hook,
            sample_excludes_child_spans=self.sample_excludes_child_spans,
        )
        self._children[child.id] = child
        return child

    @property
    def children(self) -> List["Span"]:
        return list(self._children.values())

    def _remove_child(self, child: "Span") -> None:
        self._children.pop(child.id, None)

    def span_ancestors(self) -> List["Span"]:
        if self.parent is None:
            return []
        return self.parent.span_ancestors() + [self.parent]

    @property
    def sent(self) -> bool:
        return self._sent

    @property
    def span_type(self) -> str:
        if self.is_root:
            return "root" if self.parent_id is None else "subroot"
        if not self._children:
            return "leaf"
        return "mid"

    @property
    def duration_ms(self) -> float:
        return (time.monotonic() - self._started) * 1000

    @property
    def span_context(self) -> SpanContext:
        return SpanContext(trace_id=self.trace.id, span_id=self.id)

    def to_trace_header(self) -> str:
        """Serialize this span as a W3C traceparent header value."""
        from spanhive.context.propagators import format_traceparent

        return format_traceparent(self.span_context)

    # Sampling

    def sampling_says_send(self) -> bool:
        """
        Decide, once, whether this span's event should be transmitted.

        With ``sample_excludes_child_spans`` set, a child never decides on its
        own and follows its parent's cached decision. Otherwise the sample hook
        decides (and may change the event's sample rate), or the deterministic
        sampler keyed on the trace id.
        """
        if self.sample_excludes_child_spans and self.parent is not None:
            return self.parent.sampling_says_send()

        if self._decision is SamplingDecision.UNDECIDED:
            if self.sample_hook is None:
                keep = should_sample(self.event.sample_rate, self.trace.id)
            else:
                keep, self.event.sample_rate = self.sample_hook(self.event.data)
            self._decision = SamplingDecision.KEEP if keep else SamplingDecision.DROP
        return self._decision is SamplingDecision.KEEP

    # Completion

    def send(self) -> None:
        if self._sent:
            return
        self._send_internal()

    def send_by_parent(self) -> None:
        if self._sent:
            return
        self.add_field("meta.sent_by_parent", True)
        self._send_internal()

    def will_send_by_parent(self) -> None:
        """
        Hand this span's completion over to its parent.

        The span is reported finished now; the later send by the parent does
        not report it again.
        """
        if self._sent or self._will_send_by_parent:
            return
        self._will_send_by_parent = True
        self._context.span_finished(self)

    def skip_sending(self) -> None:
        """End this span and its whole unsent subtree without transmitting."""
        if self._sent:
            return
        for child in self.children:
            child.skip_sending()
        self._mark_sent()

    def _send_internal(self) -> None:
        self._add_additional_fields()
        sample = self.sampling_says_send()
        logger.debug(
            "%s- %s (sampled=%s)",
            "  " * len(self.span_ancestors()),
            self.event.data.get("name"),
            sample,
        )

        if self.sample_excludes_child_spans and not sample:
            for child in self.children:
                child.skip_sending()
        else:
            for child in self.children:
                child.send_by_parent()

        if sample:
            if self.presend_hook is not None:
                self.presend_hook(self.event.data)
            self.event.transmit()
        self._mark_sent()

    def _add_additional_fields(self) -> None:
        span_type = self.span_type
        self.add_field("duration_ms", self.duration_ms)
        self.add_field("trace.trace_id", self.trace.id)
        self.add_field("trace.span_id", self.id)
        self.add_field("meta.span_type", span_type)
        if self.parent_id is not None:
            self.add_field("trace.parent_id", self.parent_id)
        self.add(self.rollup_fields)
        self.add(self.trace.fields)
        if span_type == "root":
            self.add(self.trace.rollup_fields)

    def _mark_sent(self) -> None:
        self._sent = True
        self.trace.unregister(self)
        if self._will_send_by_parent:
            self._context.release_trace(self.trace)
        else:
            self._context.span_finished(self)
        if self.parent is not None:
            self.parent._remove_child(self)

    # Context manager support

    def __enter__(self) -> "Span":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc is not None:
            self.add_field("error", exc_type.__name__)
            self.add_field("error_detail", str(exc))
        self.send()
        return False

    def __repr__(self) -> str:
        return f"Span(id={self.id!r}, trace_id={self.trace.id!r}, type={self.span_type!r}, sent={self._sent})"
