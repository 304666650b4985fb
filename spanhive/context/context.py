"""Trace context: the active span stack for one execution scope."""

from __future__ import annotations

import itertools
import logging
from contextvars import ContextVar, Token
from typing import Callable, Dict, List, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from spanhive.tracer.span import Span
    from spanhive.tracer.trace import Trace

logger = logging.getLogger(__name__)

SpanListener = Callable[["Span"], None]

# Span stacks of every TraceContext, keyed by context serial. Each asyncio task
# and thread sees its own copy, so spans pushed in one task never become the
# parent of spans started in a sibling task.
_span_stacks: ContextVar[Optional[Dict[int, Tuple["Span", ...]]]] = ContextVar(
    "spanhive_span_stacks", default=None
)
_serials = itertools.count()


class TraceContext:
    """
    Holds the current span and current trace for one request.

    Spans push themselves on creation. A finished span is removed from the
    stack wherever it sits, so the span that was current before it becomes
    current again. The stack itself lives in a context variable, so tasks
    started while a span is open each build on that span independently.
    Listeners and the current trace are shared by all of them.
    """

    def __init__(self) -> None:
        self._serial = next(_serials)
        self._listeners: List[SpanListener] = []
        self.current_trace: Optional["Trace"] = None
        self.finished_spans = 0

    def _stack(self) -> Tuple["Span", ...]:
        stacks = _span_stacks.get()
        if not stacks:
            return ()
        return stacks.get(self._serial, ())

    def _set_stack(self, stack: Tuple["Span", ...]) -> None:
        stacks = dict(_span_stacks.get() or {})
        if stack:
            stacks[self._serial] = stack
        else:
            stacks.pop(self._serial, None)
        _span_stacks.set(stacks)

    @property
    def current_span(self) -> Optional["Span"]:
        stack = self._stack()
        return stack[-1] if stack else None

    @current_span.setter
    def current_span(self, span: "Span") -> None:
        self.push_span(span)

    def push_span(self, span: "Span") -> None:
        self._set_stack(self._stack() + (span,))

    def pop_span(self, span: "Span") -> None:
        stack = self._stack()
        for index in range(len(stack) - 1, -1, -1):
            if stack[index] is span:
                self._set_stack(stack[:index] + stack[index + 1:])
                return

    def add_listener(self, listener: SpanListener) -> None:
        """Register a callable invoked with every finished span."""
        self._listeners.append(listener)

    def remove_listener(self, listener: SpanListener) -> None:
        self._listeners.remove(listener)

    def span_finished(self, span: "Span") -> None:
        self.finished_spans += 1
        self.pop_span(span)
        for listener in list(self._listeners):
            listener(span)
        self.release_trace(span.trace)

    def release_trace(self, trace: "Trace") -> None:
        """Forget ``trace`` as the current trace once all its spans have ended."""
        if self.current_trace is trace and trace.is_complete:
            logger.debug("trace %s complete", trace.id)
            self.current_trace = None

    @property
    def depth(self) -> int:
        return len(self._stack())


_current_context: ContextVar[Optional[TraceContext]] = ContextVar(
    "spanhive_trace_context", default=None
)


def get_trace_context() -> TraceContext:
    """
    Return the trace context of the running execution scope.

    A new context is created on first use in each scope.
    """
    ctx = _current_context.get()
    if ctx is None:
        ctx = TraceContext()
        _current_context.set(ctx)
    return ctx


def use_trace_context(ctx: TraceContext) -> Token:
    """
    Make ``ctx`` the context of the running scope.

    Returns:
        Token needed to restore the previous context
    """
    return _current_context.set(ctx)


def reset_trace_context(token: Token) -> None:
    """Restore the previous context using the token from use_trace_context()."""
    _current_context.reset(token)
