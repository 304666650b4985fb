"""Identity of a span as seen from another process."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SpanContext:
    """
    Trace id, span id and W3C flags of a span.

    A context extracted from incoming headers is remote; continuing it makes
    the new root span a subroot whose parent id is ``span_id``.
    """

    trace_id: str
    span_id: str
    trace_flags: int = 1
    trace_state: Optional[str] = None
    is_remote: bool = False

    @property
    def sampled(self) -> bool:
        return bool(self.trace_flags & 1)

    def is_valid(self) -> bool:
        return bool(self.trace_id and self.span_id)
