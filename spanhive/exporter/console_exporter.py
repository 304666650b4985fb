"""Console exporter for developer visibility."""

from __future__ import annotations

import sys
from typing import Iterable

from spanhive.tracer.event import Event


class ConsoleExporter:
    """Simple exporter that prints events to stdout (or provided stream)."""

    def __init__(self, stream=None) -> None:
        self.stream = stream or sys.stdout

    def export(self, events: Iterable[Event]) -> bool:
        for event in events:
            data = event.data
            line = (
                f"[span] name={data.get('name')} trace_id={data.get('trace.trace_id')} "
                f"span_id={data.get('trace.span_id')} type={data.get('meta.span_type')} "
                f"duration_ms={data.get('duration_ms')} sample_rate={event.sample_rate}"
            )
            extra = {k: v for k, v in data.items() if not k.startswith(("trace.", "meta.")) and k not in ("name", "duration_ms")}
            if extra:
                line += f" fields={extra}"
            print(line, file=self.stream)
        return True

    def shutdown(self) -> None:
        return None

    def force_flush(self, timeout_millis=None) -> None:
        self.stream.flush()
