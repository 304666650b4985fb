"""Event processor that logs events when they are transmitted."""

from __future__ import annotations

import logging
from typing import Optional

from spanhive.tracer.provider import EventProcessor


class LoggingEventProcessor(EventProcessor):
    """Logs an event summary on transmit using the standard logging module."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or logging.getLogger("spanhive.events")

    def on_transmit(self, event) -> None:
        data = event.data
        self.logger.info(
            "[event] name=%s trace_id=%s span_id=%s type=%s duration_ms=%s sample_rate=%s",
            data.get("name"),
            data.get("trace.trace_id"),
            data.get("trace.span_id"),
            data.get("meta.span_type"),
            data.get("duration_ms"),
            event.sample_rate,
        )
