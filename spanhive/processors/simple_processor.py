"""Event processor exporting each event as soon as it is transmitted."""

from __future__ import annotations

import logging
from typing import Optional

from spanhive.tracer.provider import EventProcessor

logger = logging.getLogger(__name__)


class SimpleEventProcessor(EventProcessor):
    """Synchronously hands every transmitted event to an exporter."""

    def __init__(self, exporter) -> None:
        self.exporter = exporter
        self._shutdown = False

    def on_transmit(self, event) -> None:
        if self._shutdown:
            return
        if not self.exporter.export([event]):
            logger.warning(
                "%s rejected event %s",
                type(self.exporter).__name__,
                event.data.get("trace.span_id"),
            )

    def shutdown(self) -> None:
        self._shutdown = True
        self.exporter.shutdown()

    def force_flush(self, timeout: Optional[float] = None) -> None:
        flush = getattr(self.exporter, "force_flush", None)
        if flush is not None:
            flush(timeout_millis=int(timeout * 1000) if timeout else None)
