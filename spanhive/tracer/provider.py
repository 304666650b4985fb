"""TracerProvider: builds events and hands transmitted events to processors."""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from spanhive import runtime_config
from spanhive.errors import ValidationError

if TYPE_CHECKING:
    from spanhive.tracer.span import PresendHook, SampleHook

logger = logging.getLogger(__name__)


class EventProcessor:
    """
    Base interface for processors receiving transmitted events.

    Processors only ever see events whose span was kept by sampling.
    """

    def on_transmit(self, event) -> None:
        """
        Called when an event is transmitted.

        Args:
            event: spanhive Event, already sampled and finalized
        """
        pass

    def shutdown(self) -> None:
        """Shutdown the processor."""
        pass

    def force_flush(self, timeout: Optional[float] = None) -> None:
        """Force flush any pending events."""
        pass


class TracerProvider:
    """
    Source of events and tracers, and sink of transmitted events.

    Settings not given here fall back to ``spanhive.runtime_config``.
    """

    def __init__(
        self,
        service_name: Optional[str] = None,
        dataset: Optional[str] = None,
        sample_rate: Optional[int] = None,
        sample_hook: Optional[SampleHook] = None,
        presend_hook: Optional[PresendHook] = None,
        sample_excludes_child_spans: Optional[bool] = None,
    ) -> None:
        """
        Initialize the provider.

        Args:
            service_name: Added as ``service_name`` to every event
            dataset: Added as ``meta.dataset`` to every event when set
            sample_rate: Default sample rate of new events (positive int)
            sample_hook: Default sample hook for new traces
            presend_hook: Default presend hook for new traces
            sample_excludes_child_spans: Default descendant-exclusion mode
        """
        self.service_name = service_name or runtime_config.get_service_name()
        self.dataset = dataset or runtime_config.get_dataset()
        self.sample_rate = sample_rate if sample_rate is not None else runtime_config.get_sample_rate()
        if isinstance(self.sample_rate, bool) or not isinstance(self.sample_rate, int) or self.sample_rate < 1:
            raise ValidationError("sample_rate must be a positive integer", {"sample_rate": self.sample_rate})
        self.sample_hook = sample_hook
        self.presend_hook = presend_hook
        if sample_excludes_child_spans is None:
            sample_excludes_child_spans = runtime_config.get_sample_excludes_child_spans()
        self.sample_excludes_child_spans = sample_excludes_child_spans

        self._processors: List[EventProcessor] = []
        self._tracers: Dict[str, Any] = {}
        self._lock = threading.Lock()
        self._shutdown = False

    def span_options(self) -> Dict[str, Any]:
        """Hook and sampling options given to the root span of new traces."""
        return {
            "sample_hook": self.sample_hook,
            "presend_hook": self.presend_hook,
            "sample_excludes_child_spans": self.sample_excludes_child_spans,
        }

    def get_tracer(self, name: str) -> "Tracer":
        """
        Get a tracer by name.

        Args:
            name: Instrumentation scope name

        Returns:
            spanhive Tracer instance
        """
        with self._lock:
            tracer = self._tracers.get(name)
            if tracer is None:
                from spanhive.tracer.tracer import Tracer
                tracer = Tracer(self, name)
                self._tracers[name] = tracer
            return tracer

    def add_event_processor(self, processor: EventProcessor) -> None:
        self._processors.append(processor)

    @property
    def processors(self) -> List[EventProcessor]:
        return list(self._processors)

    def new_event(self):
        from spanhive.tracer.event import Event

        fields = {}
        if self.service_name:
            fields["service_name"] = self.service_name
        if self.dataset:
            fields["meta.dataset"] = self.dataset
        return Event(self, fields, sample_rate=self.sample_rate)

    def emit(self, event) -> None:
        """Hand a transmitted event to every processor."""
        if self._shutdown:
            logger.debug("provider shut down, dropping event %s", event.data.get("trace.span_id"))
            return
        for processor in self._processors:
            try:
                processor.on_transmit(event)
            except Exception:
                # Transmission problems must not break the traced application.
                logger.exception("event processor %s failed", type(processor).__name__)

    def force_flush(self, timeout: Optional[float] = None) -> None:
        """Force flush all processors."""
        for processor in self._processors:
            try:
                processor.force_flush(timeout=timeout)
            except Exception:
                logger.exception("flushing %s failed", type(processor).__name__)

    def shutdown(self) -> None:
        """Shutdown the provider and all processors."""
        if self._shutdown:
            return
        self._shutdown = True
        for processor in self._processors:
            try:
                processor.shutdown()
            except Exception:
                logger.exception("shutting down %s failed", type(processor).__name__)
