"""spanhive: span lifecycle and trace aggregation for telemetry clients."""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional

from spanhive import runtime_config
from spanhive.config import load_config
from spanhive.context import TraceContext, get_trace_context
from spanhive.errors import ConfigError, ExportError, InitializationError, SpanhiveError
from spanhive.exporter import ConsoleExporter, OTLPExporter
from spanhive.instrumentation import observe
from spanhive.processors import LoggingEventProcessor, SimpleEventProcessor
from spanhive.tracer import PresendHook, SampleHook, Span, Trace, Tracer, TracerProvider

__version__ = "0.3.0"

logger = logging.getLogger("spanhive.auto")

_provider: Optional[TracerProvider] = None
_initialized = False
_lock = threading.Lock()


def init(
    config_file: Optional[str] = None,
    *,
    sample_hook: Optional[SampleHook] = None,
    presend_hook: Optional[PresendHook] = None,
    **overrides: Any,
) -> TracerProvider:
    """
    Configure spanhive and install the global TracerProvider.

    Settings come from the config file, the environment and ``overrides``
    (see ``spanhive.config.load_config``). Calling init() again returns the
    existing provider.
    """
    global _provider, _initialized
    with _lock:
        if _initialized and _provider is not None:
            logger.warning("spanhive.init() called more than once; returning the existing provider")
            return _provider

        config = load_config(config_file, **overrides)
        tracing = config.tracing
        runtime_config.set_service_name(tracing.service_name)
        runtime_config.set_dataset(tracing.dataset)
        runtime_config.set_sample_rate(tracing.sample_rate)
        runtime_config.set_sample_excludes_child_spans(tracing.sample_excludes_child_spans)
        runtime_config.set_debug(tracing.debug)
        if runtime_config.get_debug():
            logging.getLogger("spanhive").setLevel(logging.DEBUG)

        provider = TracerProvider(sample_hook=sample_hook, presend_hook=presend_hook)
        exporters = config.exporters
        try:
            if exporters.enable_console:
                provider.add_event_processor(SimpleEventProcessor(ConsoleExporter()))
            if exporters.enable_logging:
                provider.add_event_processor(LoggingEventProcessor())
            if exporters.otlp_endpoint:
                provider.add_event_processor(
                    SimpleEventProcessor(
                        OTLPExporter(
                            endpoint=exporters.otlp_endpoint,
                            api_key=exporters.api_key,
                            timeout=exporters.timeout,
                        )
                    )
                )
        except Exception as exc:
            raise InitializationError("failed to set up exporters", {"error": exc}) from exc

        _provider = provider
        _initialized = True
        logger.debug("spanhive initialized (service_name=%s)", tracing.service_name)
        return provider


def get_tracer_provider() -> TracerProvider:
    """Return the global provider, creating an unconfigured one if needed."""
    global _provider
    with _lock:
        if _provider is None:
            _provider = TracerProvider()
        return _provider


def set_tracer_provider(provider: TracerProvider) -> None:
    global _provider
    with _lock:
        _provider = provider


def get_tracer(name: str = "spanhive") -> Tracer:
    return get_tracer_provider().get_tracer(name)


def shutdown() -> None:
    """Flush and shut down the global provider; init() may be called again."""
    global _provider, _initialized
    with _lock:
        provider = _provider
        _provider = None
        _initialized = False
    if provider is not None:
        provider.force_flush()
        provider.shutdown()
    runtime_config.reset()


__all__ = [
    "__version__",
    "init",
    "shutdown",
    "get_tracer",
    "get_tracer_provider",
    "set_tracer_provider",
    "observe",
    "Span",
    "Trace",
    "Tracer",
    "TracerProvider",
    "TraceContext",
    "get_trace_context",
    "SpanhiveError",
    "ConfigError",
    "ExportError",
    "InitializationError",
]
