"""Exporters converting spanhive events into OpenTelemetry spans."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional

from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace.export import SpanExporter, SpanExportResult
from opentelemetry.sdk.util.instrumentation import InstrumentationScope
from opentelemetry.trace import SpanContext, SpanKind, Status, StatusCode, TraceFlags

from spanhive.errors import ExportError
from spanhive.tracer.event import Event
from spanhive.utils.helpers import parse_span_id, parse_trace_id, to_attribute_value

logger = logging.getLogger(__name__)

_SCOPE = InstrumentationScope("spanhive")


class OTelBridgeExporter:
    """
    Exports events through any OpenTelemetry SpanExporter.

    Each event becomes one ReadableSpan. Its start time is the event's
    creation time and its end time adds ``duration_ms``.
    """

    def __init__(self, span_exporter: SpanExporter, resource: Optional[Resource] = None) -> None:
        self._span_exporter = span_exporter
        self.resource = resource or Resource.create({})

    def export(self, events: Iterable[Event]) -> bool:
        """
        Export events.

        Returns:
            True if export succeeded, False if the backend rejected the spans

        Raises:
            ExportError: if the underlying span exporter raised
        """
        spans = [self.to_readable_span(event) for event in events]
        if not spans:
            return True
        try:
            result = self._span_exporter.export(spans)
        except Exception as exc:
            raise ExportError(
                "span export failed",
                {"exporter": type(self._span_exporter).__name__, "spans": len(spans)},
            ) from exc
        if result != SpanExportResult.SUCCESS:
            logger.debug("%s returned %s", type(self._span_exporter).__name__, result)
            return False
        return True

    def to_readable_span(self, event: Event) -> ReadableSpan:
        data = event.data
        trace_id = parse_trace_id(str(data.get("trace.trace_id", "")))
        context = SpanContext(
            trace_id=trace_id,
            span_id=parse_span_id(data.get("trace.span_id", "")),
            is_remote=False,
            trace_flags=TraceFlags(TraceFlags.SAMPLED),
        )
        parent = None
        if data.get("trace.parent_id"):
            parent = SpanContext(
                trace_id=trace_id,
                span_id=parse_span_id(data["trace.parent_id"]),
                is_remote=data.get("meta.span_type") == "subroot",
            )

        if "error" in data:
            status = Status(status_code=StatusCode.ERROR, description=str(data.get("error_detail", data["error"])))
        else:
            status = Status(status_code=StatusCode.UNSET)

        start_time = event.timestamp_ns
        end_time = start_time + int(float(data.get("duration_ms", 0)) * 1_000_000)

        return ReadableSpan(
            name=str(data.get("name") or "span"),
            context=context,
            parent=parent,
            resource=self.resource,
            attributes=self._attributes(event),
            kind=SpanKind.INTERNAL,
            status=status,
            start_time=start_time,
            end_time=end_time,
            instrumentation_scope=_SCOPE,
        )

    def _attributes(self, event: Event) -> Dict[str, Any]:
        attributes = {}
        for key, value in event.data.items():
            converted = to_attribute_value(value)
            if converted is not None:
                attributes[key] = converted
        attributes["meta.sample_rate"] = event.sample_rate
        return attributes

    def shutdown(self) -> None:
        self._span_exporter.shutdown()

    def force_flush(self, timeout_millis: Optional[int] = None) -> None:
        self._span_exporter.force_flush(timeout_millis=timeout_millis or 30000)


class OTLPExporter(OTelBridgeExporter):
    """Bridge over OpenTelemetry's OTLP/HTTP span exporter."""

    def __init__(
        self,
        endpoint: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        headers: Optional[dict] = None,
        resource: Optional[Resource] = None,
    ) -> None:
        """
        Initialize OTLP exporter.

        Args:
            endpoint: OTLP endpoint URL (defaults to OTel default)
            api_key: Optional API key for authentication
            timeout: Request timeout in seconds
            headers: Optional additional headers
            resource: Resource describing the emitting service
        """
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter

        export_headers = dict(headers) if headers else {}
        if api_key:
            export_headers["Authorization"] = f"Bearer {api_key}"

        super().__init__(
            OTLPSpanExporter(
                endpoint=endpoint,
                timeout=timeout,
                headers=export_headers or None,
            ),
            resource=resource,
        )
        self.endpoint = endpoint
        self.api_key = api_key
        self.timeout = timeout
