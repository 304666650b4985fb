"""Utility functions for spanhive."""

from spanhive.utils.helpers import (
    generate_span_id,
    generate_trace_id,
    format_trace_id,
    format_span_id,
    parse_trace_id,
    parse_span_id,
    to_attribute_value,
)

__all__ = [
    "generate_span_id",
    "generate_trace_id",
    "format_trace_id",
    "format_span_id",
    "parse_trace_id",
    "parse_span_id",
    "to_attribute_value",
]
