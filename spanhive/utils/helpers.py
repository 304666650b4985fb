"""Helper functions for identifiers and OpenTelemetry compatibility."""

from __future__ import annotations

import hashlib
import json
import re
import secrets
import uuid
from typing import Any

INVALID_SPAN_ID = "00" * 8

_TRACE_ID_HEX = re.compile(r"[0-9a-f]{32}")


def generate_span_id() -> str:
    """
    Generate a random 16-hex-character span id.

    The all-zero id is reserved and is regenerated when drawn.
    """
    while True:
        span_id = secrets.token_hex(8)
        if span_id != INVALID_SPAN_ID:
            return span_id


def generate_trace_id() -> str:
    """Generate a random 32-hex-character trace id."""
    return uuid.uuid4().hex


def format_trace_id(trace_id: int) -> str:
    """
    Format OTel trace_id (int) to hex string.

    Args:
        trace_id: OTel trace_id as int

    Returns:
        32-character hex string
    """
    return format(trace_id, '032x')


def format_span_id(span_id: int) -> str:
    """
    Format OTel span_id (int) to hex string.

    Args:
        span_id: OTel span_id as int

    Returns:
        16-character hex string
    """
    return format(span_id, '016x')


def parse_trace_id(value: str) -> int:
    """
    Parse a trace id string to an OTel trace_id int.

    Trace ids are opaque strings; anything that is not a 128-bit hex value is
    mapped onto one through a SHA-256 digest so it can still be exported.
    The result is never 0, which OTel treats as an invalid trace id.
    """
    if _TRACE_ID_HEX.fullmatch(value):
        parsed = int(value, 16)
        if parsed:
            return parsed
    digest = hashlib.sha256(value.encode("utf-8")).hexdigest()
    return int(digest[:32], 16) or int(digest[32:], 16) or 1


def parse_span_id(hex_string: str) -> int:
    """
    Parse hex string span_id to OTel int.

    Args:
        hex_string: 16-character hex string

    Returns:
        OTel span_id as int
    """
    if not hex_string:
        return 0
    return int(hex_string, 16)


def to_attribute_value(value: Any) -> Any:
    """
    Convert a value to an OpenTelemetry-compatible attribute type.

    OTel attributes must be: bool, str, bytes, int, float, or sequences of those.
    """
    if isinstance(value, (bool, str, bytes, int, float)):
        return value

    if value is None:
        return None

    if isinstance(value, (list, tuple)):
        converted = []
        for item in value:
            if isinstance(item, (bool, str, bytes, int, float)):
                converted.append(item)
            else:
                converted.append(str(item)[:1000])
        return converted[:100]

    if isinstance(value, dict):
        try:
            return json.dumps(value, default=str)[:1000]
        except (TypeError, ValueError):
            return str(value)[:1000]

    return str(value)[:1000]
