"""Function instrumentation helpers."""

from spanhive.instrumentation.decorator import observe

__all__ = ["observe"]
