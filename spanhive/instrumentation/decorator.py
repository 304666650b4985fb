"""@observe decorator for tracing functions."""

from __future__ import annotations

import functools
import inspect
from typing import Any, Callable, Dict, Iterable, Optional

from spanhive.utils.helpers import to_attribute_value


def _capture_args(bound_args: inspect.BoundArguments, skip: Iterable[str]) -> Dict[str, Any]:
    """Capture function arguments as ``app.<name>`` fields."""
    captured = {}
    for name, value in bound_args.arguments.items():
        if name in skip or name in ("self", "cls"):
            continue
        captured[f"app.{name}"] = to_attribute_value(value)
    return captured


def observe(
    name: Optional[str] = None,
    *,
    attributes: Optional[Dict[str, Any]] = None,
    skip_args: Optional[Iterable[str]] = None,
    skip_result: bool = False,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Decorate a function to run it inside a span.

    - Supports sync and async functions.
    - The span is a child of the current span, or the root of a new trace.
    - Errors are recorded as ``error``/``error_detail`` fields and re-raised.
    - Arguments and the result are captured unless skipped.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        span_name = name or func.__name__
        skip_args_set = set(skip_args or [])
        signature = inspect.signature(func)

        def _fields(args, kwargs) -> Dict[str, Any]:
            bound = signature.bind_partial(*args, **kwargs)
            bound.apply_defaults()
            fields = dict(attributes or {})
            fields.update(_capture_args(bound, skip_args_set))
            return fields

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            tracer = _get_tracer(func.__module__ or "default")
            with tracer.span(span_name, fields=_fields(args, kwargs)) as span:
                result = func(*args, **kwargs)
                if not skip_result:
                    span.add_field("app.result", to_attribute_value(result))
                return result

        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            tracer = _get_tracer(func.__module__ or "default")
            with tracer.span(span_name, fields=_fields(args, kwargs)) as span:
                result = await func(*args, **kwargs)
                if not skip_result:
                    span.add_field("app.result", to_attribute_value(result))
                return result

        return async_wrapper if inspect.iscoroutinefunction(func) else sync_wrapper

    return decorator


def _get_tracer(name: str):
    import spanhive

    return spanhive.get_tracer(name)
