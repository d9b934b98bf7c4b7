"""Span helpers for review mutations and dashboard fetches."""

import asyncio
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

T = TypeVar("T")

_tracer = trace.get_tracer("udhyogunity")

# Identifiers only. Comments, reviewer names and photo URLs stay out of spans.
SPAN_ARGUMENTS = frozenset({
    "review_type", "business_id", "item_id", "review_id", "user_id",
    "entity_type", "entity_id", "page_size", "limit", "identifier",
})


def _span_value(value: Any) -> str:
    # ReviewType and other str enums record their value, not their repr.
    return str(getattr(value, "value", value))


def traced(
    operation_name: str | None = None,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Wrap a coroutine function in a span named `operation_name`.

    Keyword arguments listed in SPAN_ARGUMENTS become `udhyog.<name>`
    attributes. Exceptions mark the span as failed and are re-raised.
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        if not asyncio.iscoroutinefunction(func):
            raise TypeError(f"traced() needs an async function, got {func.__qualname__}")
        span_name = operation_name or f"{func.__module__}.{func.__qualname__}"

        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            with _tracer.start_as_current_span(span_name, record_exception=False) as span:
                for key, value in kwargs.items():
                    if key in SPAN_ARGUMENTS and value is not None:
                        span.set_attribute(f"udhyog.{key}", _span_value(value))
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    span.record_exception(e)
                    span.set_status(Status(StatusCode.ERROR, type(e).__name__))
                    raise
                span.set_status(Status(StatusCode.OK))
                return result

        return wrapper

    return decorator


def add_span_attributes(**attributes: str | int | float | bool) -> None:
    """Attach attributes to the active span, if one is recording."""
    span = trace.get_current_span()
    if span.is_recording():
        for key, value in attributes.items():
            span.set_attribute(f"udhyog.{key}", value)
