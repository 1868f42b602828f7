"""OpenTelemetry instrumentation for the weather app.

This module provides span decorators for the cache store, the upstream
client and the forecast lookup path, plus optional Phoenix export.
"""

import asyncio
import functools
import json
import logging
import os
from typing import Any, Callable, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

# Type variable for preserving function signatures
F = TypeVar("F", bound=Callable[..., Any])

TRACER_NAME = "weather-app"

logger = logging.getLogger(__name__)

# Global tracer instance
_tracer: trace.Tracer | None = None


def get_tracer() -> trace.Tracer:
    """Get the global tracer instance."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(TRACER_NAME)
    return _tracer


def tracing_enabled() -> bool:
    """Whether TRACING_ENABLED asks for span export."""
    return os.getenv("TRACING_ENABLED", "false").lower() in ("1", "true", "yes")


def init_tracing(
    project_name: str = "weather-app",
    endpoint: str | None = None,
) -> bool:
    """Register the Phoenix OTLP exporter when tracing is enabled.

    Without TRACING_ENABLED the global no-op tracer stays in place and the
    decorators below cost next to nothing.

    Args:
        project_name: Name of the project in Phoenix dashboard.
        endpoint: Phoenix collector endpoint. Defaults to local Phoenix server.

    Returns:
        True if an exporter was registered.
    """
    if not tracing_enabled():
        logger.info("Tracing disabled (set TRACING_ENABLED=true to export spans)")
        return False

    from phoenix.otel import register

    collector_endpoint = endpoint or os.getenv(
        "PHOENIX_COLLECTOR_ENDPOINT",
        "http://localhost:6006/v1/traces"
    )

    tracer_provider = register(
        project_name=project_name,
        endpoint=collector_endpoint,
    )

    global _tracer
    _tracer = trace.get_tracer(TRACER_NAME, tracer_provider=tracer_provider)

    logger.info(f"Tracing initialized for project {project_name}, sending to {collector_endpoint}")
    return True


def _serialize_value(value: Any) -> str:
    """Serialize a value to string for span attributes."""
    try:
        if isinstance(value, (dict, list)):
            return json.dumps(value, ensure_ascii=False, default=str)
        return str(value)
    except (TypeError, ValueError):
        return str(value)


def trace_operation(
    name: str | None = None,
    capture_input: bool = True,
    capture_output: bool = True,
) -> Callable[[F], F]:
    """Decorator to trace a store or upstream operation with input/output capture.

    Args:
        name: Custom span name. Defaults to function name.
        capture_input: Whether to capture input arguments. Defaults to True.
        capture_output: Whether to capture return value. Defaults to True.

    Returns:
        Decorated function with tracing.

    Example:
        @trace_operation(name="db.cache_location")
        def cache_location(self, payload: dict) -> int:
            ...
    """
    def decorator(func: F) -> F:
        span_name = name or f"operation.{func.__name__}"

        def _start(span: trace.Span, kind: str, args: tuple, kwargs: dict) -> None:
            span.set_attribute("operation.name", func.__name__)
            span.set_attribute("operation.type", kind)
            if capture_input:
                if args:
                    span.set_attribute("input.args", _serialize_value(args))
                if kwargs:
                    span.set_attribute("input.kwargs", _serialize_value(kwargs))

        def _fail(span: trace.Span, e: Exception) -> None:
            span.set_status(Status(StatusCode.ERROR, str(e)))
            span.set_attribute("error.type", type(e).__name__)
            span.set_attribute("error.message", str(e))

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with get_tracer().start_as_current_span(span_name) as span:
                _start(span, "sync", args, kwargs)
                try:
                    result = func(*args, **kwargs)
                except Exception as e:
                    _fail(span, e)
                    raise
                if capture_output and result is not None:
                    span.set_attribute("output.result", _serialize_value(result))
                span.set_status(Status(StatusCode.OK))
                return result

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            with get_tracer().start_as_current_span(span_name) as span:
                _start(span, "async", args, kwargs)
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    _fail(span, e)
                    raise
                if capture_output and result is not None:
                    span.set_attribute("output.result", _serialize_value(result))
                span.set_status(Status(StatusCode.OK))
                return result

        if asyncio.iscoroutinefunction(func):
            return async_wrapper  # type: ignore
        return sync_wrapper  # type: ignore

    return decorator


def trace_span(name: str) -> Callable[[F], F]:
    """Simple decorator to create a named span around a function.

    Args:
        name: Span name.

    Returns:
        Decorated function with tracing.
    """
    def decorator(func: F) -> F:
        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with get_tracer().start_as_current_span(name) as span:
                span.set_attribute("function.name", func.__name__)
                try:
                    result = func(*args, **kwargs)
                    span.set_status(Status(StatusCode.OK))
                    return result
                except Exception as e:
                    span.set_status(Status(StatusCode.ERROR, str(e)))
                    raise

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            with get_tracer().start_as_current_span(name) as span:
                span.set_attribute("function.name", func.__name__)
                try:
                    result = await func(*args, **kwargs)
                    span.set_status(Status(StatusCode.OK))
                    return result
                except Exception as e:
                    span.set_status(Status(StatusCode.ERROR, str(e)))
                    raise

        if asyncio.iscoroutinefunction(func):
            return async_wrapper  # type: ignore
        return sync_wrapper  # type: ignore

    return decorator
