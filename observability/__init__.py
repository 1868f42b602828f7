"""Observability module for the weather app.

Uses OpenTelemetry spans, optionally exported to Arize Phoenix.
"""

from .instrumentation import init_tracing, trace_operation, trace_span

__all__ = ["init_tracing", "trace_operation", "trace_span"]
