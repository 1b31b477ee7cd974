"""Observability module for structured logging, Prometheus metrics and OpenTelemetry tracing."""

from property_engine.observability.context import bind_request, get_request_context
from property_engine.observability.logging import JsonFormatter, configure_logging
from property_engine.observability.metrics import (
    RECORDS_PROCESSED,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    get_metrics,
    get_metrics_content_type,
    record_request,
    track_latency,
)
from property_engine.observability.setup import setup_observability
from property_engine.observability.tracing import create_span, get_tracer, init_tracing, mark_span_error


__all__ = [
    "RECORDS_PROCESSED",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "JsonFormatter",
    "bind_request",
    "configure_logging",
    "create_span",
    "get_metrics",
    "get_metrics_content_type",
    "get_request_context",
    "get_tracer",
    "init_tracing",
    "mark_span_error",
    "record_request",
    "setup_observability",
    "track_latency",
]
