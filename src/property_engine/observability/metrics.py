"""Prometheus metrics for dispatched engine requests."""

from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager
import time

from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, CollectorRegistry, Counter, Histogram, generate_latest


REQUEST_LATENCY = Histogram(
    "engine_request_latency_seconds",
    "Engine request latency in seconds",
    ["operation"],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

REQUEST_COUNT = Counter(
    "engine_requests_total",
    "Total engine requests",
    ["operation", "status"],
)

RECORDS_PROCESSED = Counter(
    "engine_records_processed_total",
    "Property records handed to the engine",
    ["operation"],
)


@contextmanager
def track_latency(histogram: Histogram, **labels: str) -> Generator[None, None, None]:
    """Context manager to track operation latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        histogram.labels(**labels).observe(time.perf_counter() - start)


def record_request(operation: str, status: str, record_count: int) -> None:
    """Count one finished request and the records it carried."""
    REQUEST_COUNT.labels(operation=operation, status=status).inc()
    if record_count:
        RECORDS_PROCESSED.labels(operation=operation).inc(record_count)


def get_metrics(registry: CollectorRegistry = REGISTRY) -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest(registry)


def get_metrics_content_type() -> str:
    """Get content type for the metrics exposition."""
    return CONTENT_TYPE_LATEST
