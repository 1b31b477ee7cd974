"""Process-level observability wiring driven by ``Settings``."""

from __future__ import annotations

from opentelemetry.sdk.trace import TracerProvider

from property_engine.config import Settings, get_settings
from property_engine.observability.logging import configure_logging
from property_engine.observability.tracing import init_tracing


def setup_observability(
    settings: Settings | None = None,
    *,
    logger_levels: dict[str, str] | None = None,
    resource_attributes: dict[str, str] | None = None,
) -> TracerProvider | None:
    """Configure logging and tracing from settings.

    Meant for applications that own the process. Libraries embedding the
    engine can skip it: spans then go to the host's tracer provider.

    Returns:
        The installed tracer provider, or None when tracing is disabled.
    """
    settings = settings or get_settings()
    configure_logging(
        level=settings.log_level,
        json_output=settings.log_json,
        logger_levels=logger_levels,
    )
    if not settings.tracing_enabled:
        return None
    return init_tracing(service_name=settings.service_name, resource_attributes=resource_attributes)
