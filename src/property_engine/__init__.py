"""Property search, filtering, ranking and statistics engine."""

from property_engine.domain import (
    ErrorResponse,
    FilterCriteria,
    PropertyRecord,
    SortKey,
    SortOrder,
    StatsReport,
)
from property_engine.engine import compute_stats, filter_properties, search_properties, sort_properties
from property_engine.observability import setup_observability
from property_engine.service_layer import PropertyWorker, dispatch, handle_message


__version__ = "0.1.0"

__all__ = [
    "ErrorResponse",
    "FilterCriteria",
    "PropertyRecord",
    "PropertyWorker",
    "SortKey",
    "SortOrder",
    "StatsReport",
    "compute_stats",
    "dispatch",
    "filter_properties",
    "handle_message",
    "search_properties",
    "setup_observability",
    "sort_properties",
]
