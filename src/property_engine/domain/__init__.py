"""Domain layer - property records, query value objects and engine messages.

Everything here is an immutable pydantic model with no dependency on the
engines or on how requests are executed.
"""

from property_engine.domain.messages import (
    CALCULATE_STATS,
    FILTER_PROPERTIES,
    SEARCH_PROPERTIES,
    SORT_PROPERTIES,
    EngineRequest,
    EngineResponse,
    ErrorResponse,
    FilterComplete,
    FilterPayload,
    FilterRequest,
    SearchComplete,
    SearchPayload,
    SearchRequest,
    SortComplete,
    SortPayload,
    SortRequest,
    StatsComplete,
    StatsPayload,
    StatsRequest,
)
from property_engine.domain.model import (
    FilterCriteria,
    FilterResult,
    NumericRange,
    PriceRange,
    PropertyRecord,
    SearchResult,
    SortKey,
    SortOrder,
    SortResult,
    SortSpec,
    StatsReport,
)


__all__ = [
    "CALCULATE_STATS",
    "FILTER_PROPERTIES",
    "SEARCH_PROPERTIES",
    "SORT_PROPERTIES",
    "EngineRequest",
    "EngineResponse",
    "ErrorResponse",
    "FilterComplete",
    "FilterCriteria",
    "FilterPayload",
    "FilterRequest",
    "FilterResult",
    "NumericRange",
    "PriceRange",
    "PropertyRecord",
    "SearchComplete",
    "SearchPayload",
    "SearchRequest",
    "SearchResult",
    "SortComplete",
    "SortKey",
    "SortOrder",
    "SortPayload",
    "SortRequest",
    "SortResult",
    "SortSpec",
    "StatsComplete",
    "StatsPayload",
    "StatsReport",
    "StatsRequest",
]
