"""Request/response messages exchanged with the engine.

Both directions are tagged unions discriminated on ``type``. Wire names
match what the listing UI already sends (``FILTER_PROPERTIES`` in,
``FILTER_COMPLETE`` out) and payload keys serialize in camelCase.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import Field, TypeAdapter

from property_engine.domain.model import (
    EngineModel,
    FilterCriteria,
    FilterResult,
    PropertyRecord,
    SearchResult,
    SortOrder,
    SortResult,
    SortSpec,
    StatsReport,
)


FILTER_PROPERTIES = "FILTER_PROPERTIES"
SEARCH_PROPERTIES = "SEARCH_PROPERTIES"
SORT_PROPERTIES = "SORT_PROPERTIES"
CALCULATE_STATS = "CALCULATE_STATS"

# Prefix used in error messages for each operation
OPERATION_LABELS: dict[str, str] = {
    FILTER_PROPERTIES: "Filter",
    SEARCH_PROPERTIES: "Search",
    SORT_PROPERTIES: "Sort",
    CALCULATE_STATS: "Stats calculation",
}


class FilterPayload(EngineModel):
    properties: list[PropertyRecord] = Field(default_factory=list)
    filters: FilterCriteria = Field(default_factory=FilterCriteria)


class SearchPayload(EngineModel):
    properties: list[PropertyRecord] = Field(default_factory=list)
    query: str | None = None
    fuzzy_search: bool | None = None


class SortPayload(EngineModel):
    properties: list[PropertyRecord] = Field(default_factory=list)
    sort_by: str
    sort_order: SortOrder = SortOrder.ASC

    @property
    def spec(self) -> SortSpec:
        return SortSpec(key=self.sort_by, order=self.sort_order)


class StatsPayload(EngineModel):
    properties: list[PropertyRecord] = Field(default_factory=list)


class FilterRequest(EngineModel):
    type: Literal["FILTER_PROPERTIES"] = FILTER_PROPERTIES
    data: FilterPayload


class SearchRequest(EngineModel):
    type: Literal["SEARCH_PROPERTIES"] = SEARCH_PROPERTIES
    data: SearchPayload


class SortRequest(EngineModel):
    type: Literal["SORT_PROPERTIES"] = SORT_PROPERTIES
    data: SortPayload


class StatsRequest(EngineModel):
    type: Literal["CALCULATE_STATS"] = CALCULATE_STATS
    data: StatsPayload


EngineRequest = Annotated[
    FilterRequest | SearchRequest | SortRequest | StatsRequest,
    Field(discriminator="type"),
]


class FilterComplete(EngineModel):
    type: Literal["FILTER_COMPLETE"] = "FILTER_COMPLETE"
    data: FilterResult


class SearchComplete(EngineModel):
    type: Literal["SEARCH_COMPLETE"] = "SEARCH_COMPLETE"
    data: SearchResult


class SortComplete(EngineModel):
    type: Literal["SORT_COMPLETE"] = "SORT_COMPLETE"
    data: SortResult


class StatsComplete(EngineModel):
    type: Literal["STATS_COMPLETE"] = "STATS_COMPLETE"
    data: StatsReport


class ErrorResponse(EngineModel):
    """Failure of a single request; ``error`` is prefixed with the operation label."""

    type: Literal["ERROR"] = "ERROR"
    operation: str | None = None
    error: str


EngineResponse = Annotated[
    FilterComplete | SearchComplete | SortComplete | StatsComplete | ErrorResponse,
    Field(discriminator="type"),
]

REQUEST_ADAPTER: TypeAdapter[EngineRequest] = TypeAdapter(EngineRequest)
RESPONSE_ADAPTER: TypeAdapter[EngineResponse] = TypeAdapter(EngineResponse)
