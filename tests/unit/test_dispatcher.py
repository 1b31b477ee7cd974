"""Unit tests for the engine dispatcher."""

import pytest

from property_engine.domain.messages import (
    RESPONSE_ADAPTER,
    ErrorResponse,
    FilterComplete,
    FilterPayload,
    FilterRequest,
    SearchComplete,
    SortComplete,
    StatsComplete,
    StatsPayload,
    StatsRequest,
)
from property_engine.domain.model import FilterCriteria
from property_engine.errors import UnknownOperationError
from property_engine.service_layer import dispatcher as dispatcher_module
from property_engine.service_layer.dispatcher import describe_error, dispatch, error_response, handle_message


def _raw(listings) -> list[dict]:
    return [record.model_dump(by_alias=True, exclude_none=True) for record in listings]


@pytest.mark.unit
class TestHandleMessage:
    def test_filter_message(self, listings, settings):
        response = handle_message(
            {"type": "FILTER_PROPERTIES", "data": {"properties": _raw(listings), "filters": {"bedrooms": 5}}},
            settings,
        )

        assert isinstance(response, FilterComplete)
        assert response.data.count == 2
        assert response.data.total_count == 5
        assert [record.id for record in response.data.filtered_properties] == ["p4", "p5"]

    def test_search_message_uses_camel_case_options(self, listings, settings):
        response = handle_message(
            {"type": "SEARCH_PROPERTIES", "data": {"properties": _raw(listings), "query": "cottage", "fuzzySearch": False}},
            settings,
        )

        assert isinstance(response, SearchComplete)
        assert [record.search_score for record in response.data.search_results] == [11, 1]

    def test_search_falls_back_to_configured_fuzzy_default(self, listings, settings):
        response = handle_message(
            {"type": "SEARCH_PROPERTIES", "data": {"properties": _raw(listings), "query": "cottage"}},
            settings,
        )

        assert response.data.search_results[0].search_score == 11.5

    def test_sort_message_echoes_parameters(self, listings, settings):
        response = handle_message(
            {"type": "SORT_PROPERTIES", "data": {"properties": _raw(listings), "sortBy": "price", "sortOrder": "desc"}},
            settings,
        )

        assert isinstance(response, SortComplete)
        assert response.data.sort_by == "price"
        assert response.data.sort_order == "desc"
        assert response.data.sorted_properties[0].id == "p4"

    def test_stats_message(self, listings, settings):
        response = handle_message({"type": "CALCULATE_STATS", "data": {"properties": _raw(listings)}}, settings)

        assert isinstance(response, StatsComplete)
        assert response.data.total == 5

    def test_unknown_operation_returns_error(self, settings):
        response = handle_message({"type": "DELETE_PROPERTIES", "data": {}}, settings)

        assert isinstance(response, ErrorResponse)
        assert response.error == "Unknown operation type: DELETE_PROPERTIES"

    @pytest.mark.parametrize("message", [{}, {"type": None}, {"type": ["FILTER_PROPERTIES"]}, "FILTER_PROPERTIES", None])
    def test_garbage_messages_never_raise(self, message, settings):
        response = handle_message(message, settings)

        assert isinstance(response, ErrorResponse)
        assert response.error.startswith("Unknown operation type")

    def test_malformed_payload_is_prefixed_with_operation(self, settings):
        response = handle_message({"type": "SORT_PROPERTIES", "data": {"properties": []}}, settings)

        assert isinstance(response, ErrorResponse)
        assert response.operation == "SORT_PROPERTIES"
        assert response.error.startswith("Sort error: invalid payload")
        assert "sortBy" in response.error

    @pytest.mark.parametrize("field", ["price", "bathrooms"])
    def test_oversized_numbers_degrade_instead_of_raising(self, field, settings):
        message = {"type": "CALCULATE_STATS", "data": {"properties": [{field: 10**400}, {"price": 100}]}}

        response = handle_message(message, settings)

        assert isinstance(response, StatsComplete)
        assert response.data.total == 2
        assert response.data.average_price == 100

    def test_unexpected_validation_failure_becomes_error_response(self, settings, monkeypatch):
        class _ExplodingAdapter:
            def validate_python(self, message):
                raise OverflowError("int too large to convert to float")

        monkeypatch.setattr(dispatcher_module, "REQUEST_ADAPTER", _ExplodingAdapter())

        response = handle_message({"type": "CALCULATE_STATS", "data": {"properties": []}}, settings)

        assert isinstance(response, ErrorResponse)
        assert response.error == "Stats calculation error: int too large to convert to float"

    def test_unknown_sort_key_is_not_an_error(self, listings, settings):
        response = handle_message(
            {"type": "SORT_PROPERTIES", "data": {"properties": _raw(listings), "sortBy": "popularity"}},
            settings,
        )

        assert isinstance(response, SortComplete)
        assert [record.id for record in response.data.sorted_properties] == ["p1", "p2", "p3", "p4", "p5"]

    def test_wire_round_trip(self, listings, settings):
        response = handle_message(
            {"type": "FILTER_PROPERTIES", "data": {"properties": _raw(listings), "filters": {"propertyType": "Land"}}},
            settings,
        )
        wire = response.model_dump(mode="json", by_alias=True)

        assert wire["type"] == "FILTER_COMPLETE"
        assert wire["data"]["totalCount"] == 5
        assert wire["data"]["filteredProperties"][0]["propertyType"] == "Land"
        assert isinstance(RESPONSE_ADAPTER.validate_python(wire), FilterComplete)


@pytest.mark.unit
class TestDispatch:
    def test_typed_request(self, listings, settings):
        request = FilterRequest(data=FilterPayload(properties=listings, filters=FilterCriteria(bedrooms=5)))

        response = dispatch(request, settings)

        assert isinstance(response, FilterComplete)
        assert response.data.count == 2

    def test_engine_failure_becomes_error_response(self, listings, settings, monkeypatch):
        def _boom(records):
            raise RuntimeError("boom")

        monkeypatch.setattr(dispatcher_module, "compute_stats", _boom)

        response = dispatch(StatsRequest(data=StatsPayload(properties=listings)), settings)

        assert isinstance(response, ErrorResponse)
        assert response.operation == "CALCULATE_STATS"
        assert response.error == "Stats calculation error: boom"

    def test_non_request_object_is_rejected(self, settings):
        response = dispatch(object(), settings)  # type: ignore[arg-type]

        assert isinstance(response, ErrorResponse)
        assert response.error == "Unknown operation type: None"

    def test_request_without_payload_is_rejected(self, settings):
        class _BareRequest:
            type = "FILTER_PROPERTIES"

        response = dispatch(_BareRequest(), settings)  # type: ignore[arg-type]

        assert isinstance(response, ErrorResponse)
        assert response.operation == "FILTER_PROPERTIES"
        assert response.error.startswith("Filter error:")

    def test_dispatch_without_observability(self, listings):
        from property_engine.config import Settings

        quiet = Settings(_env_file=None, metrics_enabled=False, tracing_enabled=False)
        response = dispatch(StatsRequest(data=StatsPayload(properties=listings)), quiet)

        assert isinstance(response, StatsComplete)

    def test_uses_global_settings_by_default(self, listings):
        assert isinstance(dispatch(StatsRequest(data=StatsPayload(properties=listings))), StatsComplete)


@pytest.mark.unit
class TestErrorHelpers:
    def test_error_labels(self):
        assert error_response("FILTER_PROPERTIES", ValueError("x")).error == "Filter error: x"
        assert error_response("SEARCH_PROPERTIES", ValueError("x")).error == "Search error: x"
        assert error_response("SORT_PROPERTIES", ValueError("x")).error == "Sort error: x"

    def test_unknown_operation_error(self):
        response = error_response("NOPE", UnknownOperationError("NOPE"))
        assert response.error == "Unknown operation type: NOPE"

    def test_describe_error_falls_back_to_class_name(self):
        assert describe_error(KeyError()) == "KeyError"
