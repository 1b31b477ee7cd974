"""Unit tests for the filter engine."""

import pytest

from property_engine.domain.model import FilterCriteria, NumericRange, PropertyRecord
from property_engine.engine.filtering import bathrooms_match, bedrooms_match, filter_properties, matches


def _ids(result) -> list[str]:
    return [record.id for record in result.filtered_properties]


class TestRoomRules:
    @pytest.mark.parametrize(("beds", "expected"), [(4, False), (5, True), (9, True)])
    def test_five_bedrooms_means_five_or_more(self, beds, expected):
        assert bedrooms_match(beds, 5) is expected

    def test_other_bedroom_values_are_exact(self):
        assert bedrooms_match(3, 3)
        assert not bedrooms_match(4, 3)
        assert not bedrooms_match(7, 6)

    def test_three_bathrooms_means_three_or_more(self):
        assert bathrooms_match(3, 3)
        assert bathrooms_match(4.5, 3)
        assert not bathrooms_match(2.5, 3)

    def test_other_bathroom_values_are_at_least(self):
        assert bathrooms_match(2, 1.5)
        assert bathrooms_match(1.5, 1.5)
        assert not bathrooms_match(1, 1.5)


class TestFilterProperties:
    def test_empty_criteria_pass_everything(self, listings):
        result = filter_properties(listings, FilterCriteria())

        assert result.count == 5
        assert result.total_count == 5
        assert result.filtered_properties == listings

    def test_five_plus_bedrooms_end_to_end(self, listings):
        result = filter_properties(listings, FilterCriteria(bedrooms=5))

        assert [record.bedrooms for record in listings] == [2, 3, 3, 5, 6]
        assert result.count == 2
        assert _ids(result) == ["p4", "p5"]

    def test_exact_bedroom_match(self, listings):
        assert _ids(filter_properties(listings, FilterCriteria(bedrooms=3))) == ["p2", "p3"]

    def test_zero_bedrooms_is_unset(self, listings):
        result = filter_properties(listings, FilterCriteria.model_validate({"bedrooms": 0, "bathrooms": 0}))
        assert result.count == 5

    def test_bathroom_thresholds(self, listings):
        assert _ids(filter_properties(listings, FilterCriteria(bathrooms=3))) == ["p4"]
        assert _ids(filter_properties(listings, FilterCriteria(bathrooms=1.5))) == ["p2", "p3", "p4"]

    def test_price_range_treats_missing_price_as_zero(self, listings):
        result = filter_properties(listings, FilterCriteria(price_range=NumericRange(min=0, max=300000)))
        assert _ids(result) == ["p1", "p3", "p5"]

        result = filter_properties(listings, FilterCriteria(price_range=NumericRange(min=2400, max=450000)))
        assert _ids(result) == ["p1", "p2", "p3"]

    def test_sqft_range_reads_legacy_field(self, listings):
        result = filter_properties(listings, FilterCriteria(sqft_range=NumericRange(min=2000, max=3000)))
        assert _ids(result) == ["p2"]

    def test_type_filters_are_exact(self, listings):
        assert _ids(filter_properties(listings, FilterCriteria(property_type="House"))) == ["p2", "p3", "p4"]
        assert _ids(filter_properties(listings, FilterCriteria(property_type="house"))) == []
        assert _ids(filter_properties(listings, FilterCriteria(sale_type="For Rent"))) == ["p1"]

    def test_location_is_case_insensitive_across_fields(self, listings):
        assert _ids(filter_properties(listings, FilterCriteria(location="SPRINGFIELD"))) == ["p1", "p3"]
        assert _ids(filter_properties(listings, FilterCriteria(location="old town"))) == ["p1"]
        assert _ids(filter_properties(listings, FilterCriteria(location="oak ave"))) == ["p2"]

    def test_criteria_combine_as_conjunction(self, listings):
        criteria = FilterCriteria(property_type="House", location="springfield", bedrooms=3)
        assert _ids(filter_properties(listings, criteria)) == ["p3"]

    def test_relaxing_criteria_never_shrinks_the_result(self, listings):
        strict = FilterCriteria(
            property_type="House",
            sale_type="For Sale",
            price_range=NumericRange(min=200000, max=2000000),
            bathrooms=1.5,
        )
        relaxations = [
            strict.model_copy(update={"property_type": None}),
            strict.model_copy(update={"price_range": None}),
            strict.model_copy(update={"bathrooms": None, "sale_type": None}),
            FilterCriteria(),
        ]

        strict_ids = set(_ids(filter_properties(listings, strict)))
        for relaxed in relaxations:
            assert strict_ids <= set(_ids(filter_properties(listings, relaxed)))

    def test_filtering_is_idempotent(self, listings):
        criteria = FilterCriteria(sale_type="For Sale", bedrooms=3)
        once = filter_properties(listings, criteria)
        twice = filter_properties(once.filtered_properties, criteria)

        assert twice.filtered_properties == once.filtered_properties

    def test_sparse_records_never_raise(self):
        criteria = FilterCriteria(
            price_range=NumericRange(min=0, max=10),
            bedrooms=5,
            bathrooms=1,
            sqft_range=NumericRange(min=0, max=10),
            location="x",
        )
        assert not matches(PropertyRecord(), criteria)

    def test_input_is_not_mutated(self, listings):
        snapshot = [record.model_dump() for record in listings]
        filter_properties(listings, FilterCriteria(bedrooms=5))

        assert [record.model_dump() for record in listings] == snapshot
