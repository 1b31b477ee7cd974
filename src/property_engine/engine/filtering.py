"""Multi-field property filtering.

A record passes only when every supplied criterion passes; unset criteria
are skipped. Predicates are independent, so evaluation order never changes
the result and the first failing predicate short-circuits the rest.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from property_engine.domain.model import FilterCriteria, FilterResult, PropertyRecord


Predicate = Callable[[PropertyRecord], bool]

# "5" in the bedrooms picker means "5 or more"; "3" in the bathrooms picker means "3 or more".
BEDROOMS_OPEN_ENDED = 5
BATHROOMS_OPEN_ENDED = 3


def bedrooms_match(bedrooms: int, target: int) -> bool:
    if target == BEDROOMS_OPEN_ENDED:
        return bedrooms >= BEDROOMS_OPEN_ENDED
    return bedrooms == target


def bathrooms_match(bathrooms: float, target: float) -> bool:
    if target == BATHROOMS_OPEN_ENDED:
        return bathrooms >= BATHROOMS_OPEN_ENDED
    return bathrooms >= target


def build_predicates(criteria: FilterCriteria) -> list[Predicate]:
    """Translate criteria into the list of predicates that actually apply."""
    predicates: list[Predicate] = []

    if criteria.price_range is not None:
        price_range = criteria.price_range
        predicates.append(lambda record: price_range.contains(record.price_value))

    if criteria.property_type is not None:
        property_type = criteria.property_type
        predicates.append(lambda record: record.property_type == property_type)

    if criteria.sale_type is not None:
        sale_type = criteria.sale_type
        predicates.append(lambda record: record.sale_type == sale_type)

    if criteria.bedrooms is not None:
        bedrooms = criteria.bedrooms
        predicates.append(lambda record: bedrooms_match(record.bedrooms_value, bedrooms))

    if criteria.bathrooms is not None:
        bathrooms = criteria.bathrooms
        predicates.append(lambda record: bathrooms_match(record.bathrooms_value, bathrooms))

    if criteria.sqft_range is not None:
        sqft_range = criteria.sqft_range
        predicates.append(lambda record: sqft_range.contains(record.sqft_value))

    if criteria.location is not None:
        needle = criteria.location.lower()
        predicates.append(lambda record: needle in record.location_text.lower())

    return predicates


def matches(record: PropertyRecord, criteria: FilterCriteria) -> bool:
    """Return True when ``record`` satisfies every supplied criterion."""
    return all(predicate(record) for predicate in build_predicates(criteria))


def filter_properties(records: Sequence[PropertyRecord], criteria: FilterCriteria) -> FilterResult:
    """Filter ``records`` by ``criteria``, preserving input order."""
    predicates = build_predicates(criteria)
    passing = [record for record in records if all(predicate(record) for predicate in predicates)]
    return FilterResult(
        filtered_properties=passing,
        count=len(passing),
        total_count=len(records),
    )
