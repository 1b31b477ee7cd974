"""Aggregate statistics over property records.

Single pass over the records plus one sort of the priced subset for the
median. Price figures only consider records with a positive price and the
square-footage average only records with a positive area.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from statistics import median

from property_engine.domain.model import PriceRange, PropertyRecord, StatsReport


FOR_SALE = "For Sale"
FOR_RENT = "For Rent"
OTHER_TYPE = "Other"
UNKNOWN_BEDROOMS = "Unknown"


def property_type_label(record: PropertyRecord) -> str:
    return record.property_type or OTHER_TYPE


def bedroom_label(record: PropertyRecord) -> str:
    """Histogram key for bedrooms; zero or missing counts are "Unknown"."""
    return str(record.bedrooms) if record.bedrooms else UNKNOWN_BEDROOMS


def median_price(prices: Sequence[float]) -> float:
    """Median of ``prices``; 0 for an empty sequence."""
    if not prices:
        return 0.0
    return float(median(prices))


def compute_stats(records: Sequence[PropertyRecord]) -> StatsReport:
    """Reduce ``records`` into a single ``StatsReport``."""
    for_sale = 0
    for_rent = 0
    prices: list[float] = []
    total_sqft = 0
    sqft_count = 0
    property_types: Counter[str] = Counter()
    bedroom_distribution: Counter[str] = Counter()

    for record in records:
        if record.sale_type == FOR_SALE:
            for_sale += 1
        elif record.sale_type == FOR_RENT:
            for_rent += 1

        price = record.price_value
        if price > 0:
            prices.append(price)

        property_types[property_type_label(record)] += 1
        bedroom_distribution[bedroom_label(record)] += 1

        sqft = record.sqft_value
        if sqft > 0:
            total_sqft += sqft
            sqft_count += 1

    return StatsReport(
        total=len(records),
        for_sale=for_sale,
        for_rent=for_rent,
        average_price=sum(prices) / len(prices) if prices else 0.0,
        median_price=median_price(prices),
        price_range=PriceRange(min=min(prices), max=max(prices)) if prices else PriceRange(),
        property_types=dict(property_types),
        bedroom_distribution=dict(bedroom_distribution),
        average_sqft=total_sqft / sqft_count if sqft_count else 0.0,
    )
