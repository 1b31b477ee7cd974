"""Non-destructive property sorting.

Key fallbacks: missing ``price``, ``sqft`` and ``bedrooms`` sort as 0,
missing dates as the epoch (oldest), missing titles as "". Titles compare
case-insensitively. Ties keep input order in both directions.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
import logging
from typing import Any

from property_engine.domain.model import PropertyRecord, SortKey, SortOrder, SortSpec


logger = logging.getLogger(__name__)


KEY_EXTRACTORS: dict[SortKey, Callable[[PropertyRecord], Any]] = {
    SortKey.PRICE: lambda record: record.price_value,
    SortKey.DATE: lambda record: record.created_at_value,
    SortKey.SQFT: lambda record: record.sqft_value,
    SortKey.BEDROOMS: lambda record: record.bedrooms_value,
    SortKey.TITLE: lambda record: record.title_text.lower(),
}


def resolve_sort_key(key: SortKey | str) -> SortKey | None:
    """Map a raw key to a ``SortKey``; unknown keys resolve to None."""
    if isinstance(key, SortKey):
        return key
    try:
        return SortKey(key)
    except ValueError:
        return None


def sort_properties(
    records: Sequence[PropertyRecord],
    key: SortKey | str,
    order: SortOrder | str = SortOrder.ASC,
) -> list[PropertyRecord]:
    """Return a new list of ``records`` ordered by ``key``.

    Unknown keys are a no-op: the records come back in their original order.
    """
    sort_key = resolve_sort_key(key)
    if sort_key is None:
        logger.debug("Unknown sort key %r; returning records unchanged", key)
        return list(records)

    descending = SortOrder(order) is SortOrder.DESC
    return sorted(records, key=KEY_EXTRACTORS[sort_key], reverse=descending)


def apply_sort_spec(records: Sequence[PropertyRecord], spec: SortSpec) -> list[PropertyRecord]:
    return sort_properties(records, spec.key, spec.order)
