"""Domain model - property records and the value objects that query them.

All models are immutable pydantic models:
- Input keys are accepted in snake_case or camelCase
- Output serializes with camelCase aliases (``model_dump(by_alias=True)``)
- Every optional numeric field is read through exactly one accessor with a
  zero fallback, so engines never re-derive fallback logic
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
import math
import re
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_LEADING_NUMBER = re.compile(r"^\s*[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_LEADING_INT = re.compile(r"^\s*[-+]?\d+")


def parse_float(value: Any) -> float | None:
    """Leniently parse a number the way form input arrives.

    ``"2.5"`` -> 2.5, ``"450000 USD"`` -> 450000.0, ``"n/a"`` -> None.
    Values that do not fit a finite float (``10**400``, ``"1e400"``) are None.
    """
    if value is None or isinstance(value, bool):
        return None
    number = None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        match = _LEADING_NUMBER.match(value)
        if match:
            number = float(match.group(0))
    if number is None or not math.isfinite(number):
        return None
    return number


def parse_int(value: Any) -> int | None:
    """Leniently parse an integer; floats are truncated toward zero."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return None if math.isnan(value) or math.isinf(value) else int(value)
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match:
            return int(match.group(0))
    return None


def parse_timestamp(value: Any) -> datetime | None:
    """Parse ISO-8601 strings, datetimes or epoch milliseconds into aware UTC datetimes."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    return None


class EngineModel(BaseModel):
    """Base for every value object crossing the engine boundary."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class PropertyRecord(EngineModel):
    """A single property listing as supplied by the caller's data layer.

    Unknown caller fields (images, agent ids, ...) are preserved so the
    engine can hand records back exactly as it received them.
    """

    model_config = ConfigDict(extra="allow")

    id: str | int | None = None
    title: str | None = None
    description: str | None = None
    address: str | None = None
    city: str | None = None
    neighborhood: str | None = None
    property_type: str | None = None
    sale_type: str | None = None
    price: float | None = None
    bedrooms: int | None = None
    bathrooms: float | None = None
    sqft: int | None = None
    square_feet: int | None = Field(
        default=None,
        validation_alias=AliasChoices("square_feet", "squareFeet"),
    )
    features: list[str] = Field(default_factory=list)
    created_at: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices("created_at", "createdAt"),
    )
    date_added: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices("date_added", "dateAdded"),
    )
    search_score: float | None = None

    @field_validator("title", "description", "address", "city", "neighborhood", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str | None:
        if value is None:
            return None
        return value if isinstance(value, str) else str(value)

    @field_validator("property_type", "sale_type", mode="before")
    @classmethod
    def _coerce_category(cls, value: Any) -> str | None:
        if value is None or value == "":
            return None
        return value if isinstance(value, str) else str(value)

    @field_validator("price", "bathrooms", mode="before")
    @classmethod
    def _coerce_float(cls, value: Any) -> float | None:
        return parse_float(value)

    @field_validator("bedrooms", "sqft", "square_feet", mode="before")
    @classmethod
    def _coerce_int(cls, value: Any) -> int | None:
        return parse_int(value)

    @field_validator("created_at", "date_added", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> datetime | None:
        return parse_timestamp(value)

    @field_validator("features", mode="before")
    @classmethod
    def _coerce_features(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        if isinstance(value, (list, tuple, set)):
            return [str(item) for item in value if item is not None]
        return []

    @property
    def price_value(self) -> float:
        return self.price or 0.0

    @property
    def bedrooms_value(self) -> int:
        return self.bedrooms or 0

    @property
    def bathrooms_value(self) -> float:
        return self.bathrooms or 0.0

    @property
    def sqft_value(self) -> int:
        """Square footage from ``sqft``, falling back to the legacy ``square_feet``."""
        return self.sqft or self.square_feet or 0

    @property
    def created_at_value(self) -> datetime:
        """Listing timestamp; missing dates resolve to the epoch so they sort as oldest."""
        return self.created_at or self.date_added or EPOCH

    @property
    def title_text(self) -> str:
        return self.title or ""

    @property
    def address_text(self) -> str:
        return self.address or ""

    @property
    def location_text(self) -> str:
        """Address, city and neighborhood joined for location matching."""
        return f"{self.address or ''} {self.city or ''} {self.neighborhood or ''}"

    def with_score(self, score: float) -> PropertyRecord:
        """Return a scored copy; the caller-owned record is left untouched."""
        return self.model_copy(update={"search_score": score}, deep=True)


class NumericRange(EngineModel):
    """Inclusive numeric range; a missing bound is unbounded on that side."""

    min: float | None = None
    max: float | None = None

    def contains(self, value: float) -> bool:
        if self.min is not None and value < self.min:
            return False
        if self.max is not None and value > self.max:
            return False
        return True


ANY_TYPE = "all"
ANY_COUNT = "any"


class FilterCriteria(EngineModel):
    """Caller-built filter; unset fields are ignored.

    The UI sentinels ``"all"`` (types) and ``"any"`` (room counts), a room
    count of 0 and a blank location also mean "unset".
    """

    price_range: NumericRange | None = None
    property_type: str | None = None
    sale_type: str | None = None
    bedrooms: int | None = None
    bathrooms: float | None = None
    sqft_range: NumericRange | None = None
    location: str | None = None

    @field_validator("property_type", "sale_type", mode="before")
    @classmethod
    def _drop_all_sentinel(cls, value: Any) -> Any:
        if value in (None, "", ANY_TYPE):
            return None
        return value

    @field_validator("bedrooms", mode="before")
    @classmethod
    def _parse_bedrooms(cls, value: Any) -> int | None:
        if value == ANY_COUNT:
            return None
        return parse_int(value) or None

    @field_validator("bathrooms", mode="before")
    @classmethod
    def _parse_bathrooms(cls, value: Any) -> float | None:
        if value == ANY_COUNT:
            return None
        return parse_float(value) or None

    @field_validator("location", mode="before")
    @classmethod
    def _drop_blank_location(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        return value


class SortKey(str, Enum):
    PRICE = "price"
    DATE = "date"
    SQFT = "sqft"
    BEDROOMS = "bedrooms"
    TITLE = "title"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class SortSpec(EngineModel):
    """Sort key and direction.

    ``key`` stays a plain string so that unknown keys reach the sort engine,
    which treats them as a no-op rather than a validation failure.
    """

    key: str
    order: SortOrder = SortOrder.ASC


class PriceRange(EngineModel):
    min: float = 0.0
    max: float = 0.0


class StatsReport(EngineModel):
    """Aggregate statistics over a record sequence."""

    total: int = 0
    for_sale: int = 0
    for_rent: int = 0
    average_price: float = 0.0
    median_price: float = 0.0
    price_range: PriceRange = Field(default_factory=PriceRange)
    property_types: dict[str, int] = Field(default_factory=dict)
    bedroom_distribution: dict[str, int] = Field(default_factory=dict)
    average_sqft: float = 0.0


class FilterResult(EngineModel):
    filtered_properties: list[PropertyRecord]
    count: int
    total_count: int


class SearchResult(EngineModel):
    search_results: list[PropertyRecord]
    query: str | None = None
    result_count: int


class SortResult(EngineModel):
    sorted_properties: list[PropertyRecord]
    sort_by: str
    sort_order: SortOrder
