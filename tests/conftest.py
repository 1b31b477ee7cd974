"""Shared test fixtures and configuration."""

import os

import pytest

from property_engine.config import Settings, get_settings
from property_engine.domain.model import PropertyRecord


def _clear_engine_env() -> None:
    for key in list(os.environ):
        if key.upper().startswith("PROPERTY_ENGINE_"):
            del os.environ[key]


_clear_engine_env()


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Drop PROPERTY_ENGINE_* overrides and the cached settings before each test."""
    for key in list(os.environ):
        if key.upper().startswith("PROPERTY_ENGINE_"):
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def listings() -> list[PropertyRecord]:
    """Five listings covering the fields every engine reads."""
    raw = [
        {
            "id": "p1",
            "title": "Modern Loft Downtown",
            "description": "Bright open plan with garden views",
            "address": "12 Main St",
            "city": "Springfield",
            "neighborhood": "Old Town",
            "property_type": "Apartment",
            "sale_type": "For Rent",
            "price": 2400,
            "bedrooms": 2,
            "bathrooms": 1,
            "sqft": 850,
            "features": ["Pool", "Gym"],
            "created_at": "2024-03-01T10:00:00Z",
        },
        {
            "id": "p2",
            "title": "Family Home",
            "description": "Quiet street close to schools",
            "address": "48 Oak Avenue",
            "city": "Shelbyville",
            "property_type": "House",
            "sale_type": "For Sale",
            "price": 450000,
            "bedrooms": 3,
            "bathrooms": 2,
            "square_feet": 2100,
            "features": ["Garage"],
            "created_at": "2023-11-15T09:30:00Z",
        },
        {
            "id": "p3",
            "title": "Starter Cottage",
            "address": "7 Elm Road",
            "city": "Springfield",
            "property_type": "House",
            "sale_type": "For Sale",
            "price": 275000,
            "bedrooms": 3,
            "bathrooms": 1.5,
            "sqft": 1300,
        },
        {
            "id": "p4",
            "title": "Lakeside Estate",
            "description": "Private dock and guest cottage",
            "address": "1 Shore Drive",
            "city": "Capital City",
            "neighborhood": "Lakeside",
            "property_type": "House",
            "sale_type": "For Sale",
            "price": 1250000,
            "bedrooms": 5,
            "bathrooms": 4,
            "sqft": 5200,
            "features": ["Dock", "Pool"],
            "created_at": "2024-06-20T12:00:00Z",
        },
        {
            "id": "p5",
            "title": "Vacant Lot Conversion",
            "city": "Ogdenville",
            "property_type": "Land",
            "bedrooms": 6,
        },
    ]
    return [PropertyRecord.model_validate(item) for item in raw]
