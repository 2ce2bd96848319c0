"""Shared catalog fixtures for affiliate page tests."""

from __future__ import annotations

import typing as typ

import msgspec
import pytest

from affiliate_pages.catalog import Catalog

CATALOG_PAYLOAD: dict[str, typ.Any] = {
    "categories": [
        {"slug": "mice", "name": "Gaming Mice", "description": "Pointing devices."},
        {"slug": "keyboards", "name": "Keyboards"},
    ],
    "products": [
        {
            "id": "1",
            "slug": "acme-widget",
            "title": "Acme Widget",
            "excerpt": "The widget everyone needs.",
            "priceFrom": 49.5,
            "priceCurrency": "USD",
            "rating": 4.6,
            "isFeatured": True,
            "categories": ["mice"],
            "affiliateLinks": [
                {"partner": "Shop", "url": "https://shop.example.com/acme"},
                {
                    "partner": "Amazon",
                    "url": "https://amazon.example.com/acme",
                    "isPrimary": True,
                },
            ],
            "content": "<h2>Design</h2><p>Solid build, better than Orbit Mouse.</p>",
            "metadata": {
                "pros": ["Light", "Fast"],
                "cons": ["Loud clicks"],
                "specifications": {"Weight": "60 g"},
                "unknownKey": "ignored",
            },
        },
        {
            "id": "2",
            "slug": "orbit-mouse",
            "title": "Orbit Mouse",
            "priceFrom": 30,
            "priceCurrency": "EUR",
            "rating": 3.9,
            "categories": ["mice"],
        },
        {
            "id": "3",
            "slug": "zen-board",
            "title": "Zen Board",
            "categories": ["keyboards"],
            "metadata": {"specifications": {}},
        },
        {
            "id": "4",
            "slug": "pixel-mouse",
            "title": "Pixel Mouse",
            "categories": ["mice"],
        },
    ],
}


@pytest.fixture
def catalog_payload() -> dict[str, typ.Any]:
    """Return a representative catalog document as plain data."""
    return msgspec.json.decode(msgspec.json.encode(CATALOG_PAYLOAD))


@pytest.fixture
def catalog(catalog_payload: dict[str, typ.Any]) -> Catalog:
    """Return the representative catalog decoded into a :class:`Catalog`."""
    return Catalog.from_json(msgspec.json.encode(catalog_payload))
