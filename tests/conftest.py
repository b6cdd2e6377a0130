"""Pytest configuration and shared fixtures."""

import pytest
from unittest.mock import MagicMock

from flamelink import Flamelink
from flamelink.core.resilience import CircuitBreaker

from tests.mocks.mock_store import MemoryStore

PRODUCT_ID = "1491827711368"


@pytest.fixture
def catalog():
    """Realtime Database tree for a small Flamelink project."""
    return {
        "environments": {
            "production": {
                "content": {
                    "products": {
                        "en-US": {
                            PRODUCT_ID: {
                                "id": 1491827711368,
                                "titleA": "Metris Shower/Bath Finish Set Round Large",
                                "titleB": "Metris",
                                "price": "123.00",
                                "category": "bathroom",
                                "stock": 12,
                            },
                            "1491830905127": {
                                "id": 1491830905127,
                                "titleA": "Talis Kitchen Faucet",
                                "titleB": "Talis",
                                "price": "89.50",
                                "category": "kitchen",
                                "stock": 3,
                            },
                            "1491899037522": {
                                "id": 1491899037522,
                                "titleA": "Croma Hand Shower",
                                "price": "45.00",
                                "category": "bathroom",
                                "stock": 40,
                            },
                        },
                        "fr-FR": {
                            PRODUCT_ID: {
                                "id": 1491827711368,
                                "titleA": "Set de finition Metris rond grand",
                                "price": "123.00",
                            },
                        },
                    },
                },
                "navigation": {
                    "main": {
                        "en-US": {
                            "id": "main",
                            "title": "Main Navigation",
                            "items": [
                                {"id": 1, "title": "Home", "url": "/", "order": 0},
                                {"id": 2, "title": "Products", "url": "/products", "order": 1},
                            ],
                        },
                    },
                },
            },
            "staging": {
                "content": {
                    "products": {
                        "en-US": {
                            "draft": {"titleA": "Draft product", "price": "1.00"},
                        },
                    },
                },
            },
        },
        "schemas": {
            "products": {
                "id": "products",
                "title": "Products",
                "fields": [
                    {"key": "titleA", "title": "Title", "type": "text"},
                    {"key": "price", "title": "Price", "type": "text"},
                ],
            },
            "blog": {"id": "blog", "title": "Blog", "fields": []},
        },
        "settings": {
            "locales": {"en-US": {"title": "English"}, "fr-FR": {"title": "French"}},
            "environments": {"production": {}, "staging": {}},
            "globals": {"siteTitle": "Bath & Kitchen", "tagline": "Fixtures"},
            "general": {
                "imageSizes": [{"width": 240}, {"width": 1080}],
                "defaultPermissionsGroup": 1,
            },
        },
    }


@pytest.fixture
def store(catalog):
    return MemoryStore(catalog)


@pytest.fixture
def app(store):
    """Client on the in-memory store, production / en-US."""
    return Flamelink(store=store, env="production", locale="en-US")


@pytest.fixture
def mock_ref():
    """Reference whose builder calls return distinct child mocks."""
    return MagicMock()


@pytest.fixture
def circuit():
    """Fresh circuit breaker for each test."""
    return CircuitBreaker("test", threshold=3, cooldown=1)
