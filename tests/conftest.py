"""Shared pytest fixtures and configuration for all tests."""

import os
from decimal import Decimal

import pytest

# Keep src/main.py and src/lambda_handler.py from building the app on import
os.environ.setdefault("ENVIRONMENT", "test")

from restaurant_storefront.models.storefront_models import BasketLine, Product  # noqa: E402


@pytest.fixture
def mock_product_payloads() -> list[dict]:
    """Fixture providing products as the restaurant API returns them."""
    return [
        {
            "id": 1,
            "name": "Khachapuri",
            "price": 12.5,
            "nuts": False,
            "image": "https://example.com/khachapuri.jpg",
            "vegeterian": True,
            "spiciness": 0,
            "categoryId": 3,
        },
        {
            "id": 2,
            "name": "Walnut Salad",
            "price": 9.0,
            "nuts": True,
            "image": "https://example.com/salad.jpg",
            "vegeterian": True,
            "spiciness": 1,
            "categoryId": 3,
        },
        {
            "id": 3,
            "name": "Spicy Wings",
            "price": 15,
            "nuts": False,
            "image": "https://example.com/wings.jpg",
            "vegeterian": False,
            "spiciness": 3,
            "categoryId": 4,
        },
    ]


@pytest.fixture
def mock_products(mock_product_payloads: list[dict]) -> list[Product]:
    """Fixture providing parsed sample products."""
    return [Product.model_validate(payload) for payload in mock_product_payloads]


@pytest.fixture
def mock_basket_payloads(mock_product_payloads: list[dict]) -> list[dict]:
    """Fixture providing a basket snapshot as the restaurant API returns it."""
    return [
        {"quantity": 2, "price": 25.0, "productId": 1, "product": mock_product_payloads[0]},
        {"quantity": 3, "price": 45.0, "productId": 3, "product": mock_product_payloads[2]},
    ]


@pytest.fixture
def mock_basket_lines(mock_basket_payloads: list[dict]) -> list[BasketLine]:
    """Fixture providing parsed basket lines (quantities 2 and 3)."""
    return [BasketLine.model_validate(payload) for payload in mock_basket_payloads]


@pytest.fixture
def make_product():
    """Factory fixture building a Product with overridable attributes."""

    def _make(**overrides: object) -> Product:
        data: dict = {
            "id": 10,
            "name": "Lobio",
            "price": Decimal("10"),
            "image": None,
            "vegeterian": False,
            "nuts": False,
            "spiciness": 0,
        }
        data.update(overrides)
        return Product(**data)

    return _make
