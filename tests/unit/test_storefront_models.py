"""Unit tests for storefront data models."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from restaurant_storefront.models.storefront_models import (
    BasketItemRequest,
    BasketLine,
    Category,
    FilterState,
    Product,
)


@pytest.mark.unit
class TestProduct:
    """Tests for the Product model."""

    def test_parses_api_payload(self, mock_product_payloads: list[dict]) -> None:
        """Test that the wire format, including categoryId, is accepted."""
        product = Product.model_validate(mock_product_payloads[0])

        assert product.id == 1
        assert product.price == Decimal("12.5")
        assert product.vegeterian is True
        assert product.category_id == 3

    def test_float_price_keeps_decimal_precision(self) -> None:
        """Test that float prices convert through their string form."""
        product = Product.model_validate({"id": 1, "name": "Tea", "price": 0.1})
        assert product.price == Decimal("0.1")

    def test_defaults_for_missing_attributes(self) -> None:
        """Test default attribute values."""
        product = Product.model_validate({"id": 1, "name": "Bread", "price": 2, "spiciness": None})

        assert product.vegeterian is False
        assert product.nuts is False
        assert product.spiciness == 0
        assert product.image is None
        assert product.category_id is None

    def test_rejects_negative_price(self) -> None:
        """Test that negative prices fail validation."""
        with pytest.raises(ValidationError):
            Product(id=1, name="Bad", price=Decimal("-1"))

    def test_rejects_negative_spiciness(self) -> None:
        """Test that negative spiciness fails validation."""
        with pytest.raises(ValidationError):
            Product(id=1, name="Bad", price=Decimal("1"), spiciness=-1)


@pytest.mark.unit
class TestBasketLine:
    """Tests for the BasketLine model."""

    def test_exposes_product_shortcuts(self, mock_basket_lines: list[BasketLine]) -> None:
        """Test product_id and unit_price shortcuts."""
        line = mock_basket_lines[1]

        assert line.product_id == 3
        assert line.unit_price == Decimal("15")
        assert line.price == line.quantity * line.unit_price

    def test_rejects_zero_quantity(self, mock_product_payloads: list[dict]) -> None:
        """Test that a line cannot hold zero units."""
        with pytest.raises(ValidationError):
            BasketLine.model_validate(
                {"quantity": 0, "price": 0, "product": mock_product_payloads[0]}
            )


@pytest.mark.unit
class TestBasketItemRequest:
    """Tests for the basket request body."""

    def test_payload_uses_wire_names_and_numeric_price(self) -> None:
        """Test that productId is aliased and price is a JSON number."""
        request = BasketItemRequest(quantity=3, price=Decimal("30.5"), product_id=4)

        assert request.to_payload() == {"quantity": 3, "price": 30.5, "productId": 4}


@pytest.mark.unit
class TestCategory:
    """Tests for the Category model."""

    def test_null_products_become_empty_list(self) -> None:
        """Test that a category without products parses."""
        category = Category.model_validate({"id": 5, "name": "Soups", "products": None})
        assert category.products == []


@pytest.mark.unit
class TestFilterState:
    """Tests for FilterState."""

    def test_defaults_are_unconstrained(self) -> None:
        """Test default filters have no active constraint."""
        filters = FilterState()

        assert filters.vegeterian is False
        assert filters.nuts is False
        assert filters.spiciness == 0
        assert filters.is_default is True

    def test_any_constraint_is_not_default(self) -> None:
        """Test that each constraint on its own is active."""
        assert FilterState(vegeterian=True).is_default is False
        assert FilterState(nuts=True).is_default is False
        assert FilterState(spiciness=2).is_default is False

    def test_rejects_negative_spiciness(self) -> None:
        """Test that spiciness below zero fails validation."""
        with pytest.raises(ValidationError):
            FilterState(spiciness=-1)

    def test_nuts_constraint_excludes_products_with_nuts(self, make_product) -> None:
        """Test the nuts constraint excludes rather than requires nuts."""
        filters = FilterState(nuts=True)

        assert filters.matches(make_product(nuts=False)) is True
        assert filters.matches(make_product(nuts=True)) is False

    def test_spiciness_is_exact_match(self, make_product) -> None:
        """Test the spiciness constraint matches one level only."""
        filters = FilterState(spiciness=2)

        assert filters.matches(make_product(spiciness=2)) is True
        assert filters.matches(make_product(spiciness=3)) is False
        assert filters.matches(make_product(spiciness=1)) is False
