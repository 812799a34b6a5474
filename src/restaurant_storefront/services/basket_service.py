"""Basket service keeping the storefront in step with the server basket."""

import logging
from dataclasses import dataclass
from decimal import Decimal

from restaurant_storefront.models.storefront_models import BasketLine
from restaurant_storefront.observability import traced
from restaurant_storefront.observability.metrics import record_basket_mutation
from restaurant_storefront.services.restaurant_api_client import RestaurantApiClient

logger = logging.getLogger(__name__)


@dataclass
class BasketBadge:
    """Basket item count indicator.

    Attributes:
        count: Total units across all basket lines
        visible: Whether the badge is shown
    """

    count: int
    visible: bool

    @classmethod
    def from_lines(cls, lines: list[BasketLine]) -> "BasketBadge":
        count = count_basket_items(lines)
        return cls(count=count, visible=count > 0)


@dataclass
class BasketMutationResult:
    """Result of a basket mutation.

    Attributes:
        success: Whether the restaurant API accepted the change
        action: "added", "updated" or "deleted"
        product_id: The product whose line changed
        quantity: Quantity sent to the API (0 for deletes)
        price: Line total sent to the API, None for deletes
        badge: Refreshed badge after a successful mutation
        lines: Basket snapshot read after a successful mutation
        error_message: Error message if the mutation failed, None otherwise
    """

    success: bool
    action: str
    product_id: int
    quantity: int = 0
    price: Decimal | None = None
    badge: BasketBadge | None = None
    lines: list[BasketLine] | None = None
    error_message: str | None = None


def count_basket_items(lines: list[BasketLine]) -> int:
    """Sum quantities across basket lines."""
    return sum(line.quantity for line in lines)


def calculate_basket_total(lines: list[BasketLine]) -> Decimal:
    """Sum line totals across basket lines."""
    return sum((line.price for line in lines), Decimal("0"))


def line_total(unit_price: Decimal, quantity: int) -> Decimal:
    """Line total for quantity units at unit_price."""
    return Decimal(unit_price) * quantity


class BasketService:
    """Service for basket mutations and the basket badge.

    Nothing is cached: every decision starts from a fresh basket snapshot
    and the line total is always computed here before being sent.
    """

    def __init__(self, api_client: RestaurantApiClient) -> None:
        """Initialize the BasketService.

        Args:
            api_client: Client for the restaurant API
        """
        self.api_client = api_client

    async def get_basket(self) -> list[BasketLine] | None:
        """Fetch the basket snapshot for display.

        Returns:
            Basket lines, or None on failure
        """
        return await self.api_client.list_basket()

    @traced("refresh_basket_badge")
    async def refresh_basket_badge(self) -> BasketBadge | None:
        """Recount the basket.

        Returns:
            BasketBadge with the summed quantity, or None if the basket could not be read
        """
        lines = await self.api_client.list_basket()
        if lines is None:
            logger.error("Error updating basket count")
            return None
        return BasketBadge.from_lines(lines)

    @traced("add_to_basket")
    async def add_or_increment(self, product_id: int, unit_price: Decimal) -> BasketMutationResult:
        """Add one unit of a product, incrementing its line if it exists.

        Args:
            product_id: Product to add
            unit_price: Unit price of the product

        Returns:
            BasketMutationResult for the add or update that was issued
        """
        lines = await self.api_client.list_basket()
        if lines is None:
            error_msg = f"Failed to read basket before adding product {product_id}"
            logger.error(error_msg)
            return BasketMutationResult(
                success=False, action="added", product_id=product_id, error_message=error_msg
            )

        existing = next((line for line in lines if line.product_id == product_id), None)
        if existing is not None:
            return await self._update(product_id, existing.quantity + 1, unit_price)

        price = line_total(unit_price, 1)
        success = await self.api_client.add_basket_item(product_id, price, quantity=1)
        return await self._complete("added", product_id, 1, price, success)

    @traced("increment_basket_line")
    async def increment_line(self, product_id: int, quantity: int, unit_price: Decimal) -> BasketMutationResult:
        """Raise a line's quantity by one.

        Args:
            product_id: Product whose line changes
            quantity: Current quantity of the line
            unit_price: Unit price of the product

        Returns:
            BasketMutationResult for the update
        """
        return await self._update(product_id, quantity + 1, unit_price)

    @traced("decrement_basket_line")
    async def decrement_line(self, product_id: int, quantity: int, unit_price: Decimal) -> BasketMutationResult:
        """Lower a line's quantity by one, deleting it at quantity 1.

        Args:
            product_id: Product whose line changes
            quantity: Current quantity of the line
            unit_price: Unit price of the product

        Returns:
            BasketMutationResult for the update or delete
        """
        if quantity <= 1:
            return await self.remove_line(product_id)
        return await self._update(product_id, quantity - 1, unit_price)

    @traced("remove_basket_line")
    async def remove_line(self, product_id: int) -> BasketMutationResult:
        """Delete a product's line from the basket.

        Args:
            product_id: Product whose line is removed

        Returns:
            BasketMutationResult for the delete
        """
        success = await self.api_client.delete_basket_item(product_id)
        return await self._complete("deleted", product_id, 0, None, success)

    async def _update(self, product_id: int, new_quantity: int, unit_price: Decimal) -> BasketMutationResult:
        new_price = line_total(unit_price, new_quantity)
        success = await self.api_client.update_basket_item(product_id, new_quantity, new_price)
        return await self._complete("updated", product_id, new_quantity, new_price, success)

    async def _complete(
        self,
        action: str,
        product_id: int,
        quantity: int,
        price: Decimal | None,
        success: bool,
    ) -> BasketMutationResult:
        record_basket_mutation(action, success)

        if not success:
            error_msg = f"Basket line for product {product_id} was not {action}"
            logger.error(error_msg)
            return BasketMutationResult(
                success=False,
                action=action,
                product_id=product_id,
                quantity=quantity,
                price=price,
                error_message=error_msg,
            )

        logger.info(f"Basket line for product {product_id} {action}, quantity {quantity}")
        lines = await self.api_client.list_basket()
        if lines is None:
            logger.error("Error updating basket count")
        badge = BasketBadge.from_lines(lines) if lines is not None else None
        return BasketMutationResult(
            success=True,
            action=action,
            product_id=product_id,
            quantity=quantity,
            price=price,
            badge=badge,
            lines=lines,
        )
