"""Client for interacting with the restaurant REST API."""

import logging
import time
from decimal import Decimal
from typing import Any

import httpx
from pydantic import ValidationError

from restaurant_storefront.models.storefront_models import (
    BasketItemRequest,
    BasketLine,
    Category,
    Product,
)
from restaurant_storefront.observability.metrics import record_api_call, record_api_failure

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://restaurant.stepprojects.ge/api/"

# Transport, status, JSON decode and model validation failures
_CLIENT_ERRORS = (httpx.HTTPStatusError, httpx.RequestError, ValidationError, ValueError)


class RestaurantApiClient:
    """HTTP client for the restaurant products, categories and basket API.

    Reads return parsed models, or None when the call fails. Writes return
    True when the server accepted the change and False otherwise. Failures
    are logged here; callers decide how to surface them.
    """

    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: float = 10.0) -> None:
        """Initialize the restaurant API client.

        Args:
            base_url: Base URL of the restaurant API (e.g., "https://restaurant.stepprojects.ge/api/")
            timeout: Per-request timeout in seconds

        Raises:
            ValueError: If base_url is not an http(s) URL
        """
        if not base_url.startswith(("http://", "https://")):
            raise ValueError(f"Restaurant API base URL must be http(s): {base_url!r}")

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path}"

    async def _get_json(self, operation: str, path: str, params: dict[str, Any] | None = None) -> Any:
        started = time.perf_counter()
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            if params is None:
                response = await client.get(self._url(path))
            else:
                response = await client.get(self._url(path), params=params)
            record_api_call(operation, time.perf_counter() - started)
            response.raise_for_status()
            return response.json()

    async def _send(self, operation: str, method: str, path: str, payload: dict[str, Any]) -> bool:
        started = time.perf_counter()
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                if method == "POST":
                    response = await client.post(self._url(path), json=payload)
                elif method == "PUT":
                    response = await client.put(self._url(path), json=payload)
                else:
                    # httpx.AsyncClient.delete takes no body; the API expects {id}
                    response = await client.request(method, self._url(path), json=payload)
                record_api_call(operation, time.perf_counter() - started)
                response.raise_for_status()
                return True

        except (httpx.HTTPStatusError, httpx.RequestError) as e:
            logger.error(f"Restaurant API {operation} failed: {e}")
            record_api_failure(operation, type(e).__name__)
            return False

    async def list_all_products(self) -> list[Product] | None:
        """Fetch every product on the menu.

        Returns:
            List of Product objects, empty list if the menu is empty, or None on failure
        """
        try:
            data = await self._get_json("list_all_products", "Products/GetAll")
            return [Product.model_validate(item) for item in data or []]

        except _CLIENT_ERRORS as e:
            logger.error(f"Failed to fetch products: {e}")
            record_api_failure("list_all_products", type(e).__name__)
            return None

    async def get_filtered_products(
        self, vegeterian: bool, nuts: bool, spiciness: int
    ) -> list[Product] | None:
        """Fetch products matching attribute filters on the server side.

        Args:
            vegeterian: Only vegeterian products
            nuts: Nuts constraint as understood by the API
            spiciness: Required spiciness, 0 for no constraint

        Returns:
            List of matching Product objects, or None on failure
        """
        params = {
            "vegeterian": str(vegeterian).lower(),
            "nuts": str(nuts).lower(),
            "spiciness": spiciness,
        }
        try:
            data = await self._get_json("get_filtered_products", "Products/GetFiltered", params)
            return [Product.model_validate(item) for item in data or []]

        except _CLIENT_ERRORS as e:
            logger.error(f"Failed to fetch filtered products {params}: {e}")
            record_api_failure("get_filtered_products", type(e).__name__)
            return None

    async def list_categories(self) -> list[Category] | None:
        """Fetch all categories for the category controls.

        Returns:
            List of Category objects, or None on failure
        """
        try:
            data = await self._get_json("list_categories", "Categories/GetAll")
            return [Category.model_validate(item) for item in data or []]

        except _CLIENT_ERRORS as e:
            logger.error(f"Failed to fetch categories: {e}")
            record_api_failure("list_categories", type(e).__name__)
            return None

    async def get_category(self, category_id: int) -> Category | None:
        """Fetch one category together with its products.

        Args:
            category_id: The category to fetch

        Returns:
            Category with its products (possibly none), or None on failure
        """
        try:
            data = await self._get_json("get_category", f"Categories/GetCategory/{category_id}")
            if not isinstance(data, dict):
                raise ValueError(f"Unexpected category payload: {type(data).__name__}")
            data.setdefault("id", category_id)
            return Category.model_validate(data)

        except _CLIENT_ERRORS as e:
            logger.error(f"Failed to fetch category {category_id}: {e}")
            record_api_failure("get_category", type(e).__name__)
            return None

    async def list_basket(self) -> list[BasketLine] | None:
        """Fetch the current basket snapshot.

        Returns:
            List of BasketLine objects, empty list if the basket is empty, or None on failure
        """
        try:
            data = await self._get_json("list_basket", "Baskets/GetAll")
            return [BasketLine.model_validate(item) for item in data or []]

        except _CLIENT_ERRORS as e:
            logger.error(f"Failed to fetch basket: {e}")
            record_api_failure("list_basket", type(e).__name__)
            return None

    async def add_basket_item(self, product_id: int, price: Decimal, quantity: int = 1) -> bool:
        """Create a new basket line.

        Args:
            product_id: Product to add
            price: Line total for the new line
            quantity: Number of units

        Returns:
            True if the line was created, False otherwise
        """
        request = BasketItemRequest(quantity=quantity, price=price, product_id=product_id)
        return await self._send("add_basket_item", "POST", "Baskets/AddToBasket", request.to_payload())

    async def update_basket_item(self, product_id: int, quantity: int, price: Decimal) -> bool:
        """Replace quantity and line total of an existing basket line.

        Args:
            product_id: Product whose line is updated
            quantity: New quantity
            price: New line total

        Returns:
            True if the line was updated, False otherwise
        """
        request = BasketItemRequest(quantity=quantity, price=price, product_id=product_id)
        return await self._send("update_basket_item", "PUT", "Baskets/UpdateBasket", request.to_payload())

    async def delete_basket_item(self, product_id: int) -> bool:
        """Remove a basket line.

        Args:
            product_id: Product whose line is removed

        Returns:
            True if the line was removed, False otherwise
        """
        return await self._send(
            "delete_basket_item", "DELETE", f"Baskets/DeleteProduct/{product_id}", {"id": product_id}
        )
