"""Catalog service for category selection and product filtering."""

import logging
from dataclasses import dataclass, field

from restaurant_storefront.models.storefront_models import FilterState, Product
from restaurant_storefront.observability import traced
from restaurant_storefront.observability.metrics import record_stale_response
from restaurant_storefront.services.restaurant_api_client import RestaurantApiClient
from restaurant_storefront.state.session_state import StorefrontSession

logger = logging.getLogger(__name__)

NO_PRODUCTS_MESSAGE = "No products found."
NO_CATEGORY_PRODUCTS_MESSAGE = "No products found in this category."
NO_FILTERED_PRODUCTS_MESSAGE = "No products found with these filters."


@dataclass
class CatalogResult:
    """Result of a catalog action, ready for rendering.

    Attributes:
        success: Whether the restaurant API answered
        products: Products to display
        empty_message: Message to show instead of an empty card list
        stale: True when a newer action on the same session superseded this one
        error_message: Error message if the action failed, None otherwise
    """

    success: bool
    products: list[Product] = field(default_factory=list)
    empty_message: str | None = None
    stale: bool = False
    error_message: str | None = None


def apply_filters_to_products(products: list[Product], filters: FilterState) -> list[Product]:
    """Filter products locally with AND semantics.

    A product is rejected when vegeterian is required and it is not
    vegeterian, when the nuts constraint is set and it contains nuts, or when
    a spiciness above zero is requested and its spiciness differs.

    Args:
        products: Candidate products
        filters: Active filter state

    Returns:
        Products satisfying every active constraint, in their original order
    """
    if filters.is_default:
        return list(products)
    return [product for product in products if filters.matches(product)]


class CatalogService:
    """Service deciding which catalog endpoint to call for a session.

    Category products are filtered locally because the category endpoint
    takes no filter parameters; without a category the server-side filter
    endpoint is used.
    """

    def __init__(self, api_client: RestaurantApiClient) -> None:
        """Initialize the CatalogService.

        Args:
            api_client: Client for the restaurant API
        """
        self.api_client = api_client

    @traced("show_all_products")
    async def show_all_products(self, session: StorefrontSession) -> CatalogResult:
        """Clear the category selection and list every product.

        Args:
            session: Visitor session to update

        Returns:
            CatalogResult with all products or the generic empty message
        """
        session.clear_category()
        token = session.begin_request()

        products = await self.api_client.list_all_products()
        return self._finish(session, token, "show_all_products", products, NO_PRODUCTS_MESSAGE)

    @traced("select_category")
    async def set_category(self, session: StorefrontSession, category_id: int) -> CatalogResult:
        """Select a category and list its products under the active filters.

        Args:
            session: Visitor session to update
            category_id: Category to select

        Returns:
            CatalogResult with the category's matching products
        """
        session.select_category(category_id)
        token = session.begin_request()
        return await self._load_category(session, token, "set_category")

    @traced("apply_filters")
    async def set_filters(self, session: StorefrontSession, filters: FilterState) -> CatalogResult:
        """Record new filters and list matching products.

        Args:
            session: Visitor session to update
            filters: New filter state

        Returns:
            CatalogResult with matching products
        """
        session.update_filters(filters)
        token = session.begin_request()

        if session.current_category is not None:
            return await self._load_category(session, token, "set_filters")

        products = await self.api_client.get_filtered_products(
            vegeterian=filters.vegeterian,
            nuts=filters.nuts,
            spiciness=filters.spiciness,
        )
        return self._finish(session, token, "set_filters", products, NO_FILTERED_PRODUCTS_MESSAGE)

    @traced("reset_filters")
    async def reset_filters(self, session: StorefrontSession) -> CatalogResult:
        """Clear the filters and list the current category or the whole menu.

        Args:
            session: Visitor session to update

        Returns:
            CatalogResult with the unfiltered products
        """
        session.reset_filters()
        token = session.begin_request()

        if session.current_category is not None:
            return await self._load_category(session, token, "reset_filters")

        products = await self.api_client.list_all_products()
        return self._finish(session, token, "reset_filters", products, NO_PRODUCTS_MESSAGE)

    async def _load_category(self, session: StorefrontSession, token: int, operation: str) -> CatalogResult:
        category_id = session.current_category
        filters = session.filters

        category = await self.api_client.get_category(category_id)  # type: ignore[arg-type]
        if category is None:
            return self._finish(session, token, operation, None, NO_CATEGORY_PRODUCTS_MESSAGE)

        if not category.products:
            return self._finish(session, token, operation, [], NO_CATEGORY_PRODUCTS_MESSAGE)

        products = apply_filters_to_products(category.products, filters)
        return self._finish(session, token, operation, products, NO_FILTERED_PRODUCTS_MESSAGE)

    def _finish(
        self,
        session: StorefrontSession,
        token: int,
        operation: str,
        products: list[Product] | None,
        empty_message: str,
    ) -> CatalogResult:
        if not session.is_current(token):
            logger.info(f"Discarding stale {operation} response, generation {token} < {session.generation}")
            record_stale_response(operation)
            return CatalogResult(success=products is not None, products=products or [], stale=True)

        if products is None:
            error_msg = f"Failed to load products for {operation}"
            logger.error(error_msg)
            return CatalogResult(success=False, error_message=error_msg)

        if not products:
            return CatalogResult(success=True, empty_message=empty_message)

        return CatalogResult(success=True, products=products)
