"""FastAPI application serving storefront pages and fragments."""

import asyncio
import logging
from decimal import Decimal

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from restaurant_storefront.models.storefront_models import FilterState
from restaurant_storefront.services.basket_service import BasketMutationResult, BasketService
from restaurant_storefront.services.catalog_service import CatalogResult, CatalogService
from restaurant_storefront.services.restaurant_api_client import RestaurantApiClient
from restaurant_storefront.state.session_state import SessionStore, StorefrontSession
from restaurant_storefront.views.renderer import StorefrontRenderer

logger = logging.getLogger(__name__)

SESSION_COOKIE = "storefront_session"
THEME_COOKIE = "storefront_theme"
THEME_COOKIE_MAX_AGE = 365 * 24 * 60 * 60
SELECTED_CATEGORY_HEADER = "X-Selected-Category"
ALL_PRODUCTS_SELECTION = "all"

UPSTREAM_FAILURE_DETAIL = "Something went wrong"
PRODUCT_ADDED_NOTICE = "Product added to basket"
CATALOG_UNAVAILABLE_MESSAGE = "Products are unavailable right now."


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str


class AddToBasketRequest(BaseModel):
    """Add-to-basket action bound to a product card."""

    product_id: int
    unit_price: Decimal = Field(..., ge=0)


class LineActionRequest(BaseModel):
    """Increment/decrement action bound to a basket card."""

    quantity: int = Field(..., ge=1)
    unit_price: Decimal = Field(..., ge=0)


class ThemeResponse(BaseModel):
    """Response model for theme toggles."""

    theme: str


def create_app(
    api_client: RestaurantApiClient,
    renderer: StorefrontRenderer | None = None,
    session_store: SessionStore | None = None,
    secure_cookies: bool = False,
) -> FastAPI:
    """Create and configure the storefront FastAPI application.

    Args:
        api_client: Client for the restaurant API
        renderer: Renderer for HTML fragments (a default one is created if omitted)
        session_store: Store of visitor sessions (a fresh in-memory store if omitted)
        secure_cookies: Whether cookies are marked Secure

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Restaurant Storefront",
        description="Restaurant menu storefront backed by the restaurant REST API",
        version="1.0.0",
    )

    # Store collaborators in app state for access in route handlers
    app.state.api_client = api_client
    app.state.catalog_service = CatalogService(api_client=api_client)
    app.state.basket_service = BasketService(api_client=api_client)
    app.state.renderer = renderer if renderer is not None else StorefrontRenderer()
    app.state.session_store = session_store if session_store is not None else SessionStore()

    def get_session(request: Request, response: Response) -> StorefrontSession:
        """Dependency resolving the visitor session from its cookie."""
        session_id, session, created = app.state.session_store.get_or_create(
            request.cookies.get(SESSION_COOKIE)
        )
        if created:
            response.set_cookie(
                SESSION_COOKIE, session_id, httponly=True, samesite="lax", secure=secure_cookies
            )
            theme = request.cookies.get(THEME_COOKIE)
            if theme:
                session.set_theme(theme)
        return session

    def render_catalog(result: CatalogResult, response: Response, session: StorefrontSession) -> str:
        if result.stale:
            response.status_code = 204
            return ""
        if not result.success:
            raise HTTPException(status_code=502, detail=UPSTREAM_FAILURE_DETAIL)

        # Selected category id, or "all" without one
        selected = session.current_category
        response.headers[SELECTED_CATEGORY_HEADER] = (
            ALL_PRODUCTS_SELECTION if selected is None else str(selected)
        )
        if result.empty_message:
            return app.state.renderer.render_empty(result.empty_message)
        return app.state.renderer.render_products(result.products)

    def render_basket_after(result: BasketMutationResult) -> str:
        """Render the refreshed basket followed by the refreshed badge."""
        if not result.success or result.lines is None:
            raise HTTPException(status_code=502, detail=UPSTREAM_FAILURE_DETAIL)

        basket: str = app.state.renderer.render_basket(result.lines)
        return basket + app.state.renderer.render_badge(result.badge)

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy")

    @app.get("/", response_class=HTMLResponse, tags=["Pages"])
    async def index(session: StorefrontSession = Depends(get_session)) -> str:
        """Render the storefront page with every product, the categories and the badge."""
        result, categories, badge = await asyncio.gather(
            app.state.catalog_service.show_all_products(session),
            app.state.api_client.list_categories(),
            app.state.basket_service.refresh_basket_badge(),
        )

        if not result.success:
            content = app.state.renderer.render_empty(CATALOG_UNAVAILABLE_MESSAGE)
        elif result.empty_message:
            content = app.state.renderer.render_empty(result.empty_message)
        else:
            content = app.state.renderer.render_products(result.products)

        page: str = app.state.renderer.render_page(
            content=content,
            badge=badge,
            categories=categories or [],
            selected_category=session.current_category,
            filters=session.filters,
            theme=session.theme,
        )
        return page

    @app.get("/products", response_class=HTMLResponse, tags=["Catalog"])
    async def show_all_products(
        response: Response, session: StorefrontSession = Depends(get_session)
    ) -> str:
        """List every product and clear the category selection."""
        result = await app.state.catalog_service.show_all_products(session)
        return render_catalog(result, response, session)

    @app.post("/categories/{category_id}/select", response_class=HTMLResponse, tags=["Catalog"])
    async def select_category(
        category_id: int, response: Response, session: StorefrontSession = Depends(get_session)
    ) -> str:
        """Select a category and list its products under the active filters."""
        logger.info(f"Category {category_id} selected")
        result = await app.state.catalog_service.set_category(session, category_id)
        return render_catalog(result, response, session)

    @app.post("/filters", response_class=HTMLResponse, tags=["Catalog"])
    async def apply_filters(
        filters: FilterState, response: Response, session: StorefrontSession = Depends(get_session)
    ) -> str:
        """Apply vegeterian, nuts and spiciness filters."""
        result = await app.state.catalog_service.set_filters(session, filters)
        return render_catalog(result, response, session)

    @app.post("/filters/reset", response_class=HTMLResponse, tags=["Catalog"])
    async def reset_filters(
        response: Response, session: StorefrontSession = Depends(get_session)
    ) -> str:
        """Clear the filters and list the current category or the whole menu."""
        result = await app.state.catalog_service.reset_filters(session)
        return render_catalog(result, response, session)

    @app.get("/basket", response_class=HTMLResponse, tags=["Basket"])
    async def show_basket() -> str:
        """Render the basket lines and their total."""
        lines = await app.state.basket_service.get_basket()
        if lines is None:
            raise HTTPException(status_code=502, detail=UPSTREAM_FAILURE_DETAIL)
        basket: str = app.state.renderer.render_basket(lines)
        return basket

    @app.get("/basket/badge", response_class=HTMLResponse, tags=["Basket"])
    async def basket_badge() -> str:
        """Render the basket item count badge."""
        badge = await app.state.basket_service.refresh_basket_badge()
        if badge is None:
            raise HTTPException(status_code=502, detail=UPSTREAM_FAILURE_DETAIL)
        rendered: str = app.state.renderer.render_badge(badge)
        return rendered

    @app.post("/basket/items", response_class=HTMLResponse, tags=["Basket"])
    async def add_to_basket(request: AddToBasketRequest, response: Response) -> str:
        """Add one unit of a product and return the refreshed badge."""
        result = await app.state.basket_service.add_or_increment(
            request.product_id, request.unit_price
        )
        if not result.success:
            raise HTTPException(status_code=502, detail=UPSTREAM_FAILURE_DETAIL)

        response.headers["X-Storefront-Notice"] = PRODUCT_ADDED_NOTICE
        rendered: str = app.state.renderer.render_badge(result.badge)
        return rendered

    @app.post("/basket/items/{product_id}/increment", response_class=HTMLResponse, tags=["Basket"])
    async def increment_line(product_id: int, request: LineActionRequest) -> str:
        """Raise a basket line by one and return the re-rendered basket and badge."""
        result = await app.state.basket_service.increment_line(
            product_id, request.quantity, request.unit_price
        )
        return render_basket_after(result)

    @app.post("/basket/items/{product_id}/decrement", response_class=HTMLResponse, tags=["Basket"])
    async def decrement_line(product_id: int, request: LineActionRequest) -> str:
        """Lower a basket line by one (removing it at 1) and return the re-rendered basket and badge."""
        result = await app.state.basket_service.decrement_line(
            product_id, request.quantity, request.unit_price
        )
        return render_basket_after(result)

    @app.delete("/basket/items/{product_id}", response_class=HTMLResponse, tags=["Basket"])
    async def remove_line(product_id: int) -> str:
        """Remove a basket line and return the re-rendered basket and badge."""
        result = await app.state.basket_service.remove_line(product_id)
        return render_basket_after(result)

    @app.post("/theme/toggle", response_model=ThemeResponse, tags=["Preferences"])
    async def toggle_theme(
        response: Response, session: StorefrontSession = Depends(get_session)
    ) -> ThemeResponse:
        """Switch between light and dark themes and persist the choice in a cookie."""
        theme = session.toggle_theme()
        response.set_cookie(THEME_COOKIE, theme, max_age=THEME_COOKIE_MAX_AGE, samesite="lax")
        return ThemeResponse(theme=theme)

    return app
