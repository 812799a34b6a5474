"""Main application entry point for the restaurant storefront.

This module provides the FastAPI application factory and configuration
for running the storefront locally or in production.
"""

import logging
import os

from fastapi import FastAPI

from restaurant_storefront.handlers.api_handler import create_app
from restaurant_storefront.observability import configure_logging, setup_observability
from restaurant_storefront.services.restaurant_api_client import DEFAULT_BASE_URL, RestaurantApiClient
from restaurant_storefront.state.session_state import DEFAULT_MAX_SESSIONS, SessionStore
from restaurant_storefront.views.renderer import StorefrontRenderer

logger = logging.getLogger(__name__)


def create_api_client() -> RestaurantApiClient:
    """Create the restaurant API client from environment variables.

    Returns:
        Configured RestaurantApiClient

    Raises:
        ValueError: If the base URL or timeout is invalid
    """
    base_url = os.getenv("RESTAURANT_API_BASE_URL", DEFAULT_BASE_URL)
    timeout = float(os.getenv("RESTAURANT_API_TIMEOUT_SECONDS", "10"))

    if timeout <= 0:
        raise ValueError("RESTAURANT_API_TIMEOUT_SECONDS must be positive")

    client = RestaurantApiClient(base_url=base_url, timeout=timeout)
    logger.info(f"Restaurant API client configured - URL: {client.base_url}")
    return client


def create_application() -> FastAPI:
    """Create and configure the storefront application with all dependencies.

    This factory function:
    1. Configures logging
    2. Creates the restaurant API client
    3. Creates the renderer and session store
    4. Creates the FastAPI app
    5. Sets up observability

    Returns:
        Configured FastAPI application instance
    """
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    logger.info("Initializing restaurant storefront...")

    api_client = create_api_client()
    secure_cookies = os.getenv("SESSION_COOKIE_SECURE", "false").lower() == "true"
    max_sessions = int(os.getenv("SESSION_STORE_MAX_SIZE", str(DEFAULT_MAX_SESSIONS)))

    app = create_app(
        api_client=api_client,
        renderer=StorefrontRenderer(),
        session_store=SessionStore(max_sessions=max_sessions),
        secure_cookies=secure_cookies,
    )

    enable_exporters = os.getenv("OTEL_ENABLED", "false").lower() == "true"
    setup_observability(app, enable_exporters=enable_exporters)

    logger.info("Restaurant storefront initialized successfully")
    return app


# Create the FastAPI application instance (only when not in test mode)
# This prevents the app from being created during test collection
if os.getenv("ENVIRONMENT") != "test":  # noqa: SIM108
    app = create_application()
else:
    app = FastAPI()


if __name__ == "__main__":
    """Run the application with uvicorn when executed directly."""
    import uvicorn

    port = int(os.getenv("PORT", "8000"))
    host = os.getenv("HOST", "0.0.0.0")

    logger.info(f"Starting development server on {host}:{port}")

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=True,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
