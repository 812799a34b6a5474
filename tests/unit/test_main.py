"""Unit tests for main application entry point."""

import os
from unittest.mock import Mock, patch

import pytest
from fastapi import FastAPI

from restaurant_storefront.services.restaurant_api_client import DEFAULT_BASE_URL
from src.main import create_api_client, create_application


@pytest.mark.unit
class TestCreateApiClient:
    """Tests for create_api_client function."""

    @patch.dict(os.environ, {}, clear=True)
    def test_uses_default_base_url(self) -> None:
        """Test that the public restaurant API is used when nothing is configured."""
        client = create_api_client()

        assert client.base_url == DEFAULT_BASE_URL.rstrip("/")
        assert client.timeout == 10.0

    @patch.dict(
        os.environ,
        {
            "RESTAURANT_API_BASE_URL": "http://localhost:5000/api/",
            "RESTAURANT_API_TIMEOUT_SECONDS": "2.5",
        },
        clear=True,
    )
    def test_uses_environment_configuration(self) -> None:
        """Test that base URL and timeout come from the environment."""
        client = create_api_client()

        assert client.base_url == "http://localhost:5000/api"
        assert client.timeout == 2.5

    @patch.dict(os.environ, {"RESTAURANT_API_TIMEOUT_SECONDS": "0"}, clear=True)
    def test_rejects_non_positive_timeout(self) -> None:
        """Test that a zero timeout is a configuration error."""
        with pytest.raises(ValueError, match="TIMEOUT"):
            create_api_client()

    @patch.dict(os.environ, {"RESTAURANT_API_BASE_URL": "ftp://example.com"}, clear=True)
    def test_rejects_invalid_base_url(self) -> None:
        """Test that a non-http base URL is a configuration error."""
        with pytest.raises(ValueError):
            create_api_client()


@pytest.mark.unit
class TestCreateApplication:
    """Tests for create_application function."""

    @patch.dict(os.environ, {"ENVIRONMENT": "test", "LOG_LEVEL": "WARNING"}, clear=True)
    @patch("src.main.setup_observability")
    @patch("src.main.configure_logging")
    def test_creates_app(self, mock_configure_logging: Mock, mock_setup_observability: Mock) -> None:
        """Test that the application is built and instrumented without exporters."""
        app = create_application()

        assert isinstance(app, FastAPI)
        assert app.title == "Restaurant Storefront"
        mock_configure_logging.assert_called_once_with("WARNING")
        mock_setup_observability.assert_called_once_with(app, enable_exporters=False)

    @patch.dict(os.environ, {"ENVIRONMENT": "test", "OTEL_ENABLED": "true"}, clear=True)
    @patch("src.main.setup_observability")
    @patch("src.main.configure_logging")
    def test_enables_exporters_when_configured(
        self, mock_configure_logging: Mock, mock_setup_observability: Mock
    ) -> None:
        """Test that OTEL_ENABLED turns on the OTLP exporters."""
        app = create_application()

        mock_setup_observability.assert_called_once_with(app, enable_exporters=True)

    @patch.dict(os.environ, {"ENVIRONMENT": "test", "SESSION_COOKIE_SECURE": "true"}, clear=True)
    @patch("src.main.setup_observability")
    @patch("src.main.configure_logging")
    @patch("src.main.create_app")
    def test_passes_secure_cookie_setting(
        self, mock_create_app: Mock, mock_configure_logging: Mock, mock_setup_observability: Mock
    ) -> None:
        """Test that SESSION_COOKIE_SECURE reaches the app factory."""
        create_application()

        assert mock_create_app.call_args.kwargs["secure_cookies"] is True

    @patch.dict(os.environ, {"ENVIRONMENT": "test", "SESSION_STORE_MAX_SIZE": "25"}, clear=True)
    @patch("src.main.setup_observability")
    @patch("src.main.configure_logging")
    def test_bounds_session_store(
        self, mock_configure_logging: Mock, mock_setup_observability: Mock
    ) -> None:
        """Test SESSION_STORE_MAX_SIZE caps the app's session store."""
        app = create_application()

        assert app.state.session_store.max_sessions == 25
