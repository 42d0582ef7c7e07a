"""Tests for settings loading and the quote service factory."""

import logging
import os
from unittest.mock import patch

import httpx

from app.stocks.factory import create_http_client, create_quote_service
from app.stocks.service import QuoteService
from app.stocks.settings import DEFAULT_BASE_URL, StocksSettings


class TestStocksSettings:
    """Tests for StocksSettings.from_env."""

    def test_defaults_when_env_empty(self):
        """Test defaults with no STOCKS_* variables set."""
        with patch.dict(os.environ, {}, clear=True):
            settings = StocksSettings.from_env()

        assert settings.api_key == ""
        assert settings.base_url == DEFAULT_BASE_URL
        assert settings.request_timeout == 10.0
        assert settings.update_interval == 5.0
        assert not settings.has_api_key

    def test_reads_values(self):
        """Test reading every variable."""
        env = {
            "STOCKS_API_KEY": " key-123 ",
            "STOCKS_BASE_URL": "https://example.test/query",
            "STOCKS_REQUEST_TIMEOUT": "2.5",
            "STOCKS_UPDATE_INTERVAL": "30",
        }
        settings = StocksSettings.from_env(env)

        assert settings.api_key == "key-123"
        assert settings.has_api_key
        assert settings.base_url == "https://example.test/query"
        assert settings.request_timeout == 2.5
        assert settings.update_interval == 30.0

    def test_whitespace_api_key_is_missing(self):
        """Test that a whitespace-only key counts as absent."""
        assert not StocksSettings.from_env({"STOCKS_API_KEY": "   "}).has_api_key
        assert not StocksSettings(api_key="   ").has_api_key

    def test_invalid_numbers_fall_back(self, caplog):
        """Test that malformed or non-positive numbers use the defaults."""
        caplog.set_level(logging.WARNING, logger="app.stocks.settings")
        settings = StocksSettings.from_env(
            {"STOCKS_REQUEST_TIMEOUT": "fast", "STOCKS_UPDATE_INTERVAL": "-1"}
        )

        assert settings.request_timeout == 10.0
        assert settings.update_interval == 5.0
        assert "STOCKS_REQUEST_TIMEOUT" in caplog.text
        assert "STOCKS_UPDATE_INTERVAL" in caplog.text


class TestFactory:
    """Tests for create_quote_service."""

    def test_creates_service(self, cache):
        """Test that a QuoteService is created with the given collaborators."""
        settings = StocksSettings(api_key="test-key")
        client = httpx.AsyncClient()
        service = create_quote_service(settings, cache, http_client=client)

        assert isinstance(service, QuoteService)
        assert service._http is client
        assert service._cache is cache
        assert service._settings is settings

    def test_creates_service_without_api_key(self, cache, caplog):
        """Test that a missing key still yields a service, with a warning."""
        caplog.set_level(logging.WARNING, logger="app.stocks.factory")
        service = create_quote_service(StocksSettings(), cache)

        assert isinstance(service, QuoteService)
        assert "STOCKS_API_KEY is not set" in caplog.text

    def test_http_client_timeout(self):
        """Test that the HTTP client gets the configured timeout."""
        client = create_http_client(StocksSettings(request_timeout=3.0))
        assert client.timeout == httpx.Timeout(3.0)
