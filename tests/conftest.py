"""
Pytest configuration and fixtures for fluent-http tests.
"""

import httpx
import pytest

from fluent_http import AsyncHTTPClient, HTTPClientConfig
from fluent_http.core.logging.config import LoggingConfig
from fluent_http.core.logging.filters import clear_correlation_id


@pytest.fixture
def base_url():
    """Base URL for testing."""
    return "https://api.example.com"


@pytest.fixture
def make_client(base_url):
    """
    Factory for AsyncHTTPClient over httpx.MockTransport.

    Example:
        async def test_x(make_client):
            http = make_client(lambda request: httpx.Response(200, text="ok"))
            result = await http.with_uri("/x").send_string()
    """
    def factory(handler, **kwargs):
        transport = httpx.AsyncClient(
            transport=httpx.MockTransport(handler),
            base_url=base_url,
        )
        return AsyncHTTPClient(transport, **kwargs)

    return factory


@pytest.fixture
def config(base_url):
    """Config for an owned transport."""
    return HTTPClientConfig.create(base_url=base_url, timeout=10)


@pytest.fixture
def logging_config_with_file(tmp_path):
    """
    LoggingConfig fixture with file logging enabled.

    Uses temporary directory for log files to avoid cleanup issues.
    """
    log_file = tmp_path / "test.log"
    return LoggingConfig.create(
        level="DEBUG",
        format="json",
        enable_console=False,
        enable_file=True,
        file_path=str(log_file)
    )


@pytest.fixture(autouse=True)
def _reset_correlation_id():
    yield
    clear_correlation_id()
