"""
Pytest configuration for contract tests

Provides an HTTP client factory backed by httpx.MockTransport
"""
import httpx
import pytest


@pytest.fixture
def mock_client():
    """
    Build an AsyncClient whose requests are answered by handler.

    Usage:
        client = mock_client(lambda request: httpx.Response(200, text="ok"))
    """
    def factory(handler):
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return factory
