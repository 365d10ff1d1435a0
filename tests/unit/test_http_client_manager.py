"""Tests for the shared HTTP client cache."""

import pytest

from addon_proxy.http_client_manager import close_http_clients, get_main_http_client


@pytest.mark.asyncio
class TestHttpClientManager:
    """Test get_main_http_client and close_http_clients."""

    async def test_same_config_shares_client(self):
        try:
            first = get_main_http_client(timeout=5.0)
            second = get_main_http_client(timeout=5.0)
            other = get_main_http_client(timeout=6.0)

            assert first is second
            assert first is not other
        finally:
            await close_http_clients()

    async def test_closed_client_is_recreated(self):
        client = get_main_http_client()
        await close_http_clients()

        assert client.is_closed
        replacement = get_main_http_client()
        assert replacement is not client
        assert not replacement.is_closed
        await close_http_clients()
