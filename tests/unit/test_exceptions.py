"""Tests for the exception hierarchy."""

import pytest

from addon_proxy.exceptions import (
    ConfigError,
    ConfigNotFoundError,
    ConfigSourceError,
    LegacyRouteNotFoundError,
    ProxyException,
    UpstreamError,
    UpstreamHTTPError,
    UpstreamResponseError,
    UpstreamTimeoutError,
)


class TestProxyException:
    """Test ProxyException rendering."""

    def test_message_only(self):
        assert str(ProxyException("boom")) == "boom"

    def test_message_with_context(self):
        exc = UpstreamHTTPError("HTTP 502", url="https://a.example.com/stream", status_code=502)

        assert str(exc) == "HTTP 502 (url=https://a.example.com/stream; status_code=502)"
        assert exc.context == {"url": "https://a.example.com/stream", "status_code": 502}

    @pytest.mark.parametrize(
        "exc,parent",
        [
            (ConfigSourceError("bad", source="x.json"), ConfigError),
            (ConfigNotFoundError("demo"), ConfigError),
            (UpstreamTimeoutError("slow", timeout=1.0), UpstreamError),
            (UpstreamResponseError("not json"), UpstreamError),
            (LegacyRouteNotFoundError("meta/x"), ProxyException),
        ],
    )
    def test_hierarchy(self, exc, parent):
        assert isinstance(exc, parent)
        assert isinstance(exc, ProxyException)

    def test_http_facing_messages(self):
        assert ConfigNotFoundError("demo").message == "Config not found"
        assert LegacyRouteNotFoundError("meta/x").message == "Not found"

    def test_url_renders_before_subclass_context(self):
        exc = UpstreamTimeoutError("slow", url="https://a.example.com", timeout=2.0)

        assert list(exc.context) == ["url", "timeout"]
