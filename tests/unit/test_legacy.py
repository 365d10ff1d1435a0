"""Unit tests for the legacy GET path adapter."""

import pytest

from addon_proxy.dispatch import DispatchEngine, LegacyPathAdapter
from addon_proxy.exceptions import ConfigNotFoundError, LegacyRouteNotFoundError
from addon_proxy.store import StoreHolder
from addon_proxy.upstream import MockJsonTransport


BASE1 = "https://base1.example.com"
BASE2 = "https://base2.example.com"


@pytest.mark.asyncio
class TestLegacyPathAdapter:
    """Test LegacyPathAdapter.dispatch."""

    async def test_catalog_path_forwarded_to_owner(self, make_legacy, demo_bindings):
        transport = MockJsonTransport({
            ("GET", f"{BASE1}/catalog/movie/movies-top.json"): {"metas": [{"id": "tt1"}]},
        })
        adapter = make_legacy({"demo": demo_bindings}, transport)

        result = await adapter.dispatch("demo", "catalog/movie/movies-top.json")

        assert result == {"metas": [{"id": "tt1"}]}
        assert transport.called_urls() == [f"{BASE1}/catalog/movie/movies-top.json"]

    async def test_catalog_with_extra_segment(self, make_legacy, demo_bindings):
        path = "catalog/series/series-top/skip=20.json"
        transport = MockJsonTransport({("GET", f"{BASE2}/{path}"): {"metas": [{"id": "tt9"}]}})
        adapter = make_legacy({"demo": demo_bindings}, transport)

        result = await adapter.dispatch("demo", path)

        assert result == {"metas": [{"id": "tt9"}]}

    async def test_stream_path_goes_to_all(self, make_legacy, demo_bindings):
        path = "stream/movie/tt1.json"
        transport = MockJsonTransport({
            ("GET", f"{BASE1}/{path}"): {"streams": [{"url": "a"}]},
            ("GET", f"{BASE2}/{path}"): {"streams": [{"url": "b"}]},
        })
        adapter = make_legacy({"demo": demo_bindings}, transport)

        result = await adapter.dispatch("demo", path)

        assert result == {"streams": [{"url": "a"}, {"url": "b"}]}

    async def test_subtitles_failure_tolerated(self, make_legacy, demo_bindings):
        path = "subtitles/movie/tt1.json"
        transport = MockJsonTransport({("GET", f"{BASE2}/{path}"): {"subtitles": [{"id": "en"}]}})
        adapter = make_legacy({"demo": demo_bindings}, transport)

        result = await adapter.dispatch("demo", path)

        assert result == {"subtitles": [{"id": "en"}]}

    async def test_unknown_prefix(self, make_legacy, demo_bindings, mock_transport):
        adapter = make_legacy({"demo": demo_bindings}, mock_transport)

        with pytest.raises(LegacyRouteNotFoundError) as exc_info:
            await adapter.dispatch("demo", "meta/movie/tt1.json")

        assert exc_info.value.message == "Not found"
        assert mock_transport.calls == []

    async def test_unknown_config(self, mock_transport):
        adapter = LegacyPathAdapter(DispatchEngine(StoreHolder(), mock_transport))

        with pytest.raises(ConfigNotFoundError) as exc_info:
            await adapter.dispatch("nope", "stream/movie/tt1.json")

        assert exc_info.value.message == "Config not found"

    async def test_channel_catalog_skips_catalog_filter(self, make_legacy, demo_bindings):
        path = "catalog/channel/tv-all.json"
        transport = MockJsonTransport({
            ("GET", f"{BASE1}/{path}"): {"metas": [{"id": "c1"}]},
            ("GET", f"{BASE2}/{path}"): {"metas": [{"id": "c2"}]},
        })
        adapter = make_legacy({"demo": demo_bindings}, transport)

        result = await adapter.dispatch("demo", path)

        # Neither upstream owns "tv-all"; both are still called
        assert result == {"metas": [{"id": "c1"}, {"id": "c2"}]}
        assert transport.called_urls() == [f"{BASE1}/{path}", f"{BASE2}/{path}"]
