"""Unit tests for the configuration store and startup path."""

import asyncio

import pytest

from addon_proxy.exceptions import ConfigNotFoundError, UpstreamHTTPError
from addon_proxy.manifest import ManifestFetcher
from addon_proxy.models import ConfigSource, Configuration
from addon_proxy.store import ConfigurationStore, StoreHolder, build_configuration, build_store
from addon_proxy.upstream import MockJsonTransport


BASE1 = "https://base1.example.com"
BASE2 = "https://base2.example.com"


class TestConfigurationStore:
    """Test ConfigurationStore lookups."""

    def test_unknown_configuration(self):
        store = ConfigurationStore()

        assert store.bindings("missing") == ()
        with pytest.raises(ConfigNotFoundError):
            store.manifest("missing")

    def test_uninitialized_configuration(self):
        store = ConfigurationStore([Configuration(name="empty", bases=(BASE1,))])

        assert "empty" in store
        assert store.bindings("empty") == ()
        with pytest.raises(ConfigNotFoundError) as exc_info:
            store.manifest("empty")
        assert exc_info.value.config_name == "empty"

    def test_is_read_only(self):
        store = ConfigurationStore([Configuration(name="a")])

        with pytest.raises(TypeError):
            store["b"] = Configuration(name="b")  # type: ignore[index]

    def test_with_configuration_returns_new_store(self):
        store = ConfigurationStore([Configuration(name="a"), Configuration(name="b")])
        replacement = Configuration(name="a", bases=(BASE1,))

        updated = store.with_configuration(replacement)

        assert updated is not store
        assert updated["a"] is replacement
        assert store["a"].bases == ()
        assert list(updated) == ["a", "b"]


@pytest.mark.asyncio
class TestBuildConfiguration:
    """Test the startup path for one configuration."""

    async def test_normalizes_fetches_and_merges(self, demo_transport):
        source = ConfigSource(
            name="demo",
            addon_urls=(f"{BASE1}/manifest.json", f"{BASE2}/", f"{BASE1}"),
        )

        config = await build_configuration(source, ManifestFetcher(demo_transport))

        assert config.bases == (BASE1, BASE2)
        assert [b.base for b in config.bindings] == [BASE1, BASE2]
        assert config.initialized
        assert [c["id"] for c in config.manifest.catalogs] == ["movies-top", "series-top"]

    async def test_zero_bindings_is_uninitialized(self):
        source = ConfigSource(name="dead", addon_urls=(BASE1, BASE2))

        config = await build_configuration(source, ManifestFetcher(MockJsonTransport()))

        assert config.bindings == ()
        assert config.manifest is None
        assert not config.initialized

    async def test_build_store_keeps_every_source(self, demo_transport):
        sources = [
            ConfigSource(name="demo", addon_urls=(BASE1, BASE2)),
            ConfigSource(name="dead", addon_urls=("https://down.example.com",)),
        ]

        store = await build_store(sources, ManifestFetcher(demo_transport))

        assert sorted(store) == ["dead", "demo"]
        assert store.manifest("demo").id == "stremio-proxy-wrapper-demo"
        with pytest.raises(ConfigNotFoundError):
            store.manifest("dead")


@pytest.mark.asyncio
class TestStoreHolder:
    """Test atomic store replacement."""

    async def test_reload_swaps_complete_store(self, demo_transport, movies_manifest):
        holder = StoreHolder()
        fetcher = ManifestFetcher(demo_transport)

        first = await holder.reload([ConfigSource(name="demo", addon_urls=(BASE1,))], fetcher)
        assert holder.store is first
        assert len(first.bindings("demo")) == 1

        second = await holder.reload(
            [ConfigSource(name="demo", addon_urls=(BASE1, BASE2))], fetcher
        )

        assert holder.store is second
        assert len(second.bindings("demo")) == 2
        # The earlier snapshot is untouched
        assert len(first.bindings("demo")) == 1

    async def test_readers_keep_old_snapshot_during_reload(self, movies_manifest):
        transport = MockJsonTransport(
            {("GET", f"{BASE1}/manifest.json"): movies_manifest},
            delays={f"{BASE1}/manifest.json": 0.05},
        )
        fetcher = ManifestFetcher(transport)
        holder = StoreHolder(ConfigurationStore([Configuration(name="demo")]))
        before = holder.store

        reload_task = asyncio.create_task(
            holder.reload([ConfigSource(name="demo", addon_urls=(BASE1,))], fetcher)
        )
        await asyncio.sleep(0.01)

        assert holder.store is before
        assert holder.store.bindings("demo") == ()

        await reload_task
        assert len(holder.store.bindings("demo")) == 1

    async def test_reload_one_keeps_other_configurations(self, demo_transport):
        holder = StoreHolder()
        fetcher = ManifestFetcher(demo_transport)
        await holder.reload(
            [
                ConfigSource(name="a", addon_urls=(BASE1,)),
                ConfigSource(name="b", addon_urls=(BASE2,)),
            ],
            fetcher,
        )
        untouched = holder.store["b"]

        await holder.reload_one(ConfigSource(name="a", addon_urls=(BASE1, BASE2)), fetcher)

        assert len(holder.store.bindings("a")) == 2
        assert holder.store["b"] is untouched

    async def test_failed_upstream_excluded_after_reload(self, movies_manifest):
        transport = MockJsonTransport({
            ("GET", f"{BASE1}/manifest.json"): movies_manifest,
            ("GET", f"{BASE2}/manifest.json"): UpstreamHTTPError("HTTP 503", status_code=503),
        })
        holder = StoreHolder()

        await holder.reload(
            [ConfigSource(name="demo", addon_urls=(BASE1, BASE2))], ManifestFetcher(transport)
        )

        assert [b.base for b in holder.store.bindings("demo")] == [BASE1]
        assert holder.store["demo"].bases == (BASE1, BASE2)
