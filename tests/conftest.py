"""Pytest configuration and shared fixtures for addon proxy tests."""

import sys
from pathlib import Path
from typing import Any

import pytest


sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from addon_proxy.dispatch import DispatchEngine, LegacyPathAdapter
from addon_proxy.manifest import ManifestFetcher, merge_manifests
from addon_proxy.models import ConfigSource, Configuration, UpstreamBinding
from addon_proxy.routing import DispatchPolicy
from addon_proxy.store import ConfigurationStore, StoreHolder, build_configuration
from addon_proxy.upstream import MockJsonTransport


BASE1 = "https://base1.example.com"
BASE2 = "https://base2.example.com"
BASE3 = "https://base3.example.com"


# ==================== Manifest Fixtures ====================


@pytest.fixture
def movies_manifest() -> dict[str, Any]:
    """Manifest of an upstream owning the movies-top catalog."""
    return {
        "id": "org.example.movies",
        "name": "Movies",
        "types": ["movie"],
        "idPrefixes": ["tt"],
        "catalogs": [{"id": "movies-top", "type": "movie", "name": "Top Movies"}],
        "logo": "https://base1.example.com/logo.png",
        "icon": "https://base1.example.com/icon.png",
    }


@pytest.fixture
def series_manifest() -> dict[str, Any]:
    """Manifest of an upstream owning the series-top catalog."""
    return {
        "id": "org.example.series",
        "name": "Series",
        "types": ["series", "movie"],
        "idPrefixes": ["tt", "kitsu"],
        "catalogs": [{"id": "series-top", "type": "series", "name": "Top Series"}],
    }


@pytest.fixture
def channel_manifest() -> dict[str, Any]:
    """Manifest of an upstream serving live channels."""
    return {
        "id": "org.example.tv",
        "name": "TV",
        "types": ["channel"],
        "idPrefixes": ["tv"],
        "catalogs": [{"id": "tv-all", "type": "channel", "name": "All Channels"}],
    }


# ==================== Transport Fixtures ====================


@pytest.fixture
def mock_transport() -> MockJsonTransport:
    """Empty in-memory transport; tests register routes with ``add``."""
    return MockJsonTransport()


@pytest.fixture
def demo_transport(movies_manifest, series_manifest) -> MockJsonTransport:
    """Transport serving the two-upstream demo configuration."""
    return MockJsonTransport({
        ("GET", f"{BASE1}/manifest.json"): movies_manifest,
        ("GET", f"{BASE2}/manifest.json"): series_manifest,
        ("POST", f"{BASE1}/catalog"): {"metas": [{"id": "tt1"}]},
        ("POST", f"{BASE2}/catalog"): {"metas": [{"id": "tt2"}]},
        ("POST", f"{BASE1}/stream"): {"streams": [{"url": "https://cdn1.example.com/tt1.mp4"}]},
        ("POST", f"{BASE2}/stream"): {"streams": [{"url": "https://cdn2.example.com/tt1.mp4"}]},
    })


# ==================== Store / Engine Fixtures ====================


@pytest.fixture
def make_holder():
    """Build a StoreHolder from ``{config_name: [UpstreamBinding, ...]}``."""

    def _make(configs: dict[str, list[UpstreamBinding]]) -> StoreHolder:
        configurations = [
            Configuration(
                name=name,
                bases=tuple(b.base for b in bindings),
                bindings=tuple(bindings),
                manifest=merge_manifests(name, bindings),
            )
            for name, bindings in configs.items()
        ]
        return StoreHolder(ConfigurationStore(configurations))

    return _make


@pytest.fixture
def make_engine(make_holder):
    """Build a DispatchEngine over the given bindings and transport."""

    def _make(
        configs: dict[str, list[UpstreamBinding]],
        transport: MockJsonTransport,
        policy: DispatchPolicy | None = None,
    ) -> DispatchEngine:
        return DispatchEngine(make_holder(configs), transport, policy=policy)

    return _make


@pytest.fixture
def make_legacy(make_engine):
    """Build a LegacyPathAdapter over the given bindings and transport."""

    def _make(configs, transport) -> LegacyPathAdapter:
        return LegacyPathAdapter(make_engine(configs, transport))

    return _make


@pytest.fixture
def demo_bindings(movies_manifest, series_manifest) -> list[UpstreamBinding]:
    return [
        UpstreamBinding(base=BASE1, manifest=movies_manifest),
        UpstreamBinding(base=BASE2, manifest=series_manifest),
    ]


# ==================== Config Source Fixtures ====================


@pytest.fixture
def configs_dir(tmp_path: Path) -> Path:
    """Temporary configuration sources directory."""
    path = tmp_path / "configs"
    path.mkdir()
    return path


@pytest.fixture
def write_config(configs_dir: Path):
    """Write a configuration source file into the temporary configs dir."""

    def _write(filename: str, content: str) -> Path:
        path = configs_dir / filename
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def build_config():
    """Run the full startup path for one source against a transport."""

    async def _build(source: ConfigSource, transport: MockJsonTransport):
        return await build_configuration(source, ManifestFetcher(transport))

    return _build
