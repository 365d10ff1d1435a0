"""
Addon Proxy Package

Aggregates several content-catalog addons behind one endpoint per named
configuration.

This package provides:
- ProxyService: startup initialization, reload and request dispatch
- ManifestFetcher / merge_manifests: manifest discovery and synthesis
- DispatchEngine / LegacyPathAdapter: per-request fan-out and merge
- ConfigurationStore / StoreHolder: immutable, atomically swapped state
- create_app: FastAPI application exposing the HTTP surface

Usage:
    from addon_proxy import ProxyService, ResourceKind

    service = ProxyService()
    await service.start()
    result = await service.dispatch("demo", ResourceKind.CATALOG, {"id": "top"})
"""

from .app import create_app
from .concurrency import Settled, gather_settled
from .dispatch import DispatchEngine, LegacyPathAdapter
from .exceptions import (
    ConfigNotFoundError,
    ConfigSourceError,
    LegacyRouteNotFoundError,
    ProxyException,
    UpstreamError,
)
from .manifest import ManifestFetcher, merge_manifests
from .models import (
    CHANNEL_TYPE,
    ConfigSource,
    Configuration,
    SynthesizedManifest,
    UpstreamBinding,
)
from .registry import normalize_bases
from .routing import DispatchMode, DispatchPolicy, ResourceKind
from .service import ProxyService
from .store import ConfigurationStore, StoreHolder
from .upstream import HttpJsonTransport, JsonTransport, MockJsonTransport

__version__ = "1.0.0"

__all__ = [
    # Service and HTTP surface
    "ProxyService",
    "create_app",
    # Startup path
    "normalize_bases",
    "ManifestFetcher",
    "merge_manifests",
    "ConfigurationStore",
    "StoreHolder",
    # Request path
    "DispatchEngine",
    "LegacyPathAdapter",
    "DispatchMode",
    "DispatchPolicy",
    "ResourceKind",
    # Data model
    "CHANNEL_TYPE",
    "ConfigSource",
    "Configuration",
    "SynthesizedManifest",
    "UpstreamBinding",
    # Transports
    "JsonTransport",
    "HttpJsonTransport",
    "MockJsonTransport",
    # Concurrency
    "Settled",
    "gather_settled",
    # Errors
    "ProxyException",
    "ConfigNotFoundError",
    "ConfigSourceError",
    "LegacyRouteNotFoundError",
    "UpstreamError",
    # Metadata
    "__version__",
]
