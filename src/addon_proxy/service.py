"""
Proxy Service

Wires settings, transport, store, dispatch engine and legacy adapter into the
single object the HTTP layer talks to.
"""

from typing import Any, Iterable

from prometheus_client import CollectorRegistry

from .dispatch import DispatchEngine, LegacyPathAdapter
from .http_client_manager import close_http_clients, get_main_http_client
from .log_config import get_context_logger
from .manifest import ManifestFetcher
from .metrics import MetricsCollector, NoOpMetrics, PrometheusMetrics
from .models import ConfigSource
from .routing import DispatchPolicy, ResourceKind
from .settings import Settings, get_settings
from .sources import load_config_sources
from .store import ConfigurationStore, StoreHolder
from .upstream import HttpJsonTransport, JsonTransport


class ProxyService:
    """
    Aggregation proxy facade.

    Attributes:
        settings: Application settings
        transport: JSON transport used for every upstream call
        metrics: Metrics collector
        holder: Holder of the current configuration store
        engine: Dispatch engine for POST resource requests
        legacy: Adapter for legacy GET paths

    Examples:
        >>> service = ProxyService(settings)
        >>> await service.start()
        >>> service.manifest("demo")["catalogs"]
        [...]
        >>> await service.dispatch("demo", ResourceKind.STREAM, {"id": "tt1", "type": "movie"})
        {'streams': [...]}
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: JsonTransport | None = None,
        metrics: MetricsCollector | None = None,
    ):
        self.logger = get_context_logger("proxy_service")
        self.settings = settings or get_settings()

        self._owns_transport = transport is None
        if transport is None:
            transport = HttpJsonTransport(
                get_main_http_client(**self.settings.http_client_kwargs()),
                headers=self.settings.http.default_headers,
            )
        self.transport = transport

        if metrics is None:
            metrics = (
                PrometheusMetrics(registry=CollectorRegistry())
                if self.settings.metrics_enabled
                else NoOpMetrics()
            )
        self.metrics = metrics

        self.holder = StoreHolder()
        self.fetcher = ManifestFetcher(
            self.transport,
            timeout=self.settings.http.manifest_timeout,
            metrics=self.metrics,
        )
        self.engine = DispatchEngine(
            self.holder,
            self.transport,
            policy=DispatchPolicy.from_types(self.settings.dispatch.stream_first_match_types),
            metrics=self.metrics,
        )
        self.legacy = LegacyPathAdapter(self.engine)

    @property
    def store(self) -> ConfigurationStore:
        return self.holder.store

    @property
    def config_names(self) -> list[str]:
        return list(self.holder.store)

    async def start(self) -> ConfigurationStore:
        """Load configuration sources from disk and initialize them all."""
        return await self.initialize(load_config_sources(self.settings.configs_dir))

    async def initialize(self, sources: Iterable[ConfigSource]) -> ConfigurationStore:
        """Build a store from ``sources`` and swap it in."""
        return await self.holder.reload(sources, self.fetcher)

    async def reload(self) -> ConfigurationStore:
        """Re-run initialization for every configuration source on disk."""
        return await self.start()

    def manifest(self, config_name: str) -> dict[str, Any]:
        """
        Synthesized manifest for ``config_name`` in wire format.

        Raises:
            ConfigNotFoundError: If the configuration is unknown or uninitialized
        """
        return self.holder.store.manifest(config_name).to_dict()

    async def dispatch(
        self, config_name: str, kind: ResourceKind, payload: Any
    ) -> dict[str, list[Any]]:
        return await self.engine.dispatch(config_name, kind, payload)

    async def dispatch_legacy(self, config_name: str, path: str) -> dict[str, list[Any]]:
        return await self.legacy.dispatch(config_name, path)

    async def close(self) -> None:
        """Release HTTP clients created by this service."""
        if self._owns_transport:
            await close_http_clients()


__all__ = ["ProxyService"]
