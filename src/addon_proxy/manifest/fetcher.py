"""
Manifest Fetcher

Retrieves ``<base>/manifest.json`` for every upstream of a configuration.
"""

import time
from typing import Any, Sequence

from ..concurrency import gather_settled
from ..events import ProxyEvents
from ..exceptions import UpstreamResponseError
from ..log_config import get_context_logger
from ..metrics import MetricLabels, MetricsCollector, NoOpMetrics, ProxyMetrics
from ..models import UpstreamBinding
from ..registry import join_url
from ..upstream import JsonTransport


class ManifestFetcher:
    """
    Concurrent, failure-tolerant manifest discovery.

    All manifests of one configuration are requested at once and every call
    is awaited; a failing upstream never aborts the others. Failed upstreams
    are logged and left out of the result.

    Examples:
        >>> fetcher = ManifestFetcher(transport, timeout=10.0)
        >>> bindings = await fetcher.fetch_bindings("demo", ["https://a.example.com"])
    """

    def __init__(
        self,
        transport: JsonTransport,
        timeout: float | None = None,
        metrics: MetricsCollector | None = None,
    ):
        """
        Args:
            transport: JSON transport used for the GET requests
            timeout: Per-manifest timeout in seconds (transport default if None)
            metrics: Metrics collector (no-op if None)
        """
        self.logger = get_context_logger("manifest_fetcher")
        self.transport = transport
        self.timeout = timeout
        self.metrics = metrics or NoOpMetrics()

    async def fetch_bindings(
        self, config_name: str, bases: Sequence[str]
    ) -> list[UpstreamBinding]:
        """
        Fetch manifests for ``bases`` and bind the ones that succeeded.

        Args:
            config_name: Configuration name, used in diagnostics
            bases: Canonical upstream base URLs

        Returns:
            Bindings in the same order as ``bases``, failed upstreams omitted
        """
        start_time = time.time()
        outcomes = await gather_settled(self._fetch_manifest(base) for base in bases)

        bindings: list[UpstreamBinding] = []
        labels = {MetricLabels.CONFIG: config_name}
        for base, outcome in zip(bases, outcomes):
            self.metrics.increment(ProxyMetrics.MANIFEST_FETCH_TOTAL, labels=labels)
            if outcome.ok:
                bindings.append(UpstreamBinding(base=base, manifest=outcome.value))
                continue

            self.metrics.increment(ProxyMetrics.MANIFEST_FETCH_FAILURE, labels=labels)
            self.logger.warning(
                ProxyEvents.MANIFEST_FETCH_FAILED,
                config=config_name,
                base=base,
                error=str(outcome.error),
                error_type=type(outcome.error).__name__,
            )

        self.logger.debug(
            ProxyEvents.MANIFEST_FETCH_SUCCESS,
            config=config_name,
            bound=len(bindings),
            requested=len(bases),
            elapsed_time=time.time() - start_time,
        )
        return bindings

    async def _fetch_manifest(self, base: str) -> dict[str, Any]:
        url = join_url(base, "manifest.json")
        manifest = await self.transport.get_json(url, timeout=self.timeout)
        if not isinstance(manifest, dict):
            raise UpstreamResponseError("Manifest is not a JSON object", url=url)
        return manifest


__all__ = ["ManifestFetcher"]
