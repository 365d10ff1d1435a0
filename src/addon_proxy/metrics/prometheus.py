"""
Prometheus metrics collector implementation.

Integrates with prometheus_client for exporting proxy metrics.
"""

from typing import Any

from prometheus_client import REGISTRY, Counter, Histogram, generate_latest

from .base import MetricsCollector


class PrometheusMetrics(MetricsCollector):
    """
    Prometheus metrics collector.

    Lazily creates one Counter or Histogram per metric name. Label names are
    fixed by the first call for a given metric.

    Example:
        >>> metrics = PrometheusMetrics()
        >>> metrics.increment('proxy.upstream.calls.total', labels={'resource': 'meta'})
        >>> metrics.histogram('proxy.dispatch.duration.milliseconds', 42.0)
    """

    def __init__(self, registry: Any | None = None) -> None:
        """
        Args:
            registry: Optional CollectorRegistry; the global REGISTRY if None.
        """
        self._registry = registry or REGISTRY
        self._counters: dict[str, Counter] = {}
        self._histograms: dict[str, Histogram] = {}

    @staticmethod
    def _sanitize_metric_name(metric: str) -> str:
        return metric.replace(".", "_").replace("-", "_")

    def increment(
        self, metric: str, value: int = 1, labels: dict[str, str] | None = None
    ) -> None:
        metric_name = self._sanitize_metric_name(metric)
        labels = labels or {}

        if metric_name not in self._counters:
            self._counters[metric_name] = Counter(
                metric_name,
                f"Counter for {metric}",
                list(labels.keys()),
                registry=self._registry,
            )

        if labels:
            self._counters[metric_name].labels(**labels).inc(value)
        else:
            self._counters[metric_name].inc(value)

    def histogram(
        self, metric: str, value: float, labels: dict[str, str] | None = None
    ) -> None:
        metric_name = self._sanitize_metric_name(metric)
        labels = labels or {}

        if metric_name not in self._histograms:
            self._histograms[metric_name] = Histogram(
                metric_name,
                f"Histogram for {metric}",
                list(labels.keys()),
                registry=self._registry,
            )

        if labels:
            self._histograms[metric_name].labels(**labels).observe(value)
        else:
            self._histograms[metric_name].observe(value)

    def render(self) -> bytes:
        """Render the registry in the Prometheus text exposition format."""
        return generate_latest(self._registry)


__all__ = ["PrometheusMetrics"]
