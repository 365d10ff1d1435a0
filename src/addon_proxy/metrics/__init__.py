"""
Metrics collection module for the addon proxy.

Provides pluggable metrics interfaces for upstream fan-out monitoring.
Supports Prometheus, with a zero-overhead default.

Example:
    >>> from addon_proxy.metrics import NoOpMetrics, PrometheusMetrics
    >>>
    >>> metrics = NoOpMetrics()
    >>> metrics.increment('proxy.upstream.calls.total')  # No-op
    >>>
    >>> metrics = PrometheusMetrics()
    >>> metrics.increment('proxy.upstream.calls.total', labels={'resource': 'stream'})
"""

from .base import MetricsCollector, NoOpMetrics
from .constants import MetricLabels, ProxyMetrics
from .prometheus import PrometheusMetrics

__all__ = [
    "MetricsCollector",
    "NoOpMetrics",
    "PrometheusMetrics",
    "ProxyMetrics",
    "MetricLabels",
]
