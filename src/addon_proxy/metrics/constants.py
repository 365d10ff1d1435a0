"""Metric name constants for the addon proxy."""


class ProxyMetrics:
    """Metric name constants for proxy operations."""

    # Upstream call counters
    UPSTREAM_CALLS_TOTAL = "proxy.upstream.calls.total"
    UPSTREAM_CALLS_FAILURE = "proxy.upstream.calls.failure"

    # Manifest discovery
    MANIFEST_FETCH_TOTAL = "proxy.manifest.fetch.total"
    MANIFEST_FETCH_FAILURE = "proxy.manifest.fetch.failure"

    # Fan-out latency
    DISPATCH_DURATION_MS = "proxy.dispatch.duration.milliseconds"


class MetricLabels:
    """Standard label names for metrics."""

    RESOURCE = "resource"  # catalog, meta, stream, subtitles
    CONFIG = "config"  # configuration name
    MODE = "mode"  # full_merge, first_match


__all__ = ["ProxyMetrics", "MetricLabels"]
