"""Proxy event type constants."""

from enum import Enum


class ProxyEvents(str, Enum):
    """Event type constants for structured logging."""

    # Configuration source events
    CONFIG_SOURCE_LOADED = "proxy.config.loaded"
    CONFIG_SOURCE_FAILED = "proxy.config.failed"

    # Initialization events
    CONFIG_INIT_STARTED = "proxy.init.started"
    CONFIG_INIT_SUCCESS = "proxy.init.success"
    CONFIG_INIT_EMPTY = "proxy.init.empty"
    ALL_CONFIGS_READY = "proxy.init.all_ready"
    STORE_SWAPPED = "proxy.store.swapped"

    # Manifest events
    MANIFEST_FETCH_SUCCESS = "proxy.manifest.fetch.success"
    MANIFEST_FETCH_FAILED = "proxy.manifest.fetch.failed"

    # Dispatch events
    DISPATCH_STARTED = "proxy.dispatch.started"
    DISPATCH_COMPLETED = "proxy.dispatch.completed"
    DISPATCH_NO_TARGETS = "proxy.dispatch.no_targets"
    UPSTREAM_CALL_FAILED = "proxy.dispatch.upstream.failed"

    # Legacy adapter events
    LEGACY_ROUTE_UNKNOWN = "proxy.legacy.unknown_route"

    # Server events
    SERVER_STARTING = "proxy.server.starting"
    SERVER_STOPPED = "proxy.server.stopped"


__all__ = ["ProxyEvents"]
