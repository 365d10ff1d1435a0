"""HTTP client manager for connection pooling and lifecycle management."""

from typing import Any

import httpx


# Global HTTP client instances (keyed by config tuple)
_main_http_clients: dict[tuple[Any, ...], httpx.AsyncClient] = {}


def _client_cache_key(cfg: dict[str, Any]) -> tuple[Any, ...]:
    """Build a cache key tuple from HTTP configuration."""

    return (
        cfg.get("verify"),
        cfg.get("timeout"),
        cfg.get("max_connections"),
        cfg.get("max_keepalive_connections"),
        cfg.get("keepalive_expiry"),
        cfg.get("follow_redirects"),
    )


def get_main_http_client(
    *,
    ssl_verify: bool | str = True,
    timeout: float = 30.0,
    max_connections: int = 100,
    max_keepalive_connections: int = 20,
    keepalive_expiry: float = 5.0,
    follow_redirects: bool = True,
) -> httpx.AsyncClient:
    """Get the shared HTTP client for upstream addon requests.

    Clients are cached per configuration so that every caller with the same
    settings shares one connection pool.
    """

    cfg = {
        "verify": ssl_verify,
        "timeout": timeout,
        "max_connections": max_connections,
        "max_keepalive_connections": max_keepalive_connections,
        "keepalive_expiry": keepalive_expiry,
        "follow_redirects": follow_redirects,
    }

    key = _client_cache_key(cfg)
    client = _main_http_clients.get(key)
    if client is None or client.is_closed:
        client = httpx.AsyncClient(
            timeout=cfg["timeout"],
            limits=httpx.Limits(
                max_keepalive_connections=cfg["max_keepalive_connections"],
                max_connections=cfg["max_connections"],
                keepalive_expiry=cfg["keepalive_expiry"],
            ),
            verify=cfg["verify"],
            follow_redirects=cfg["follow_redirects"],
        )
        _main_http_clients[key] = client
    return client


async def close_http_clients() -> None:
    """Close every cached HTTP client."""
    clients = list(_main_http_clients.values())
    _main_http_clients.clear()
    for client in clients:
        await client.aclose()


__all__ = [
    "get_main_http_client",
    "close_http_clients",
]
