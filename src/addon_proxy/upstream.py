"""
Upstream Transport Protocol and Implementations

Defines the "fetch JSON over HTTP" capability the aggregation core is given.
The manifest fetcher and the dispatch engine only depend on ``JsonTransport``;
the concrete transport decides how bytes move.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Protocol, Union, runtime_checkable

import httpx

from .exceptions import (
    UpstreamError,
    UpstreamHTTPError,
    UpstreamResponseError,
    UpstreamTimeoutError,
)
from .log_config import get_context_logger


@runtime_checkable
class JsonTransport(Protocol):
    """
    Protocol for upstream JSON transports.

    Implementations raise an ``UpstreamError`` subclass on any failure:
    connection problems, non-2xx status, timeout or an unparseable body.

    Examples:
        >>> class MyTransport:
        ...     async def get_json(self, url, timeout=None):
        ...         return {"id": "org.example"}
        ...     async def post_json(self, url, payload, timeout=None):
        ...         return {"metas": []}
    """

    async def get_json(self, url: str, timeout: Union[float, None] = None) -> Any:
        """GET ``url`` and return the decoded JSON body."""
        ...

    async def post_json(
        self,
        url: str,
        payload: Any,
        timeout: Union[float, None] = None,
    ) -> Any:
        """POST ``payload`` as JSON to ``url`` and return the decoded JSON body."""
        ...


class BaseTransport(ABC):
    """Base class for transport implementations, provides a logger."""

    def __init__(self):
        self.logger = get_context_logger(f"upstream.{self.__class__.__name__}")

    @abstractmethod
    async def get_json(self, url: str, timeout: Union[float, None] = None) -> Any:
        pass

    @abstractmethod
    async def post_json(
        self,
        url: str,
        payload: Any,
        timeout: Union[float, None] = None,
    ) -> Any:
        pass


class HttpJsonTransport(BaseTransport):
    """
    httpx-based JSON transport.

    Attributes:
        headers: Headers sent with every request
        timeout: Default request timeout in seconds (None keeps the client's)

    Examples:
        >>> transport = HttpJsonTransport(httpx.AsyncClient())
        >>> manifest = await transport.get_json("https://addon.example.com/manifest.json")
    """

    def __init__(
        self,
        http_client: Union[httpx.AsyncClient, None] = None,
        headers: Union[dict[str, str], None] = None,
        timeout: Union[float, None] = None,
    ):
        """
        Args:
            http_client: HTTP client to use (the shared main client if None)
            headers: Headers sent with every request
            timeout: Default request timeout in seconds
        """
        super().__init__()
        self._http_client = http_client
        self.headers = headers or {}
        self.timeout = timeout

    @property
    def http_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            from .http_client_manager import get_main_http_client

            self._http_client = get_main_http_client()
        return self._http_client

    async def get_json(self, url: str, timeout: Union[float, None] = None) -> Any:
        return await self._request("GET", url, timeout=timeout)

    async def post_json(
        self,
        url: str,
        payload: Any,
        timeout: Union[float, None] = None,
    ) -> Any:
        return await self._request("POST", url, payload=payload, timeout=timeout)

    async def _request(
        self,
        method: str,
        url: str,
        payload: Any = None,
        timeout: Union[float, None] = None,
    ) -> Any:
        kwargs: dict[str, Any] = {"headers": dict(self.headers)}
        if method == "POST":
            kwargs["json"] = payload
            kwargs["headers"]["Content-Type"] = "application/json"
        effective_timeout = timeout if timeout is not None else self.timeout
        if effective_timeout is not None:
            kwargs["timeout"] = effective_timeout

        self.logger.debug("Calling upstream", method=method, url=url)

        try:
            response = await self.http_client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError(
                f"Timeout calling upstream: {e}", url=url, timeout=effective_timeout
            ) from e
        except httpx.HTTPStatusError as e:
            raise UpstreamHTTPError(
                f"HTTP {e.response.status_code}",
                url=url,
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamHTTPError(
                f"{type(e).__name__}: {e}", url=url
            ) from e

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamResponseError(
                "Upstream body is not valid JSON", url=url
            ) from e


class MockJsonTransport(BaseTransport):
    """
    In-memory JSON transport for tests and local development.

    Responses are keyed by ``(method, url)``. A value that is an exception
    instance is raised instead of returned. Unknown routes raise
    ``UpstreamHTTPError`` with status 404.

    Attributes:
        routes: Mapping of (method, url) to response body or exception
        delays: Optional per-url simulated delay in seconds
        calls: Recorded (method, url, payload) tuples, in call order

    Examples:
        >>> transport = MockJsonTransport({
        ...     ("GET", "https://a.example.com/manifest.json"): {"catalogs": []},
        ...     ("POST", "https://a.example.com/stream"): {"streams": [{"url": "x"}]},
        ... })
    """

    def __init__(
        self,
        routes: Union[dict[tuple[str, str], Any], None] = None,
        delays: Union[dict[str, float], None] = None,
    ):
        super().__init__()
        self.routes = dict(routes or {})
        self.delays = dict(delays or {})
        self.calls: list[tuple[str, str, Any]] = []

    def add(self, method: str, url: str, body: Any) -> None:
        self.routes[(method.upper(), url)] = body

    def called_urls(self, method: Union[str, None] = None) -> list[str]:
        return [url for m, url, _ in self.calls if method is None or m == method]

    async def get_json(self, url: str, timeout: Union[float, None] = None) -> Any:
        return await self._respond("GET", url, None)

    async def post_json(
        self,
        url: str,
        payload: Any,
        timeout: Union[float, None] = None,
    ) -> Any:
        return await self._respond("POST", url, payload)

    async def _respond(self, method: str, url: str, payload: Any) -> Any:
        self.calls.append((method, url, payload))

        delay = self.delays.get(url, 0.0)
        if delay > 0:
            await asyncio.sleep(delay)

        if (method, url) not in self.routes:
            raise UpstreamHTTPError("HTTP 404", url=url, status_code=404)

        body = self.routes[(method, url)]
        if isinstance(body, Exception):
            if isinstance(body, UpstreamError):
                raise body
            raise UpstreamHTTPError(f"{type(body).__name__}: {body}", url=url) from body
        return body


__all__ = [
    "JsonTransport",
    "BaseTransport",
    "HttpJsonTransport",
    "MockJsonTransport",
]
