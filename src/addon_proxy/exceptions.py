"""Addon proxy exception hierarchy.

Provides specific exception types for configuration loading, upstream
transport and request routing. None of these are fatal to the process: the
service layer catches them at well-defined seams and degrades to smaller
results or a 404.

Exception Hierarchy:
    ProxyException (base)
    ├── ConfigError
    │   ├── ConfigSourceError
    │   └── ConfigNotFoundError
    ├── UpstreamError
    │   ├── UpstreamHTTPError
    │   ├── UpstreamTimeoutError
    │   └── UpstreamResponseError
    └── LegacyRouteNotFoundError
"""

from typing import Optional


class ProxyException(Exception):
    """Base exception for all addon proxy errors.

    All proxy-specific exceptions inherit from this class to allow
    catching them with a single except clause.
    """

    def __init__(self, message: str, context: Optional[dict] = None):
        """Initialize proxy exception.

        Args:
            message: Error message
            context: Optional context dictionary for debugging
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return string representation with context."""
        if self.context:
            context_str = "; ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


# Configuration Errors

class ConfigError(ProxyException):
    """Base exception for configuration problems."""

    pass


class ConfigSourceError(ConfigError):
    """Raised when a configuration source cannot be read or parsed.

    Attributes:
        source: Path or identifier of the failing source
    """

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        context: Optional[dict] = None,
    ):
        if context is None:
            context = {}
        if source:
            context["source"] = source
        super().__init__(message, context)
        self.source = source


class ConfigNotFoundError(ConfigError):
    """Raised when a request names an unknown or uninitialized configuration.

    Attributes:
        config_name: The requested configuration name
    """

    def __init__(self, config_name: str, context: Optional[dict] = None):
        if context is None:
            context = {}
        context["config"] = config_name
        super().__init__("Config not found", context)
        self.config_name = config_name


# Upstream Errors

class UpstreamError(ProxyException):
    """Base exception for failed calls to an upstream addon.

    Attributes:
        url: The URL that was requested
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        context: Optional[dict] = None,
    ):
        context = dict(context or {})
        if url:
            context = {"url": url, **context}
        super().__init__(message, context)
        self.url = url


class UpstreamHTTPError(UpstreamError):
    """Raised when an upstream answers with a non-2xx status or is unreachable.

    Attributes:
        status_code: HTTP status code, None for connection-level failures
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        context: Optional[dict] = None,
    ):
        if context is None:
            context = {}
        if status_code is not None:
            context["status_code"] = status_code
        super().__init__(message, url, context)
        self.status_code = status_code


class UpstreamTimeoutError(UpstreamError):
    """Raised when an upstream call exceeds the transport timeout."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        context: Optional[dict] = None,
    ):
        if context is None:
            context = {}
        if timeout is not None:
            context["timeout"] = timeout
        super().__init__(message, url, context)
        self.timeout = timeout


class UpstreamResponseError(UpstreamError):
    """Raised when an upstream body is not valid JSON."""

    pass


# Routing Errors

class LegacyRouteNotFoundError(ProxyException):
    """Raised when a legacy path does not start with a known resource prefix.

    Attributes:
        path: The unrecognized trailing path
    """

    def __init__(self, path: str, context: Optional[dict] = None):
        if context is None:
            context = {}
        context["path"] = path
        super().__init__("Not found", context)
        self.path = path


__all__ = [
    "ProxyException",
    "ConfigError",
    "ConfigSourceError",
    "ConfigNotFoundError",
    "UpstreamError",
    "UpstreamHTTPError",
    "UpstreamTimeoutError",
    "UpstreamResponseError",
    "LegacyRouteNotFoundError",
]
