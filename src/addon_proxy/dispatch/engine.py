"""
Dispatch Engine

Fans a resource request out to the eligible upstreams of a configuration and
merges their result arrays.

Merge order: calls run concurrently and are all awaited; results are
concatenated in binding order (the configured upstream order). Results are
never de-duplicated.
"""

import time
from typing import Any, Awaitable, Callable, Sequence

from ..concurrency import gather_settled
from ..events import ProxyEvents
from ..log_config import RequestContext, get_context_logger
from ..metrics import MetricLabels, MetricsCollector, NoOpMetrics, ProxyMetrics
from ..models import UpstreamBinding
from ..registry import join_url
from ..routing import (
    RESOURCE_SPECS,
    DispatchMode,
    DispatchPolicy,
    ResourceKind,
    ResourceSpec,
    select_targets,
)
from ..store import StoreHolder
from ..upstream import JsonTransport

UpstreamCall = Callable[[UpstreamBinding], Awaitable[Any]]


def extract_items(body: Any, key: str) -> list[Any]:
    """Return the array under ``key`` in ``body``, or [] if there is none."""
    if isinstance(body, dict):
        items = body.get(key)
        if isinstance(items, list):
            return items
    return []


class DispatchEngine:
    """
    Per-request fan-out/fan-in over the bound upstreams of a configuration.

    The engine reads the current store from ``holder`` once per request and
    never mutates it. Upstream failures are logged and contribute nothing;
    they are never raised to the caller.

    Examples:
        >>> engine = DispatchEngine(holder, transport)
        >>> await engine.dispatch("demo", ResourceKind.CATALOG, {"id": "top", "type": "movie"})
        {'metas': [...]}
    """

    def __init__(
        self,
        holder: StoreHolder,
        transport: JsonTransport,
        policy: DispatchPolicy | None = None,
        metrics: MetricsCollector | None = None,
    ):
        """
        Args:
            holder: Holder of the current configuration store
            transport: JSON transport used for upstream calls
            policy: Dispatch mode per content type (full merge everywhere if None)
            metrics: Metrics collector (no-op if None)
        """
        self.logger = get_context_logger("dispatch_engine")
        self.holder = holder
        self.transport = transport
        self.policy = policy or DispatchPolicy()
        self.metrics = metrics or NoOpMetrics()

    async def dispatch(
        self,
        config_name: str,
        kind: ResourceKind,
        payload: Any,
    ) -> dict[str, list[Any]]:
        """
        Dispatch one resource request.

        Args:
            config_name: Configuration name from the request path
            kind: Requested resource kind
            payload: Request body, forwarded verbatim to every target

        Returns:
            ``{<resource key>: [...]}``, empty when the configuration is
            unknown, uninitialized or no upstream is eligible
        """
        spec = RESOURCE_SPECS[kind]
        bindings = self.holder.store.bindings(config_name)
        if not bindings:
            return {spec.key: []}

        request = payload if isinstance(payload, dict) else {}
        item_id = request.get("id")
        content_type = request.get("type")

        with RequestContext(config=config_name, resource=kind.value):
            targets = select_targets(bindings, kind, item_id, content_type)
            mode = self.policy.mode_for(kind, content_type)

            async def call(binding: UpstreamBinding) -> Any:
                return await self.transport.post_json(
                    join_url(binding.base, spec.endpoint), payload
                )

            items = await self.fan_out(config_name, spec, targets, call, mode)

        return {spec.key: items}

    async def fan_out(
        self,
        config_name: str,
        spec: ResourceSpec,
        targets: Sequence[UpstreamBinding],
        call: UpstreamCall,
        mode: DispatchMode = DispatchMode.FULL_MERGE,
    ) -> list[Any]:
        """
        Call ``targets`` and merge the arrays found under ``spec.key``.

        Args:
            config_name: Configuration name, used in diagnostics
            spec: Resource spec of the request
            targets: Eligible upstreams in binding order
            call: Coroutine function performing the request for one upstream
            mode: FULL_MERGE or FIRST_MATCH

        Returns:
            Merged result array
        """
        if not targets:
            self.logger.debug(ProxyEvents.DISPATCH_NO_TARGETS, config=config_name)
            return []

        self.logger.debug(
            ProxyEvents.DISPATCH_STARTED,
            config=config_name,
            targets=len(targets),
            mode=mode.value,
        )

        start_time = time.time()
        if mode is DispatchMode.FIRST_MATCH:
            items = await self._first_match(config_name, spec, targets, call)
        else:
            items = await self._full_merge(config_name, spec, targets, call)

        elapsed_ms = (time.time() - start_time) * 1000
        self.metrics.timing(
            ProxyMetrics.DISPATCH_DURATION_MS,
            elapsed_ms,
            labels={MetricLabels.RESOURCE: spec.kind.value, MetricLabels.MODE: mode.value},
        )
        self.logger.debug(
            ProxyEvents.DISPATCH_COMPLETED,
            config=config_name,
            items=len(items),
            elapsed_ms=elapsed_ms,
        )
        return items

    async def _full_merge(
        self,
        config_name: str,
        spec: ResourceSpec,
        targets: Sequence[UpstreamBinding],
        call: UpstreamCall,
    ) -> list[Any]:
        outcomes = await gather_settled(call(binding) for binding in targets)

        combined: list[Any] = []
        for binding, outcome in zip(targets, outcomes):
            self._count_call(spec, failed=not outcome.ok)
            if not outcome.ok:
                self._log_failure(config_name, spec, binding, outcome.error)
                continue
            combined.extend(extract_items(outcome.value, spec.key))
        return combined

    async def _first_match(
        self,
        config_name: str,
        spec: ResourceSpec,
        targets: Sequence[UpstreamBinding],
        call: UpstreamCall,
    ) -> list[Any]:
        for binding in targets:
            try:
                body = await call(binding)
            except Exception as e:
                self._count_call(spec, failed=True)
                self._log_failure(config_name, spec, binding, e)
                continue

            self._count_call(spec, failed=False)
            items = extract_items(body, spec.key)
            if items:
                return list(items)
        return []

    def _count_call(self, spec: ResourceSpec, failed: bool) -> None:
        labels = {MetricLabels.RESOURCE: spec.kind.value}
        self.metrics.increment(ProxyMetrics.UPSTREAM_CALLS_TOTAL, labels=labels)
        if failed:
            self.metrics.increment(ProxyMetrics.UPSTREAM_CALLS_FAILURE, labels=labels)

    def _log_failure(
        self,
        config_name: str,
        spec: ResourceSpec,
        binding: UpstreamBinding,
        error: BaseException | None,
    ) -> None:
        self.logger.warning(
            ProxyEvents.UPSTREAM_CALL_FAILED,
            config=config_name,
            endpoint=spec.endpoint,
            base=binding.base,
            error=str(error),
            error_type=type(error).__name__,
        )


__all__ = ["DispatchEngine", "extract_items"]
