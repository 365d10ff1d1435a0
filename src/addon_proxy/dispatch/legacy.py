"""
Legacy Path Adapter

Serves ``GET /{config}/{path}`` for clients of the older protocol revision.
The path is classified by prefix, targets are selected with the same rules as
the POST endpoints, and the full path is forwarded as a GET to each target.
"""

from typing import Any

from ..events import ProxyEvents
from ..exceptions import ConfigNotFoundError, LegacyRouteNotFoundError
from ..log_config import RequestContext, get_context_logger
from ..models import UpstreamBinding
from ..registry import join_url
from ..routing import RESOURCE_SPECS, classify_legacy_path, select_targets
from .engine import DispatchEngine


class LegacyPathAdapter:
    """
    Thin facade over ``DispatchEngine`` for legacy GET paths.

    Examples:
        >>> adapter = LegacyPathAdapter(engine)
        >>> await adapter.dispatch("demo", "catalog/movie/movies-top.json")
        {'metas': [...]}
    """

    def __init__(self, engine: DispatchEngine):
        self.logger = get_context_logger("legacy_path_adapter")
        self.engine = engine

    async def dispatch(self, config_name: str, path: str) -> dict[str, list[Any]]:
        """
        Dispatch a legacy path.

        Raises:
            ConfigNotFoundError: If the configuration is unknown or has no
                bound upstreams
            LegacyRouteNotFoundError: If the path has no known prefix
        """
        bindings = self.engine.holder.store.bindings(config_name)
        if not bindings:
            raise ConfigNotFoundError(config_name)

        route = classify_legacy_path(path)
        if route is None:
            self.logger.info(ProxyEvents.LEGACY_ROUTE_UNKNOWN, config=config_name, path=path)
            raise LegacyRouteNotFoundError(path)

        spec = RESOURCE_SPECS[route.kind]
        with RequestContext(config=config_name, resource=route.kind.value):
            targets = select_targets(bindings, route.kind, route.item_id, route.content_type)

            async def call(binding: UpstreamBinding) -> Any:
                return await self.engine.transport.get_json(join_url(binding.base, route.path))

            items = await self.engine.fan_out(
                config_name,
                spec,
                targets,
                call,
                self.engine.policy.mode_for(route.kind, route.content_type),
            )

        return {spec.key: items}


__all__ = ["LegacyPathAdapter"]
