"""
HTTP surface of the aggregation proxy.

Routes (per configuration name ``{config}``):
    GET  /{config}/manifest.json
    POST /{config}/catalog | meta | stream | subtitles
    GET  /{config}/{path}          legacy protocol fallback
    GET  /health
    GET  /metrics                  when metrics are enabled
"""

import json
from contextlib import asynccontextmanager
from typing import Any

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse, Response

from .events import ProxyEvents
from .exceptions import ConfigNotFoundError, LegacyRouteNotFoundError
from .log_config import configure_logging, get_context_logger
from .metrics import PrometheusMetrics
from .routing import ResourceKind
from .service import ProxyService
from .settings import Settings, get_settings

logger = get_context_logger("addon_proxy.app")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
    "Access-Control-Allow-Headers": "Origin, X-Requested-With, Content-Type, Accept",
}

router = APIRouter()


def _service(request: Request) -> ProxyService:
    return request.app.state.service


async def _read_payload(request: Request) -> Any:
    """Decode the JSON request body; an empty or invalid body counts as {}."""
    body = await request.body()
    if not body:
        return {}
    try:
        return json.loads(body)
    except ValueError:
        return {}


@router.get("/health")
async def health(request: Request) -> dict[str, Any]:
    return {"status": "ok", "configs": _service(request).config_names}


@router.get("/metrics")
async def metrics(request: Request) -> Response:
    collector = _service(request).metrics
    if not isinstance(collector, PrometheusMetrics):
        return JSONResponse({"error": "Metrics disabled"}, status_code=404)
    return Response(collector.render(), media_type="text/plain; version=0.0.4")


@router.get("/{config}/manifest.json")
async def manifest(config: str, request: Request) -> dict[str, Any]:
    return _service(request).manifest(config)


def _resource_handler(kind: ResourceKind):
    async def handler(config: str, request: Request) -> dict[str, list[Any]]:
        payload = await _read_payload(request)
        return await _service(request).dispatch(config, kind, payload)

    handler.__name__ = f"post_{kind.value}"
    return handler


for _kind in ResourceKind:
    router.add_api_route(
        f"/{{config}}/{_kind.value}",
        _resource_handler(_kind),
        methods=["POST"],
        name=f"post_{_kind.value}",
    )


@router.get("/{config}/{path:path}")
async def legacy(config: str, path: str, request: Request) -> dict[str, list[Any]]:
    return await _service(request).dispatch_legacy(config, path)


async def _config_not_found(request: Request, exc: ConfigNotFoundError) -> JSONResponse:
    return JSONResponse({"error": exc.message}, status_code=404)


async def _route_not_found(request: Request, exc: LegacyRouteNotFoundError) -> JSONResponse:
    return JSONResponse({"error": exc.message}, status_code=404)


def create_app(
    service: ProxyService | None = None,
    settings: Settings | None = None,
    initialize: bool = True,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        service: Proxy service to serve (a new one from ``settings`` if None)
        settings: Settings used when creating the service
        initialize: Load and initialize configurations on startup

    Returns:
        FastAPI application
    """
    service = service or ProxyService(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if initialize:
            await service.start()
        yield
        await service.close()

    app = FastAPI(title="Addon Proxy", lifespan=lifespan)
    app.state.service = service

    @app.middleware("http")
    async def cors(request: Request, call_next):
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=CORS_HEADERS)
        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    app.add_exception_handler(ConfigNotFoundError, _config_not_found)
    app.add_exception_handler(LegacyRouteNotFoundError, _route_not_found)
    app.include_router(router)
    return app


def main() -> None:
    """Run the proxy with uvicorn."""
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level, json_output=settings.log_json)
    logger.info(ProxyEvents.SERVER_STARTING, host=settings.host, port=settings.port)
    uvicorn.run(create_app(settings=settings), host=settings.host, port=settings.port)
    logger.info(ProxyEvents.SERVER_STOPPED)


__all__ = ["create_app", "main", "router", "CORS_HEADERS"]
