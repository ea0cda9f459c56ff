"""Liveness and readiness probes."""

from typing import Any

from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

from src.price_editor.api.http.app_data import ApplicationDependencies
from src.price_editor.runtime.context import get_config

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health() -> dict[str, str]:
    """Liveness: 200 as long as the process runs."""
    return {"status": "healthy", "service": "price-editor"}


@router.get("/ready", response_model=None)
async def readiness(request: Request) -> dict[str, Any] | JSONResponse:
    """Readiness: database and host store are required, Redis is optional.

    Returns 503 when a required dependency is unavailable.
    """
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    config = get_config()

    checks: dict[str, Any] = {}
    all_healthy = True

    db_healthy = app_deps.database_service.health_check()
    checks["database"] = {
        "status": "healthy" if db_healthy else "unhealthy",
        "type": "postgresql" if "postgresql" in config.database.url else "sqlite",
    }
    all_healthy = all_healthy and db_healthy

    if app_deps.woo_client is not None:
        host_healthy = await app_deps.woo_client.ping()
        checks["host"] = {
            "status": "healthy" if host_healthy else "unhealthy",
            "url": config.host.site_url,
        }
        all_healthy = all_healthy and host_healthy

    # Without Redis the limiter counts in memory; degraded, not down.
    if app_deps.redis_service is not None and app_deps.redis_service.is_enabled:
        redis_healthy = await app_deps.redis_service.health_check()
        checks["redis"] = {"status": "healthy" if redis_healthy else "degraded"}
    else:
        checks["redis"] = {"status": "disabled", "type": "in-memory"}

    response = {
        "status": "ready" if all_healthy else "not_ready",
        "environment": config.app.environment,
        "checks": checks,
    }
    if not all_healthy:
        return JSONResponse(status_code=503, content=response)
    return response
