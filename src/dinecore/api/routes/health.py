from __future__ import annotations

from fastapi import APIRouter, Response, status

from dinecore.infrastructure.cache.redis_client import ping_redis, redis_url
from dinecore.infrastructure.http.api_client import ping_api

router = APIRouter()


@router.get("/health/live")
def live() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/health/ready")
async def ready(response: Response) -> dict[str, object]:
    checks: dict[str, bool] = {"api": await ping_api(timeout_seconds=1.0)}
    if redis_url():
        checks["redis"] = await ping_redis(timeout_seconds=1.0)

    if all(checks.values()):
        return {"status": "ok"}

    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return {"status": "unavailable", "checks": checks}
