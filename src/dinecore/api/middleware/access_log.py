from __future__ import annotations

import logging
import time

from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger("dinecore.api.access")

HTTP_REQUESTS_TOTAL = Counter(
    "dinecore_http_requests_total",
    "BFF requests by method, route template and status code.",
    ["method", "path", "status_code"],
)
HTTP_REQUEST_SECONDS = Histogram(
    "dinecore_http_request_duration_seconds",
    "BFF request latency in seconds by method and route template.",
    ["method", "path"],
)


def route_template(request: Request) -> str:
    # Entity ids stay out of metric labels.
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


def _observe(request: Request, status_code: int, started: float) -> dict[str, object]:
    elapsed = time.perf_counter() - started
    path = route_template(request)
    HTTP_REQUESTS_TOTAL.labels(
        method=request.method, path=path, status_code=str(status_code)
    ).inc()
    HTTP_REQUEST_SECONDS.labels(method=request.method, path=path).observe(elapsed)
    return {
        "method": request.method,
        "path": path,
        "status_code": status_code,
        "duration_ms": round(elapsed * 1000, 2),
    }


class AccessLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("request_error", extra=_observe(request, 500, started))
            raise
        fields = _observe(request, response.status_code, started)
        if response.status_code >= 500:
            logger.warning("request_failed", extra=fields)
        else:
            logger.info("request_complete", extra=fields)
        return response
