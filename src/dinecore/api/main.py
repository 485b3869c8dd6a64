from __future__ import annotations

import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dinecore.api.error_handling import register_exception_handlers
from dinecore.api.middleware.access_log import AccessLogMiddleware
from dinecore.api.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware
from dinecore.api.routes.checkout import router as checkout_router
from dinecore.api.routes.health import router as health_router
from dinecore.api.routes.metrics import router as metrics_router
from dinecore.api.routes.reservations import router as reservations_router
from dinecore.api.routes.status import router as status_router
from dinecore.infrastructure.observability.logging_config import configure_logging
from dinecore.infrastructure.observability.otel import configure_otel

ROUTERS = (
    health_router,
    metrics_router,
    checkout_router,
    reservations_router,
    status_router,
)


def _cors_allow_origins() -> list[str]:
    """Any origin outside staging/prod; an explicit allowlist otherwise."""
    if os.getenv("APP_ENV", "dev").lower() in {"dev", "test"}:
        return ["*"]
    return [
        origin.strip()
        for origin in os.getenv("CORS_ALLOW_ORIGINS", "").split(",")
        if origin.strip()
    ]


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(title="dinecore BFF", version="0.1.0")
    register_exception_handlers(app)
    for router in ROUTERS:
        app.include_router(router)

    # Added last runs first: CORS, then request id, then access log.
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_allow_origins(),
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=[
            "Authorization",
            "Content-Type",
            REQUEST_ID_HEADER,
            "X-Admin-Request",
            "X-User-Id",
            "X-User-Name",
            "X-User-Email",
        ],
        expose_headers=[REQUEST_ID_HEADER],
    )

    configure_otel(app)
    return app


app = create_app()
