from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from app.api.callback import router as callback_router
from app.api.health import router as health_router
from app.api.login import router as login_router
from app.api.metrics_endpoint import router as metrics_router
from app.core.config import SETTINGS, Settings
from app.core.logging import setup_logging
from app.middleware.metrics import MetricsMiddleware
from app.middleware.request_context import (
    RequestContextMiddleware,
    install_request_context_filter,
)

logger = logging.getLogger(__name__)


def create_app(settings: Settings) -> FastAPI:
    """Build the app around an immutable Settings instance.

    Handlers read settings and the outbound HTTP client from app.state
    (via app.api.dependencies), never from module globals, so tests can
    build an app with substituted values.
    """
    setup_logging(settings.log_level, json_format=settings.log_json)
    install_request_context_filter()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        # One pooled client for all token exchanges; the timeout bounds a
        # slow authorization server instead of letting the callback hang.
        async with httpx.AsyncClient(
            timeout=settings.token_request_timeout
        ) as http_client:
            app.state.http_client = http_client
            logger.info(
                "oidc-client listening on %s  env=%s authorize=%s",
                settings.app_base_origin,
                settings.app_env,
                settings.authorize_endpoint,
            )
            yield
        logger.info("oidc-client shut down")

    app = FastAPI(
        title="oidc-client",
        lifespan=lifespan,
        docs_url="/docs" if settings.is_dev else None,
        redoc_url="/redoc" if settings.is_dev else None,
    )
    app.state.settings = settings

    # Middleware execution order: last-added runs first (outermost layer).
    # RequestContext (outermost) → Metrics → route handler
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestContextMiddleware)

    app.include_router(metrics_router)
    app.include_router(health_router)
    app.include_router(login_router)
    app.include_router(callback_router)

    return app


app = create_app(SETTINGS)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=SETTINGS.port, log_config=None)
