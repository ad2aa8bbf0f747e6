"""Health and readiness endpoints.

  /health (liveness): the process can answer.  Authorization server
    settings are validated by load_settings() before the app exists, and
    this client holds no connection to it between requests, so there is
    nothing further to check or ping.

  /ready (readiness): this instance can take traffic.  The only
    dependency is the outbound HTTP client opened by the lifespan.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from app.api.dependencies import get_settings
from app.core.config import Settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(settings: Annotated[Settings, Depends(get_settings)]) -> dict:
    return {
        "status": "ok",
        "checks": {"authorization_server": "configured"},
        "environment_id": settings.environment_id,
    }


@router.get("/ready")
async def ready(request: Request) -> Response:
    http_client = getattr(request.app.state, "http_client", None)
    if http_client is None or http_client.is_closed:
        return Response(status_code=503)
    return Response(status_code=200)
