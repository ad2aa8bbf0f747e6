from __future__ import annotations

import httpx
from fastapi import Request

from app.core.config import Settings


def get_settings(request: Request) -> Settings:
    """Settings injected at app construction (see app.main.create_app)."""
    return request.app.state.settings


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Shared outbound client opened by the app lifespan.

    Tests replace this dependency with a client on an httpx.MockTransport.
    """
    return request.app.state.http_client
