from __future__ import annotations

import asyncio
import os
import sys
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

# Settings are loaded at import time; give the required variables test
# values before anything under app/ is imported.
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("PINGONE_AUTH_BASE_URL", "https://auth.example.test")
os.environ.setdefault("PINGONE_ENVIRONMENT_ID", "env-1234")
os.environ.setdefault("PINGONE_CLIENT_ID", "test-client-id")
os.environ.setdefault("PINGONE_CLIENT_SECRET", "test-client-s3cret")
os.environ.setdefault("APP_BASE_URL", "http://localhost")

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

# Ensure repo root is on sys.path so `import app` works under pytest.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.api.dependencies import get_http_client  # noqa: E402
from app.core.config import Settings  # noqa: E402
from app.main import app  # noqa: E402

Handler = Callable[[httpx.Request], httpx.Response]


@dataclass
class StubAuthorizationServer:
    """Stands in for the token endpoint; records every outbound request."""

    handler: Handler = field(
        default=lambda request: httpx.Response(
            200, json={"access_token": "t1", "id_token": "t2"}
        )
    )
    requests: list[httpx.Request] = field(default_factory=list)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    def respond_with(self, handler: Handler) -> None:
        self.handler = handler


@pytest.fixture
def settings() -> Settings:
    return app.state.settings


@pytest.fixture
def auth_server() -> StubAuthorizationServer:
    return StubAuthorizationServer()


@pytest.fixture
def client(auth_server: StubAuthorizationServer) -> Iterator[TestClient]:
    """TestClient whose outbound token requests go to auth_server."""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(auth_server))
    app.dependency_overrides[get_http_client] = lambda: http_client
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_http_client, None)
        asyncio.run(http_client.aclose())


def make_settings(**overrides: object) -> Settings:
    values: dict[str, object] = {
        "app_env": "test",
        "log_level": "info",
        "log_json": False,
        "port": 3000,
        "auth_base_url": "https://auth.example.test",
        "environment_id": "env-1234",
        "client_id": "test-client-id",
        "client_secret": "test-client-s3cret",
        "app_base_url": "http://localhost",
    }
    values.update(overrides)
    return Settings(**values)  # type: ignore[arg-type]
