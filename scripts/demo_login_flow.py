"""Demo: walk "/" → authorization server → "/callback" in-process.

The authorization server is replaced by an httpx.MockTransport that
answers the token endpoint, so no PingOne environment is needed.

Run with:
    python scripts/demo_login_flow.py
"""

from __future__ import annotations

import asyncio
import html
import os
import re
from urllib.parse import parse_qsl, urlsplit

os.environ.setdefault("PINGONE_AUTH_BASE_URL", "https://auth.pingone.test")
os.environ.setdefault("PINGONE_ENVIRONMENT_ID", "demo-environment")
os.environ.setdefault("PINGONE_CLIENT_ID", "demo-client")
os.environ.setdefault("PINGONE_CLIENT_SECRET", "demo-secret")

import httpx  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.api.dependencies import get_http_client  # noqa: E402
from app.main import app  # noqa: E402

DEMO_CODE = "demo-authorization-code"


def _token_endpoint(request: httpx.Request) -> httpx.Response:
    form = dict(parse_qsl(request.content.decode()))
    if form.get("code") != DEMO_CODE:
        return httpx.Response(
            400,
            json={"error": "invalid_grant", "error_description": "unknown code"},
        )
    return httpx.Response(
        200,
        json={
            "access_token": "demo-access-token",
            "id_token": "demo-id-token",
            "token_type": "Bearer",
            "expires_in": 3600,
            "scope": form.get("scope", "openid"),
        },
    )


def main() -> None:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(_token_endpoint))
    app.dependency_overrides[get_http_client] = lambda: http_client
    client = TestClient(app, follow_redirects=False)

    try:
        _walk(client)
    finally:
        asyncio.run(http_client.aclose())

    print("\nAll steps completed.")


def _walk(client: TestClient) -> None:
    # ── Step 1: GET / ───────────────────────────────────────────────
    r = client.get("/")
    href = html.unescape(re.search(r'href="([^"]+)"', r.text).group(1))  # type: ignore[union-attr]
    print(f"1. GET  /                      → {r.status_code}  Login → {href[:60]}…")

    # ── Step 2: the browser visits the authorize URL ────────────────
    # (the authorization server authenticates the user, then redirects)
    query = dict(parse_qsl(urlsplit(href).query))
    print(f"2. authorize request           → redirect_uri={query['redirect_uri']}")

    # ── Step 3: GET /callback without a code ────────────────────────
    r = client.get("/callback")
    print(f"3. GET  /callback (no code)    → {r.status_code}  {r.text}")

    # ── Step 4: GET /callback with a bad code ───────────────────────
    r = client.get("/callback", params={"code": "wrong"})
    print(f"4. GET  /callback (bad code)   → {r.status_code}  {r.json()}")

    # ── Step 5: GET /callback with the issued code ──────────────────
    r = client.get("/callback", params={"code": DEMO_CODE})
    print(f"5. GET  /callback (good code)  → {r.status_code}  {r.json()}")


if __name__ == "__main__":
    main()
